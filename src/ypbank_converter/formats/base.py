"""Base codec class, format enumeration and codec registry."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar

from ypbank_converter.errors import InvalidFormatError
from ypbank_converter.models import Statement


class Format(Enum):
    """Statement interchange formats understood by the converter."""

    MT940 = "mt940"
    CAMT053 = "camt053"
    CSV = "csv"

    def extension(self) -> str:
        """File extension conventionally used for this format."""
        return _EXTENSIONS[self]


_EXTENSIONS = {
    Format.MT940: "mt940",
    Format.CAMT053: "xml",
    Format.CSV: "csv",
}

_ALIASES = {
    "mt940": Format.MT940,
    "mt-940": Format.MT940,
    "swift": Format.MT940,
    "camt053": Format.CAMT053,
    "camt.053": Format.CAMT053,
    "camt": Format.CAMT053,
    "xml": Format.CAMT053,
    "csv": Format.CSV,
}


def format_from_name(name: str) -> Format:
    """
    Resolve a user-supplied format name.

    Raises:
        InvalidFormatError: If the name is not a known alias
    """
    fmt = _ALIASES.get(name.strip().lower())
    if fmt is None:
        raise InvalidFormatError(name)
    return fmt


class StatementCodec(ABC):
    """Abstract base class for statement parsers/serializers."""

    format: ClassVar[Format]

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        """Initialize codec with the loaded JSON config, if any."""
        self._config = config

    @abstractmethod
    def parse(self, content: str) -> Statement:
        """
        Parse a whole document into a statement.

        Args:
            content: Document text

        Returns:
            Parsed Statement
        """

    @abstractmethod
    def serialize(self, statement: Statement) -> str:
        """
        Render a statement as a whole document.

        Args:
            statement: Statement to render

        Returns:
            Document text
        """


class CodecRegistry:
    """Registry mapping each Format to its codec class."""

    _codecs: ClassVar[dict[Format, type[StatementCodec]]] = {}

    @classmethod
    def register(cls, codec_class: type[StatementCodec]) -> type[StatementCodec]:
        """
        Register a codec class. Can be used as a decorator.

        Example:
            @CodecRegistry.register
            class Mt940Codec(StatementCodec):
                format = Format.MT940
        """
        cls._codecs[codec_class.format] = codec_class
        return codec_class

    @classmethod
    def get_codec(
        cls,
        fmt: Format,
        config: dict[str, Any] | None = None,
    ) -> StatementCodec:
        """
        Get a codec instance for the given format.

        Raises:
            InvalidFormatError: If no codec is registered for the format
        """
        codec_class = cls._codecs.get(fmt)
        if codec_class is None:
            raise InvalidFormatError(str(fmt.value))
        return codec_class(config=config)

    @classmethod
    def get_all_codecs(cls) -> list[type[StatementCodec]]:
        """Get all registered codec classes."""
        return list(cls._codecs.values())
