"""Statement format codecs."""

from typing import IO, Any

from ypbank_converter.errors import StatementIOError
from ypbank_converter.formats.base import CodecRegistry, Format, StatementCodec, format_from_name
from ypbank_converter.formats.camt053 import Camt053Codec
from ypbank_converter.formats.csv_format import CsvCodec
from ypbank_converter.formats.mt940 import Mt940Codec
from ypbank_converter.models import Statement
from ypbank_converter.utils import read_source

__all__ = [
    "Format",
    "format_from_name",
    "StatementCodec",
    "CodecRegistry",
    "Mt940Codec",
    "Camt053Codec",
    "CsvCodec",
    "parse",
    "serialize",
]


def parse(
    source: str | bytes | IO[str] | IO[bytes],
    fmt: Format,
    config: dict[str, Any] | None = None,
) -> Statement:
    """
    Parse a whole document in the given format.

    Args:
        source: Document text, raw bytes or a readable file object
        fmt: Format of the document
        config: Loaded JSON config

    Returns:
        Parsed Statement
    """
    content = read_source(source)
    return CodecRegistry.get_codec(fmt, config).parse(content)


def serialize(
    statement: Statement,
    fmt: Format,
    sink: IO[str] | None = None,
    config: dict[str, Any] | None = None,
) -> str:
    """
    Render a statement in the given format.

    The rendered text is always returned; it is also written to ``sink``
    when one is given.

    Raises:
        StatementIOError: If writing to the sink fails
    """
    text = CodecRegistry.get_codec(fmt, config).serialize(statement)

    if sink is not None:
        try:
            sink.write(text)
            sink.flush()
        except OSError as e:
            raise StatementIOError(e) from e

    return text
