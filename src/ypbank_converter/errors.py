"""Exceptions raised by the statement codecs."""


class StatementError(ValueError):
    """Base class for every error raised while reading or writing a statement."""


class StatementIOError(StatementError):
    """Reading from a source or writing to a sink failed."""

    def __init__(self, error: OSError) -> None:
        super().__init__(f"I/O error: {error}")
        self.error = error


class CsvFormatError(StatementError):
    """The tabular document could not be read."""

    def __init__(self, message: str) -> None:
        super().__init__(f"CSV parsing error: {message}")


class XmlFormatError(StatementError):
    """The XML document is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(f"XML parsing error: {message}")


class Mt940ParseError(StatementError):
    """A tagged line of an MT940 document could not be decoded."""

    def __init__(self, line_number: int, line: str, message: str) -> None:
        super().__init__(f"MT940 parsing error at line {line_number}: {message} ({line!r})")
        self.line_number = line_number
        self.line = line
        self.message = message


class InvalidDateError(StatementError):
    """A date field does not match any accepted pattern."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid date format: {value}")
        self.value = value


class InvalidAmountError(StatementError):
    """An amount field is not a decimal number."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid amount format: {value}")
        self.value = value


class MissingFieldError(StatementError):
    """A field required to build a statement is absent."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Missing required field: {field_name}")
        self.field_name = field_name


class InvalidFormatError(StatementError):
    """A format name is not one of the known aliases."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid format: {name}")
        self.name = name


class ParseError(StatementError):
    """Generic parse failure."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Parse error: {message}")


class ConversionError(StatementError):
    """A statement cannot be converted to the requested format."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Conversion error: {message}")
