"""Parsing utilities shared by the statement codecs."""

import csv
import io
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import IO

from ypbank_converter.errors import StatementIOError

# Tried in order, first match wins
TABULAR_DATE_FORMATS = [
    "%d.%m.%Y",  # 20.02.2024
    "%Y-%m-%d",  # 2024-02-20
    "%d/%m/%Y",  # 20/02/2024
    "%m/%d/%Y",  # 02/20/2024
]


def parse_date(date_str: str, formats: list[str] | None = None) -> date | None:
    """
    Parse a date using the first matching strptime pattern.

    Args:
        date_str: Date string to parse
        formats: Patterns to try (default: TABULAR_DATE_FORMATS)

    Returns:
        date object if successful, None otherwise
    """
    date_str = date_str.strip().strip('"').strip()

    if not date_str:
        return None

    for fmt in formats or TABULAR_DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


def parse_amount(amount_str: str) -> Decimal | None:
    """
    Parse a decimal amount written with a comma or dot separator.

    Handles:
    - Spaces (including non-breaking) used as thousands separators
    - Comma as the decimal separator ("1 540,00")

    Args:
        amount_str: Amount string to parse

    Returns:
        Decimal if successful, None otherwise
    """
    if not amount_str or not amount_str.strip():
        return None

    amount_str = re.sub(r"\s", "", amount_str.strip().strip('"'))
    amount_str = amount_str.replace(",", ".")

    try:
        value = Decimal(amount_str)
    except InvalidOperation:
        return None

    if not value.is_finite():
        return None
    return value


def format_amount(amount: Decimal, decimal_separator: str = ".") -> str:
    """Render an amount without exponent notation."""
    text = format(amount, "f")
    return text.replace(".", decimal_separator)


def clean_description(desc: str) -> str:
    """Collapse runs of whitespace and newlines into single spaces."""
    return " ".join(desc.split())


def decode_bytes(data: bytes) -> str:
    """Decode raw document bytes, dropping a UTF-8 byte order mark."""
    for encoding in ("utf-8-sig", "cp1251"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


def read_source(source: str | bytes | IO[str] | IO[bytes]) -> str:
    """
    Buffer a whole document from a string, bytes or readable file object.

    Raises:
        StatementIOError: If reading the file object fails
    """
    if isinstance(source, str):
        return source.removeprefix("\ufeff")
    if isinstance(source, bytes):
        return decode_bytes(source)

    try:
        data = source.read()
    except OSError as e:
        raise StatementIOError(e) from e

    if isinstance(data, bytes):
        return decode_bytes(data)
    return data.removeprefix("\ufeff")


def read_file(filepath: Path, excel: bool = True) -> str:
    """
    Read file content, handling both text and legacy Excel (.xls) files.

    Args:
        filepath: Path to the file
        excel: Convert .xls files to CSV text; when False they are read as text

    Returns:
        File content as string (Excel files converted to CSV format)

    Raises:
        StatementIOError: If file cannot be read
    """
    if excel and filepath.suffix.lower() == ".xls":
        return _read_excel(filepath)

    try:
        with open(filepath, "rb") as f:
            return decode_bytes(f.read())
    except OSError as e:
        raise StatementIOError(e) from e


def _read_excel(filepath: Path) -> str:
    """Read the first sheet of an Excel export and convert it to CSV text."""
    import xlrd  # type: ignore[import-untyped]

    try:
        wb = xlrd.open_workbook(str(filepath))
    except OSError as e:
        raise StatementIOError(e) from e
    except xlrd.XLRDError as e:
        raise StatementIOError(OSError(f"Could not read Excel file {filepath}: {e}")) from e

    sheet = wb.sheet_by_index(0)
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    for row in range(sheet.nrows):
        row_data = []
        for col in range(sheet.ncols):
            cell = sheet.cell(row, col)
            if cell.ctype == xlrd.XL_CELL_DATE:
                dt = xlrd.xldate_as_datetime(cell.value, wb.datemode)
                row_data.append(dt.strftime("%d.%m.%Y"))
            elif cell.ctype == xlrd.XL_CELL_NUMBER:
                row_data.append(format_amount(Decimal(str(cell.value))))
            else:
                row_data.append(str(cell.value))
        writer.writerow(row_data)

    return buffer.getvalue()
