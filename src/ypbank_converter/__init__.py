"""ypbank-converter - Convert bank statements between MT940, CAMT.053 and CSV."""

from ypbank_converter.compare import compare_statements
from ypbank_converter.conversion import convert, to_line, to_structured
from ypbank_converter.errors import StatementError
from ypbank_converter.formats import Format, format_from_name, parse, serialize
from ypbank_converter.models import Balance, BalanceType, DebitCredit, Statement, Transaction

__version__ = "0.1.0"
__all__ = [
    "Balance",
    "BalanceType",
    "DebitCredit",
    "Format",
    "Statement",
    "StatementError",
    "Transaction",
    "compare_statements",
    "convert",
    "format_from_name",
    "parse",
    "serialize",
    "to_line",
    "to_structured",
]
