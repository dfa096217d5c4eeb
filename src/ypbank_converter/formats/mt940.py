"""MT940 (SWIFT customer statement) codec."""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import ClassVar

from ypbank_converter.config import get_default_currency
from ypbank_converter.errors import (
    InvalidAmountError,
    InvalidDateError,
    MissingFieldError,
    Mt940ParseError,
    ParseError,
)
from ypbank_converter.formats.base import CodecRegistry, Format, StatementCodec
from ypbank_converter.models import Balance, BalanceType, DebitCredit, Statement, Transaction
from ypbank_converter.utils import format_amount, parse_amount

logger = logging.getLogger(__name__)

HEADER = "{1:F01BANKXXXXAXXX0000000000}{2:I940BANKXXXXAXXXXN}{4:"
TRAILER = "-}"

# :20:, :25:, :28C:, :60F:, ...
_TAG_RE = re.compile(r"^:(\d{2}[A-Z]?):")

# D/C (1) + YYMMDD (6) + currency (3) + at least one amount character
_MIN_BALANCE_LENGTH = 11


def parse_short_date(text: str) -> date:
    """
    Parse a YYMMDD date.

    Two-digit years below 50 belong to the 2000s, the rest to the 1900s.

    Raises:
        InvalidDateError: If the text is not a valid YYMMDD date
    """
    if len(text) != 6 or not (text.isascii() and text.isdigit()):
        raise InvalidDateError(text)

    yy, month, day = int(text[0:2]), int(text[2:4]), int(text[4:6])
    year = 2000 + yy if yy < 50 else 1900 + yy

    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateError(f"{year}-{month}-{day}") from e


def parse_entry_date(text: str, year: int) -> date:
    """
    Parse an MMDD entry date within the given year.

    Raises:
        InvalidDateError: If the text is not a valid MMDD date
    """
    if len(text) != 4 or not (text.isascii() and text.isdigit()):
        raise InvalidDateError(text)

    month, day = int(text[0:2]), int(text[2:4])
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateError(f"{year}-{month}-{day}") from e


def format_short_date(value: date) -> str:
    """Format a date as YYMMDD."""
    return f"{value.year % 100:02}{value.month:02}{value.day:02}"


def _slice(content: str, start: int, end: int | None, what: str) -> str:
    """Return content[start:end], failing if the range is not fully present."""
    stop = len(content) if end is None else end
    if start >= stop or stop > len(content):
        raise ParseError(f"{what} missing, content too short")
    return content[start:stop]


def _parse_amount(text: str) -> Decimal:
    amount = parse_amount(text)
    if amount is None or amount < 0:
        raise InvalidAmountError(text)
    return amount


def _format_amount(amount: Decimal) -> str:
    text = format_amount(amount, decimal_separator=",")
    return text if "," in text else f"{text},"


def _is_continuation(line: str) -> bool:
    return not line.startswith(":") and not line.strip().startswith(TRAILER)


def parse_balance(content: str, balance_type: BalanceType) -> Balance:
    """
    Decode the content of a :60x:/:62x: balance field.

    Layout: D/C indicator, YYMMDD date, currency, amount (comma decimal),
    e.g. ``C250218USD2732398848,02``.
    """
    content = content.strip()
    if len(content) < _MIN_BALANCE_LENGTH:
        raise ParseError("Balance line too short")

    debit_credit = DebitCredit.from_code(_slice(content, 0, 1, "D/C indicator"))
    balance_date = parse_short_date(_slice(content, 1, 7, "balance date"))
    currency = _slice(content, 7, 10, "currency")
    amount = _parse_amount(_slice(content, 10, None, "amount"))

    return Balance(
        balance_type=balance_type,
        amount=amount,
        currency=currency,
        debit_credit=debit_credit,
        date=balance_date,
    )


def parse_statement_line(content: str, currency: str) -> Transaction:
    """
    Decode the content of a :61: statement line.

    Layout: YYMMDD value date, optional MMDD entry date, D/C indicator,
    amount up to the transaction type code, then the references, e.g.
    ``2502180218D12,01NTRFGSLNVSHSUTKWDR//GI2504900007841``.
    """
    content = content.strip()
    if len(content) < 6:
        raise ParseError("Transaction line too short")

    value_date = parse_short_date(content[0:6])
    booking_date = value_date
    pos = 6

    # The entry date is optional; a digit two places in marks it present.
    # This can misread an entry-date-less line whose amount puts a digit
    # there, which is accepted for compatibility with existing exports.
    if len(content) > pos + 4 and content[pos + 2].isdigit():
        booking_date = parse_entry_date(content[pos : pos + 4], value_date.year)
        pos += 4

    debit_credit = DebitCredit.from_code(_slice(content, pos, pos + 1, "D/C indicator"))
    pos += 1

    rest = content[pos:]
    amount_end = next((i for i, ch in enumerate(rest) if ch.isalpha()), len(rest))
    amount = _parse_amount(rest[:amount_end])

    reference = rest[amount_end:].split("//")[-1].strip()
    if not reference:
        reference = Transaction.synthesized_reference(booking_date, amount)

    return Transaction(
        reference=reference,
        date=booking_date,
        value_date=value_date,
        amount=amount,
        currency=currency,
        debit_credit=debit_credit,
    )


@dataclass
class _ScanState:
    """Accumulators for one forward scan over an MT940 document."""

    statement_id: str = ""
    account: str = ""
    sequence_number: str | None = None
    currency: str = ""
    opening_balance: Balance | None = None
    closing_balance: Balance | None = None
    transactions: list[Transaction] = field(default_factory=list)
    pending: Transaction | None = None
    pending_description: str = ""

    def flush(self) -> None:
        """Finish the transaction in progress, attaching its :86: text."""
        if self.pending is not None:
            self.pending.description = self.pending_description.strip()
            self.transactions.append(self.pending)
        self.pending = None
        self.pending_description = ""


@CodecRegistry.register
class Mt940Codec(StatementCodec):
    """Codec for SWIFT MT940 customer statements."""

    format: ClassVar[Format] = Format.MT940

    def parse(self, content: str) -> Statement:
        """Parse an MT940 document."""
        lines = content.splitlines()
        state = _ScanState()

        index = 0
        while index < len(lines):
            line = lines[index].rstrip()
            line_number = index + 1

            match = _TAG_RE.match(line)
            if match is None:
                index += 1
                continue

            tag = match.group(1)
            value = line[match.end() :]

            try:
                if tag == "20":
                    state.statement_id = value.strip()
                elif tag == "25":
                    state.account = value.strip()
                elif tag == "28C":
                    state.sequence_number = value.strip()
                elif tag.startswith("60"):
                    state.opening_balance = parse_balance(value, BalanceType.OPENING)
                    if not state.currency:
                        state.currency = state.opening_balance.currency
                elif tag.startswith("62"):
                    state.closing_balance = parse_balance(value, BalanceType.CLOSING)
                elif tag.startswith("64") or tag.startswith("65"):
                    balance_type = (
                        BalanceType.CLOSING if tag.startswith("64")
                        else BalanceType.FORWARD_AVAILABLE
                    )
                    balance = parse_balance(value, balance_type)
                    logger.debug("Dropping :%s: balance %s at line %d", tag, balance, line_number)
                elif tag == "61":
                    state.flush()
                    state.pending = parse_statement_line(value, state.currency)
                elif tag == "86":
                    parts = [value.strip()]
                    while index + 1 < len(lines) and _is_continuation(lines[index + 1]):
                        index += 1
                        parts.append(lines[index].strip())
                    text = " ".join(part for part in parts if part)

                    if state.pending is None:
                        logger.warning(
                            "Ignoring :86: at line %d with no statement line before it",
                            line_number,
                        )
                    else:
                        state.pending_description = text
                else:
                    logger.debug("Ignoring unsupported tag :%s: at line %d", tag, line_number)
            except (InvalidDateError, InvalidAmountError, ParseError) as e:
                raise Mt940ParseError(line_number, line, str(e)) from e

            index += 1

        state.flush()

        if not state.statement_id:
            raise MissingFieldError("statement reference :20:")
        if not state.account:
            raise MissingFieldError("account identification :25:")

        currency = state.currency
        if not currency and state.closing_balance is not None:
            currency = state.closing_balance.currency
        if not currency:
            currency = get_default_currency(self._config)
            logger.debug("No balance currency found, using %s", currency)

        statement = Statement.new(state.statement_id, state.account, currency)
        statement.sequence_number = state.sequence_number
        statement.opening_balance = state.opening_balance
        statement.closing_balance = state.closing_balance
        for transaction in state.transactions:
            if not transaction.currency:
                transaction.currency = currency
            statement.add_transaction(transaction)

        return statement

    def serialize(self, statement: Statement) -> str:
        """Render a statement as an MT940 document."""
        lines = [
            HEADER,
            f":20:{statement.statement_id}",
            f":25:{statement.account}",
        ]

        if statement.sequence_number:
            lines.append(f":28C:{statement.sequence_number}")

        if statement.opening_balance is not None:
            lines.append(_format_balance("60", statement.opening_balance, BalanceType.OPENING))

        for transaction in statement.transactions:
            lines.append(_format_statement_line(transaction))
            if transaction.description:
                first, *continuation = _description_lines(transaction.description)
                lines.append(f":86:{first}")
                lines.extend(continuation)

        if statement.closing_balance is not None:
            lines.append(_format_balance("62", statement.closing_balance, BalanceType.CLOSING))

        lines.append(TRAILER)
        return "\n".join(lines) + "\n"


def _description_lines(description: str) -> list[str]:
    """
    Split a description into :86: text and continuation lines.

    A line that would read back as a tag or the trailer is joined onto the
    line before it, as continuations are space-joined on parse anyway.
    Blank continuation lines are dropped.
    """
    lines: list[str] = []
    for part in description.splitlines() or [""]:
        if lines and not part.strip():
            continue
        if lines and not _is_continuation(part):
            lines[-1] = f"{lines[-1]} {part.strip()}"
        else:
            lines.append(part)
    return lines


def _format_balance(tag: str, balance: Balance, final_type: BalanceType) -> str:
    # F for the final opening/closing balance, M for an intermediate one
    suffix = "F" if balance.balance_type is final_type else "M"
    return (
        f":{tag}{suffix}:{balance.debit_credit.code}{format_short_date(balance.date)}"
        f"{balance.currency}{_format_amount(balance.amount)}"
    )


def _format_statement_line(transaction: Transaction) -> str:
    # Entry date always carries the booking date's month and day
    value_date = transaction.value_date or transaction.date
    return (
        f":61:{format_short_date(value_date)}"
        f"{transaction.date.month:02}{transaction.date.day:02}"
        f"{transaction.debit_credit.code}{_format_amount(transaction.amount)}"
        f"NTRF//{transaction.reference}"
    )
