"""CSV statement codec with Russian or English column headers."""

import csv
import io
import logging
import time
from decimal import Decimal
from typing import Any, ClassVar

from ypbank_converter.config import get_csv_currency, get_csv_date_format, get_csv_delimiter
from ypbank_converter.errors import CsvFormatError, InvalidAmountError, InvalidDateError
from ypbank_converter.formats.base import CodecRegistry, Format, StatementCodec
from ypbank_converter.models import UNKNOWN_ACCOUNT, DebitCredit, Statement, Transaction
from ypbank_converter.utils import format_amount, parse_amount, parse_date
from ypbank_converter.utils.parsing import TABULAR_DATE_FORMATS

logger = logging.getLogger(__name__)

# Logical column -> accepted header names: localized, English, snake_case
COLUMNS: dict[str, tuple[str, ...]] = {
    "date": ("Дата проводки", "Date", "date"),
    "debit_account": ("Счет Дебет", "Debit Account", "debit_account"),
    "credit_account": ("Счет Кредит", "Credit Account", "credit_account"),
    "debit_amount": ("Сумма по дебету", "Debit Amount", "debit_amount"),
    "credit_amount": ("Сумма по кредиту", "Credit Amount", "credit_amount"),
    "reference": ("№ документа", "Document No", "reference"),
    "description": ("Назначение платежа", "Purpose", "description"),
    "bank": ("Банк (БИК и наименование)", "Bank", "bank"),
}

ENGLISH_HEADER = [names[1] for names in COLUMNS.values()]

_HEADER_LOOKUP = {name: column for column, names in COLUMNS.items() for name in names}

BIC_MARKERS = ("БИК ", "BIC ")


def extract_account(cell: str) -> str:
    """
    Account number from an account cell.

    Cells may hold several lines, e.g. account number, tax id and party
    name; the account is always the first one.
    """
    lines = cell.splitlines()
    return lines[0].strip() if lines else ""


def extract_bic(cell: str) -> str:
    """
    Bank identifier from a bank cell.

    ``"БИК 044525545 АО Банк, г.Москва"`` yields ``"044525545"``; a cell with
    no BIC marker is returned whole.
    """
    for marker in BIC_MARKERS:
        start = cell.find(marker)
        if start != -1:
            tokens = cell[start + len(marker) :].split()
            return tokens[0] if tokens else ""
    return cell.strip()


def extract_counterparty_name(counterparty_cell: str, description: str) -> str | None:
    """Third line of the counterparty cell, else the first line of the description."""
    lines = counterparty_cell.splitlines()
    if len(lines) >= 3 and lines[2].strip():
        return lines[2].strip()

    description_lines = description.strip().splitlines()
    if description_lines:
        return description_lines[0].strip()
    return None


def _map_header(header: list[str]) -> dict[str, int]:
    positions: dict[str, int] = {}
    for index, name in enumerate(header):
        column = _HEADER_LOOKUP.get(name.strip().lstrip("\ufeff"))
        if column is not None and column not in positions:
            positions[column] = index

    if "date" not in positions:
        raise CsvFormatError(f"Header has no date column: {header}")
    return positions


@CodecRegistry.register
class CsvCodec(StatementCodec):
    """Codec for delimited statement exports."""

    format: ClassVar[Format] = Format.CSV

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        self.currency = get_csv_currency(config)
        self.delimiter = get_csv_delimiter(config)
        self.date_format = get_csv_date_format(config)

    def parse(self, content: str) -> Statement:
        """Parse a CSV statement."""
        reader = csv.reader(io.StringIO(content, newline=""), delimiter=self.delimiter)
        transactions: list[Transaction] = []
        own_account = ""

        try:
            header = next(reader, None)
            if header is None:
                raise CsvFormatError("Missing header row")
            positions = _map_header(header)

            for row in reader:
                transaction, own_account = self._parse_row(row, positions, own_account)
                if transaction is not None:
                    transactions.append(transaction)
        except csv.Error as e:
            raise CsvFormatError(f"line {reader.line_num}: {e}") from e

        statement = Statement.new(
            f"CSV-{int(time.time())}",
            own_account or UNKNOWN_ACCOUNT,
            self.currency,
        )
        for transaction in transactions:
            statement.add_transaction(transaction)
        return statement

    def _parse_row(
        self,
        row: list[str],
        positions: dict[str, int],
        own_account: str,
    ) -> tuple[Transaction | None, str]:
        """
        Parse one data row.

        Args:
            row: Cells of the row
            positions: Logical column -> cell index
            own_account: Statement account found so far ("" if none yet)

        Returns:
            (transaction or None for skipped rows, updated own account)
        """

        def cell(column: str) -> str:
            index = positions.get(column)
            if index is None or index >= len(row):
                return ""
            return row[index]

        date_text = cell("date").strip()
        if not date_text:
            return None, own_account

        booking_date = parse_date(date_text, self._date_formats())
        if booking_date is None:
            raise InvalidDateError(date_text)

        debit_amount = cell("debit_amount").strip()
        credit_amount = cell("credit_amount").strip()

        if debit_amount:
            amount = self._parse_amount(debit_amount)
            debit_credit = DebitCredit.DEBIT
            own_cell, counterparty_cell = cell("debit_account"), cell("credit_account")
        elif credit_amount:
            amount = self._parse_amount(credit_amount)
            debit_credit = DebitCredit.CREDIT
            own_cell, counterparty_cell = cell("credit_account"), cell("debit_account")
        else:
            logger.debug("Skipping row dated %s without an amount", date_text)
            return None, own_account

        if not own_account:
            own_account = extract_account(own_cell)

        description = cell("description").strip()
        bank = cell("bank")
        reference = cell("reference").strip() or Transaction.synthesized_reference(
            booking_date, amount
        )

        transaction = Transaction(
            reference=reference,
            date=booking_date,
            value_date=booking_date,
            amount=amount,
            currency=self.currency,
            debit_credit=debit_credit,
            counterparty_account=extract_account(counterparty_cell) or None,
            counterparty_name=extract_counterparty_name(counterparty_cell, description),
            bank_identifier=extract_bic(bank) if bank.strip() else None,
            description=description,
        )
        return transaction, own_account

    def _date_formats(self) -> list[str]:
        if self.date_format in TABULAR_DATE_FORMATS:
            return TABULAR_DATE_FORMATS
        return [*TABULAR_DATE_FORMATS, self.date_format]

    @staticmethod
    def _parse_amount(text: str) -> Decimal:
        amount = parse_amount(text)
        if amount is None or amount < 0:
            raise InvalidAmountError(text)
        return amount

    def serialize(self, statement: Statement) -> str:
        """Render a statement as CSV with English headers."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.delimiter, lineterminator="\n")
        writer.writerow(ENGLISH_HEADER)

        for transaction in statement.transactions:
            counterparty = transaction.counterparty_account or ""
            if transaction.counterparty_name:
                # account / tax id / name, matching bank exports
                counterparty = f"{counterparty}\n\n{transaction.counterparty_name}"

            amount = format_amount(transaction.amount)
            if transaction.is_debit:
                accounts = [statement.account, counterparty]
                amounts = [amount, ""]
            else:
                accounts = [counterparty, statement.account]
                amounts = ["", amount]

            writer.writerow([
                transaction.date.strftime(self.date_format),
                *accounts,
                *amounts,
                transaction.reference,
                transaction.description,
                transaction.bank_identifier or "",
            ])

        return buffer.getvalue()
