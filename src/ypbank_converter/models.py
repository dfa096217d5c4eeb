"""Canonical statement model shared by all formats."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from ypbank_converter.errors import ParseError

# Placeholder when a document never names its own account
UNKNOWN_ACCOUNT = "UNKNOWN"


class DebitCredit(Enum):
    """Direction of a movement: money out (debit) or in (credit)."""

    DEBIT = "debit"
    CREDIT = "credit"

    @classmethod
    def from_code(cls, value: str) -> "DebitCredit":
        """
        Parse a debit/credit indicator.

        Accepts the single-letter MT940 codes, the ISO 20022 codes and the
        spelled-out words, case-insensitively.

        Raises:
            ParseError: If the indicator is not recognized
        """
        code = value.strip().upper()
        if code in ("D", "DBIT", "DEBIT"):
            return cls.DEBIT
        if code in ("C", "CRDT", "CREDIT"):
            return cls.CREDIT
        raise ParseError(f"Invalid debit/credit indicator: {value!r}")

    @property
    def code(self) -> str:
        """Single-letter code used by MT940."""
        return "D" if self is DebitCredit.DEBIT else "C"

    @property
    def iso_code(self) -> str:
        """Four-letter code used by ISO 20022."""
        return "DBIT" if self is DebitCredit.DEBIT else "CRDT"


class BalanceType(Enum):
    """Kinds of balance a statement can report."""

    OPENING = "opening"
    CLOSING = "closing"
    INTERMEDIATE = "intermediate"
    FORWARD_AVAILABLE = "forward_available"


@dataclass(frozen=True)
class Balance:
    """Account balance at a given date."""

    balance_type: BalanceType
    amount: Decimal
    currency: str
    debit_credit: DebitCredit
    date: date


@dataclass
class Transaction:
    """Represents one ledger entry of a statement."""

    reference: str
    date: date
    amount: Decimal  # always a magnitude, sign lives in debit_credit
    currency: str
    debit_credit: DebitCredit
    value_date: date | None = None
    account: str | None = None
    counterparty_account: str | None = None
    counterparty_name: str | None = None
    bank_identifier: str | None = None
    description: str = ""
    additional_info: str | None = None

    @staticmethod
    def synthesized_reference(booking_date: date, amount: Decimal) -> str:
        """Reference used when a source document carries none."""
        return f"{booking_date.isoformat()}-{amount}"

    @property
    def is_debit(self) -> bool:
        """Return True if money left the account."""
        return self.debit_credit is DebitCredit.DEBIT


@dataclass
class Statement:
    """One account statement covering a period."""

    statement_id: str
    account: str
    currency: str
    sequence_number: str | None = None
    account_holder: str | None = None
    opening_balance: Balance | None = None
    closing_balance: Balance | None = None
    transactions: list[Transaction] = field(default_factory=list)
    creation_date: date | None = None
    from_date: date | None = None
    to_date: date | None = None

    @classmethod
    def new(cls, statement_id: str, account: str, currency: str) -> "Statement":
        """Create an empty statement with only the required fields set."""
        return cls(statement_id=statement_id, account=account, currency=currency)

    def add_transaction(self, transaction: Transaction) -> None:
        """Append a transaction, keeping document order."""
        self.transactions.append(transaction)
