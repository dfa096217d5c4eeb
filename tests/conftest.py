"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from ypbank_converter.models import Balance, BalanceType, DebitCredit, Statement, Transaction


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep config discovery away from the developer's real config files."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg_config"))


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def mt940_file(fixtures_dir: Path) -> Path:
    """Return path to MT940 statement fixture."""
    return fixtures_dir / "statement.mt940"


@pytest.fixture
def camt053_file(fixtures_dir: Path) -> Path:
    """Return path to camt.053 statement fixture."""
    return fixtures_dir / "statement.xml"


@pytest.fixture
def csv_file(fixtures_dir: Path) -> Path:
    """Return path to CSV statement fixture with Russian headers."""
    return fixtures_dir / "statement.csv"


@pytest.fixture
def sample_statement() -> Statement:
    """Statement with balances, one credit and one debit transaction."""
    statement = Statement.new("TEST001", "DE89370400440532013000", "EUR")
    statement.opening_balance = Balance(
        balance_type=BalanceType.OPENING,
        amount=Decimal("1000.00"),
        currency="EUR",
        debit_credit=DebitCredit.CREDIT,
        date=date(2024, 1, 1),
    )
    statement.closing_balance = Balance(
        balance_type=BalanceType.CLOSING,
        amount=Decimal("849.50"),
        currency="EUR",
        debit_credit=DebitCredit.CREDIT,
        date=date(2024, 1, 31),
    )
    statement.add_transaction(
        Transaction(
            reference="REF001",
            date=date(2024, 1, 15),
            value_date=date(2024, 1, 15),
            amount=Decimal("100.50"),
            currency="EUR",
            debit_credit=DebitCredit.CREDIT,
            counterparty_account="GB29NWBK60161331926819",
            counterparty_name="Test Company",
            bank_identifier="NWBKGB2L",
            description="Invoice 42",
        )
    )
    statement.add_transaction(
        Transaction(
            reference="REF002",
            date=date(2024, 1, 20),
            value_date=date(2024, 1, 20),
            amount=Decimal("251.00"),
            currency="EUR",
            debit_credit=DebitCredit.DEBIT,
            counterparty_account="FR1420041010050500013M02606",
            counterparty_name="Another Company",
            bank_identifier="PSSTFRPP",
            description="Rent January",
            additional_info="Extra info",
        )
    )
    return statement
