"""Tests for statement comparison."""

import copy
import dataclasses
from datetime import date
from decimal import Decimal

from ypbank_converter.compare import compare_statements, format_report, normalize_description
from ypbank_converter.models import DebitCredit, Statement


class TestNormalizeDescription:
    """Tests for loose description matching."""

    def test_normalize(self) -> None:
        """Test case, punctuation and whitespace are ignored."""
        assert normalize_description("  Invoice #42,  PAID! ") == "invoice 42 paid"


class TestCompareStatements:
    """Tests for compare_statements function."""

    def test_identical(self, sample_statement: Statement) -> None:
        """Test no differences for equal statements."""
        assert compare_statements(sample_statement, copy.deepcopy(sample_statement)) == []

    def test_amount_difference(self, sample_statement: Statement) -> None:
        """Test amount mismatch line."""
        other = copy.deepcopy(sample_statement)
        other.transactions[0].amount = Decimal("100.51")

        assert compare_statements(sample_statement, other) == [
            "Transaction 1 amount differs: 100.50 vs 100.51"
        ]

    def test_count_date_and_type(self, sample_statement: Statement) -> None:
        """Test count, date and type mismatches."""
        other = copy.deepcopy(sample_statement)
        other.transactions.pop()
        other.transactions[0].date = date(2024, 1, 16)
        other.transactions[0].debit_credit = DebitCredit.DEBIT

        assert compare_statements(sample_statement, other) == [
            "Number of transactions differs: 2 vs 1",
            "Transaction 1 date differs: 2024-01-15 vs 2024-01-16",
            "Transaction 1 type differs: Credit vs Debit",
        ]

    def test_description_loose_match(self, sample_statement: Statement) -> None:
        """Test descriptions differing only in punctuation and case match."""
        other = copy.deepcopy(sample_statement)
        other.transactions[0].description = "INVOICE  42."
        assert compare_statements(sample_statement, other) == []

    def test_description_difference(self, sample_statement: Statement) -> None:
        """Test a real description mismatch."""
        other = copy.deepcopy(sample_statement)
        other.transactions[0].description = "Invoice 43"

        assert compare_statements(sample_statement, other) == [
            "Transaction 1 description differs:\n  File 1: Invoice 42\n  File 2: Invoice 43"
        ]

    def test_empty_description_ignored(self, sample_statement: Statement) -> None:
        """Test a missing description on one side is not a difference."""
        other = copy.deepcopy(sample_statement)
        other.transactions[0].description = ""
        assert compare_statements(sample_statement, other) == []

    def test_balances(self, sample_statement: Statement) -> None:
        """Test balance mismatches, only when both sides have them."""
        other = copy.deepcopy(sample_statement)
        assert other.opening_balance is not None
        other.opening_balance = dataclasses.replace(other.opening_balance, amount=Decimal("1"))
        other.closing_balance = None

        assert compare_statements(sample_statement, other) == [
            "Opening balance differs: 1000.00 vs 1"
        ]


class TestFormatReport:
    """Tests for format_report function."""

    def test_identical(self) -> None:
        """Test report for identical statements."""
        assert format_report([], "a.xml", "b.mt940") == (
            "The transaction records in 'a.xml' and 'b.mt940' are identical."
        )

    def test_differences(self) -> None:
        """Test report listing differences."""
        report = format_report(["one", "two"], "a", "b")
        assert report == "Differences found:\n  - one\n  - two"
