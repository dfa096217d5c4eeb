"""Tests for conversion rules."""

from datetime import date

import pytest

from ypbank_converter.conversion import convert, to_line, to_structured
from ypbank_converter.errors import ConversionError
from ypbank_converter.formats import Format
from ypbank_converter.models import Statement


class TestToStructured:
    """Tests for the line to structured rule."""

    def test_sets_creation_date(self, sample_statement: Statement) -> None:
        """Test a missing creation date is filled in."""
        result = to_structured(sample_statement)
        assert isinstance(result.creation_date, date)
        assert sample_statement.creation_date is None

    def test_keeps_creation_date(self, sample_statement: Statement) -> None:
        """Test an existing creation date is kept."""
        sample_statement.creation_date = date(2020, 5, 1)
        assert to_structured(sample_statement).creation_date == date(2020, 5, 1)

    def test_keeps_transactions(self, sample_statement: Statement) -> None:
        """Test transactions are copied unchanged."""
        result = to_structured(sample_statement)
        assert result.statement_id == "TEST001"
        assert result.transactions == sample_statement.transactions


class TestToLine:
    """Tests for the structured to line rule."""

    def test_folds_details_into_description(self, sample_statement: Statement) -> None:
        """Test additional info and counterparty name are appended."""
        result = to_line(sample_statement)

        assert result.transactions[0].description == "Invoice 42 | Counterparty: Test Company"
        assert result.transactions[1].description == (
            "Rent January | Extra info | Counterparty: Another Company"
        )

    def test_input_not_modified(self, sample_statement: Statement) -> None:
        """Test the source statement is left alone."""
        to_line(sample_statement)
        assert sample_statement.transactions[0].description == "Invoice 42"

    def test_idempotent(self, sample_statement: Statement) -> None:
        """Test applying the rule twice changes nothing further."""
        once = to_line(sample_statement)
        twice = to_line(once)
        assert [tx.description for tx in twice.transactions] == [
            tx.description for tx in once.transactions
        ]
        assert twice == once

    def test_folded_fields_cleared(self, sample_statement: Statement) -> None:
        """Test folded details are removed from the transaction."""
        tx = to_line(sample_statement).transactions[1]
        assert tx.additional_info is None
        assert tx.counterparty_name is None
        assert tx.counterparty_account == "FR1420041010050500013M02606"

    @pytest.mark.parametrize(
        ("description", "additional_info", "expected"),
        [
            ("Fee", "Fee", "Fee | Fee"),
            ("A | B", "A", "A | B | A"),
            ("A | B", "B", "A | B | B"),
        ],
    )
    def test_appends_text_already_in_description(
        self,
        sample_statement: Statement,
        description: str,
        additional_info: str,
        expected: str,
    ) -> None:
        """Test additional info is appended even when the description repeats it."""
        tx = sample_statement.transactions[0]
        tx.description = description
        tx.additional_info = additional_info
        tx.counterparty_name = None

        once = to_line(sample_statement)
        assert once.transactions[0].description == expected
        assert to_line(once).transactions[0].description == expected

    def test_empty_description(self, sample_statement: Statement) -> None:
        """Test no leading separator on an empty description."""
        sample_statement.transactions[0].description = ""
        result = to_line(sample_statement)
        assert result.transactions[0].description == "Counterparty: Test Company"

    def test_nothing_to_fold(self, sample_statement: Statement) -> None:
        """Test descriptions without extra details stay as they are."""
        tx = sample_statement.transactions[0]
        tx.counterparty_name = None
        assert to_line(sample_statement).transactions[0].description == "Invoice 42"


class TestConvert:
    """Tests for convert dispatch."""

    def test_mt940_to_camt053(self, sample_statement: Statement) -> None:
        """Test line to structured dispatch."""
        result = convert(sample_statement, Format.MT940, Format.CAMT053)
        assert result.creation_date is not None
        assert result.transactions[0].description == "Invoice 42"

    def test_camt053_to_mt940(self, sample_statement: Statement) -> None:
        """Test structured to line dispatch."""
        result = convert(sample_statement, Format.CAMT053, Format.MT940)
        assert "Extra info" in result.transactions[1].description

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (Format.CSV, Format.MT940),
            (Format.MT940, Format.CSV),
            (Format.CAMT053, Format.CAMT053),
        ],
    )
    def test_other_pairs_copy(
        self, sample_statement: Statement, source: Format, target: Format
    ) -> None:
        """Test pairs without a rule return an equal copy."""
        result = convert(sample_statement, source, target)
        assert result == sample_statement
        assert result is not sample_statement

    def test_missing_identifier(self, sample_statement: Statement) -> None:
        """Test a statement without id is rejected."""
        sample_statement.statement_id = ""
        with pytest.raises(ConversionError):
            convert(sample_statement, Format.MT940, Format.CAMT053)

    def test_missing_account(self, sample_statement: Statement) -> None:
        """Test a statement without account is rejected."""
        sample_statement.account = ""
        with pytest.raises(ConversionError):
            convert(sample_statement, Format.CAMT053, Format.MT940)
