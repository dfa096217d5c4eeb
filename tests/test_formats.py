"""Tests for format selection and the parse/serialize entry points."""

import io
from pathlib import Path

import pytest

from ypbank_converter.errors import InvalidFormatError, StatementIOError
from ypbank_converter.formats import (
    Camt053Codec,
    CodecRegistry,
    CsvCodec,
    Format,
    Mt940Codec,
    format_from_name,
    parse,
    serialize,
)
from ypbank_converter.models import Statement


class TestFormatFromName:
    """Tests for format name resolution."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("mt940", Format.MT940),
            ("MT-940", Format.MT940),
            (" swift ", Format.MT940),
            ("camt053", Format.CAMT053),
            ("CAMT.053", Format.CAMT053),
            ("camt", Format.CAMT053),
            ("xml", Format.CAMT053),
            ("CSV", Format.CSV),
        ],
    )
    def test_aliases(self, name: str, expected: Format) -> None:
        """Test every accepted alias."""
        assert format_from_name(name) is expected

    def test_unknown(self) -> None:
        """Test unknown names raise InvalidFormatError."""
        with pytest.raises(InvalidFormatError):
            format_from_name("json")

    def test_extensions(self) -> None:
        """Test file extensions."""
        assert Format.MT940.extension() == "mt940"
        assert Format.CAMT053.extension() == "xml"
        assert Format.CSV.extension() == "csv"


class TestCodecRegistry:
    """Tests for the codec registry."""

    def test_all_formats_registered(self) -> None:
        """Test each format has its codec."""
        assert isinstance(CodecRegistry.get_codec(Format.MT940), Mt940Codec)
        assert isinstance(CodecRegistry.get_codec(Format.CAMT053), Camt053Codec)
        assert isinstance(CodecRegistry.get_codec(Format.CSV), CsvCodec)
        assert len(CodecRegistry.get_all_codecs()) == 3

    def test_config_passed_to_codec(self) -> None:
        """Test the config dict reaches the codec."""
        codec = CodecRegistry.get_codec(Format.CSV, {"csv": {"currency": "EUR"}})
        assert isinstance(codec, CsvCodec)
        assert codec.currency == "EUR"


class TestParseAndSerialize:
    """Tests for the module-level parse and serialize functions."""

    def test_parse_sources(self, mt940_file: Path) -> None:
        """Test parsing from text, bytes and file objects."""
        data = mt940_file.read_bytes()

        from_bytes = parse(data, Format.MT940)
        from_text = parse(data.decode("utf-8"), Format.MT940)
        with open(mt940_file, "rb") as f:
            from_file = parse(f, Format.MT940)

        assert from_bytes == from_text == from_file
        assert from_bytes.statement_id == "STMT20250218"

    def test_parse_bom(self) -> None:
        """Test a UTF-8 BOM before the first tag is ignored."""
        statement = parse(b"\xef\xbb\xbf:20:S\n:25:A\n", Format.MT940)
        assert statement.statement_id == "S"

    def test_serialize_to_sink(self, sample_statement: Statement) -> None:
        """Test text is returned and written to the sink."""
        sink = io.StringIO()
        text = serialize(sample_statement, Format.MT940, sink)

        assert sink.getvalue() == text
        assert text.startswith("{1:")

    def test_serialize_without_sink(self, sample_statement: Statement) -> None:
        """Test text is returned without a sink."""
        text = serialize(sample_statement, Format.CSV)
        assert text.startswith("Date,")

    def test_sink_failure(self, sample_statement: Statement) -> None:
        """Test write errors are wrapped."""

        class BrokenSink(io.StringIO):
            def write(self, s: str) -> int:
                raise OSError("disk full")

        with pytest.raises(StatementIOError):
            serialize(sample_statement, Format.CAMT053, BrokenSink())

    def test_cross_format(self, camt053_file: Path) -> None:
        """Test a camt.053 statement renders as MT940 and reads back."""
        statement = parse(camt053_file.read_bytes(), Format.CAMT053)
        reparsed = parse(serialize(statement, Format.MT940), Format.MT940)

        assert reparsed.statement_id == statement.statement_id
        assert reparsed.account == statement.account
        assert [tx.amount for tx in reparsed.transactions] == [
            tx.amount for tx in statement.transactions
        ]
