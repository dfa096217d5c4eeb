#!/usr/bin/env python3
"""Command-line interface for ypbank-converter."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from ypbank_converter.compare import compare_statements, format_report
from ypbank_converter.config import load_config
from ypbank_converter.conversion import convert
from ypbank_converter.errors import StatementError, StatementIOError
from ypbank_converter.formats import CodecRegistry, Format, format_from_name, parse, serialize
from ypbank_converter.models import Statement
from ypbank_converter.utils import read_file

FORMAT_HELP = "mt940, camt053 or csv"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.json file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )


def _read_statement(
    path: Path | None,
    fmt: Format,
    config: dict[str, Any] | None,
) -> Statement:
    """
    Parse a statement from a file, or from stdin when no path is given.

    Only tabular input is read from .xls workbooks.
    """
    if path is None:
        return parse(sys.stdin.buffer, fmt, config)
    return parse(read_file(path, excel=fmt is Format.CSV), fmt, config)


def _write_statement(
    statement: Statement,
    path: Path | None,
    fmt: Format,
    config: dict[str, Any] | None,
) -> None:
    """Serialize a statement to a file, or to stdout when no path is given."""
    if path is None:
        serialize(statement, fmt, sys.stdout, config)
        return

    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            serialize(statement, fmt, f, config)
    except OSError as e:
        raise StatementIOError(e) from e


def convert_main(argv: list[str] | None = None) -> int:
    """Converter entry point."""
    parser = argparse.ArgumentParser(
        prog="ypbank-convert",
        description="Convert bank statements between MT940, CAMT.053 and CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ypbank-convert --input-format mt940 --output-format camt053 -i statement.mt940
  ypbank-convert --input-format csv --output-format mt940 -i export.xls -o out.mt940
  cat statement.xml | ypbank-convert --input-format camt --output-format csv
        """,
    )
    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        help="Input file (default: stdin)",
    )
    parser.add_argument(
        "--input-format",
        help=f"Input format: {FORMAT_HELP}",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--output-format",
        help=f"Output format: {FORMAT_HELP}",
    )
    parser.add_argument(
        "--list-formats",
        action="store_true",
        help="List available statement formats",
    )
    _add_common_arguments(parser)

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if args.list_formats:
        print("Available formats:")
        for codec_cls in CodecRegistry.get_all_codecs():
            fmt = codec_cls.format
            print(f"  - {fmt.value}: {codec_cls.__name__} (.{fmt.extension()})")
        return 0

    if not args.input_format or not args.output_format:
        parser.print_help()
        return 1

    try:
        input_format = format_from_name(args.input_format)
        output_format = format_from_name(args.output_format)
        config = load_config(args.config)

        statement = _read_statement(args.input, input_format, config)
        statement = convert(statement, input_format, output_format)
        _write_statement(statement, args.output, output_format, config)
    except StatementError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output is not None:
        print(
            f"Wrote {len(statement.transactions)} transactions to {args.output}",
            file=sys.stderr,
        )

    return 0


def compare_main(argv: list[str] | None = None) -> int:
    """Comparer entry point."""
    parser = argparse.ArgumentParser(
        prog="ypbank-compare",
        description="Compare bank statements from different formats",
    )
    parser.add_argument("--file1", type=Path, required=True, help="First file")
    parser.add_argument("--format1", required=True, help=f"First file format: {FORMAT_HELP}")
    parser.add_argument("--file2", type=Path, required=True, help="Second file")
    parser.add_argument("--format2", required=True, help=f"Second file format: {FORMAT_HELP}")
    _add_common_arguments(parser)

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        format1 = format_from_name(args.format1)
        format2 = format_from_name(args.format2)
        config = load_config(args.config)

        statement1 = _read_statement(args.file1, format1, config)
        statement2 = _read_statement(args.file2, format2, config)
    except StatementError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    differences = compare_statements(statement1, statement2)
    print(format_report(differences, str(args.file1), str(args.file2)))

    return 0


if __name__ == "__main__":
    sys.exit(convert_main())
