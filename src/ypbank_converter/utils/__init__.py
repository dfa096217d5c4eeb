"""Utility functions for ypbank-converter."""

from ypbank_converter.utils.parsing import (
    clean_description,
    format_amount,
    parse_amount,
    parse_date,
    read_file,
    read_source,
)

__all__ = [
    "parse_date",
    "parse_amount",
    "format_amount",
    "clean_description",
    "read_file",
    "read_source",
]
