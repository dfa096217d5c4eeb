"""Conversion rules applied when a statement changes format."""

import copy
import logging
from datetime import datetime, timezone

from ypbank_converter.errors import ConversionError
from ypbank_converter.formats.base import Format
from ypbank_converter.models import Statement, Transaction

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = " | "


def to_structured(statement: Statement) -> Statement:
    """
    Prepare a line-format statement for the structured format.

    Returns a copy whose creation date is set to today (UTC) when absent.
    """
    result = copy.deepcopy(statement)
    if result.creation_date is None:
        result.creation_date = datetime.now(timezone.utc).date()
    return result


def _fold_into_description(transaction: Transaction) -> None:
    segments = [transaction.description] if transaction.description else []
    if transaction.additional_info:
        segments.append(transaction.additional_info)
    if transaction.counterparty_name:
        segments.append(f"Counterparty: {transaction.counterparty_name}")

    transaction.description = SEGMENT_SEPARATOR.join(segments)

    # Folded details now live only in the description
    transaction.additional_info = None
    transaction.counterparty_name = None


def to_line(statement: Statement) -> Statement:
    """
    Prepare a structured statement for the line format.

    The line format has no place for additional information or the
    counterparty name, so both are moved into each description as
    ``" | "`` separated segments and cleared from the transaction. A second
    application therefore finds nothing left to fold.
    """
    result = copy.deepcopy(statement)
    for transaction in result.transactions:
        _fold_into_description(transaction)
    return result


def convert(statement: Statement, source: Format, target: Format) -> Statement:
    """
    Apply the conversion rule for a source/target format pair.

    Args:
        statement: Parsed statement
        source: Format the statement was read from
        target: Format it will be written to

    Returns:
        Converted copy of the statement

    Raises:
        ConversionError: If the statement lacks its id or account
    """
    if not statement.statement_id:
        raise ConversionError("statement has no identifier")
    if not statement.account:
        raise ConversionError("statement has no account")

    if source is Format.MT940 and target is Format.CAMT053:
        return to_structured(statement)
    if source is Format.CAMT053 and target is Format.MT940:
        return to_line(statement)

    logger.debug("No conversion rule for %s -> %s, copying", source.value, target.value)
    return copy.deepcopy(statement)
