"""CAMT.053 (ISO 20022 bank-to-customer statement) codec.

Parsing reads the XML into the records of ``camt053_tree`` and then projects
them onto the canonical model; serialization builds the records from a
statement and renders them. Both projections are plain functions so the
mapping policy can change without touching the schema records.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from ypbank_converter.config import get_default_currency
from ypbank_converter.errors import (
    InvalidAmountError,
    InvalidDateError,
    MissingFieldError,
    ParseError,
    XmlFormatError,
)
from ypbank_converter.formats.base import CodecRegistry, Format, StatementCodec
from ypbank_converter.formats.camt053_tree import (
    AccountId,
    AccountRecord,
    AgentRecord,
    AmountRecord,
    BalanceRecord,
    BankTransactionCode,
    DateChoice,
    Document,
    EntryDetails,
    EntryRecord,
    FromToDate,
    GroupHeader,
    PartyRecord,
    RelatedAgents,
    RelatedParties,
    RemittanceInformation,
    StatementRecord,
    TransactionDetails,
    local_name,
)
from ypbank_converter.models import (
    UNKNOWN_ACCOUNT,
    Balance,
    BalanceType,
    DebitCredit,
    Statement,
    Transaction,
)
from ypbank_converter.utils import format_amount

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

BALANCE_CODES = {
    "OPBD": BalanceType.OPENING,
    "OPAV": BalanceType.OPENING,
    "CLBD": BalanceType.CLOSING,
    "CLAV": BalanceType.CLOSING,
    "PRCD": BalanceType.INTERMEDIATE,
}


def balance_type_from_code(code: str | None) -> BalanceType:
    """Map a balance type code; unknown codes count as intermediate."""
    return BALANCE_CODES.get((code or "").upper(), BalanceType.INTERMEDIATE)


def parse_date_only(text: str) -> date:
    """Parse a ``YYYY-MM-DD`` date."""
    try:
        return datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidDateError(text) from e


def parse_date_time(text: str) -> date:
    """
    Parse an ISO ``YYYY-MM-DDTHH:MM:SS`` date-time down to its date.

    Fractional seconds and UTC offsets after the seconds are ignored; a bare
    date is accepted as well.
    """
    text = text.strip()
    try:
        return datetime.strptime(text[:19], "%Y-%m-%dT%H:%M:%S").date()
    except ValueError:
        return parse_date_only(text)


def parse_date_choice(choice: DateChoice | None) -> date | None:
    """Date of a ``Dt``/``DtTm`` choice, None if neither is present."""
    if choice is None:
        return None
    if choice.date:
        return parse_date_only(choice.date)
    if choice.date_time:
        return parse_date_time(choice.date_time)
    return None


def format_date_time(value: date) -> str:
    """Format a date as midnight ISO date-time."""
    return f"{value.isoformat()}T00:00:00"


def _optional_date(text: str | None, what: str) -> date | None:
    if not text:
        return None
    try:
        return parse_date_time(text)
    except InvalidDateError:
        logger.warning("Ignoring unparseable %s %r", what, text)
        return None


def _parse_amount(amount: AmountRecord | None) -> Decimal:
    raw = amount.value if amount is not None else ""
    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise InvalidAmountError(raw) from e
    if not value.is_finite() or value < 0:
        raise InvalidAmountError(raw)
    return value


def _parse_indicator(indicator: str | None) -> DebitCredit:
    if not indicator:
        raise ParseError("Missing credit/debit indicator CdtDbtInd")
    return DebitCredit.from_code(indicator)


def _account_id(account_id: AccountId | None) -> str | None:
    """IBAN, else other identification."""
    if account_id is None:
        return None
    return account_id.iban or account_id.other_id


def project_balance(record: BalanceRecord, default_currency: str) -> Balance:
    """
    Map a ``Bal`` record onto a canonical balance.

    Raises:
        InvalidAmountError: If the amount is not a decimal
        ParseError: If the credit/debit indicator is invalid or absent
        MissingFieldError: If the balance has no date
    """
    balance_type = balance_type_from_code(record.code)
    amount = _parse_amount(record.amount)
    debit_credit = _parse_indicator(record.indicator)

    balance_date = parse_date_choice(record.date)
    if balance_date is None:
        raise MissingFieldError("balance date")

    currency = (record.amount.currency if record.amount else None) or default_currency
    return Balance(
        balance_type=balance_type,
        amount=amount,
        currency=currency,
        debit_credit=debit_credit,
        date=balance_date,
    )


def project_entry(record: EntryRecord, default_currency: str) -> Transaction:
    """Map an ``Ntry`` record onto a canonical transaction."""
    amount = _parse_amount(record.amount)
    debit_credit = _parse_indicator(record.indicator)

    value_date = parse_date_choice(record.value_date)
    booking_date = parse_date_choice(record.booking_date) or value_date
    if booking_date is None:
        booking_date = datetime.now(timezone.utc).date()
        logger.warning("Entry %s has no booking date, using %s", record.reference, booking_date)

    details = record.details.transaction if record.details else None

    description = ""
    counterparty_name = None
    counterparty_account = None
    bank_identifier = None
    additional_info = None
    end_to_end_id = None

    if details is not None:
        end_to_end_id = details.end_to_end_id
        if details.remittance and details.remittance.unstructured:
            description = details.remittance.unstructured

        # Whichever side is filled in is the counterparty; creditor wins
        # when both are.
        parties = details.related_parties
        if parties is not None:
            for party in (parties.debtor, parties.creditor):
                if party is not None and party.name:
                    counterparty_name = party.name
            for account_id in (parties.debtor_account, parties.creditor_account):
                counterparty_account = _account_id(account_id) or counterparty_account

        agents = details.related_agents
        if agents is not None:
            for agent in (agents.debtor_agent, agents.creditor_agent):
                if agent is not None and agent.bic:
                    bank_identifier = agent.bic

        additional_info = details.additional_info

    if not description and record.bank_transaction_code:
        description = record.bank_transaction_code.proprietary_code or ""

    reference = (
        record.reference
        or record.servicer_reference
        or end_to_end_id
        or Transaction.synthesized_reference(booking_date, amount)
    )

    return Transaction(
        reference=reference,
        date=booking_date,
        value_date=value_date,
        amount=amount,
        currency=(record.amount.currency if record.amount else None) or default_currency,
        debit_credit=debit_credit,
        counterparty_account=counterparty_account,
        counterparty_name=counterparty_name,
        bank_identifier=bank_identifier,
        description=description,
        additional_info=additional_info,
    )


def document_to_statement(document: Document, default_currency: str) -> Statement:
    """Project a parsed camt.053 document onto the canonical model."""
    record = document.statement
    account = record.account

    statement_id = record.id or document.group_header.message_id
    if not statement_id:
        raise MissingFieldError("Stmt/Id")

    currency = account.currency or default_currency
    statement = Statement.new(
        statement_id,
        _account_id(account.id) or UNKNOWN_ACCOUNT,
        currency,
    )
    statement.sequence_number = record.electronic_sequence
    statement.account_holder = account.name or (account.owner.name if account.owner else None)
    statement.creation_date = _optional_date(record.creation_date_time, "creation date")
    if record.period is not None:
        statement.from_date = _optional_date(record.period.from_date_time, "period start")
        statement.to_date = _optional_date(record.period.to_date_time, "period end")

    for balance_record in record.balances:
        balance = project_balance(balance_record, currency)
        if balance.balance_type is BalanceType.OPENING:
            statement.opening_balance = balance
        elif balance.balance_type is BalanceType.CLOSING:
            statement.closing_balance = balance
        else:
            logger.debug("Dropping %s balance %s", balance_record.code, balance)

    for entry in record.entries:
        statement.add_transaction(project_entry(entry, currency))

    return statement


def _balance_record(balance: Balance, code: str) -> BalanceRecord:
    return BalanceRecord(
        code=code,
        amount=AmountRecord(value=format_amount(balance.amount), currency=balance.currency),
        indicator=balance.debit_credit.iso_code,
        date=DateChoice(date=balance.date.isoformat()),
    )


def _entry_record(transaction: Transaction) -> EntryRecord:
    parties = None
    agents = None
    if transaction.counterparty_name is not None or transaction.counterparty_account is not None:
        party = (
            PartyRecord(name=transaction.counterparty_name)
            if transaction.counterparty_name is not None
            else None
        )
        account_id = (
            AccountId(iban=transaction.counterparty_account)
            if transaction.counterparty_account is not None
            else None
        )
        # The counterparty sits on the side opposite to the entry itself
        if transaction.debit_credit is DebitCredit.CREDIT:
            parties = RelatedParties(debtor=party, debtor_account=account_id)
        else:
            parties = RelatedParties(creditor=party, creditor_account=account_id)

    if transaction.bank_identifier is not None:
        agent = AgentRecord(bic=transaction.bank_identifier)
        if transaction.debit_credit is DebitCredit.CREDIT:
            agents = RelatedAgents(debtor_agent=agent)
        else:
            agents = RelatedAgents(creditor_agent=agent)

    remittance = None
    if transaction.description:
        remittance = RemittanceInformation(unstructured=transaction.description)

    return EntryRecord(
        reference=transaction.reference,
        amount=AmountRecord(value=format_amount(transaction.amount), currency=transaction.currency),
        indicator=transaction.debit_credit.iso_code,
        status="BOOK",
        booking_date=DateChoice(date=transaction.date.isoformat()),
        value_date=(
            DateChoice(date=transaction.value_date.isoformat())
            if transaction.value_date is not None
            else None
        ),
        bank_transaction_code=BankTransactionCode(proprietary_code=transaction.description),
        details=EntryDetails(
            transaction=TransactionDetails(
                related_parties=parties,
                related_agents=agents,
                remittance=remittance,
                additional_info=transaction.additional_info,
            )
        ),
    )


def statement_to_document(statement: Statement) -> Document:
    """Build the camt.053 records for a canonical statement."""
    creation_date = statement.creation_date or datetime.now(timezone.utc).date()

    sequence = statement.sequence_number
    if sequence is not None and not (sequence.isascii() and sequence.isdigit()):
        logger.debug("Dropping non-numeric sequence number %r", sequence)
        sequence = None

    balances = []
    if statement.opening_balance is not None:
        balances.append(_balance_record(statement.opening_balance, "OPBD"))
    if statement.closing_balance is not None:
        balances.append(_balance_record(statement.closing_balance, "CLBD"))

    period = None
    if statement.from_date is not None or statement.to_date is not None:
        period = FromToDate(
            from_date_time=format_date_time(statement.from_date) if statement.from_date else None,
            to_date_time=format_date_time(statement.to_date) if statement.to_date else None,
        )

    return Document(
        group_header=GroupHeader(
            message_id=statement.statement_id,
            creation_date_time=format_date_time(creation_date),
        ),
        statement=StatementRecord(
            id=statement.statement_id,
            electronic_sequence=sequence,
            creation_date_time=(
                format_date_time(statement.creation_date) if statement.creation_date else None
            ),
            period=period,
            account=AccountRecord(
                id=AccountId(iban=statement.account),
                currency=statement.currency,
                name=statement.account_holder,
            ),
            balances=balances,
            entry_count=str(len(statement.transactions)),
            entries=[_entry_record(tx) for tx in statement.transactions],
        ),
    )


@CodecRegistry.register
class Camt053Codec(StatementCodec):
    """Codec for ISO 20022 camt.053 XML statements."""

    format: ClassVar[Format] = Format.CAMT053

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__(config)
        self.default_currency = get_default_currency(config)

    def parse(self, content: str) -> Statement:
        """Parse a camt.053 document."""
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise XmlFormatError(str(e)) from e

        if local_name(root.tag) != "Document":
            raise MissingFieldError("Document")

        document = Document.from_xml(root)
        if document is None:
            raise MissingFieldError("BkToCstmrStmt/Stmt")

        return document_to_statement(document, self.default_currency)

    def serialize(self, statement: Statement) -> str:
        """Render a statement as a camt.053 document."""
        root = statement_to_document(statement).to_xml()
        ET.indent(root)
        return f"{XML_DECLARATION}\n{ET.tostring(root, encoding='unicode')}\n"
