"""ISO 20022 camt.053 element tree as nested records.

Each record mirrors one schema element: optional children are ``None`` when
absent and repeated children are lists. ``from_xml`` reads an ElementTree
element (matching children by local name, so namespaces are ignored) and
``to_xml`` appends the element to a parent in schema order. Mapping to and
from the canonical statement lives in ``camt053.py``.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

NAMESPACE = "urn:iso:std:iso:20022:tech:xsd:camt.053.001.02"


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def find_child(element: ET.Element | None, name: str) -> ET.Element | None:
    """Return the first child with the given local name."""
    if element is None:
        return None
    for child in element:
        if local_name(child.tag) == name:
            return child
    return None


def find_children(element: ET.Element | None, name: str) -> list[ET.Element]:
    """Return all children with the given local name."""
    if element is None:
        return []
    return [child for child in element if local_name(child.tag) == name]


def child_text(element: ET.Element | None, *path: str) -> str | None:
    """Text of the descendant at ``path``, stripped, or None if absent."""
    for name in path:
        element = find_child(element, name)
    if element is None or element.text is None:
        return None
    return element.text.strip()


def add_text(parent: ET.Element, name: str, text: str | None) -> ET.Element | None:
    """Append ``<name>text</name>`` unless text is None."""
    if text is None:
        return None
    child = ET.SubElement(parent, name)
    child.text = text
    return child


@dataclass
class AccountId:
    """``Id`` of an account: IBAN or other identification."""

    iban: str | None = None
    other_id: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "AccountId | None":
        if element is None:
            return None
        return cls(
            iban=child_text(element, "IBAN"),
            other_id=child_text(element, "Othr", "Id"),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "Id")
        add_text(node, "IBAN", self.iban)
        if self.other_id is not None:
            add_text(ET.SubElement(node, "Othr"), "Id", self.other_id)


@dataclass
class PartyRecord:
    """A party (``Dbtr``, ``Cdtr``, ``Ownr``) with name and country."""

    name: str | None = None
    country: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "PartyRecord | None":
        if element is None:
            return None
        return cls(
            name=child_text(element, "Nm"),
            country=child_text(element, "PstlAdr", "Ctry"),
        )

    def to_xml(self, parent: ET.Element, tag: str) -> None:
        node = ET.SubElement(parent, tag)
        add_text(node, "Nm", self.name)
        if self.country is not None:
            add_text(ET.SubElement(node, "PstlAdr"), "Ctry", self.country)


@dataclass
class AgentRecord:
    """A financial institution identified by BIC."""

    bic: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "AgentRecord | None":
        if element is None:
            return None
        # BIC in camt.053.001.02, BICFI in later versions
        return cls(
            bic=child_text(element, "FinInstnId", "BIC")
            or child_text(element, "FinInstnId", "BICFI"),
        )

    def to_xml(self, parent: ET.Element, tag: str) -> None:
        node = ET.SubElement(ET.SubElement(parent, tag), "FinInstnId")
        add_text(node, "BIC", self.bic)


@dataclass
class AccountRecord:
    """``Acct`` of a statement."""

    id: AccountId | None = None
    currency: str | None = None
    name: str | None = None
    owner: PartyRecord | None = None
    servicer: AgentRecord | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "AccountRecord":
        return cls(
            id=AccountId.from_xml(find_child(element, "Id")),
            currency=child_text(element, "Ccy"),
            name=child_text(element, "Nm"),
            owner=PartyRecord.from_xml(find_child(element, "Ownr")),
            servicer=AgentRecord.from_xml(find_child(element, "Svcr")),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "Acct")
        if self.id is not None:
            self.id.to_xml(node)
        add_text(node, "Ccy", self.currency)
        add_text(node, "Nm", self.name)
        if self.owner is not None:
            self.owner.to_xml(node, "Ownr")
        if self.servicer is not None:
            self.servicer.to_xml(node, "Svcr")


@dataclass
class AmountRecord:
    """``Amt`` with its ``Ccy`` attribute."""

    value: str
    currency: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "AmountRecord | None":
        if element is None:
            return None
        currency = element.get("Ccy") or child_text(element, "Ccy")
        return cls(value=(element.text or "").strip(), currency=currency)

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "Amt")
        if self.currency is not None:
            node.set("Ccy", self.currency)
        node.text = self.value


@dataclass
class DateChoice:
    """Either ``Dt`` (date) or ``DtTm`` (date-time)."""

    date: str | None = None
    date_time: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "DateChoice | None":
        if element is None:
            return None
        return cls(date=child_text(element, "Dt"), date_time=child_text(element, "DtTm"))

    def to_xml(self, parent: ET.Element, tag: str) -> None:
        node = ET.SubElement(parent, tag)
        add_text(node, "Dt", self.date)
        add_text(node, "DtTm", self.date_time)


@dataclass
class BalanceRecord:
    """``Bal`` entry of a statement."""

    code: str | None
    amount: AmountRecord | None
    indicator: str | None
    date: DateChoice | None

    @classmethod
    def from_xml(cls, element: ET.Element) -> "BalanceRecord":
        code_or_proprietary = find_child(find_child(element, "Tp"), "CdOrPrtry")
        return cls(
            code=child_text(code_or_proprietary, "Cd")
            or child_text(code_or_proprietary, "Prtry"),
            amount=AmountRecord.from_xml(find_child(element, "Amt")),
            indicator=child_text(element, "CdtDbtInd"),
            date=DateChoice.from_xml(find_child(element, "Dt")),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "Bal")
        code_node = ET.SubElement(ET.SubElement(node, "Tp"), "CdOrPrtry")
        add_text(code_node, "Cd", self.code)
        if self.amount is not None:
            self.amount.to_xml(node)
        add_text(node, "CdtDbtInd", self.indicator)
        if self.date is not None:
            self.date.to_xml(node, "Dt")


@dataclass
class BankTransactionCode:
    """``BkTxCd``: domain code and/or proprietary code."""

    domain_code: str | None = None
    proprietary_code: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "BankTransactionCode | None":
        if element is None:
            return None
        return cls(
            domain_code=child_text(element, "Domn", "Cd"),
            proprietary_code=child_text(element, "Prtry", "Cd"),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "BkTxCd")
        if self.domain_code is not None:
            add_text(ET.SubElement(node, "Domn"), "Cd", self.domain_code)
        if self.proprietary_code is not None:
            add_text(ET.SubElement(node, "Prtry"), "Cd", self.proprietary_code)


@dataclass
class RelatedParties:
    """``RltdPties``: debtor and creditor with their accounts."""

    debtor: PartyRecord | None = None
    debtor_account: AccountId | None = None
    creditor: PartyRecord | None = None
    creditor_account: AccountId | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "RelatedParties | None":
        if element is None:
            return None
        return cls(
            debtor=PartyRecord.from_xml(find_child(element, "Dbtr")),
            debtor_account=AccountId.from_xml(
                find_child(find_child(element, "DbtrAcct"), "Id")
            ),
            creditor=PartyRecord.from_xml(find_child(element, "Cdtr")),
            creditor_account=AccountId.from_xml(
                find_child(find_child(element, "CdtrAcct"), "Id")
            ),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "RltdPties")
        if self.debtor is not None:
            self.debtor.to_xml(node, "Dbtr")
        if self.debtor_account is not None:
            self.debtor_account.to_xml(ET.SubElement(node, "DbtrAcct"))
        if self.creditor is not None:
            self.creditor.to_xml(node, "Cdtr")
        if self.creditor_account is not None:
            self.creditor_account.to_xml(ET.SubElement(node, "CdtrAcct"))


@dataclass
class RelatedAgents:
    """``RltdAgts``: debtor and creditor banks."""

    debtor_agent: AgentRecord | None = None
    creditor_agent: AgentRecord | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "RelatedAgents | None":
        if element is None:
            return None
        return cls(
            debtor_agent=AgentRecord.from_xml(find_child(element, "DbtrAgt")),
            creditor_agent=AgentRecord.from_xml(find_child(element, "CdtrAgt")),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "RltdAgts")
        if self.debtor_agent is not None:
            self.debtor_agent.to_xml(node, "DbtrAgt")
        if self.creditor_agent is not None:
            self.creditor_agent.to_xml(node, "CdtrAgt")


@dataclass
class RemittanceInformation:
    """``RmtInf``: unstructured text and/or creditor reference."""

    unstructured: str | None = None
    creditor_reference: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "RemittanceInformation | None":
        if element is None:
            return None
        return cls(
            unstructured=child_text(element, "Ustrd"),
            creditor_reference=child_text(element, "Strd", "CdtrRefInf", "Ref"),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "RmtInf")
        add_text(node, "Ustrd", self.unstructured)
        if self.creditor_reference is not None:
            strd = ET.SubElement(ET.SubElement(node, "Strd"), "CdtrRefInf")
            add_text(strd, "Ref", self.creditor_reference)


@dataclass
class TransactionDetails:
    """``TxDtls`` of an entry."""

    end_to_end_id: str | None = None
    related_parties: RelatedParties | None = None
    related_agents: RelatedAgents | None = None
    remittance: RemittanceInformation | None = None
    additional_info: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "TransactionDetails | None":
        if element is None:
            return None
        return cls(
            end_to_end_id=child_text(element, "Refs", "EndToEndId"),
            related_parties=RelatedParties.from_xml(find_child(element, "RltdPties")),
            related_agents=RelatedAgents.from_xml(find_child(element, "RltdAgts")),
            remittance=RemittanceInformation.from_xml(find_child(element, "RmtInf")),
            additional_info=child_text(element, "AddtlTxInf"),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "TxDtls")
        if self.end_to_end_id is not None:
            add_text(ET.SubElement(node, "Refs"), "EndToEndId", self.end_to_end_id)
        if self.related_parties is not None:
            self.related_parties.to_xml(node)
        if self.related_agents is not None:
            self.related_agents.to_xml(node)
        if self.remittance is not None:
            self.remittance.to_xml(node)
        add_text(node, "AddtlTxInf", self.additional_info)


@dataclass
class EntryDetails:
    """``NtryDtls``; only the first ``TxDtls`` is kept."""

    batch_count: str | None = None
    transaction: TransactionDetails | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "EntryDetails | None":
        if element is None:
            return None
        return cls(
            batch_count=child_text(element, "Btch", "NbOfTxs"),
            transaction=TransactionDetails.from_xml(find_child(element, "TxDtls")),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "NtryDtls")
        if self.batch_count is not None:
            add_text(ET.SubElement(node, "Btch"), "NbOfTxs", self.batch_count)
        if self.transaction is not None:
            self.transaction.to_xml(node)


@dataclass
class EntryRecord:
    """``Ntry``: one booked entry."""

    amount: AmountRecord | None
    indicator: str | None
    reference: str | None = None
    status: str | None = None
    booking_date: DateChoice | None = None
    value_date: DateChoice | None = None
    servicer_reference: str | None = None
    bank_transaction_code: BankTransactionCode | None = None
    details: EntryDetails | None = None

    @classmethod
    def from_xml(cls, element: ET.Element) -> "EntryRecord":
        return cls(
            amount=AmountRecord.from_xml(find_child(element, "Amt")),
            indicator=child_text(element, "CdtDbtInd"),
            reference=child_text(element, "NtryRef"),
            status=child_text(element, "Sts"),
            booking_date=DateChoice.from_xml(find_child(element, "BookgDt")),
            value_date=DateChoice.from_xml(find_child(element, "ValDt")),
            servicer_reference=child_text(element, "AcctSvcrRef"),
            bank_transaction_code=BankTransactionCode.from_xml(find_child(element, "BkTxCd")),
            details=EntryDetails.from_xml(find_child(element, "NtryDtls")),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "Ntry")
        add_text(node, "NtryRef", self.reference)
        if self.amount is not None:
            self.amount.to_xml(node)
        add_text(node, "CdtDbtInd", self.indicator)
        add_text(node, "Sts", self.status)
        if self.booking_date is not None:
            self.booking_date.to_xml(node, "BookgDt")
        if self.value_date is not None:
            self.value_date.to_xml(node, "ValDt")
        add_text(node, "AcctSvcrRef", self.servicer_reference)
        if self.bank_transaction_code is not None:
            self.bank_transaction_code.to_xml(node)
        if self.details is not None:
            self.details.to_xml(node)


@dataclass
class FromToDate:
    """``FrToDt``: statement period."""

    from_date_time: str | None = None
    to_date_time: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "FromToDate | None":
        if element is None:
            return None
        return cls(
            from_date_time=child_text(element, "FrDtTm"),
            to_date_time=child_text(element, "ToDtTm"),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "FrToDt")
        add_text(node, "FrDtTm", self.from_date_time)
        add_text(node, "ToDtTm", self.to_date_time)


@dataclass
class StatementRecord:
    """``Stmt``: the account statement."""

    id: str | None
    account: AccountRecord
    electronic_sequence: str | None = None
    legal_sequence: str | None = None
    creation_date_time: str | None = None
    period: FromToDate | None = None
    balances: list[BalanceRecord] = field(default_factory=list)
    entry_count: str | None = None
    entries: list[EntryRecord] = field(default_factory=list)

    @classmethod
    def from_xml(cls, element: ET.Element) -> "StatementRecord":
        return cls(
            id=child_text(element, "Id"),
            account=AccountRecord.from_xml(find_child(element, "Acct")),
            electronic_sequence=child_text(element, "ElctrncSeqNb"),
            legal_sequence=child_text(element, "LglSeqNb"),
            creation_date_time=child_text(element, "CreDtTm"),
            period=FromToDate.from_xml(find_child(element, "FrToDt")),
            balances=[BalanceRecord.from_xml(e) for e in find_children(element, "Bal")],
            entry_count=child_text(element, "TxsSummry", "TtlNtries", "NbOfNtries"),
            entries=[EntryRecord.from_xml(e) for e in find_children(element, "Ntry")],
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "Stmt")
        add_text(node, "Id", self.id)
        add_text(node, "ElctrncSeqNb", self.electronic_sequence)
        add_text(node, "LglSeqNb", self.legal_sequence)
        add_text(node, "CreDtTm", self.creation_date_time)
        if self.period is not None:
            self.period.to_xml(node)
        self.account.to_xml(node)
        for balance in self.balances:
            balance.to_xml(node)
        if self.entry_count is not None:
            totals = ET.SubElement(ET.SubElement(node, "TxsSummry"), "TtlNtries")
            add_text(totals, "NbOfNtries", self.entry_count)
        for entry in self.entries:
            entry.to_xml(node)


@dataclass
class GroupHeader:
    """``GrpHdr``: message identification."""

    message_id: str | None = None
    creation_date_time: str | None = None

    @classmethod
    def from_xml(cls, element: ET.Element | None) -> "GroupHeader":
        return cls(
            message_id=child_text(element, "MsgId"),
            creation_date_time=child_text(element, "CreDtTm"),
        )

    def to_xml(self, parent: ET.Element) -> None:
        node = ET.SubElement(parent, "GrpHdr")
        add_text(node, "MsgId", self.message_id)
        add_text(node, "CreDtTm", self.creation_date_time)


@dataclass
class Document:
    """``Document > BkToCstmrStmt`` with a single statement."""

    group_header: GroupHeader
    statement: StatementRecord

    @classmethod
    def from_xml(cls, root: ET.Element) -> "Document | None":
        """Build the tree, or return None if ``BkToCstmrStmt/Stmt`` is absent."""
        container = find_child(root, "BkToCstmrStmt")
        statement = find_child(container, "Stmt")
        if container is None or statement is None:
            return None
        return cls(
            group_header=GroupHeader.from_xml(find_child(container, "GrpHdr")),
            statement=StatementRecord.from_xml(statement),
        )

    def to_xml(self) -> ET.Element:
        root = ET.Element("Document", {"xmlns": NAMESPACE})
        container = ET.SubElement(root, "BkToCstmrStmt")
        self.group_header.to_xml(container)
        self.statement.to_xml(container)
        return root
