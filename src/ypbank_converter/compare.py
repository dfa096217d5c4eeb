"""Field-level comparison of two statements."""

from ypbank_converter.models import Balance, Statement
from ypbank_converter.utils import clean_description


def normalize_description(text: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    kept = "".join(ch for ch in text.strip().lower() if ch.isalnum() or ch.isspace())
    return clean_description(kept)


def _balance_diff(label: str, first: Balance | None, second: Balance | None) -> list[str]:
    if first is None or second is None or first.amount == second.amount:
        return []
    return [f"{label} balance differs: {first.amount} vs {second.amount}"]


def compare_statements(first: Statement, second: Statement) -> list[str]:
    """
    List the differences between two statements.

    Transactions are matched by position. Descriptions are compared loosely
    and only when both sides have one.

    Returns:
        Human-readable difference lines, empty if the statements match
    """
    differences: list[str] = []

    if len(first.transactions) != len(second.transactions):
        differences.append(
            f"Number of transactions differs: "
            f"{len(first.transactions)} vs {len(second.transactions)}"
        )

    pairs = zip(first.transactions, second.transactions)
    for number, (tx1, tx2) in enumerate(pairs, start=1):
        if tx1.date != tx2.date:
            differences.append(f"Transaction {number} date differs: {tx1.date} vs {tx2.date}")

        if tx1.amount != tx2.amount:
            differences.append(
                f"Transaction {number} amount differs: {tx1.amount} vs {tx2.amount}"
            )

        if tx1.debit_credit is not tx2.debit_credit:
            differences.append(
                f"Transaction {number} type differs: "
                f"{tx1.debit_credit.name.title()} vs {tx2.debit_credit.name.title()}"
            )

        desc1 = normalize_description(tx1.description)
        desc2 = normalize_description(tx2.description)
        if desc1 and desc2 and desc1 != desc2:
            differences.append(
                f"Transaction {number} description differs:\n"
                f"  File 1: {tx1.description}\n"
                f"  File 2: {tx2.description}"
            )

    differences.extend(_balance_diff("Opening", first.opening_balance, second.opening_balance))
    differences.extend(_balance_diff("Closing", first.closing_balance, second.closing_balance))

    return differences


def format_report(differences: list[str], name1: str, name2: str) -> str:
    """Render comparison results for display."""
    if not differences:
        return f"The transaction records in '{name1}' and '{name2}' are identical."

    lines = ["Differences found:"]
    lines.extend(f"  - {diff}" for diff in differences)
    return "\n".join(lines)
