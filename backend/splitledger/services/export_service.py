"""
Export service: ledger-style reports over a list of transactions.
"""
import csv
import io
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence
from splitledger.core.utils import money_str, to_money, utcnow
from splitledger.models.transaction import Transaction, TransactionType

LEDGER_COLUMNS = ["Date", "Description", "Type", "Category", "Paid By", "Amount", "Balance"]


def build_ledger(transactions: Sequence[Transaction]) -> Dict[str, Any]:
    """
    Order transactions by date and attach a running balance.

    Income adds to the balance, expenses subtract from it.
    """
    ordered = sorted(transactions, key=lambda t: (t.date, t.id or 0))

    running = Decimal("0.00")
    total_income = Decimal("0.00")
    total_expenses = Decimal("0.00")
    entries: List[Dict[str, Any]] = []

    for transaction in ordered:
        amount = to_money(transaction.amount)
        if transaction.type == TransactionType.INCOME:
            running += amount
            total_income += amount
        else:
            running -= amount
            total_expenses += amount
        entries.append({
            "date": transaction.date,
            "description": transaction.description,
            "type": TransactionType(transaction.type).value,
            "category": transaction.category or "",
            "paid_by": transaction.paid_by,
            "amount": amount,
            "balance": running,
        })

    return {
        "entries": entries,
        "total_income": total_income,
        "total_expenses": total_expenses,
        "net_balance": total_income - total_expenses,
    }


def render_text_report(transactions: Sequence[Transaction], title: Optional[str] = None) -> bytes:
    """Plain-text ledger report."""
    ledger = build_ledger(transactions)
    heading = (title or "Expense Report").upper()

    lines = [heading, "=" * len(heading), ""]
    lines.append(f"Generated on: {utcnow().strftime('%Y-%m-%d')}")
    lines.append("")
    for entry in ledger["entries"]:
        sign = "+" if entry["type"] == TransactionType.INCOME.value else "-"
        lines.append(f"{entry['date'].strftime('%Y-%m-%d')} | {entry['description']}")
        lines.append(
            f"  Type: {entry['type']} | Amount: {sign}{money_str(entry['amount'])}"
            f" | Balance: {money_str(entry['balance'])}"
        )
        lines.append(f"  Category: {entry['category'] or 'N/A'} | Paid by: {entry['paid_by']}")
        lines.append("")

    lines.append("=" * len(heading))
    lines.append(f"Total Income: +{money_str(ledger['total_income'])}")
    lines.append(f"Total Expenses: -{money_str(ledger['total_expenses'])}")
    lines.append(f"Net Balance: {money_str(ledger['net_balance'])}")
    return ("\n".join(lines) + "\n").encode("utf-8")


def render_csv(transactions: Sequence[Transaction]) -> bytes:
    """CSV ledger with a trailing totals block."""
    ledger = build_ledger(transactions)
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow(LEDGER_COLUMNS)
    for entry in ledger["entries"]:
        writer.writerow([
            entry["date"].strftime("%Y-%m-%d"),
            entry["description"],
            entry["type"],
            entry["category"],
            entry["paid_by"],
            money_str(entry["amount"]),
            money_str(entry["balance"]),
        ])
    writer.writerow([])
    writer.writerow(["Total Income", money_str(ledger["total_income"])])
    writer.writerow(["Total Expenses", money_str(ledger["total_expenses"])])
    writer.writerow(["Net Balance", money_str(ledger["net_balance"])])
    return buffer.getvalue().encode("utf-8")
