"""
Tests for ledger exports.
"""
import csv
import io
from datetime import datetime
from decimal import Decimal
from splitledger.models.transaction import Transaction, TransactionType
from splitledger.services.export_service import build_ledger, render_csv


def _transaction(id, type, amount, day):
    return Transaction(
        id=id,
        type=type,
        amount=Decimal(amount),
        description=f"Entry {id}",
        category=None,
        date=datetime(2024, 3, day),
        paid_by="Alice",
        is_shared=False
    )


def test_build_ledger_running_balance():
    """Test entries are date-ascending with a running balance."""
    ledger = build_ledger([
        _transaction(2, TransactionType.EXPENSE, "40.00", 5),
        _transaction(1, TransactionType.INCOME, "100.00", 1),
        _transaction(3, TransactionType.EXPENSE, "75.00", 9),
    ])

    assert [entry["balance"] for entry in ledger["entries"]] == [
        Decimal("100.00"), Decimal("60.00"), Decimal("-15.00")
    ]
    assert ledger["total_income"] == Decimal("100.00")
    assert ledger["total_expenses"] == Decimal("115.00")
    assert ledger["net_balance"] == Decimal("-15.00")


def test_render_csv_has_totals_block():
    rows = list(csv.reader(io.StringIO(render_csv([
        _transaction(1, TransactionType.INCOME, "10.00", 1),
    ]).decode("utf-8"))))

    assert rows[0][0] == "Date"
    assert rows[1] == ["2024-03-01", "Entry 1", "income", "", "Alice", "10.00", "10.00"]
    assert rows[-1] == ["Net Balance", "10.00"]


def test_export_csv_endpoint_applies_filters(client):
    for description, paid_by in (("Lunch", "Alice"), ("Taxi", "Bob")):
        client.post("/api/transactions", json={
            "type": "expense",
            "amount": "8.00",
            "description": description,
            "date": "2024-03-10T12:00:00",
            "paidBy": paid_by,
        })

    response = client.post("/api/export/csv", json={"filters": {"paidBy": "Bob"}})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    assert "Taxi" in response.text
    assert "Lunch" not in response.text


def test_export_text_report(client):
    client.post("/api/transactions", json={
        "type": "income",
        "amount": "250.00",
        "description": "Refund",
        "date": "2024-03-10T12:00:00",
        "paidBy": "Alice",
    })

    response = client.post("/api/export/text", json={"title": "March"})

    assert response.status_code == 200
    assert response.text.startswith("MARCH\n=====")
    assert "Total Income: +250.00" in response.text
