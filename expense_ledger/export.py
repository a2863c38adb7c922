"""
export.py - CSV and XLSX exports of the ledger

CSV layout: header "Date,Category,Description,Amount", then one row per
expense in ledger order with every field double-quoted and the amount
formatted to two decimals.
"""

from io import BytesIO, StringIO
from typing import Sequence
import csv
import datetime

import pandas as pd

from expense_ledger.errors import EmptyExport
from expense_ledger.models import Expense

CSV_HEADERS = ["Date", "Category", "Description", "Amount"]
CSV_MIME = "text/csv"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_filename(today: datetime.date, extension: str = "csv") -> str:
    return f"expenses_{today.isoformat()}.{extension}"


def to_csv(expenses: Sequence[Expense]) -> str:
    if not expenses:
        raise EmptyExport()
    buffer = StringIO()
    buffer.write(",".join(CSV_HEADERS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for e in expenses:
        writer.writerow([e.date, e.category, e.description, f"{e.amount:.2f}"])
    # no trailing newline after the last row
    return buffer.getvalue().rstrip("\n")


def to_dataframe(expenses: Sequence[Expense]) -> pd.DataFrame:
    rows = [
        {
            "id": e.id,
            "date": e.date,
            "category": e.category,
            "description": e.description,
            "amount": float(e.amount),
            "created_at": e.created_at,
        }
        for e in expenses
    ]
    return pd.DataFrame(rows, columns=["id", "date", "category", "description", "amount", "created_at"])


def to_xlsx(expenses: Sequence[Expense]) -> bytes:
    """
    Workbook with an "expenses" sheet and a "totals_by_category" sheet.
    """
    if not expenses:
        raise EmptyExport()
    df = to_dataframe(expenses)
    totals = df.groupby("category", sort=False)["amount"].sum().reset_index()

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="expenses")
        totals.to_excel(writer, index=False, sheet_name="totals_by_category")
    buffer.seek(0)
    return buffer.getvalue()
