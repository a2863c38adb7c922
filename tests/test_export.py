import datetime
from io import BytesIO

import pandas as pd
import pytest

from expense_ledger import export
from expense_ledger.errors import EmptyExport


def test_csv_layout(make_expense):
    expenses = [
        make_expense(12.5, "food", date="2024-01-05", description="Lunch"),
        make_expense(40, "transport", date="2024-01-10", description="Train"),
    ]
    assert export.to_csv(expenses) == (
        "Date,Category,Description,Amount\n"
        '"2024-01-05","food","Lunch","12.50"\n'
        '"2024-01-10","transport","Train","40.00"'
    )


def test_csv_escapes_quotes_and_keeps_commas(make_expense):
    text = export.to_csv([make_expense(3, "other", description='Bolts, "M4"')])
    assert text.splitlines()[1] == '"2024-01-05","other","Bolts, ""M4""","3.00"'


def test_csv_empty_ledger():
    with pytest.raises(EmptyExport):
        export.to_csv([])


def test_export_filename():
    assert export.export_filename(datetime.date(2024, 3, 9)) == "expenses_2024-03-09.csv"
    assert export.export_filename(datetime.date(2024, 3, 9), "xlsx") == "expenses_2024-03-09.xlsx"


def test_xlsx_export(make_expense):
    expenses = [
        make_expense(12.5, "food", id="a"),
        make_expense(40, "transport", id="b"),
        make_expense(7.5, "food", id="c"),
    ]
    data = export.to_xlsx(expenses)
    assert data[:2] == b"PK"

    sheets = pd.read_excel(BytesIO(data), sheet_name=None)
    assert list(sheets["expenses"]["id"]) == ["a", "b", "c"]
    totals = dict(zip(sheets["totals_by_category"]["category"], sheets["totals_by_category"]["amount"]))
    assert totals == {"food": 20.0, "transport": 40.0}


def test_xlsx_empty_ledger():
    with pytest.raises(EmptyExport):
        export.to_xlsx([])
