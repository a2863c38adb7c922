import pytest

from expense_ledger import actions
from expense_ledger.config import Settings
from expense_ledger.errors import StorageWriteFailed
from expense_ledger.tracker import ExpenseLedger
from expense_ledger.ui.dashboard import apply_delete, build_ledger


def test_build_ledger_uses_file_store(tmp_path):
    settings = Settings(data_dir=str(tmp_path), storage_key="household")
    ledger = build_ledger(settings)
    exp = ledger.add_expense(4.5, "health", "Plasters", "2024-03-01")

    assert (tmp_path / "household.json").exists()
    assert build_ledger(settings).expenses == [exp]


def test_failed_delete_still_redraws_the_page(failing_storage):
    ledger = ExpenseLedger(failing_storage)
    with pytest.raises(StorageWriteFailed):
        ledger.add_expense(4.5, "health", "Plasters", "2024-03-01")
    exp = ledger.expenses[0]

    assert apply_delete(ledger, actions.DeleteExpense(exp.id)) is True
    assert len(ledger) == 0
    assert ledger.storage_status()[0] == "error"


def test_delete_of_unknown_id_does_not_redraw(ledger):
    assert apply_delete(ledger, actions.DeleteExpense("nonexistent-id")) is False
