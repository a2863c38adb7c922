import json

import pytest

from expense_ledger.errors import StorageCorrupt, StorageWriteFailed
from expense_ledger.models import new_expense
from expense_ledger.storage import JsonFileStore, LedgerStorage, MemoryStore
from expense_ledger.tracker import ExpenseLedger


def _sample_ledger():
    return [
        new_expense(12.5, "food", "Lunch", "2024-01-05"),
        new_expense("40", "transport", "Train \"return\"", "2024-01-10"),
        new_expense(3.99, "pets", "", "2024-02-29"),
    ]


def test_load_missing_key_is_empty(storage):
    assert storage.load() == []
    assert storage.last_error is None


def test_round_trip_memory_store(storage):
    expenses = _sample_ledger()
    storage.save(expenses)
    assert storage.load() == expenses


def test_round_trip_file_store_survives_reopen(tmp_path):
    expenses = _sample_ledger()
    LedgerStorage(JsonFileStore(str(tmp_path / "data"))).save(expenses)

    reopened = LedgerStorage(JsonFileStore(str(tmp_path / "data")))
    assert reopened.load() == expenses
    assert (tmp_path / "data" / "expenses.json").exists()


def test_persisted_layout_is_a_json_array(store, storage):
    e = new_expense(12.5, "food", "Lunch", "2024-01-05")
    storage.save([e])
    data = json.loads(store.get("expenses"))
    assert data == [{
        "id": e.id,
        "amount": 12.5,
        "category": "food",
        "description": "Lunch",
        "date": "2024-01-05",
        "createdAt": e.created_at,
    }]


@pytest.mark.parametrize("payload", [
    "{not json",
    '{"expenses": []}',
    '[{"id": "a"}]',
    '[1, 2, 3]',
    '[{"id": "a", "amount": NaN, "category": "food", "date": "2024-01-01", "createdAt": "t"}]',
    '[{"id": "a", "amount": -4, "category": "food", "date": "2024-01-01", "createdAt": "t"}]',
])
def test_corrupt_payload_loads_empty_and_is_quarantined(store, storage, payload):
    store.set("expenses", payload)

    assert storage.load() == []
    assert isinstance(storage.last_error, StorageCorrupt)
    assert store.get("expenses.corrupt") == payload


def test_corrupt_payload_is_replaced_on_next_save(store, storage):
    store.set("expenses", "garbage")
    storage.load()
    e = new_expense(1, "food", "", "2024-01-01")
    storage.save([e])

    assert storage.load() == [e]
    assert storage.last_error is None
    assert store.get("expenses.corrupt") == "garbage"


def test_save_failure_raises_storage_write_failed(failing_storage):
    with pytest.raises(StorageWriteFailed):
        failing_storage.save([new_expense(1, "food", "", "2024-01-01")])


def test_clear_deletes_key(store, storage):
    storage.save([new_expense(1, "food", "", "2024-01-01")])
    storage.clear()
    assert store.get("expenses") is None
    assert storage.load() == []


def test_custom_key(store):
    storage = LedgerStorage(store, key="household")
    storage.save([new_expense(1, "food", "", "2024-01-01")])
    assert store.get("household") is not None
    assert store.get("expenses") is None


def test_file_store_basic_operations(tmp_path):
    fs = JsonFileStore(str(tmp_path))
    assert fs.get("missing") is None
    fs.set("k", "value")
    assert fs.get("k") == "value"
    fs.set("k", "other")
    assert fs.get("k") == "other"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]
    fs.delete("k")
    assert fs.get("k") is None
    fs.delete("k")


def test_file_store_rejects_path_like_keys(tmp_path):
    fs = JsonFileStore(str(tmp_path))
    with pytest.raises(ValueError):
        fs.set("../escape", "x")


def test_memory_store_initial_data():
    ms = MemoryStore({"a": "1"})
    assert ms.get("a") == "1"
    ms.delete("a")
    assert ms.get("a") is None


def test_corrupt_payload_is_marked_quarantined(store, storage):
    store.set("expenses", "{broken")
    storage.load()
    assert storage.quarantined is True


def test_undecodable_file_is_quarantined_byte_for_byte(tmp_path):
    raw = b"\xff\xfe[garbage"
    (tmp_path / "expenses.json").write_bytes(raw)
    storage = LedgerStorage(JsonFileStore(str(tmp_path)))

    assert storage.load() == []
    assert isinstance(storage.last_error, StorageCorrupt)
    assert storage.quarantined is True
    assert (tmp_path / "expenses.corrupt.json").read_bytes() == raw

    ledger = ExpenseLedger(storage)
    ledger.add_expense(1, "food", "", "2024-01-01")
    assert (tmp_path / "expenses.corrupt.json").read_bytes() == raw


class _NoQuarantineStore(MemoryStore):
    def set(self, key, value):
        if key.endswith(".corrupt"):
            raise OSError("quota exceeded")
        super().set(key, value)


def test_failed_quarantine_is_reported():
    store = _NoQuarantineStore({"expenses": "{broken"})
    storage = LedgerStorage(store)

    assert storage.load() == []
    assert isinstance(storage.last_error, StorageCorrupt)
    assert storage.quarantined is False
    assert store.get("expenses.corrupt") is None


def test_quarantine_flag_resets_on_clean_load(store, storage):
    store.set("expenses", "{broken")
    storage.load()
    storage.save([])
    storage.load()
    assert storage.quarantined is False
    assert storage.last_error is None
