import pytest

from expense_ledger.models import Expense
from expense_ledger.storage import LedgerStorage, MemoryStore
from expense_ledger.tracker import ExpenseLedger


class FailingStore(MemoryStore):
    """Store whose writes fail, like a browser storage that is full."""

    def set(self, key, value):
        raise OSError("quota exceeded")

    def delete(self, key):
        raise OSError("read-only storage")


def make_expense(amount, category="food", date="2024-01-05", description="", id=None):
    return Expense(
        id=id or f"{category}-{date}-{amount}",
        amount=amount,
        category=category,
        description=description,
        date=date,
        created_at="2024-01-05T10:00:00+00:00",
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def storage(store):
    return LedgerStorage(store)


@pytest.fixture
def ledger(storage):
    return ExpenseLedger(storage)


@pytest.fixture
def failing_storage():
    return LedgerStorage(FailingStore())


@pytest.fixture(name="make_expense")
def make_expense_fixture():
    return make_expense
