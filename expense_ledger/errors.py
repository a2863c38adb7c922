"""
errors.py - exceptions raised by the ledger core

The core raises these; the Streamlit layer catches them and shows a message.
None of them is fatal: the in-memory ledger stays usable after each one.
"""


class ExpenseLedgerError(Exception):
    """Base class for all ledger errors."""


class InvalidAmount(ExpenseLedgerError, ValueError):
    """Amount missing, non-numeric, not finite or <= 0. Nothing was mutated."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Amount must be a number greater than 0 (got {value!r})")


class StorageWriteFailed(ExpenseLedgerError, IOError):
    """The key-value store rejected a write. The in-memory ledger is kept as is."""


class StorageCorrupt(ExpenseLedgerError, ValueError):
    """Persisted data exists but cannot be read back as a list of expenses."""


class EmptyExport(ExpenseLedgerError):
    """Export requested while the ledger has no expenses."""

    def __init__(self, message: str = "No expenses to export!"):
        super().__init__(message)
