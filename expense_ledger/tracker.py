"""
tracker.py - the ledger store

Responsibilities:
 - keep the ordered, in-memory list of Expense records and the active filter
 - persist the full list through LedgerStorage after every mutation
 - provide the APIs consumed by the UI and the action dispatcher:
     add_expense, delete_expense, clear, set_filter, filtered

The in-memory list is the source of truth. When a save fails the mutation is
kept and StorageWriteFailed propagates, so the caller can tell the user; the
next successful save brings storage back in line.
"""

from typing import List, Optional, Tuple
import logging

from expense_ledger.errors import StorageWriteFailed
from expense_ledger.models import Expense, new_expense
from expense_ledger.storage import LedgerStorage, MemoryStore

logger = logging.getLogger(__name__)

FILTER_ALL = "all"


class ExpenseLedger:
    """
    One ledger per session. The composition root (ui.dashboard) creates it
    and hands it to the metrics functions and UI components.
    """

    def __init__(self, storage: Optional[LedgerStorage] = None):
        self._storage = storage if storage is not None else LedgerStorage(MemoryStore())
        self._expenses: List[Expense] = []
        self.current_filter = FILTER_ALL
        self._write_error: Optional[StorageWriteFailed] = None
        self.load()

    def __len__(self) -> int:
        return len(self._expenses)

    @property
    def expenses(self) -> List[Expense]:
        """Copy of all expenses in insertion order."""
        return list(self._expenses)

    def load(self):
        """Replace the in-memory list with what storage holds (empty if absent or corrupt)."""
        self._expenses = self._storage.load()

    def save(self):
        try:
            self._storage.save(self._expenses)
        except StorageWriteFailed as exc:
            self._write_error = exc
            raise
        self._write_error = None

    def storage_status(self) -> Tuple[str, str]:
        """
        Return a (level, message) pair for the UI.
        level is "ok", "warning" (corrupt data was set aside on load) or
        "error" (the last write failed, or corrupt data could not be set aside).
        """
        if self._write_error is not None:
            return "error", f"{self._write_error} Changes are kept in this session only."
        corrupt = self._storage.last_error
        if corrupt is not None:
            if self._storage.quarantined:
                return (
                    "warning",
                    f"Saved data could not be read ({corrupt}). Started with an empty ledger; "
                    f"the old data was kept under '{self._storage.quarantine_key}'.",
                )
            return (
                "error",
                f"Saved data could not be read ({corrupt}) and no backup could be made. "
                "Started with an empty ledger; the next change will overwrite the old data.",
            )
        return "ok", f"{len(self._expenses)} expenses saved."

    def add_expense(self, amount, category: str, description: str, date: str) -> Expense:
        """
        Validate and append a new expense, then persist.
        Raises InvalidAmount (ledger untouched) or StorageWriteFailed (expense kept).
        """
        exp = new_expense(amount, category, description, date)
        self._expenses.append(exp)
        logger.info("Added expense id=%s (category=%s, amount=%.2f)", exp.id, exp.category, exp.amount)
        self.save()
        return exp

    def delete_expense(self, expense_id: str) -> bool:
        """Remove the expense with this id. Returns True if deleted, False if not found."""
        for i, e in enumerate(self._expenses):
            if e.id == expense_id:
                del self._expenses[i]
                logger.info("Deleted expense id=%s. Remaining expenses=%d.", expense_id, len(self._expenses))
                self.save()
                return True
        logger.info("Expense id=%s not found", expense_id)
        return False

    def clear(self):
        """Drop every expense, reset the filter and delete the persisted key."""
        self._expenses = []
        self.current_filter = FILTER_ALL
        logger.info("All expenses cleared")
        try:
            self._storage.clear()
        except StorageWriteFailed as exc:
            self._write_error = exc
            raise
        self._write_error = None

    def set_filter(self, category: str):
        # no validation: an unknown category simply matches nothing
        self.current_filter = category

    def filtered(self) -> List[Expense]:
        if self.current_filter == FILTER_ALL:
            return list(self._expenses)
        return [e for e in self._expenses if e.category == self.current_filter]
