"""
actions.py - the closed set of user commands and their dispatcher

The UI never calls ledger methods directly from widget callbacks. It builds
one of the commands below and passes it to dispatch(), which maps it to a
single ExpenseLedger call and returns that call's result.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union
import datetime

from expense_ledger import export
from expense_ledger.tracker import ExpenseLedger


@dataclass(frozen=True)
class AddExpense:
    amount: Any
    category: str
    description: str
    date: str  # ISO date string


@dataclass(frozen=True)
class DeleteExpense:
    expense_id: str


@dataclass(frozen=True)
class SetFilter:
    category: str


@dataclass(frozen=True)
class ClearAll:
    pass


@dataclass(frozen=True)
class Export:
    today: Optional[datetime.date] = None


@dataclass(frozen=True)
class ExportFile:
    file_name: str
    data: str
    mime: str = export.CSV_MIME


Command = Union[AddExpense, DeleteExpense, SetFilter, ClearAll, Export]


def dispatch(ledger: ExpenseLedger, command: Command):
    """
    Execute one command against the ledger.

    Returns:
      AddExpense    -> the new Expense
      DeleteExpense -> bool (False when the id is unknown)
      SetFilter     -> the filtered list after the change
      ClearAll      -> None
      Export        -> ExportFile

    Errors raised by the ledger (InvalidAmount, StorageWriteFailed,
    EmptyExport) propagate unchanged.
    """
    if isinstance(command, AddExpense):
        return ledger.add_expense(command.amount, command.category, command.description, command.date)
    if isinstance(command, DeleteExpense):
        return ledger.delete_expense(command.expense_id)
    if isinstance(command, SetFilter):
        ledger.set_filter(command.category)
        return ledger.filtered()
    if isinstance(command, ClearAll):
        ledger.clear()
        return None
    if isinstance(command, Export):
        today = command.today or datetime.date.today()
        return ExportFile(file_name=export.export_filename(today), data=export.to_csv(ledger.expenses))
    raise TypeError(f"unknown command: {command!r}")
