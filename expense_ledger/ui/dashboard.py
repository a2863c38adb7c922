"""
dashboard.py - Streamlit UI entrypoint and composition root

This module builds the ExpenseLedger for the browser session, renders the
page and routes every user action through actions.dispatch().

Design notes:
 - The ledger lives in st.session_state; Streamlit reruns this script on
   every interaction and the same instance is picked up again.
 - All persistence and business rules live in expense_ledger.tracker,
   expense_ledger.storage and expense_ledger.metrics.
 - Components return actions.* commands; this module executes them and turns
   ledger errors into messages.
"""

import datetime

import streamlit as st

from expense_ledger import actions, export, metrics
from expense_ledger.config import configure_logging, load_settings
from expense_ledger.errors import EmptyExport, InvalidAmount, StorageWriteFailed
from expense_ledger.storage import JsonFileStore, LedgerStorage
from expense_ledger.tracker import ExpenseLedger
from expense_ledger.ui import components

LEDGER_STATE_KEY = "expense_ledger"


def build_ledger(settings=None) -> ExpenseLedger:
    settings = settings or load_settings()
    storage = LedgerStorage(JsonFileStore(settings.data_dir), key=settings.storage_key)
    return ExpenseLedger(storage)


def get_ledger() -> ExpenseLedger:
    """Return the session's ledger, creating (and loading) it on first use."""
    if LEDGER_STATE_KEY not in st.session_state:
        st.session_state[LEDGER_STATE_KEY] = build_ledger()
    return st.session_state[LEDGER_STATE_KEY]


def apply_delete(ledger: ExpenseLedger, command: actions.DeleteExpense) -> bool:
    """
    Run a delete and return True when the page must be redrawn.

    A failed save still removed the row from memory, so the page is redrawn
    then too; the sidebar status carries the write error.
    """
    try:
        return actions.dispatch(ledger, command)
    except StorageWriteFailed:
        return True


def _show_storage_status(ledger: ExpenseLedger):
    level, message = ledger.storage_status()
    if level == "error":
        st.sidebar.error(message)
    elif level == "warning":
        st.sidebar.warning(message)
    else:
        st.sidebar.success(message)


def main():
    """
    Page layout, top to bottom:
      summary strip, add form, category filter + expense list,
      category breakdown, insights, export, clear all.
    """
    settings = load_settings()
    configure_logging(settings.log_level)
    st.set_page_config(page_title="Expense Tracker", page_icon="💰")
    st.title("💰 Expense Tracker")
    ledger = get_ledger()

    def run(command):
        try:
            return actions.dispatch(ledger, command)
        except InvalidAmount as exc:
            st.error(str(exc))
        except StorageWriteFailed as exc:
            st.error(f"{exc} Your changes are kept for this session.")
        except EmptyExport as exc:
            st.warning(str(exc))
        return None

    def on_add(command: actions.AddExpense):
        exp = run(command)
        if exp is not None:
            st.success("Expense added.")

    def on_delete(command: actions.DeleteExpense):
        if apply_delete(ledger, command):
            components.trigger_rerun()

    def on_clear(command: actions.ClearAll):
        try:
            actions.dispatch(ledger, command)
        except StorageWriteFailed as exc:
            st.error(str(exc))
            return
        st.session_state.pop("category_filter", None)
        components.trigger_rerun()

    # the summary is drawn above the form but filled after it, so a new
    # expense is counted in the same run
    summary_area = st.container()
    form_area = st.container()
    with form_area:
        components.display_expense_form(on_add)

    today = datetime.date.today()
    all_expenses = ledger.expenses
    with summary_area:
        components.display_summary(metrics.summary(all_expenses, today))

    components.display_filter(ledger.current_filter, run)
    components.display_expense_list(ledger.filtered(), ledger.current_filter, on_delete)

    shares, total_amount = metrics.category_breakdown(all_expenses)
    components.display_category_breakdown(shares, total_amount)
    components.display_insights(metrics.insights(all_expenses, today))

    xlsx_data = export.to_xlsx(all_expenses) if all_expenses else None
    components.display_export(run, xlsx_data)
    components.display_clear(on_clear)

    _show_storage_status(ledger)


if __name__ == "__main__":
    main()
