"""
components.py - reusable Streamlit components / forms / displays

This module contains pure-UI helpers used by the dashboard:
 - display_expense_form(on_submit)
 - display_summary / display_filter / display_expense_list
 - display_category_breakdown / display_insights
 - display_export / display_clear

Components never touch the ledger directly. Anything that changes state is
handed back to the dashboard as an actions.* command through a callback.
"""

from typing import Callable, List, Optional, Sequence
import datetime

import altair as alt
import pandas as pd
import streamlit as st

from expense_ledger import actions, export
from expense_ledger.metrics import CategoryShare, Insight, Summary
from expense_ledger.models import (
    CATEGORIES,
    Expense,
    category_emoji,
    display_category,
    format_amount,
    format_date,
)
from expense_ledger.tracker import FILTER_ALL

# one colour per category, "other" last
CATEGORY_COLORS = {
    "food": "#ff7f0e",
    "transport": "#1f77b4",
    "entertainment": "#9467bd",
    "shopping": "#e377c2",
    "bills": "#bcbd22",
    "health": "#2ca02c",
    "other": "#7f7f7f",
}


def trigger_rerun():
    # st.rerun replaced st.experimental_rerun in newer Streamlit releases
    if hasattr(st, "rerun"):
        st.rerun()
    elif hasattr(st, "experimental_rerun"):
        st.experimental_rerun()


def _category_label(category: str) -> str:
    if category == FILTER_ALL:
        return "All"
    return f"{category_emoji(category)} {category.capitalize()}"


def display_expense_form(on_submit: Callable[[actions.AddExpense], None]):
    """
    Display the 'Add Expense' form.

    The amount is checked here for a quick message; the ledger validates it
    again, so on_submit may still raise InvalidAmount.
    """
    st.header("Add Expense")
    with st.form(key="expense_form", clear_on_submit=True):
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
        category = st.selectbox("Category", options=list(CATEGORIES), format_func=_category_label)
        description = st.text_input("Description (optional)")
        date_val = st.date_input("Date", value=datetime.date.today())
        submit_button = st.form_submit_button("Add Expense")

        if submit_button:
            if amount <= 0:
                st.error("Amount must be greater than 0!")
                return
            on_submit(actions.AddExpense(
                amount=round(amount, 2),
                category=category,
                description=description.strip(),
                date=date_val.isoformat(),
            ))


def display_summary(summary: Summary):
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Spent", format_amount(summary.total))
    col2.metric("This Month", format_amount(summary.month_total))
    col3.metric("Expenses", summary.count)


def display_filter(current_filter: str, on_change: Callable[[actions.SetFilter], None]):
    options = [FILTER_ALL] + list(CATEGORIES)
    index = options.index(current_filter) if current_filter in options else 0
    selected = st.radio(
        "Filter by category",
        options=options,
        index=index,
        format_func=_category_label,
        horizontal=True,
        key="category_filter",
    )
    if selected != current_filter:
        on_change(actions.SetFilter(selected))


def display_expense_list(
    expenses: Sequence[Expense],
    current_filter: str,
    on_delete: Callable[[actions.DeleteExpense], None],
):
    """Render one row per expense with a delete button."""
    st.header("Expenses")
    if not expenses:
        if current_filter == FILTER_ALL:
            st.info("No expenses yet. Add your first expense above! 👆")
        else:
            st.info(f"No {current_filter} expenses found. Try a different filter!")
        return

    for e in expenses:
        icon_col, details_col, amount_col, delete_col = st.columns([1, 6, 2, 1])
        icon_col.markdown(f"### {category_emoji(e.category)}")
        with details_col:
            st.markdown(f"**{e.description or '(no description)'}**")
            st.caption(f"{display_category(e.category)} · {format_date(e.date)}")
        amount_col.markdown(f"**{format_amount(e.amount)}**")
        if delete_col.button("🗑️", key=f"delete_{e.id}", help="Delete this expense"):
            on_delete(actions.DeleteExpense(e.id))


def breakdown_chart(shares: Sequence[CategoryShare]) -> alt.Chart:
    df = pd.DataFrame(
        [
            {
                "category": s.category,
                "label": f"{s.emoji} {s.category}",
                "amount": s.amount,
                "percent": s.percentage,
            }
            for s in shares
        ]
    )
    domain = [s.category for s in shares]
    colors = [CATEGORY_COLORS.get(display_category(c), CATEGORY_COLORS["other"]) for c in domain]
    return alt.Chart(df).mark_bar().encode(
        x=alt.X("percent:Q", title="Share of total (%)", scale=alt.Scale(domain=[0, 100])),
        y=alt.Y("label:N", title=None, sort=[f"{s.emoji} {s.category}" for s in shares]),
        color=alt.Color("category:N", scale=alt.Scale(domain=domain, range=colors), legend=None),
        tooltip=[
            alt.Tooltip("category:N", title="Category"),
            alt.Tooltip("amount:Q", title="Amount", format=".2f"),
            alt.Tooltip("percent:Q", title="Share", format=".1f"),
        ],
    ).properties(height=40 * len(shares) + 20)


def display_category_breakdown(shares: Sequence[CategoryShare], total_amount: float):
    st.header("Category Breakdown")
    if not shares:
        st.info("Add expenses to see category breakdown")
        return
    for s in shares:
        st.write(f"{s.emoji} **{s.category}** {format_amount(s.amount)} ({s.percentage:.1f}%)")
    if total_amount > 0:
        st.altair_chart(breakdown_chart(shares), use_container_width=True)


def display_insights(insights: List[Insight]):
    st.header("Insights")
    if not insights:
        st.info("Add more expenses to see insights")
        return
    cols = st.columns(len(insights))
    for col, insight in zip(cols, insights):
        with col:
            st.metric(insight.title, insight.value)
            st.caption(insight.description)


def display_export(on_export: Callable[[actions.Export], Optional[actions.ExportFile]], xlsx_data: Optional[bytes]):
    """
    Export buttons. The CSV file is built only when requested; on_export
    returns None when there was nothing to export.
    """
    st.subheader("Export")
    if st.button("Export to CSV"):
        export_file = on_export(actions.Export(datetime.date.today()))
        if export_file is not None:
            st.download_button(
                label=f"Download {export_file.file_name}",
                data=export_file.data,
                file_name=export_file.file_name,
                mime=export_file.mime,
            )
    if xlsx_data is not None:
        st.download_button(
            label="Download as XLSX",
            data=xlsx_data,
            file_name=export.export_filename(datetime.date.today(), "xlsx"),
            mime=export.XLSX_MIME,
        )


def display_clear(on_clear: Callable[[actions.ClearAll], None]):
    st.subheader("Danger zone")
    confirm = st.checkbox("I understand this deletes ALL expenses and cannot be undone")
    if st.button("Clear All Expenses") and confirm:
        on_clear(actions.ClearAll())
