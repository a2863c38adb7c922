"""
metrics.py - totals, category breakdown and insights

Every function here is pure: it takes a sequence of Expense records (and,
where "this month" matters, a reference date supplied by the caller) and
returns freshly computed values. Nothing is cached.
"""

from typing import Iterable, List, NamedTuple, Sequence, Tuple
import datetime

from expense_ledger.models import Expense, category_emoji, format_amount, parse_date

MIN_EXPENSES_FOR_INSIGHTS = 2


class CategoryShare(NamedTuple):
    category: str
    amount: float
    percentage: float
    emoji: str


class Insight(NamedTuple):
    title: str
    value: str
    description: str


class Summary(NamedTuple):
    total: float
    month_total: float
    count: int


def total(expenses: Iterable[Expense]) -> float:
    return sum((e.amount for e in expenses), 0.0)


def _in_month(expense: Expense, reference_date: datetime.date) -> bool:
    d = parse_date(expense.date)
    return d is not None and d.year == reference_date.year and d.month == reference_date.month


def month_total(expenses: Iterable[Expense], reference_date: datetime.date) -> float:
    """Sum of amounts dated in the same calendar month and year as reference_date."""
    return total(e for e in expenses if _in_month(e, reference_date))


def summary(expenses: Sequence[Expense], reference_date: datetime.date) -> Summary:
    return Summary(
        total=total(expenses),
        month_total=month_total(expenses, reference_date),
        count=len(expenses),
    )


def category_breakdown(expenses: Iterable[Expense]) -> Tuple[List[CategoryShare], float]:
    """
    Group amounts by category.

    Returns (shares, total). Shares are sorted by amount, highest first; equal
    amounts keep the order in which their category first appeared.
    """
    grouped = {}
    grand_total = 0.0
    for e in expenses:
        grouped[e.category] = grouped.get(e.category, 0.0) + e.amount
        grand_total += e.amount

    shares = [
        CategoryShare(
            category=cat,
            amount=amount,
            percentage=(amount / grand_total * 100) if grand_total > 0 else 0.0,
            emoji=category_emoji(cat),
        )
        for cat, amount in grouped.items()
    ]
    # sorted() is stable, so ties stay in grouping order
    shares = sorted(shares, key=lambda s: s.amount, reverse=True)
    return shares, grand_total


def insights(expenses: Sequence[Expense], reference_date: datetime.date) -> List[Insight]:
    """
    Derive the insight cards shown under the breakdown.

    Needs at least MIN_EXPENSES_FOR_INSIGHTS expenses, otherwise returns [].
    Order: top category, average, largest, daily average for the month of
    reference_date (only when that month has expenses).
    """
    if len(expenses) < MIN_EXPENSES_FOR_INSIGHTS:
        return []

    out: List[Insight] = []
    shares, grand_total = category_breakdown(expenses)

    if shares:
        top = shares[0]
        out.append(Insight(
            title="Top Spending Category",
            value=f"{top.emoji} {top.category}",
            description=f"{format_amount(top.amount)} ({top.percentage:.1f}% of total)",
        ))

    average = grand_total / len(expenses)
    out.append(Insight(
        title="Average Expense",
        value=format_amount(average),
        description=f"Across {len(expenses)} transactions",
    ))

    # max() returns the first maximal element, so ties go to the earliest entry
    largest = max(expenses, key=lambda e: e.amount)
    out.append(Insight(
        title="Largest Expense",
        value=format_amount(largest.amount),
        description=f"{largest.description} ({largest.category})",
    ))

    month_expenses = [e for e in expenses if _in_month(e, reference_date)]
    if month_expenses:
        day = reference_date.day
        daily = total(month_expenses) / day
        out.append(Insight(
            title="Daily Average (This Month)",
            value=format_amount(daily),
            description=f"Based on {day} days in {reference_date:%B}",
        ))

    return out
