"""
models.py - Expense record and display helpers

The Expense dataclass is plain data: it carries no behaviour beyond the
to_dict/from_dict pair used for persistence. Display helpers (currency,
emoji, date) are free functions so records loaded from storage need no
reconstruction step.

Persisted layout of one record (see storage.py):
    {"id": str, "amount": number, "category": str, "description": str,
     "date": "YYYY-MM-DD", "createdAt": ISO-8601 timestamp}
"""

from dataclasses import dataclass
from typing import Any, Dict
import datetime
import math
import uuid

from expense_ledger.errors import InvalidAmount


CATEGORIES = (
    "food",
    "transport",
    "entertainment",
    "shopping",
    "bills",
    "health",
    "other",
)

CATEGORY_EMOJIS = {
    "food": "🍕",
    "transport": "🚗",
    "entertainment": "🎬",
    "shopping": "🛍️",
    "bills": "💡",
    "health": "🏥",
    "other": "📦",
}
DEFAULT_EMOJI = CATEGORY_EMOJIS["other"]

CURRENCY_SYMBOL = "$"


@dataclass(frozen=True)
class Expense:
    """
    A single recorded expense.

    Fields:
      - id: unique string assigned at creation, stable for the record's lifetime
      - amount: positive amount in currency units
      - category: one of CATEGORIES; unknown values are kept verbatim
      - description: free text, may be empty
      - date: ISO date string "YYYY-MM-DD" chosen by the user
      - created_at: ISO-8601 timestamp set once at creation
    """
    id: str
    amount: float
    category: str
    description: str
    date: str
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "date": self.date,
            "createdAt": self.created_at,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Expense":
        """
        Inverse of to_dict.

        Raises KeyError/TypeError/ValueError when the record does not have the
        persisted shape; the storage adapter treats that as corrupt data.
        """
        if not isinstance(d, dict):
            raise TypeError(f"expense record must be an object, got {type(d).__name__}")
        amount = d["amount"]
        # bool is an int subclass; reject it explicitly
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise TypeError(f"amount must be a number, got {amount!r}")
        try:
            value = float(amount)
        except OverflowError:
            raise ValueError(f"amount is out of range: {amount!r}") from None
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"amount must be finite and greater than 0, got {amount!r}")
        for key in ("id", "category", "date", "createdAt"):
            if not isinstance(d[key], str):
                raise TypeError(f"{key} must be a string, got {d[key]!r}")
        description = d.get("description", "")
        if description is None:
            description = ""
        if not isinstance(description, str):
            raise TypeError(f"description must be a string, got {description!r}")
        return Expense(
            id=d["id"],
            amount=value,
            category=d["category"],
            description=description,
            date=d["date"],
            created_at=d["createdAt"],
        )


def parse_amount(value: Any) -> float:
    """
    Parse user input into a positive, finite amount or raise InvalidAmount.

    Strings may use "." or "," as the decimal separator. When both appear,
    "," is a thousands separator ("1,000.50" is 1000.5); a lone "," is the
    decimal separator ("1,50" is 1.5).
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount(value)
    if isinstance(value, str):
        text = value.strip()
        if "." in text:
            text = text.replace(",", "")
        else:
            text = text.replace(",", ".")
        if not text:
            raise InvalidAmount(value)
    else:
        text = value
    try:
        amount = float(text)
    except (TypeError, ValueError, OverflowError):
        raise InvalidAmount(value) from None
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidAmount(value)
    return amount


def new_expense(amount: Any, category: str, description: str, date: str) -> Expense:
    """Validate the amount and build a fresh Expense with a new id and timestamp."""
    parsed = parse_amount(amount)
    return Expense(
        id=uuid.uuid4().hex,
        amount=parsed,
        category=category,
        description=description or "",
        date=date,
        created_at=datetime.datetime.now(datetime.timezone.utc).isoformat(),
    )


def display_category(category: str) -> str:
    """Category used for display; unknown values show as "other"."""
    return category if category in CATEGORY_EMOJIS else "other"


def category_emoji(category: str) -> str:
    return CATEGORY_EMOJIS.get(category, DEFAULT_EMOJI)


def format_amount(amount: float) -> str:
    """Fixed two-decimal currency string, e.g. "$12.50"."""
    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def parse_date(value: str):
    """Return a datetime.date for an ISO date string, or None if it is not one."""
    try:
        return datetime.date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def format_date(value: str) -> str:
    """
    Render an ISO date as "Mon D, YYYY" (e.g. "Jan 5, 2024").
    Strings that are not ISO dates are returned unchanged.
    """
    d = parse_date(value)
    if d is None:
        return value
    return f"{d:%b} {d.day}, {d.year}"
