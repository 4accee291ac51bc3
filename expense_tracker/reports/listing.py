"""Search, filter and day-grouping for the expense list page."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from expense_tracker.models.expense import Expense


def plain_amount(amount: Decimal) -> str:
    """Amount as a user would type it: no exponent, no trailing zeros."""
    text = format(amount, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def matches_search(expense: Expense, search_term: str) -> bool:
    """True when the term occurs in the note (any case) or in the amount."""
    if not search_term:
        return True
    term = search_term.lower()
    if expense.note and term in expense.note.lower():
        return True
    return term in plain_amount(expense.amount)


def filter_expenses(
    expenses: Iterable[Expense],
    search_term: str = "",
    category_id: Optional[str] = None,
) -> list[Expense]:
    """
    Expenses matching both the search term and the category filter.

    An empty search term or a None/empty category_id disables that filter.
    List order is preserved.
    """
    search_term = (search_term or "").strip()
    return [
        expense for expense in expenses
        if matches_search(expense, search_term)
        and (not category_id or expense.category_id == category_id)
    ]


def group_by_date(expenses: Iterable[Expense]) -> list[tuple[date, list[Expense]]]:
    """Group expenses by day, newest day first; list order within a day."""
    groups: dict[date, list[Expense]] = {}
    for expense in expenses:
        groups.setdefault(expense.expense_date, []).append(expense)
    return sorted(groups.items(), key=lambda item: item[0], reverse=True)
