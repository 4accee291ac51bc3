"""
Spending Aggregation

DESIGN DECISION: Aggregation is a PURE function of the expense list.
Nothing is cached or maintained incrementally. Every dashboard render
recomputes from the current records, so the totals can never drift from
what is stored.

GUARANTEES:
- The input list is never mutated
- An empty list gives zero totals and empty lists, never an error
- Percentages are 0 (not a ZeroDivisionError) when the month total is 0
- Expenses with an unknown category count toward the month total but are
  left out of the per-category breakdown
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from expense_tracker.categorization import DEFAULT_CATALOG, CategoryCatalog
from expense_tracker.models.expense import CategorySpend, Expense, SpendingSummary

RECENT_EXPENSE_LIMIT = 5

ZERO = Decimal("0")


def total_amount(expenses: Iterable[Expense]) -> Decimal:
    """Sum of the amounts of expenses."""
    return sum((expense.amount for expense in expenses), ZERO)


def percentage_of(part: Decimal, whole: Decimal) -> float:
    """part / whole * 100, defined as 0 when whole is not positive."""
    if whole <= 0:
        return 0.0
    return float(part / whole * 100)


def same_month(day: date, reference_date: date) -> bool:
    return day.year == reference_date.year and day.month == reference_date.month


def expenses_on(expenses: Iterable[Expense], day: date) -> list[Expense]:
    """Expenses dated exactly on day."""
    return [expense for expense in expenses if expense.expense_date == day]


def expenses_in_month(expenses: Iterable[Expense], reference_date: date) -> list[Expense]:
    """Expenses dated in the same calendar month as reference_date."""
    return [
        expense for expense in expenses
        if same_month(expense.expense_date, reference_date)
    ]


def category_spends(
    month_expenses: Iterable[Expense],
    catalog: CategoryCatalog = DEFAULT_CATALOG,
) -> list[CategorySpend]:
    """
    Per-category totals for a month's expenses.

    Categories with no spend are omitted. The result is sorted by amount,
    largest first; ties keep catalog order.
    """
    month_expenses = list(month_expenses)
    month_total = total_amount(month_expenses)

    totals: dict[str, Decimal] = {}
    for expense in month_expenses:
        totals[expense.category_id] = totals.get(expense.category_id, ZERO) + expense.amount

    spends = [
        CategorySpend(
            category=category,
            amount=totals[category.id],
            percentage=percentage_of(totals[category.id], month_total),
        )
        for category in catalog
        if totals.get(category.id, ZERO) > 0
    ]
    spends.sort(key=lambda spend: spend.amount, reverse=True)
    return spends


def aggregate(
    expenses: Sequence[Expense],
    reference_date: date,
    catalog: CategoryCatalog = DEFAULT_CATALOG,
    recent_limit: int = RECENT_EXPENSE_LIMIT,
) -> SpendingSummary:
    """
    Compute the dashboard's spending summary.

    Args:
        expenses: The user's expenses, newest-added first (store order)
        reference_date: The day treated as "today"
        catalog: Category lookup for the per-category breakdown
        recent_limit: How many of the most recently added expenses to return

    Returns:
        SpendingSummary with today's total, this month's total, the
        per-category breakdown and the recent expenses
    """
    expenses = list(expenses)
    month_expenses = expenses_in_month(expenses, reference_date)

    return SpendingSummary(
        reference_date=reference_date,
        today_total=total_amount(expenses_on(expenses, reference_date)),
        month_total=total_amount(month_expenses),
        category_spends=category_spends(month_expenses, catalog),
        # "Recent" is insertion order, not the date field.
        recent=expenses[:max(recent_limit, 0)],
    )
