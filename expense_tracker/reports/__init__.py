"""Derived spending views: aggregation, budgets, list views and formatting."""

from expense_tracker.reports.aggregation import (
    RECENT_EXPENSE_LIMIT,
    aggregate,
    category_spends,
    expenses_in_month,
    expenses_on,
    percentage_of,
    total_amount,
)
from expense_tracker.reports.budgets import (
    NEAR_LIMIT_PERCENT,
    budget_alerts,
    budget_overview,
    classify_usage,
    evaluate_budget,
    evaluate_budgets,
)
from expense_tracker.reports.formatting import (
    format_inr,
    format_percentage,
    format_relative_date,
    month_key,
    month_label,
)
from expense_tracker.reports.listing import (
    filter_expenses,
    group_by_date,
    plain_amount,
)

__all__ = [
    # Aggregation
    "RECENT_EXPENSE_LIMIT",
    "aggregate",
    "category_spends",
    "expenses_in_month",
    "expenses_on",
    "percentage_of",
    "total_amount",
    # Budgets
    "NEAR_LIMIT_PERCENT",
    "budget_alerts",
    "budget_overview",
    "classify_usage",
    "evaluate_budget",
    "evaluate_budgets",
    # Formatting
    "format_inr",
    "format_percentage",
    "format_relative_date",
    "month_key",
    "month_label",
    # Listing
    "filter_expenses",
    "group_by_date",
    "plain_amount",
]
