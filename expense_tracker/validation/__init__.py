"""Form input validation package."""

from expense_tracker.validation.validator import (
    ExpenseValidator,
    InvalidInputError,
    default_expense_date,
    parse_amount,
    parse_budget_limit,
    parse_email,
)

__all__ = [
    "ExpenseValidator",
    "InvalidInputError",
    "default_expense_date",
    "parse_amount",
    "parse_budget_limit",
    "parse_email",
]
