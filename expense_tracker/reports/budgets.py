"""
Budget Evaluation

Compares this month's per-category spend against the user's monthly limits.

There is one calculation, evaluate_budget(), exposed as two views:
- evaluate_budgets(): every budget, including those still within limits
  (the budget management page)
- budget_alerts(): only budgets that are near or over their limit
  (the dashboard)

Status rules:
- OVER_LIMIT when usage is above 100%
- NEAR_LIMIT when usage is above the near-limit threshold (80%) and at most 100%
- OK otherwise, including every budget whose limit is 0
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from expense_tracker.categorization import DEFAULT_CATALOG, CategoryCatalog
from expense_tracker.models.expense import (
    Budget,
    BudgetStatus,
    BudgetUsage,
    Category,
    CategoryBudgetView,
    CategorySpend,
)
from expense_tracker.reports.aggregation import ZERO, percentage_of

NEAR_LIMIT_PERCENT = 80.0


def classify_usage(
    percentage: float,
    near_limit_percent: float = NEAR_LIMIT_PERCENT,
) -> BudgetStatus:
    """Map a usage percentage to a BudgetStatus."""
    if percentage > 100:
        return BudgetStatus.OVER_LIMIT
    if percentage > near_limit_percent:
        return BudgetStatus.NEAR_LIMIT
    return BudgetStatus.OK


def evaluate_budget(
    budget: Budget,
    spent: Decimal,
    category: Optional[Category] = None,
    near_limit_percent: float = NEAR_LIMIT_PERCENT,
) -> BudgetUsage:
    """Compare one budget against the amount spent in its category."""
    percentage = percentage_of(spent, budget.monthly_limit)
    return BudgetUsage(
        budget=budget,
        category=category,
        spent=spent,
        percentage=percentage,
        remaining=budget.monthly_limit - spent,
        status=classify_usage(percentage, near_limit_percent),
    )


def _spend_by_category(category_spends: Iterable[CategorySpend]) -> dict[str, CategorySpend]:
    return {spend.category.id: spend for spend in category_spends}


def evaluate_budgets(
    budgets: Sequence[Budget],
    category_spends: Sequence[CategorySpend],
    catalog: CategoryCatalog = DEFAULT_CATALOG,
    near_limit_percent: float = NEAR_LIMIT_PERCENT,
) -> list[BudgetUsage]:
    """
    Evaluate every budget against this month's category spend.

    A category missing from category_spends had no spend this month, so
    its budget is evaluated against 0.
    """
    spends = _spend_by_category(category_spends)

    usages = []
    for budget in budgets:
        spend = spends.get(budget.category_id)
        usages.append(evaluate_budget(
            budget,
            spent=spend.amount if spend else ZERO,
            category=spend.category if spend else catalog.get(budget.category_id),
            near_limit_percent=near_limit_percent,
        ))
    return usages


def budget_alerts(
    budgets: Sequence[Budget],
    category_spends: Sequence[CategorySpend],
    catalog: CategoryCatalog = DEFAULT_CATALOG,
    near_limit_percent: float = NEAR_LIMIT_PERCENT,
) -> list[BudgetUsage]:
    """Budgets that are near or over their limit, in budget order."""
    return [
        usage
        for usage in evaluate_budgets(budgets, category_spends, catalog, near_limit_percent)
        if usage.is_alert
    ]


def budget_overview(
    budgets: Sequence[Budget],
    category_spends: Sequence[CategorySpend],
    catalog: CategoryCatalog = DEFAULT_CATALOG,
    near_limit_percent: float = NEAR_LIMIT_PERCENT,
) -> list[CategoryBudgetView]:
    """
    One row per catalog category for the budget management page.

    Rows follow catalog order. Categories without a budget have
    usage=None so the page can offer to set one.
    """
    spends = _spend_by_category(category_spends)
    budgets_by_category: dict[str, Budget] = {}
    for budget in budgets:
        budgets_by_category.setdefault(budget.category_id, budget)

    rows = []
    for category in catalog:
        spend = spends.get(category.id)
        spent = spend.amount if spend else ZERO
        budget = budgets_by_category.get(category.id)
        rows.append(CategoryBudgetView(
            category=category,
            spent=spent,
            usage=(
                evaluate_budget(budget, spent, category, near_limit_percent)
                if budget else None
            ),
        ))
    return rows
