"""Tests for budget evaluation."""

from decimal import Decimal

import pytest

from expense_tracker.categorization import DEFAULT_CATALOG
from expense_tracker.models.expense import Budget, BudgetStatus, CategorySpend
from expense_tracker.reports import (
    budget_alerts,
    budget_overview,
    classify_usage,
    evaluate_budget,
    evaluate_budgets,
)


def budget(category_id="2", limit="250") -> Budget:
    return Budget(user_id="user-1", category_id=category_id, monthly_limit=Decimal(limit))


def spend(category_id, amount) -> CategorySpend:
    return CategorySpend(
        category=DEFAULT_CATALOG.get(category_id),
        amount=Decimal(str(amount)),
        percentage=0.0,
    )


class TestEvaluateBudget:
    """Tests for evaluate_budget()."""

    def test_over_limit(self):
        """Test 300 spent against a 250 limit."""
        usage = evaluate_budget(budget(limit="250"), Decimal("300"))

        assert usage.percentage == pytest.approx(120.0)
        assert usage.status == BudgetStatus.OVER_LIMIT
        assert usage.remaining == Decimal("-50")
        assert usage.overspent_by == Decimal("50")

    def test_zero_limit_is_ok(self):
        """Test that a zero limit never alerts."""
        usage = evaluate_budget(budget(limit="0"), Decimal("500"))

        assert usage.percentage == 0.0
        assert usage.status == BudgetStatus.OK
        assert usage.remaining == Decimal("-500")

    def test_no_spend(self):
        """Test a budget with nothing spent."""
        usage = evaluate_budget(budget(limit="1000"), Decimal("0"))

        assert usage.status == BudgetStatus.OK
        assert usage.remaining == Decimal("1000")


class TestClassifyUsage:
    """Tests for the status thresholds."""

    @pytest.mark.parametrize("percentage,expected", [
        (0.0, BudgetStatus.OK),
        (80.0, BudgetStatus.OK),
        (80.01, BudgetStatus.NEAR_LIMIT),
        (99.9, BudgetStatus.NEAR_LIMIT),
        (100.0, BudgetStatus.NEAR_LIMIT),
        (100.01, BudgetStatus.OVER_LIMIT),
    ])
    def test_thresholds(self, percentage, expected):
        """Test the boundaries around 80% and 100%."""
        assert classify_usage(percentage) == expected

    def test_custom_near_limit(self):
        """Test a configurable near-limit threshold."""
        assert classify_usage(60.0, near_limit_percent=50.0) == BudgetStatus.NEAR_LIMIT


class TestBudgetCollections:
    """Tests for evaluate_budgets, budget_alerts and budget_overview."""

    def test_budget_without_spend_evaluates_against_zero(self):
        """Test that a category with no spend this month is OK."""
        usages = evaluate_budgets([budget("4", "500")], [spend("2", 100)])

        assert usages[0].spent == Decimal("0")
        assert usages[0].category.name == "Groceries"
        assert usages[0].status == BudgetStatus.OK

    def test_alerts_only_include_near_and_over(self):
        """Test that OK budgets are filtered out of alerts."""
        budgets = [budget("2", "100"), budget("3", "100"), budget("4", "100")]
        spends = [spend("2", 150), spend("3", 90), spend("4", 10)]

        alerts = budget_alerts(budgets, spends)

        assert [(a.budget.category_id, a.status) for a in alerts] == [
            ("2", BudgetStatus.OVER_LIMIT),
            ("3", BudgetStatus.NEAR_LIMIT),
        ]

    def test_unknown_budget_category(self):
        """Test that a budget for an unknown category has no Category."""
        usages = evaluate_budgets([budget("99", "100")], [])
        assert usages[0].category is None

    def test_overview_has_a_row_per_category(self):
        """Test the budget management rows."""
        rows = budget_overview([budget("2", "200")], [spend("2", 50), spend("6", 20)])

        assert [row.category.id for row in rows] == DEFAULT_CATALOG.ids()
        food = rows[1]
        assert food.has_budget
        assert food.spent == Decimal("50")
        assert food.usage.remaining == Decimal("150")
        commute = rows[5]
        assert not commute.has_budget
        assert commute.spent == Decimal("20")
