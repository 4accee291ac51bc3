"""Tests for the expense list helpers and display formatting."""

from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.models.expense import Expense
from expense_tracker.reports import (
    filter_expenses,
    format_inr,
    format_percentage,
    format_relative_date,
    group_by_date,
    month_key,
    month_label,
    plain_amount,
)


def expense(amount, day, category_id="2", note=None) -> Expense:
    return Expense(
        user_id="user-1",
        expense_date=day,
        amount=Decimal(str(amount)),
        category_id=category_id,
        note=note,
    )


class TestFilterExpenses:
    """Tests for search and category filtering."""

    def setup_method(self):
        self.expenses = [
            expense(250, date(2024, 6, 2), "2", "Swiggy dinner"),
            expense(1200, date(2024, 6, 1), "4", "DMart"),
            expense(45.5, date(2024, 6, 1), "6", None),
        ]

    def test_no_filters_returns_everything(self):
        """Test that empty filters are a no-op."""
        assert filter_expenses(self.expenses) == self.expenses

    def test_search_note_case_insensitive(self):
        """Test note search ignores case."""
        result = filter_expenses(self.expenses, "swiggy")
        assert [e.note for e in result] == ["Swiggy dinner"]

    def test_search_amount(self):
        """Test that the amount text is searchable."""
        assert [e.amount for e in filter_expenses(self.expenses, "120")] == [Decimal("1200")]
        assert [e.amount for e in filter_expenses(self.expenses, "45.5")] == [Decimal("45.5")]

    def test_category_filter(self):
        """Test filtering by category id."""
        assert [e.category_id for e in filter_expenses(self.expenses, category_id="4")] == ["4"]

    def test_search_and_category_combined(self):
        """Test that both filters must match."""
        assert filter_expenses(self.expenses, "swiggy", category_id="4") == []

    def test_whitespace_search_is_ignored(self):
        """Test that a blank search term does not filter."""
        assert len(filter_expenses(self.expenses, "   ")) == 3


class TestGroupByDate:
    """Tests for day grouping."""

    def test_newest_day_first(self):
        """Test group order and in-group order."""
        first = expense(1, date(2024, 6, 1))
        second = expense(2, date(2024, 6, 3))
        third = expense(3, date(2024, 6, 1))

        groups = group_by_date([first, second, third])

        assert [day for day, _ in groups] == [date(2024, 6, 3), date(2024, 6, 1)]
        assert groups[1][1] == [first, third]

    def test_empty(self):
        """Test grouping nothing."""
        assert group_by_date([]) == []


class TestFormatting:
    """Tests for amount and date formatting."""

    @pytest.mark.parametrize("amount,expected", [
        (Decimal("0"), "₹0"),
        (Decimal("999"), "₹999"),
        (Decimal("1000"), "₹1,000"),
        (Decimal("123456.5"), "₹1,23,456.5"),
        (Decimal("10000000"), "₹1,00,00,000"),
        (Decimal("45.678"), "₹45.68"),
        (-50, "-₹50"),
    ])
    def test_format_inr(self, amount, expected):
        """Test Indian digit grouping."""
        assert format_inr(amount) == expected

    def test_plain_amount(self):
        """Test the searchable amount text."""
        assert plain_amount(Decimal("1200.00")) == "1200"
        assert plain_amount(Decimal("45.50")) == "45.5"
        assert plain_amount(Decimal("1E+3")) == "1000"

    def test_format_percentage(self):
        """Test percentage rounding."""
        assert format_percentage(83.333) == "83%"
        assert format_percentage(83.333, digits=1) == "83.3%"

    def test_relative_dates(self):
        """Test Today, Yesterday and short dates."""
        today = date(2024, 6, 5)
        assert format_relative_date(date(2024, 6, 5), today) == "Today"
        assert format_relative_date(date(2024, 6, 4), today) == "Yesterday"
        assert format_relative_date(date(2024, 6, 1), today) == "1 Jun"
        assert format_relative_date(date(2023, 12, 31), today) == "31 Dec 2023"

    def test_yesterday_across_year(self):
        """Test Yesterday on the first of January."""
        assert format_relative_date(date(2023, 12, 31), date(2024, 1, 1)) == "Yesterday"

    def test_month_key_and_label(self):
        """Test month helpers."""
        assert month_key(date(2024, 6, 15)) == "2024-06"
        assert month_label(date(2024, 6, 15)) == "June 2024"
