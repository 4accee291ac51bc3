"""Category catalog and keyword-based category suggestion."""

from expense_tracker.categorization.catalog import (
    DEFAULT_CATALOG,
    DEFAULT_CATEGORIES,
    CategoryCatalog,
)
from expense_tracker.categorization.suggester import (
    CATEGORIZATION_RULES,
    matching_categories,
    suggest_category,
)

__all__ = [
    "CATEGORIZATION_RULES",
    "CategoryCatalog",
    "DEFAULT_CATALOG",
    "DEFAULT_CATEGORIES",
    "matching_categories",
    "suggest_category",
]
