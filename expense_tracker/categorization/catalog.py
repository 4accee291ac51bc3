"""
Category Catalog

The fixed list of spending categories. Expenses and budgets refer to a
category by its string id; this module is the lookup that turns an id
back into a Category.

DESIGN DECISION: The catalog is passed explicitly to the aggregation and
budget code instead of being read from a global, so tests and callers can
supply their own. Lookups of unknown ids return None rather than raising.
"""

from typing import Iterable, Iterator, Optional

from expense_tracker.models.expense import Category


class CategoryCatalog:
    """Ordered, read-only mapping of category id to Category."""

    def __init__(self, categories: Iterable[Category]):
        self._categories: tuple[Category, ...] = tuple(categories)
        self._by_id: dict[str, Category] = {}
        for category in self._categories:
            if category.id in self._by_id:
                raise ValueError(f"Duplicate category id: {category.id}")
            self._by_id[category.id] = category

    def get(self, category_id: Optional[str]) -> Optional[Category]:
        """Return the category with this id, or None if there is none."""
        if category_id is None:
            return None
        return self._by_id.get(category_id)

    def ids(self) -> list[str]:
        return [category.id for category in self._categories]

    def name_of(self, category_id: Optional[str], default: str = "Unknown") -> str:
        category = self.get(category_id)
        return category.name if category else default

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def __repr__(self) -> str:
        return f"CategoryCatalog({len(self)} categories)"


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="1", name="Rent", icon="Home"),
    Category(id="2", name="Mess/Food", icon="UtensilsCrossed"),
    Category(id="3", name="Tiffin", icon="Coffee"),
    Category(id="4", name="Groceries", icon="ShoppingCart"),
    Category(id="5", name="UPI/Wallet", icon="Wallet"),
    Category(id="6", name="Commute", icon="Car"),
    Category(id="7", name="Mobile/Data", icon="Smartphone"),
    Category(id="8", name="Utilities", icon="Zap"),
    Category(id="9", name="Entertainment", icon="Gamepad2"),
    Category(id="10", name="Health/Pharmacy", icon="Heart"),
    Category(id="11", name="Shopping", icon="ShoppingBag"),
    Category(id="12", name="Travel", icon="MapPin"),
)

DEFAULT_CATALOG = CategoryCatalog(DEFAULT_CATEGORIES)
