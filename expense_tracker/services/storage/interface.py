"""
Abstract Storage Interface

DESIGN DECISION: We define abstract interfaces for storage operations.
This allows us to:
1. Swap the JSON-file store for something else later
2. Use in-memory storage for testing
3. Keep the aggregation and budget logic decoupled from storage

Two layers:
- KeyValueStore: the raw get/set-by-key adapter (one serialized value per key)
- User/Expense/Budget storage interfaces: record operations scoped by the
  owning user id, built on top of a KeyValueStore

All writes are whole-collection read-modify-write. There is one writer
(the active session), so the last write wins.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from expense_tracker.models.expense import (
    Budget,
    Expense,
    ExpenseUpdate,
    User,
)


class KeyValueStore(ABC):
    """
    Abstract key-value persistence.

    Values are serialized text (JSON). A missing key reads as None.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            The stored text, or None if the key has never been set
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store value under key, replacing any previous value.

        Raises:
            StorageError: If the value could not be written
        """
        pass


class UserStorageInterface(ABC):
    """Storage for the single user record."""

    @abstractmethod
    def get_user(self) -> Optional[User]:
        """Return the stored user, or None if there is none (or it is unreadable)."""
        pass

    @abstractmethod
    def save_user(self, user: User) -> None:
        """Store user, replacing any previous user record."""
        pass


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Expenses are kept newest-added first.
    """

    @abstractmethod
    def list_expenses(self, user_id: str) -> list[Expense]:
        """
        All expenses owned by user_id, newest-added first.

        Missing or malformed stored data reads as an empty list.
        """
        pass

    @abstractmethod
    def add_expense(self, expense: Expense) -> Expense:
        """
        Prepend an expense.

        Raises:
            DuplicateError: If an expense with the same id already exists
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def update_expense(
        self,
        user_id: str,
        expense_id: str,
        changes: ExpenseUpdate,
    ) -> Optional[Expense]:
        """
        Apply a partial update to one expense owned by user_id.

        Returns:
            The updated expense, or None if there is no such expense
            (nothing is written in that case)
        """
        pass

    @abstractmethod
    def delete_expense(self, user_id: str, expense_id: str) -> bool:
        """
        Remove one expense owned by user_id.

        Returns:
            True if an expense was removed, False if there was none
        """
        pass


class BudgetStorageInterface(ABC):
    """
    Abstract interface for budget storage.

    There is at most one budget per (user_id, category_id). Budgets are
    never deleted.
    """

    @abstractmethod
    def list_budgets(self, user_id: str) -> list[Budget]:
        """All budgets owned by user_id."""
        pass

    @abstractmethod
    def set_budget(
        self,
        user_id: str,
        category_id: str,
        monthly_limit: Decimal,
    ) -> Budget:
        """
        Create or update the budget for (user_id, category_id).

        An existing budget keeps its id and only its limit changes.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not open the storage backend."""
    pass
