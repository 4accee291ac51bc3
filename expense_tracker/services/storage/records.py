"""
Record Store

Implements the user, expense and budget storage interfaces on top of any
KeyValueStore. Each collection lives under one fixed key:

    <prefix>_user      the single User record
    <prefix>_expenses  list of every Expense, newest-added first
    <prefix>_budgets   list of every Budget

Records are serialized as JSON with camelCase keys (userId, categoryId,
monthlyLimit, ...) and amounts as decimal strings.

TRADEOFFS:
- Every write re-serializes the whole collection (fine for personal use)
- No transactions; one active session is the only writer, so last write wins
- Malformed stored data is never fatal: an unreadable collection reads as
  empty and an unreadable record inside a list is skipped (and dropped on
  the next write of that collection)
"""

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from expense_tracker.config import StorageSettings
from expense_tracker.models.expense import (
    Budget,
    Expense,
    ExpenseUpdate,
    User,
)
from expense_tracker.services.storage.interface import (
    BudgetStorageInterface,
    DuplicateError,
    ExpenseStorageInterface,
    KeyValueStore,
    UserStorageInterface,
)
from expense_tracker.services.storage.key_value import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

DEFAULT_KEY_PREFIX = "dabbulu"


@dataclass(frozen=True)
class StorageKeys:
    """The three fixed storage namespaces."""
    user: str
    expenses: str
    budgets: str

    @classmethod
    def for_prefix(cls, prefix: str = DEFAULT_KEY_PREFIX) -> "StorageKeys":
        return cls(
            user=f"{prefix}_user",
            expenses=f"{prefix}_expenses",
            budgets=f"{prefix}_budgets",
        )


class RecordStore(UserStorageInterface, ExpenseStorageInterface, BudgetStorageInterface):
    """
    Key-value backed storage for users, expenses and budgets.

    All operations are whole-collection read-modify-write.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self._store = store if store is not None else InMemoryKeyValueStore()
        self._keys = StorageKeys.for_prefix(key_prefix)

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "RecordStore":
        """Build a RecordStore on the backend named in settings."""
        if settings.backend == "memory":
            store: KeyValueStore = InMemoryKeyValueStore()
        else:
            store = JsonFileKeyValueStore(settings.data_dir)
        return cls(store, key_prefix=settings.key_prefix)

    @property
    def keys(self) -> StorageKeys:
        return self._keys

    # -------------------------------------------------------------------------
    # Serialization helpers
    # -------------------------------------------------------------------------

    def _load_records(self, key: str, model: type[RecordT]) -> list[RecordT]:
        """Read a stored list, skipping anything that does not parse."""
        raw = self._store.get(key)
        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("stored_records_malformed", key=key, error=str(e))
            return []

        if not isinstance(data, list):
            logger.warning(
                "stored_records_malformed",
                key=key,
                error=f"expected a list, found {type(data).__name__}",
            )
            return []

        records = []
        for index, item in enumerate(data):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "stored_record_skipped",
                    key=key,
                    index=index,
                    error=str(e),
                )
        return records

    def _save_records(self, key: str, records: list[BaseModel]) -> None:
        payload = json.dumps(
            [record.model_dump(mode="json", by_alias=True) for record in records],
            ensure_ascii=False,
        )
        self._store.set(key, payload)

    # -------------------------------------------------------------------------
    # User
    # -------------------------------------------------------------------------

    def get_user(self) -> Optional[User]:
        raw = self._store.get(self._keys.user)
        if raw is None:
            return None

        try:
            return User.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("stored_user_malformed", key=self._keys.user, error=str(e))
            return None

    def save_user(self, user: User) -> None:
        self._store.set(self._keys.user, user.model_dump_json(by_alias=True))

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def list_expenses(self, user_id: str) -> list[Expense]:
        return [
            expense
            for expense in self._load_records(self._keys.expenses, Expense)
            if expense.user_id == user_id
        ]

    def add_expense(self, expense: Expense) -> Expense:
        expenses = self._load_records(self._keys.expenses, Expense)
        if any(existing.id == expense.id for existing in expenses):
            raise DuplicateError(f"Expense already exists: {expense.id}")

        expenses.insert(0, expense)
        self._save_records(self._keys.expenses, expenses)
        return expense

    def update_expense(
        self,
        user_id: str,
        expense_id: str,
        changes: ExpenseUpdate,
    ) -> Optional[Expense]:
        expenses = self._load_records(self._keys.expenses, Expense)

        for index, existing in enumerate(expenses):
            if existing.id == expense_id and existing.user_id == user_id:
                updated = changes.apply_to(existing)
                expenses[index] = updated
                self._save_records(self._keys.expenses, expenses)
                return updated

        logger.info("expense_update_skipped", expense_id=expense_id, reason="not_found")
        return None

    def delete_expense(self, user_id: str, expense_id: str) -> bool:
        expenses = self._load_records(self._keys.expenses, Expense)
        remaining = [
            expense for expense in expenses
            if not (expense.id == expense_id and expense.user_id == user_id)
        ]

        if len(remaining) == len(expenses):
            logger.info("expense_delete_skipped", expense_id=expense_id, reason="not_found")
            return False

        self._save_records(self._keys.expenses, remaining)
        return True

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    def list_budgets(self, user_id: str) -> list[Budget]:
        return [
            budget
            for budget in self._load_records(self._keys.budgets, Budget)
            if budget.user_id == user_id
        ]

    def set_budget(
        self,
        user_id: str,
        category_id: str,
        monthly_limit: Decimal,
    ) -> Budget:
        budgets = self._load_records(self._keys.budgets, Budget)

        for index, existing in enumerate(budgets):
            if existing.user_id == user_id and existing.category_id == category_id:
                updated = Budget(
                    id=existing.id,
                    user_id=user_id,
                    category_id=category_id,
                    monthly_limit=monthly_limit,
                )
                budgets[index] = updated
                self._save_records(self._keys.budgets, budgets)
                return updated

        budget = Budget(
            user_id=user_id,
            category_id=category_id,
            monthly_limit=monthly_limit,
        )
        budgets.append(budget)
        self._save_records(self._keys.budgets, budgets)
        return budget
