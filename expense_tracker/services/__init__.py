"""Services package."""

from expense_tracker.services.storage import (
    BudgetStorageInterface,
    ConnectionError,
    DuplicateError,
    ExpenseStorageInterface,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    RecordStore,
    StorageError,
    StorageKeys,
    UserStorageInterface,
)

__all__ = [
    "BudgetStorageInterface",
    "ConnectionError",
    "DuplicateError",
    "ExpenseStorageInterface",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "RecordStore",
    "StorageError",
    "StorageKeys",
    "UserStorageInterface",
]
