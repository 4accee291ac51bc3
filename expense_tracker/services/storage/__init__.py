"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Records live in a key-value store (JSON files on disk, or memory), but the
interfaces are designed to be swappable.
"""

from expense_tracker.services.storage.interface import (
    BudgetStorageInterface,
    ConnectionError,
    DuplicateError,
    ExpenseStorageInterface,
    KeyValueStore,
    StorageError,
    UserStorageInterface,
)
from expense_tracker.services.storage.key_value import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from expense_tracker.services.storage.records import (
    RecordStore,
    StorageKeys,
)

__all__ = [
    # Interfaces
    "BudgetStorageInterface",
    "ExpenseStorageInterface",
    "KeyValueStore",
    "UserStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "RecordStore",
    "StorageKeys",
]
