"""Tests for the key-value stores and the record store."""

import json
from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.config import StorageSettings
from expense_tracker.models.expense import Expense, ExpenseUpdate, User
from expense_tracker.services.storage import (
    ConnectionError,
    DuplicateError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    RecordStore,
    StorageError,
    StorageKeys,
)


def make_expense(user_id="user-1", **overrides) -> Expense:
    fields = dict(
        user_id=user_id,
        expense_date=date(2024, 6, 2),
        amount=Decimal("100"),
        category_id="2",
        note="Swiggy",
    )
    fields.update(overrides)
    return Expense(**fields)


class TestStorageKeys:
    """Tests for the fixed storage namespaces."""

    def test_default_prefix(self):
        """Test the default key names."""
        keys = StorageKeys.for_prefix()
        assert keys.user == "dabbulu_user"
        assert keys.expenses == "dabbulu_expenses"
        assert keys.budgets == "dabbulu_budgets"


class TestJsonFileKeyValueStore:
    """Tests for the file-backed store."""

    def test_round_trip(self, tmp_path):
        """Test set then get."""
        store = JsonFileKeyValueStore(tmp_path / "data")
        store.set("k", '{"a": 1}')

        assert store.get("k") == '{"a": 1}'
        assert (tmp_path / "data" / "k.json").exists()
        assert not (tmp_path / "data" / "k.json.tmp").exists()

    def test_missing_key(self, tmp_path):
        """Test that an absent key reads as None."""
        assert JsonFileKeyValueStore(tmp_path).get("nothing") is None

    def test_overwrite(self, tmp_path):
        """Test that set replaces the previous value."""
        store = JsonFileKeyValueStore(tmp_path)
        store.set("k", "1")
        store.set("k", "2")
        assert store.get("k") == "2"

    def test_invalid_key(self, tmp_path):
        """Test that keys cannot escape the directory."""
        store = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(ValueError):
            store.path_for("../evil")

    def test_path_is_a_file(self, tmp_path):
        """Test that a file in place of the directory is rejected."""
        target = tmp_path / "not_a_dir"
        target.write_text("x")
        with pytest.raises(ConnectionError):
            JsonFileKeyValueStore(target)

    def test_write_failure_raises_storage_error(self, tmp_path):
        """Test that an unwritable location surfaces as StorageError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        # Directory creation fails because a file sits where it would go.
        store = JsonFileKeyValueStore(blocker / "sub")

        with pytest.raises(StorageError):
            store.set("k", "1")


class TestRecordStoreExpenses:
    """Tests for expense records."""

    def setup_method(self):
        self.kv = InMemoryKeyValueStore()
        self.store = RecordStore(self.kv)

    def test_empty(self):
        """Test a fresh store."""
        assert self.store.list_expenses("user-1") == []
        assert self.store.get_user() is None

    def test_add_prepends(self):
        """Test that the newest expense comes first."""
        first = self.store.add_expense(make_expense(note="first"))
        second = self.store.add_expense(make_expense(note="second"))

        assert [e.id for e in self.store.list_expenses("user-1")] == [second.id, first.id]

    def test_add_duplicate_id(self):
        """Test that ids are unique."""
        expense = self.store.add_expense(make_expense())
        with pytest.raises(DuplicateError):
            self.store.add_expense(make_expense(id=expense.id))

    def test_scoped_by_user(self):
        """Test that users only see their own expenses."""
        self.store.add_expense(make_expense(user_id="user-1"))
        self.store.add_expense(make_expense(user_id="user-2"))

        assert len(self.store.list_expenses("user-1")) == 1
        assert len(self.store.list_expenses("user-2")) == 1

    def test_update(self):
        """Test an update and that it persists."""
        expense = self.store.add_expense(make_expense())

        updated = self.store.update_expense("user-1", expense.id, ExpenseUpdate(amount=Decimal("5")))

        assert updated.amount == Decimal("5")
        assert self.store.list_expenses("user-1")[0].amount == Decimal("5")

    def test_update_unknown_is_noop(self):
        """Test that an unknown id changes nothing."""
        self.store.add_expense(make_expense())
        before = self.kv.get(self.store.keys.expenses)

        assert self.store.update_expense("user-1", "missing", ExpenseUpdate(amount=Decimal("1"))) is None
        assert self.kv.get(self.store.keys.expenses) == before

    def test_update_other_users_expense_is_noop(self):
        """Test that another user's expense cannot be edited."""
        expense = self.store.add_expense(make_expense(user_id="user-2"))
        assert self.store.update_expense("user-1", expense.id, ExpenseUpdate(note="x")) is None

    def test_delete(self):
        """Test deleting an expense."""
        expense = self.store.add_expense(make_expense())

        assert self.store.delete_expense("user-1", expense.id)
        assert self.store.list_expenses("user-1") == []

    def test_delete_unknown_is_noop(self):
        """Test that deleting an unknown id returns False."""
        self.store.add_expense(make_expense())
        assert not self.store.delete_expense("user-1", "missing")
        assert len(self.store.list_expenses("user-1")) == 1

    def test_stored_layout(self):
        """Test the serialized JSON."""
        expense = self.store.add_expense(make_expense(amount=Decimal("99.50")))
        data = json.loads(self.kv.get("dabbulu_expenses"))

        assert data[0]["id"] == expense.id
        assert data[0]["userId"] == "user-1"
        assert data[0]["categoryId"] == "2"
        assert Decimal(data[0]["amount"]) == Decimal("99.50")


class TestRecordStoreMalformedData:
    """Tests for recovery from bad stored data."""

    def test_invalid_json_reads_as_empty(self):
        """Test that unparsable data is treated as no records."""
        store = RecordStore(InMemoryKeyValueStore({"dabbulu_expenses": "{not json"}))
        assert store.list_expenses("user-1") == []

    def test_non_list_reads_as_empty(self):
        """Test that a JSON object instead of a list is ignored."""
        store = RecordStore(InMemoryKeyValueStore({"dabbulu_budgets": '{"a": 1}'}))
        assert store.list_budgets("user-1") == []

    def test_bad_record_skipped(self):
        """Test that one bad record does not hide the others."""
        good = make_expense().model_dump(mode="json", by_alias=True)
        raw = json.dumps([good, {"id": "broken", "amount": "-1"}])
        store = RecordStore(InMemoryKeyValueStore({"dabbulu_expenses": raw}))

        assert [e.id for e in store.list_expenses("user-1")] == [good["id"]]

    def test_bad_user_reads_as_none(self):
        """Test that a malformed user record is treated as absent."""
        store = RecordStore(InMemoryKeyValueStore({"dabbulu_user": "[]"}))
        assert store.get_user() is None

    def test_undecodable_file_reads_as_empty(self, tmp_path):
        """Test that a file that is not valid UTF-8 is treated as absent."""
        (tmp_path / "dabbulu_expenses.json").write_bytes(b"\xff\xfe[garbage")
        (tmp_path / "dabbulu_user.json").write_bytes(b"\xff\xfe{")
        store = RecordStore(JsonFileKeyValueStore(tmp_path))

        assert store.list_expenses("user-1") == []
        assert store.get_user() is None

    def test_undecodable_file_is_replaced_on_next_write(self, tmp_path):
        """Test that adding an expense recovers from an undecodable file."""
        (tmp_path / "dabbulu_expenses.json").write_bytes(b"\xff\xfe[garbage")
        store = RecordStore(JsonFileKeyValueStore(tmp_path))

        expense = store.add_expense(make_expense())

        assert [e.id for e in store.list_expenses("user-1")] == [expense.id]


class TestRecordStoreBudgets:
    """Tests for budget records."""

    def setup_method(self):
        self.store = RecordStore()

    def test_set_creates(self):
        """Test creating a budget."""
        budget = self.store.set_budget("user-1", "2", Decimal("500"))
        assert self.store.list_budgets("user-1") == [budget]

    def test_set_twice_upserts(self):
        """Test that setting again keeps one record with the new limit."""
        first = self.store.set_budget("user-1", "2", Decimal("500"))
        second = self.store.set_budget("user-1", "2", Decimal("800"))

        budgets = self.store.list_budgets("user-1")
        assert len(budgets) == 1
        assert budgets[0].monthly_limit == Decimal("800")
        assert second.id == first.id

    def test_budgets_per_user(self):
        """Test that the same category can be budgeted by two users."""
        self.store.set_budget("user-1", "2", Decimal("500"))
        self.store.set_budget("user-2", "2", Decimal("100"))

        assert self.store.list_budgets("user-1")[0].monthly_limit == Decimal("500")
        assert self.store.list_budgets("user-2")[0].monthly_limit == Decimal("100")

    def test_negative_limit_rejected(self):
        """Test that the store validates limits."""
        with pytest.raises(ValueError):
            self.store.set_budget("user-1", "2", Decimal("-1"))
        assert self.store.list_budgets("user-1") == []


class TestRecordStoreOnDisk:
    """Tests for RecordStore on JSON files."""

    def test_survives_reopen(self, tmp_path):
        """Test that records persist across store instances."""
        settings = StorageSettings(backend="json", data_dir=tmp_path, key_prefix="test")
        store = RecordStore.from_settings(settings)
        user = User(email="a@example.com")
        store.save_user(user)
        store.add_expense(make_expense(user_id=user.id))
        store.set_budget(user.id, "2", Decimal("300"))

        reopened = RecordStore.from_settings(settings)

        assert reopened.get_user() == user
        assert len(reopened.list_expenses(user.id)) == 1
        assert reopened.list_budgets(user.id)[0].monthly_limit == Decimal("300")
        assert (tmp_path / "test_expenses.json").exists()

    def test_memory_backend(self):
        """Test the in-memory backend from settings."""
        store = RecordStore.from_settings(StorageSettings(backend="memory"))
        store.save_user(User(email="a@example.com"))
        assert store.get_user().email == "a@example.com"
