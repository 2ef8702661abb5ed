"""Tests for storage backends and ledger persistence."""

import json
from decimal import Decimal

import pytest

from expense_tracker.models.audit import LedgerEventType
from expense_tracker.models.entry import Entry
from expense_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    LedgerStore,
    StorageReadError,
    StorageWriteError,
)


def _entries() -> list[Entry]:
    return [
        Entry(id=3, description="Salary", amount=Decimal("1000"), date="10/06/2024, 09:15:02 AM"),
        Entry(id=1, description="Rent", amount=Decimal("250.75"), category="Home", date="11/06/2024, 10:00:00 AM"),
        Entry(id=2, description="", amount=Decimal("0.10"), category="Food", date="12/06/2024, 08:30:00 PM"),
    ]


class TestInMemoryStorage:
    """Tests for the dict-backed storage."""

    def test_set_get_delete(self):
        """Test basic key-value operations."""
        storage = InMemoryStorage()
        assert storage.get("incomes") is None

        storage.set("incomes", "[]")
        assert storage.get("incomes") == "[]"
        assert "incomes" in storage
        assert storage.keys() == ["incomes"]

        storage.delete("incomes")
        assert storage.get("incomes") is None
        assert "incomes" not in storage

    def test_delete_absent_key_is_noop(self):
        """Deleting a missing key does not raise."""
        storage = InMemoryStorage({"a": "1"})
        storage.delete("b")
        assert storage.keys() == ["a"]


class TestJsonFileStorage:
    """Tests for the JSON document storage."""

    def test_missing_file_is_empty(self, tmp_path):
        """A file that does not exist yet is an empty store."""
        storage = JsonFileStorage(tmp_path / "data.json")
        assert storage.keys() == []
        assert not (tmp_path / "data.json").exists()

    def test_values_survive_reopen(self, tmp_path):
        """Test data written by one instance is read by the next."""
        path = tmp_path / "nested" / "data.json"
        JsonFileStorage(path).set("expenses", '[{"id": 1}]')

        reopened = JsonFileStorage(path)
        assert reopened.get("expenses") == '[{"id": 1}]'
        assert json.loads(path.read_text(encoding="utf-8")) == {"expenses": '[{"id": 1}]'}

    def test_delete_removes_key_from_file(self, tmp_path):
        """Test delete rewrites the document without the key."""
        path = tmp_path / "data.json"
        storage = JsonFileStorage(path)
        storage.set("incomes", "[]")
        storage.set("expenses", "[]")

        storage.delete("incomes")

        assert JsonFileStorage(path).keys() == ["expenses"]

    def test_no_temp_files_left_behind(self, tmp_path):
        """Test the atomic write cleans up after itself."""
        storage = JsonFileStorage(tmp_path / "data.json")
        storage.set("incomes", "[]")
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", "   "])
    def test_unreadable_document_is_empty(self, tmp_path, content):
        """Test corrupt or unexpected documents load as an empty store."""
        path = tmp_path / "data.json"
        path.write_text(content, encoding="utf-8")
        assert JsonFileStorage(path).keys() == []

    def test_non_string_values_are_ignored(self, tmp_path):
        """Test only string values are loaded."""
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"incomes": "[]", "expenses": [1, 2]}), encoding="utf-8")
        storage = JsonFileStorage(path)
        assert storage.get("incomes") == "[]"
        assert storage.get("expenses") is None

    def test_unreadable_path_raises_read_error(self, tmp_path):
        """Test a path that cannot be read raises StorageReadError."""
        with pytest.raises(StorageReadError):
            JsonFileStorage(tmp_path)

    def test_write_failure_raises_and_keeps_state(self, tmp_path):
        """Test a failed write raises StorageWriteError and changes nothing."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        storage = JsonFileStorage(blocker / "data.json")

        with pytest.raises(StorageWriteError):
            storage.set("incomes", "[]")
        assert storage.get("incomes") is None


class TestLedgerStore:
    """Tests for ledger serialization."""

    def test_round_trip_preserves_entries_and_order(self):
        """Test load after save reproduces the same ledger."""
        store = LedgerStore(InMemoryStorage())
        entries = _entries()

        store.save("expenses", entries)

        assert store.load("expenses") == entries

    def test_saved_format_is_array_of_records(self):
        """Test the stored text is a JSON array with numeric amounts."""
        storage = InMemoryStorage()
        LedgerStore(storage).save("incomes", _entries()[:1])

        records = json.loads(storage.get("incomes"))
        assert records == [{
            "id": 3,
            "description": "Salary",
            "amount": 1000.0,
            "date": "10/06/2024, 09:15:02 AM",
        }]

    def test_absent_key_loads_empty(self):
        """Test a missing key loads as an empty ledger."""
        assert LedgerStore(InMemoryStorage()).load("incomes") == []

    @pytest.mark.parametrize("payload", [
        "{not json",
        "null",
        '{"id": 1}',
        '[{"id": 1, "description": "x", "amount": -5, "date": "d"}]',
        '[{"id": 1, "description": "x", "amount": "abc", "date": "d"}]',
        '[{"description": "x", "amount": 5, "date": "d"}]',
    ])
    def test_unparseable_snapshot_loads_empty(self, payload, audit_logger):
        """Test corrupt snapshots are discarded and reported."""
        store = LedgerStore(InMemoryStorage({"expenses": payload}), audit_logger)

        assert store.load("expenses") == []

        events = audit_logger.recent_events
        assert events[-1].event_type == LedgerEventType.SNAPSHOT_DISCARDED
        assert events[-1].ledger == "expenses"

    def test_legacy_records_from_browser_format_load(self):
        """Test records written with integer amounts load as Decimals."""
        payload = json.dumps([
            {"id": 1718000000000, "description": "Salary", "amount": 1000,
             "date": "6/10/2024, 9:15:02 AM"},
            {"id": 1718000000001, "amount": 200, "category": "Food",
             "description": "", "date": "6/10/2024, 9:16:00 AM"},
        ])
        store = LedgerStore(InMemoryStorage({"expenses": payload}))

        loaded = store.load("expenses")

        assert [e.amount for e in loaded] == [Decimal("1000"), Decimal("200")]
        assert loaded[1].category == "Food"

    def test_delete_removes_key(self):
        """Test delete leaves the key absent, not an empty array."""
        storage = InMemoryStorage()
        store = LedgerStore(storage)
        store.save("incomes", _entries())

        store.delete("incomes")

        assert storage.get("incomes") is None
        assert store.load("incomes") == []

    def test_scalar_round_trip(self):
        """Test a single amount survives save and load."""
        storage = InMemoryStorage()
        store = LedgerStore(storage)

        store.save_scalar("income", Decimal("1500.50"))

        assert storage.get("income") == "1500.5"
        assert store.load_scalar("income") == Decimal("1500.5")

    @pytest.mark.parametrize("payload", ["abc", "-10", "0", '"100"x'])
    def test_unreadable_scalar_loads_none(self, payload):
        """Test corrupt or non-positive scalars are discarded."""
        store = LedgerStore(InMemoryStorage({"income": payload}))
        assert store.load_scalar("income") is None

    def test_absent_scalar_loads_none(self):
        """Test a missing scalar loads as None."""
        assert LedgerStore(InMemoryStorage()).load_scalar("income") is None
