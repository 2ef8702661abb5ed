"""
Ledger Persistence

LedgerStore turns ledgers into strings for a KeyValueStorage and back.
Each ledger is stored under its own key as a JSON array of records:

    [{"id": 1718000000000, "description": "Salary", "amount": 1000.0,
      "date": "10/06/2024, 09:15:02 AM"}]

Reading never fails: a missing key, invalid JSON or a record that does not
match the Entry model all load as an empty ledger. There is no schema
version; data in an older format is discarded.
"""

import json
from decimal import Decimal
from typing import Annotated, Any, Optional, Sequence

import structlog
from pydantic import Field, TypeAdapter, ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.models.entry import Entry
from expense_tracker.services.storage.interface import (
    KeyValueStorage,
    StorageError,
)


logger = structlog.get_logger(__name__)

_LEDGER_ADAPTER = TypeAdapter(list[Entry])
_POSITIVE_AMOUNT = TypeAdapter(Annotated[Decimal, Field(gt=0, allow_inf_nan=False)])

# Sentinel for "nothing usable stored"; None is a valid decoded JSON value
_MISSING = object()


class LedgerStore:
    """Serializes ledgers to a key-value storage backend."""

    def __init__(
        self,
        storage: KeyValueStorage,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Args:
            storage: Backend holding the serialized ledgers.
            audit_logger: Receives an event for every discarded snapshot.
                          If None, discards are only logged locally.
        """
        self._storage = storage
        self._audit_logger = audit_logger

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    def _discard(self, key: str, reason: str) -> None:
        if self._audit_logger:
            self._audit_logger.log_snapshot_discarded(key, reason)
        else:
            logger.warning("snapshot_discarded", key=key, reason=reason)

    def _read(self, key: str) -> Any:
        """Read and decode a stored value; floats decode as Decimal."""
        try:
            raw = self._storage.get(key)
        except StorageError as e:
            self._discard(key, str(e))
            return _MISSING

        if raw is None:
            return _MISSING

        try:
            return json.loads(raw, parse_float=Decimal)
        except json.JSONDecodeError as e:
            self._discard(key, f"invalid JSON: {e}")
            return _MISSING

    def save(self, key: str, entries: Sequence[Entry]) -> None:
        """
        Write the whole ledger under a key.

        Raises:
            StorageWriteError: If the backend rejects the write
        """
        payload = json.dumps(
            [entry.to_record() for entry in entries],
            ensure_ascii=False,
        )
        self._storage.set(key, payload)

    def load(self, key: str) -> list[Entry]:
        """Load a ledger, or an empty list if it is absent or unreadable."""
        decoded = self._read(key)
        if decoded is _MISSING:
            return []

        try:
            return _LEDGER_ADAPTER.validate_python(decoded)
        except ValidationError as e:
            self._discard(key, f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}")
            return []

    def delete(self, key: str) -> None:
        """Remove a stored ledger (or value) entirely."""
        self._storage.delete(key)

    def save_scalar(self, key: str, value: Decimal) -> None:
        """Store a single positive amount as a JSON number."""
        self._storage.set(key, json.dumps(float(value)))

    def load_scalar(self, key: str) -> Optional[Decimal]:
        """Load a single amount, or None if absent or unreadable."""
        decoded = self._read(key)
        if decoded is _MISSING:
            return None

        try:
            return _POSITIVE_AMOUNT.validate_python(decoded)
        except ValidationError as e:
            self._discard(key, e.errors()[0]["msg"])
            return None
