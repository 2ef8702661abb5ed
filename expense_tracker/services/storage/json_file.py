"""
JSON File Storage Implementation

All keys live in one JSON document on disk, a mapping of key -> string
value. This mirrors browser local storage: values are opaque strings and
the ledger encoding is handled by LedgerStore.

TRADEOFFS:
- The whole document is rewritten on every change (fine for personal use)
- No locking; one process owns the file at a time
- No transactions across keys; a crash between two writes can leave the
  ledgers out of step with each other
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from expense_tracker.services.storage.interface import (
    KeyValueStorage,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileStorage(KeyValueStorage):
    """
    Key-value storage backed by a single JSON document.

    The document is read once at construction and kept in memory;
    every set/delete writes the full document back synchronously.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Open (or prepare to create) the storage document.

        A missing file is an empty store. A file that is not a JSON object
        of strings is treated as empty and overwritten on the next write.

        Raises:
            StorageReadError: If the file exists but cannot be read
        """
        self._path = Path(path)
        self._data = self._read_document()

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, str]:
        """Load the document from disk."""
        if not self._path.exists():
            return {}

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageReadError(f"Cannot read storage file {self._path}: {e}")

        if not raw.strip():
            return {}

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(
                "storage_document_unreadable",
                path=str(self._path),
                error=str(e),
            )
            return {}

        if not isinstance(document, dict):
            logger.warning(
                "storage_document_unreadable",
                path=str(self._path),
                error=f"expected an object, got {type(document).__name__}",
            )
            return {}

        # Non-string values cannot have been written by us
        return {k: v for k, v in document.items() if isinstance(v, str)}

    def _write_document(self, data: dict[str, str]) -> None:
        """Atomically replace the document on disk."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Cannot write storage file {self._path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        updated = dict(self._data)
        updated[key] = value
        self._write_document(updated)
        self._data = updated

    def delete(self, key: str) -> None:
        if key not in self._data:
            return
        updated = {k: v for k, v in self._data.items() if k != key}
        self._write_document(updated)
        self._data = updated

    def keys(self) -> list[str]:
        return list(self._data)
