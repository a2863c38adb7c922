"""
storage.py - key-value stores and the ledger persistence adapter

Two stores share the same tiny interface (get/set/delete on string keys):
 - MemoryStore: dict-backed, used by tests and throwaway sessions
 - JsonFileStore: one "<key>.json" file per key in a data directory,
   written atomically (temp file, fsync, move)

LedgerStorage sits on top of a store and converts the expense list to and from
a JSON array kept under a single key.
"""

from typing import Dict, List, Optional
import json
import logging
import os
import shutil
import tempfile

from expense_ledger.errors import StorageCorrupt, StorageWriteFailed
from expense_ledger.models import Expense

logger = logging.getLogger(__name__)

CORRUPT_SUFFIX = ".corrupt"


class MemoryStore:
    """In-process key-value store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """
    File-backed key-value store. Each key maps to <directory>/<key>.json.

    Writes go to a temp file in the same directory which is then moved over
    the target, so a crash mid-write never leaves a truncated file behind.
    Text goes through surrogateescape, so bytes that are not valid UTF-8 are
    read back and written out unchanged.
    """

    def __init__(self, directory: str):
        self.directory = os.path.abspath(directory)

    def _path(self, key: str) -> str:
        if not key or os.sep in key or (os.altsep and os.altsep in key):
            raise ValueError(f"invalid storage key: {key!r}")
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8", errors="surrogateescape") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        target = self._path(key)
        fd, tmp_path = tempfile.mkstemp(prefix=f"tmp_{key}_", dir=self.directory, text=True)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            shutil.move(tmp_path, target)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def delete(self, key: str) -> None:
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)


class LedgerStorage:
    """
    Persistence adapter for the expense list.

    save() raises StorageWriteFailed when the store rejects the write.
    load() never raises for bad data: a missing key is an empty ledger, and
    an unreadable payload is recorded on last_error and replaced by an empty
    ledger. The payload is first copied to "<key>.corrupt"; quarantined tells
    whether that copy was actually written.
    """

    def __init__(self, store, key: str = "expenses"):
        self.store = store
        self.key = key
        self.last_error: Optional[StorageCorrupt] = None
        self.quarantined = False

    @property
    def quarantine_key(self) -> str:
        return self.key + CORRUPT_SUFFIX

    def save(self, expenses: List[Expense]) -> None:
        payload = json.dumps([e.to_dict() for e in expenses], ensure_ascii=False)
        try:
            self.store.set(self.key, payload)
        except Exception as exc:
            logger.exception("Failed to save %d expenses under key %r", len(expenses), self.key)
            raise StorageWriteFailed("Failed to save expenses. Storage might be full.") from exc
        logger.info("Saved %d expenses under key %r", len(expenses), self.key)

    def load(self) -> List[Expense]:
        self.last_error = None
        self.quarantined = False
        try:
            raw = self.store.get(self.key)
        except (OSError, UnicodeDecodeError) as exc:
            # nothing was read, so there is nothing to copy aside
            logger.exception("Could not read key %r; starting with an empty ledger", self.key)
            self.last_error = StorageCorrupt(f"unreadable payload: {exc}")
            return []
        if raw is None:
            logger.info("No saved expenses found under key %r", self.key)
            return []
        try:
            expenses = self.decode(raw)
        except StorageCorrupt as exc:
            self.last_error = exc
            logger.warning("Discarding corrupt data under key %r: %s", self.key, exc)
            self.quarantined = self._quarantine(raw)
            return []
        logger.info("Loaded %d expenses from key %r", len(expenses), self.key)
        return expenses

    def clear(self) -> None:
        try:
            self.store.delete(self.key)
        except Exception as exc:
            logger.exception("Failed to delete key %r", self.key)
            raise StorageWriteFailed("Failed to clear saved expenses.") from exc

    @staticmethod
    def decode(raw: str) -> List[Expense]:
        """Parse a stored payload; raise StorageCorrupt if it is not a valid expense list."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageCorrupt(f"invalid JSON: {exc.msg}") from exc
        if not isinstance(data, list):
            raise StorageCorrupt(f"expected a JSON array, got {type(data).__name__}")
        expenses = []
        for idx, item in enumerate(data):
            try:
                expenses.append(Expense.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                raise StorageCorrupt(f"record {idx} is malformed: {exc}") from exc
        return expenses

    def _quarantine(self, raw: str) -> bool:
        # a failure here must not block startup with an empty ledger
        try:
            self.store.set(self.quarantine_key, raw)
        except Exception:
            logger.exception("Could not quarantine corrupt payload under %r", self.quarantine_key)
            return False
        logger.warning("Corrupt payload kept under key %r", self.quarantine_key)
        return True
