"""
Local key/value storage for client state.

``CartPersistence`` writes a versioned blob under a versioned key. Loading is
the first half of rehydration: it either yields cart entries or nothing at all.
It never raises; an unreadable, foreign or older blob reads as an empty cart.
Validating and repairing the entries is the cart store's job.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from .cart import CartItem

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "bookstore-cart-v1.1"
CART_STORAGE_VERSION = 1


class KeyValueStorage(ABC):
    """Minimal string key/value store"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage(KeyValueStorage):
    """Process-local storage"""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class JSONFileStorage(KeyValueStorage):
    """
    Storage backed by a single JSON object on disk.

    Several sessions may share one file. Each write replaces the whole file,
    so concurrent writers converge on whichever wrote last.
    """

    def __init__(self, path: Union[str, os.PathLike]):
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)


class CartPersistence:
    """Serializes cart contents; derived totals are never written"""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = CART_STORAGE_KEY,
        version: int = CART_STORAGE_VERSION,
    ):
        self.storage = storage
        self.key = key
        self.version = version

    def save(self, items: list[CartItem]) -> bool:
        """Best-effort write. Returns False when storage rejected the write."""
        payload = {
            "state": {
                "items": [item.to_dict() for item in items if item.book_id],
            },
            "version": self.version,
        }
        try:
            self.storage.set_item(self.key, json.dumps(payload))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to persist cart under {self.key}: {e}")
            return False
        return True

    def load(self) -> list[CartItem]:
        """Deserialize the stored cart, or return an empty list"""
        try:
            raw = self.storage.get_item(self.key)
        except OSError as e:
            logger.warning(f"Cart storage unavailable: {e}")
            return []

        if raw is None:
            return []

        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding unreadable cart blob under {self.key}")
            return []

        if not isinstance(payload, dict) or payload.get("version") != self.version:
            logger.warning(f"Discarding cart blob with incompatible version under {self.key}")
            return []

        state = payload.get("state")
        entries = state.get("items") if isinstance(state, dict) else None
        if not isinstance(entries, list):
            return []

        return [self._entry_to_item(entry) for entry in entries]

    def clear(self) -> None:
        """Drop the stored cart"""
        try:
            self.storage.remove_item(self.key)
        except OSError as e:
            logger.error(f"Failed to remove cart under {self.key}: {e}")

    @staticmethod
    def _entry_to_item(entry: Any) -> CartItem:
        # Malformed entries are kept as unresolvable items so cleanup can drop them
        if not isinstance(entry, dict):
            return CartItem(book=None, quantity=0)
        return CartItem(book=entry.get("book"), quantity=entry.get("quantity", 0))
