"""On-device cache of the last known portfolio document.

The cache sits on a small key/value storage abstraction (the server-side
counterpart of a browser's localStorage): one text value per fixed key.
Reads fail closed and writes never raise; a broken cache only ever
degrades to the default document.
"""

from __future__ import annotations

import json
import re
from logging import getLogger
from pathlib import Path
from typing import Optional, Protocol, Union

from ..content.schema import PartialPortfolioDocument, PortfolioDocument, coerce_partial
from ..utils.errors import LocalCorruptError, LocalUnavailableError

logger = getLogger("FOLIO.LocalCache")

PORTFOLIO_CACHE_KEY = "portfolio_data"
# Reserved for the admin session flag; the cache never touches it.
AUTH_FLAG_KEY = "portfolio_auth_token"

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


def is_valid_key(key: str) -> bool:
    """Keys double as file names, so only ``[A-Za-z0-9_.-]`` is allowed."""
    return bool(key) and _SAFE_KEY.match(key) is not None


class KeyValueStorage(Protocol):
    """Minimal durable string storage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class FileKeyValueStorage:
    """Key/value storage with one UTF-8 file per key under ``root``."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not is_valid_key(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        temp_file = path.with_suffix(".tmp")
        try:
            temp_file.write_text(value, encoding="utf-8")
            # Atomic rename
            temp_file.replace(path)
        finally:
            if temp_file.exists():
                temp_file.unlink()

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


class MemoryKeyValueStorage:
    """Process-local storage, used when no cache directory is configured."""

    def __init__(self):
        self._items = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class LocalCacheStore:
    """Reads and writes the cached portfolio document under a fixed key."""

    def __init__(self, storage: Optional[KeyValueStorage], key: str = PORTFOLIO_CACHE_KEY):
        self.storage = storage
        self.key = key

    def _require_storage(self) -> KeyValueStorage:
        if self.storage is None:
            raise LocalUnavailableError("No local storage backend", context={"key": self.key})
        return self.storage

    def _access(self, method: str, *args: str) -> Optional[str]:
        """Call ``storage.<method>(key, *args)``; a rejected key means no usable storage."""
        storage = self._require_storage()
        try:
            return getattr(storage, method)(self.key, *args)
        except UnicodeDecodeError as e:
            raise LocalCorruptError(f"Cached value is not UTF-8: {e}", context={"key": self.key}) from e
        except ValueError as e:
            raise LocalUnavailableError(f"Storage rejected the cache key: {e}", context={"key": self.key}) from e

    def _parse(self, raw: str) -> PartialPortfolioDocument:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise LocalCorruptError(f"Cached value is not valid JSON: {e}", context={"key": self.key}) from e
        partial = coerce_partial(data)
        if partial is None:
            raise LocalCorruptError(
                f"Cached value is a {type(data).__name__}, expected an object",
                context={"key": self.key},
            )
        return partial

    def read(self) -> Optional[PartialPortfolioDocument]:
        """Return the cached document, or None when absent or unreadable."""
        try:
            raw = self._access("get_item")
            if raw is None:
                return None
            return self._parse(raw)
        except (LocalCorruptError, LocalUnavailableError, OSError) as e:
            logger.warning(f"Local cache read failed: {e}")
            return None

    def write(self, doc: PortfolioDocument) -> None:
        """Overwrite the cached document."""
        try:
            self._access("set_item", doc.to_json())
        except LocalUnavailableError as e:
            logger.warning(f"Local cache write skipped: {e}")
        except OSError as e:
            logger.error(f"Local cache write failed: {e}")

    def clear(self) -> None:
        try:
            self._access("remove_item")
        except LocalUnavailableError as e:
            logger.warning(f"Local cache clear skipped: {e}")
        except OSError as e:
            logger.error(f"Local cache clear failed: {e}")
