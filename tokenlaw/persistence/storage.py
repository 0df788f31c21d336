"""Key-value storage for rebalancer and registry records."""

import copy
import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import diskcache

from config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Guards lazy creation of each store's named lock table
_LOCK_TABLE_GUARD = threading.Lock()


class KeyValueStore(ABC):
    """
    Durable get/set by key, supplied by the host.

    Values are JSON-compatible (dicts, lists, strings, ints, None).
    `set_many` must commit every key or none of them.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value under key."""

    @abstractmethod
    def set_many(self, items: Mapping[str, Any]) -> None:
        """Store several values atomically."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """List stored keys starting with prefix, sorted."""

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def lock(self, name: str) -> threading.RLock:
        """
        Re-entrant lock for a group of records (e.g. one rebalancer namespace).

        Every caller asking this store object for the same name gets the
        same lock, so independent handles over one namespace serialize.
        """
        with _LOCK_TABLE_GUARD:
            locks = getattr(self, "_named_locks", None)
            if locks is None:
                locks = self._named_locks = {}
            if name not in locks:
                locks[name] = threading.RLock()
            return locks[name]


class MemoryStore(KeyValueStore):
    """
    In-process store.

    Values are deep-copied on the way in and out, so callers never hold a
    reference into persisted records.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def set_many(self, items: Mapping[str, Any]) -> None:
        staged = {k: copy.deepcopy(v) for k, v in items.items()}
        with self._lock:
            self._data.update(staged)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(k for k in self._data if k.startswith(prefix))

    def __len__(self) -> int:
        return len(self._data)


class DiskStore(KeyValueStore):
    """
    SQLite-backed store using diskcache.

    Records never expire. Values are stored as JSON text so the on-disk
    form stays human-readable and independent of pickle.
    """

    def __init__(self, directory: Optional[Path] = None, settings: Optional[Settings] = None):
        if directory is None:
            directory = (settings or get_settings()).ensure_storage_dir()
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._cache: Optional[diskcache.Cache] = None

    def _get_cache(self) -> diskcache.Cache:
        """Get or create the cache instance."""
        if self._cache is None:
            self._cache = diskcache.Cache(str(self.directory))
        return self._cache

    def get(self, key: str) -> Optional[Any]:
        raw = self._get_cache().get(key, default=None)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._get_cache().set(key, json.dumps(value))

    def set_many(self, items: Mapping[str, Any]) -> None:
        encoded = {k: json.dumps(v) for k, v in items.items()}
        cache = self._get_cache()
        with cache.transact():
            for key, raw in encoded.items():
                cache.set(key, raw)

    def delete(self, key: str) -> bool:
        return bool(self._get_cache().delete(key))

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._get_cache().iterkeys() if k.startswith(prefix))

    def close(self):
        """Close the cache connection."""
        if self._cache:
            self._cache.close()
            self._cache = None


class StorageKeys:
    """Standard storage key patterns."""

    @staticmethod
    def config(namespace: str) -> str:
        return f"{namespace}:config"

    @staticmethod
    def state(namespace: str) -> str:
        return f"{namespace}:state"

    @staticmethod
    def symbol(symbol: str) -> str:
        return f"symbol:{symbol}"

    @staticmethod
    def token_namespace(symbol: str) -> str:
        return f"token:{symbol}"


def create_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """Build the store selected by settings."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        logger.debug("Using in-memory store")
        return MemoryStore()
    directory = settings.ensure_storage_dir()
    logger.debug(f"Using disk store at {directory}")
    return DiskStore(directory)
