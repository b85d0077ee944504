"""Persistent, namespaced TTL caches for registry lookups.

``PackageCache`` is the interface the registry clients depend on:
``get(namespace, key)`` and ``set(namespace, key, value, ttl_minutes)``.
Values must be JSON-serializable mappings/lists.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, Protocol, Tuple, TypeVar

from common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A single cache entry with TTL."""

    value: T
    expires_at: float
    created_at: float = field(default_factory=time.time)

    def is_expired(self) -> bool:
        """Check if this entry has expired."""
        return time.time() > self.expires_at


class PackageCache(Protocol):
    """Persistent cache collaborator used by the registry clients."""

    def get(self, namespace: str, key: str) -> Optional[Any]:
        ...

    def set(self, namespace: str, key: str, value: Any, ttl_minutes: int) -> None:
        ...


class MemoryPackageCache:
    """In-process TTL cache implementing the PackageCache interface.

    Useful for long-lived processes and tests; entries survive ``MemCache``
    resets but not the process.
    """

    def __init__(self, max_entries: int = 10000):
        self._cache: Dict[Tuple[str, str], CacheEntry[Any]] = {}
        self._max_entries = max_entries

    def get(self, namespace: str, key: str) -> Optional[Any]:
        entry = self._cache.get((namespace, key))
        if entry is None:
            return None
        if entry.is_expired():
            del self._cache[(namespace, key)]
            return None
        return copy.deepcopy(entry.value)

    def set(self, namespace: str, key: str, value: Any, ttl_minutes: int) -> None:
        expires_at = time.time() + ttl_minutes * 60
        self._cache[(namespace, key)] = CacheEntry(value=copy.deepcopy(value), expires_at=expires_at)
        if len(self._cache) > self._max_entries:
            self._evict_oldest(self._max_entries // 10 or 1)

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        expired_count = sum(1 for e in self._cache.values() if e.is_expired())
        return {
            "total_entries": len(self._cache),
            "expired_entries": expired_count,
            "active_entries": len(self._cache) - expired_count,
            "max_entries": self._max_entries,
        }

    def _evict_oldest(self, count: int) -> None:
        """Evict the oldest entries."""
        sorted_keys = sorted(self._cache.keys(), key=lambda k: self._cache[k].created_at)
        for key in sorted_keys[:count]:
            del self._cache[key]


class FilePackageCache:
    """File-backed TTL cache shared across runs and processes.

    Layout: ``<base_dir>/<namespace>/<sha256(key)>.json`` holding
    ``{"key", "expiresAt", "value"}``. Writes go through a temp file and
    ``os.replace`` so concurrent readers only ever see complete entries.
    """

    def __init__(self, base_dir: str):
        self._base_dir = base_dir

    def _path(self, namespace: str, key: str) -> str:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return os.path.join(self._base_dir, namespace, f"{digest}.json")

    def get(self, namespace: str, key: str) -> Optional[Any]:
        path = self._path(namespace, key)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                record = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", path, exc)
            return None

        if not isinstance(record, dict) or record.get("key") != key:
            return None
        try:
            expires_at = float(record.get("expiresAt", 0))
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring cache entry %s with invalid expiry: %s", path, exc)
            return None
        if time.time() > expires_at:
            if is_debug_enabled(logger):
                logger.debug(
                    "Cache entry expired",
                    extra=extra_context(event="cache_expired", component="package_cache", namespace=namespace),
                )
            try:
                os.remove(path)
            except OSError:
                pass
            return None
        return record.get("value")

    def set(self, namespace: str, key: str, value: Any, ttl_minutes: int) -> None:
        path = self._path(namespace, key)
        directory = os.path.dirname(path)
        os.makedirs(directory, exist_ok=True)
        record = {"key": key, "expiresAt": time.time() + ttl_minutes * 60, "value": value}
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(record, fh)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
