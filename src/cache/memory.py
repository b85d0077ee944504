"""Ephemeral in-process cache scoped to a single processing run."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MemCache(Generic[T]):
    """Run-scoped cache keyed by package name.

    Values are deep-copied on the way in and on the way out, so callers never
    observe each other's mutations. Entries never expire; call ``reset`` at
    run boundaries.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, T] = {}

    def get(self, key: str) -> Optional[T]:
        value = self._entries.get(key)
        if value is None:
            return None
        return copy.deepcopy(value)

    def set(self, key: str, value: T) -> None:
        self._entries[key] = copy.deepcopy(value)

    def reset(self) -> None:
        logger.debug("Resetting run cache (%d entries)", len(self._entries))
        self._entries.clear()

    def __contains__(self, key: Any) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
