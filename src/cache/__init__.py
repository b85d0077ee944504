"""Ephemeral (per run) and persistent caches for registry lookups."""

from .memory import MemCache
from .package_cache import CacheEntry, FilePackageCache, MemoryPackageCache, PackageCache

__all__ = [
    "MemCache",
    "CacheEntry",
    "PackageCache",
    "MemoryPackageCache",
    "FilePackageCache",
]
