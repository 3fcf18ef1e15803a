"""Opaque keyed cache shared by the providers of one session."""

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, TypeVar, runtime_checkable

from cachetools import LRUCache

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    created_at: float
    ttl: Optional[float] = None  # seconds; None never expires

    def is_fresh(self, now: Optional[float] = None) -> bool:
        if self.ttl is None:
            return True
        current = time.monotonic() if now is None else now
        return (current - self.created_at) < self.ttl


@runtime_checkable
class CacheStore(Protocol):
    """Minimal key/value contract. Entries may disappear at any time."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None: ...

    def has(self, key: str) -> bool: ...

    def delete(self, key: str) -> None: ...


class LRUCacheStore:
    """``cachetools.LRUCache`` holding ``CacheEntry`` objects with per-entry TTL."""

    def __init__(self, maxsize: int = 1000, default_ttl: Optional[float] = None) -> None:
        self.default_ttl = default_ttl
        self._cache: LRUCache[str, CacheEntry] = LRUCache(maxsize=maxsize)

    def get(self, key: str) -> Optional[Any]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if not entry.is_fresh():
            self._cache.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        self._cache[key] = CacheEntry(
            value=value,
            created_at=time.monotonic(),
            ttl=self.default_ttl if ttl is None else ttl,
        )

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)

    def __len__(self) -> int:
        return len(self._cache)


class NamespacedCache:
    """View over a shared store that prefixes every key with a namespace."""

    def __init__(self, store: CacheStore, namespace: str) -> None:
        if not namespace:
            raise ValueError("Cache namespace cannot be empty")
        if ":" in namespace:
            raise ValueError(f"Cache namespace cannot contain ':', got '{namespace}'")
        self.store = store
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[Any]:
        return self.store.get(self._key(key))

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        self.store.set(self._key(key), value, ttl)

    def has(self, key: str) -> bool:
        return self.store.has(self._key(key))

    def delete(self, key: str) -> None:
        self.store.delete(self._key(key))


async def cached(
    cache: CacheStore,
    key: str,
    fetch: Callable[[], Awaitable[T]],
    ttl: Optional[float] = None,
) -> T:
    """Return the cached value for ``key`` or await ``fetch`` and store it.

    Concurrent misses may fetch redundantly; the last write wins.
    """
    hit = cache.get(key)
    if hit is not None:
        return hit
    value = await fetch()
    cache.set(key, value, ttl)
    return value
