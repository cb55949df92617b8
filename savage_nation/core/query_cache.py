"""
Query cache: the last fetched list per cache key.

Keys are tuples such as ``("products",)`` or ``("page", "about")``. Entries
live in Django's cache framework so every worker sharing a cache backend sees
the same lists. Each key also carries a generation counter; ``cancel`` bumps
it and any fetch that started under an older generation drops its result
instead of writing it, which keeps a slow refetch from clobbering an
optimistic write.

Staleness is tracked per prefix: ``invalidate(("blogs",))`` atomically bumps
the epoch of ``("blogs",)`` and every entry written under an older epoch of
any of its prefixes reads as stale. No worker ever has to list the keys
another worker stored.

Usage:
    from savage_nation.core.query_cache import query_cache
    products = query_cache.fetch(("products",), lambda: get_table("products").select())
    query_cache.invalidate(("products",))
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Dict, Hashable, NamedTuple, Optional, Tuple

from django.conf import settings
from django.core.cache import caches
from django.db import transaction

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]
Fetcher = Callable[[], Any]

NAMESPACE_KEY = "query:__namespace__"


def normalize_key(key) -> QueryKey:
    if isinstance(key, (list, tuple)):
        return tuple(key)
    return (key,)


def _prefixes(key: QueryKey):
    return [key[:i] for i in range(1, len(key) + 1)]


class QueryResult(NamedTuple):
    data: Any
    error: Optional[BaseException] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_loading(self) -> bool:
        return self.data is None and self.error is None


class QueryCache:
    def __init__(self, alias: str | None = None, timeout: int | None = None):
        self._alias = alias
        self._timeout = timeout
        # Fetchers are callables, so they stay in-process; the data does not.
        self._fetchers: Dict[QueryKey, Fetcher] = {}

    @property
    def backend(self):
        return caches[self._alias or getattr(settings, "QUERY_CACHE_ALIAS", "default")]

    @property
    def timeout(self) -> int:
        if self._timeout is not None:
            return self._timeout
        return getattr(settings, "QUERY_CACHE_TIMEOUT", 300)

    # ------------------------------------------------------------------
    # bookkeeping
    # ------------------------------------------------------------------
    def _bump(self, counter_key: str) -> None:
        self.backend.add(counter_key, 0, None)
        try:
            self.backend.incr(counter_key)
        except ValueError:
            # evicted between add() and incr()
            self.backend.set(counter_key, 1, None)

    def _namespaced(self, key: QueryKey, suffix: str = "") -> str:
        namespace = self.backend.get(NAMESPACE_KEY, 0)
        return f"query:{namespace}:" + ":".join(str(part) for part in key) + suffix

    def _storage_key(self, key: QueryKey) -> str:
        return self._namespaced(key)

    def _generation_key(self, key: QueryKey) -> str:
        return self._namespaced(key, ":gen")

    def _epoch_key(self, prefix: QueryKey) -> str:
        return self._namespaced(prefix, ":epoch")

    def _epochs(self, key: QueryKey) -> tuple:
        epoch_keys = [self._epoch_key(prefix) for prefix in _prefixes(key)]
        found = self.backend.get_many(epoch_keys)
        return tuple(found.get(epoch_key, 0) for epoch_key in epoch_keys)

    def _entry(self, key: QueryKey):
        """Stored entry plus whether an invalidation has reached it since it was written."""
        entry = self.backend.get(self._storage_key(key))
        if entry is None:
            return None, True
        return entry, entry["epochs"] != self._epochs(key)

    def generation(self, key) -> int:
        return self.backend.get(self._generation_key(normalize_key(key)), 0)

    def _write(self, key: QueryKey, data, epochs: tuple | None = None) -> None:
        if epochs is None:
            epochs = self._epochs(key)
        self.backend.set(self._storage_key(key), {"data": data, "epochs": epochs}, self.timeout)

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def register(self, key, fetcher: Fetcher) -> None:
        self._fetchers[normalize_key(key)] = fetcher

    def get_data(self, key):
        entry, _stale = self._entry(normalize_key(key))
        return None if entry is None else entry["data"]

    def set_data(self, key, data) -> None:
        self._write(normalize_key(key), data)

    def is_stale(self, key) -> bool:
        _entry, stale = self._entry(normalize_key(key))
        return stale

    def cancel(self, key) -> None:
        """Drop the result of every fetch of ``key`` that is already running."""
        self._bump(self._generation_key(normalize_key(key)))

    def fetch(self, key, fetcher: Fetcher | None = None):
        """
        Return fresh cached data for ``key`` or run the fetcher and store its
        result. Errors from the fetcher propagate and leave the entry as is.
        """
        key = normalize_key(key)
        if fetcher is not None:
            self._fetchers[key] = fetcher
        else:
            fetcher = self._fetchers.get(key)
            if fetcher is None:
                raise KeyError(f"No fetcher registered for query {key!r}")

        entry, stale = self._entry(key)
        if entry is not None and not stale:
            return entry["data"]

        started_at = self.generation(key)
        epochs = self._epochs(key)
        data = fetcher()
        if self.generation(key) != started_at:
            logger.debug("Discarding result for query %s: cancelled while in flight", key)
            return data
        # an invalidation during the fetch leaves the result stale
        self._write(key, data, epochs)
        return data

    def query(self, key, fetcher: Fetcher | None = None) -> QueryResult:
        """``fetch`` wrapped for views: errors are returned, not raised."""
        from savage_nation.core.exceptions import GatewayError

        try:
            return QueryResult(self.fetch(key, fetcher))
        except GatewayError as exc:
            logger.warning("Query %s failed: %s", normalize_key(key), exc)
            return QueryResult(None, exc)

    def invalidate(self, key, *, refetch: bool = True) -> list:
        """
        Mark ``key`` and every key it prefixes as stale. Stale data keeps being
        served until a background refetch, scheduled after the current
        transaction commits, replaces it. Only keys with a fetcher registered
        in this process are refetched and returned; the rest go stale and
        refetch on their next read.
        """
        prefix = normalize_key(key)
        self._bump(self._epoch_key(prefix))

        matched = [k for k in self._fetchers if k[: len(prefix)] == prefix]
        if prefix not in matched:
            matched.append(prefix)
        if refetch:
            for k in matched:
                if k in self._fetchers:
                    transaction.on_commit(partial(self._background_refetch, k))
        return matched

    def _background_refetch(self, key: QueryKey) -> None:
        try:
            self.fetch(key)
        except Exception as exc:
            # Fire-and-forget: the stale entry stays until the next read.
            logger.warning("Background refetch of %s failed: %s", key, exc, exc_info=True)

    def clear(self) -> None:
        """Forget every entry, generation and epoch by moving to a new namespace."""
        self._bump(NAMESPACE_KEY)
        self._fetchers.clear()


query_cache = QueryCache()
