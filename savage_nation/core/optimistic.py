"""
Optimistic delete: drop the row from the cached list first, ask the database
second, and put the list back exactly as it was if the database says no.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .query_cache import QueryCache, normalize_key, query_cache as default_cache

logger = logging.getLogger(__name__)


def item_id(item: Any):
    if isinstance(item, dict):
        return item.get("id")
    return getattr(item, "pk", getattr(item, "id", None))


class OptimisticDelete:
    """
    ``OptimisticDelete(("products",), get_table("products").delete)(pk)``

    Any exception from ``delete_fn`` is re-raised after the rollback so the
    caller can report it. The key is invalidated whatever the outcome.
    """

    def __init__(self, query_key, delete_fn: Callable[[Any], Any], cache: QueryCache | None = None):
        self.query_key = normalize_key(query_key)
        self.delete_fn = delete_fn
        self.cache = cache or default_cache

    def __call__(self, pk) -> None:
        self.delete(pk)

    def delete(self, pk) -> None:
        # A refetch landing after this point would overwrite the optimistic list.
        self.cache.cancel(self.query_key)
        previous = self.cache.get_data(self.query_key)
        if previous is not None:
            self.cache.set_data(
                self.query_key,
                [item for item in previous if str(item_id(item)) != str(pk)],
            )

        try:
            self.delete_fn(pk)
        except Exception:
            if previous is not None:
                self.cache.set_data(self.query_key, previous)
            logger.warning("Delete of id=%s under %s failed; cache rolled back", pk, self.query_key)
            raise
        finally:
            self.cache.invalidate(self.query_key)
