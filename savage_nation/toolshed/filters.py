"""
Toolshed filtering and sorting.

``filter_resources(resources, state)`` is a pure function of its inputs:
the same list and state always give the same result, and filtering an
already filtered list changes nothing. Resources may be model instances or
plain dicts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Tuple

ALL = "all"

SORT_FEATURED = "featured"
SORT_POPULAR = "popular"
SORT_TITLE = "title"
SORT_RECENT = "recent"
SORT_CHOICES = [
    (SORT_FEATURED, "Featured"),
    (SORT_POPULAR, "Most popular"),
    (SORT_TITLE, "Title (A-Z)"),
    (SORT_RECENT, "Most recent"),
]

VIEW_MODES = ("grid", "list")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _field(resource, name, default=None):
    if isinstance(resource, dict):
        return resource.get(name, default)
    return getattr(resource, name, default)


def _tags(resource) -> List[str]:
    return list(_field(resource, "tags") or [])


@dataclass(frozen=True)
class ResourceFilterState:
    query: str = ""
    category: str = ALL
    type: str = ALL
    tags: Tuple[str, ...] = ()
    sort: str = SORT_FEATURED
    view: str = "grid"

    @classmethod
    def from_query(cls, params) -> "ResourceFilterState":
        """Build from request.GET; unknown sort keys and view modes fall back to defaults."""
        sort = params.get("sort") or SORT_FEATURED
        if sort not in dict(SORT_CHOICES):
            sort = SORT_FEATURED
        view = params.get("view") or "grid"
        if view not in VIEW_MODES:
            view = "grid"
        if hasattr(params, "getlist"):
            raw_tags = params.getlist("tag")
        else:
            raw_tags = params.get("tag") or []
            if isinstance(raw_tags, str):
                raw_tags = [raw_tags]
        tags = tuple(dict.fromkeys(t.strip() for t in raw_tags if t and t.strip()))
        return cls(
            query=(params.get("q") or "").strip(),
            category=params.get("category") or ALL,
            type=params.get("type") or ALL,
            tags=tags,
            sort=sort,
            view=view,
        )

    @property
    def has_active_filters(self) -> bool:
        return bool(self.query or self.tags or self.category != ALL or self.type != ALL)


def matches(resource, state: ResourceFilterState) -> bool:
    if state.query:
        needle = state.query.casefold()
        haystack = [
            _field(resource, "title") or "",
            _field(resource, "description") or "",
            *_tags(resource),
        ]
        if not any(needle in str(text).casefold() for text in haystack):
            return False

    if state.category != ALL and _field(resource, "category") != state.category:
        return False

    if state.type != ALL and _field(resource, "type") != state.type:
        return False

    if state.tags:
        present = set(_tags(resource))
        if not all(tag in present for tag in state.tags):
            return False

    return True


def sort_resources(resources: Iterable, sort: str) -> list:
    items = list(resources)
    if sort == SORT_POPULAR:
        return sorted(items, key=lambda r: -(_field(r, "download_count") or 0))
    if sort == SORT_TITLE:
        return sorted(items, key=lambda r: (_field(r, "title") or "").casefold())
    if sort == SORT_RECENT:
        return sorted(items, key=lambda r: _field(r, "created_at") or _EPOCH, reverse=True)
    if sort == SORT_FEATURED:
        return sorted(
            items,
            key=lambda r: (not _field(r, "featured", False), -(_field(r, "download_count") or 0)),
        )
    return items


def filter_resources(resources: Iterable, state: ResourceFilterState) -> list:
    return sort_resources((r for r in resources if matches(r, state)), state.sort)


def available_tags(resources: Iterable) -> List[str]:
    return sorted({tag for r in resources for tag in _tags(r)}, key=str.casefold)


def available_categories(resources: Iterable) -> List[str]:
    return sorted({_field(r, "category") for r in resources if _field(r, "category")}, key=str.casefold)
