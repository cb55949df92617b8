"""
Remote table gateway.

Every read and write against a collection (products, blogs, videos, pages,
faqs, toolshed_resources, gallery_images, user_roles) goes through a
``TableGateway`` looked up by name. Payloads are validated by the entity's
form before they reach the database, and database failures come back as
``GatewayError`` so callers only have one thing to catch.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Mapping, Optional

from django.apps import apps
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils.module_loading import import_string

from .exceptions import GatewayError, RecordDecodeError, RecordNotFound, UnknownTableError

logger = logging.getLogger(__name__)

# collection name -> (model label, validating form)
DEFAULT_TABLES = {
    "products": ("store.Product", "savage_nation.store.forms.ProductForm"),
    "blogs": ("blog.Blog", "savage_nation.blog.forms.BlogForm"),
    "videos": ("main.Video", "savage_nation.main.forms.VideoForm"),
    "pages": ("main.Page", "savage_nation.main.forms.PageForm"),
    "faqs": ("main.Faq", "savage_nation.main.forms.FaqForm"),
    "gallery_images": ("main.GalleryImage", "savage_nation.main.forms.GalleryImageForm"),
    "toolshed_resources": ("toolshed.ToolshedResource", "savage_nation.toolshed.forms.ToolshedResourceForm"),
    "user_roles": ("accounts.UserRole", None),
}


def _flatten_errors(errors) -> Dict[str, list]:
    return {field: [str(message) for message in messages] for field, messages in errors.items()}


class TableGateway:
    def __init__(self, name: str, model, form_class=None):
        self.name = name
        self.model = model
        self.form_class = form_class

    def __repr__(self) -> str:
        return f"<TableGateway {self.name}>"

    @property
    def objects(self):
        return self.model._default_manager

    @contextmanager
    def _remote(self, action: str):
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            logger.error("%s on %s failed: %s", action, self.name, exc)
            raise GatewayError(f"Could not {action} {self.name}: {exc}", table=self.name) from exc

    def _get(self, pk):
        try:
            instance = self.objects.filter(pk=pk).first()
        except (TypeError, ValueError):
            instance = None
        if instance is None:
            raise RecordNotFound(f"No {self.name} row with id {pk}", table=self.name)
        return instance

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def select(self, filters: Optional[Mapping[str, Any]] = None, order_by: Iterable[str] = ()) -> list:
        with self._remote("select"):
            qs = self.objects.filter(**dict(filters or {}))
            if order_by:
                qs = qs.order_by(*order_by)
            return list(qs)

    def select_single(self, **filters):
        """One row or ``None``; no row is a valid empty result, two rows are an error."""
        with self._remote("select"):
            try:
                rows = list(self.objects.filter(**filters)[:2])
            except (TypeError, ValueError):
                # e.g. a non-numeric id from a query string
                rows = []
        if not rows:
            return None
        if len(rows) > 1:
            raise GatewayError(f"Expected one {self.name} row for {filters}, found several", table=self.name)
        return rows[0]

    # ------------------------------------------------------------------
    # decoding
    # ------------------------------------------------------------------
    def decode(self, payload, instance=None, partial=False):
        """
        Validate a payload for insert/update. Returns a bound, valid form (or
        an unsaved model instance for tables without a form). With
        ``partial`` the stored values fill in every field the payload omits.
        """
        if hasattr(payload, "dict"):
            payload = payload.dict()
        payload = dict(payload or {})

        if self.form_class is None:
            obj = instance or self.model()
            for field, value in payload.items():
                setattr(obj, field, value)
            try:
                obj.full_clean()
            except ValidationError as exc:
                raise RecordDecodeError(self.name, exc.message_dict) from exc
            return obj

        if instance is not None and partial:
            current = self.form_class(instance=instance)
            merged = {name: current.initial.get(name) for name in current.fields}
            merged.update(payload)
            payload = merged

        form = self.form_class(data=payload, instance=instance)
        if not form.is_valid():
            raise RecordDecodeError(self.name, _flatten_errors(form.errors), form=form)
        return form

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def insert(self, payload):
        decoded = self.decode(payload)
        with self._remote("insert"):
            record = decoded.save()
        logger.info("Inserted %s id=%s", self.name, record.pk)
        return record

    def update(self, pk, payload, partial=True):
        instance = self._get(pk)
        decoded = self.decode(payload, instance=instance, partial=partial)
        with self._remote("update"):
            record = decoded.save()
        logger.info("Updated %s id=%s", self.name, record.pk)
        return record

    def delete(self, pk) -> None:
        with self._remote("delete"):
            try:
                deleted, _ = self.objects.filter(pk=pk).delete()
            except (TypeError, ValueError):
                deleted = 0
        if not deleted:
            raise RecordNotFound(f"No {self.name} row with id {pk}", table=self.name)
        logger.info("Deleted %s id=%s", self.name, pk)

    def increment(self, pk, field: str, by: int = 1) -> None:
        """Atomic counter bump (``field = field + by``) without a read first."""
        with self._remote("update"):
            try:
                updated = self.objects.filter(pk=pk).update(**{field: F(field) + by})
            except (TypeError, ValueError):
                updated = 0
        if not updated:
            raise RecordNotFound(f"No {self.name} row with id {pk}", table=self.name)


_gateways: Dict[str, TableGateway] = {}


def registered_tables() -> dict:
    return getattr(settings, "REMOTE_TABLES", DEFAULT_TABLES)


def get_table(name: str) -> TableGateway:
    if name in _gateways:
        return _gateways[name]

    spec = registered_tables().get(name)
    if spec is None:
        raise UnknownTableError(f"Unknown collection {name!r}", table=name)
    model_label, form_path = spec
    gateway = TableGateway(
        name,
        apps.get_model(model_label),
        import_string(form_path) if form_path else None,
    )
    _gateways[name] = gateway
    return gateway
