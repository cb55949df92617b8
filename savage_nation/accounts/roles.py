"""
Admin role resolution.

A user is an admin when the user_roles table says so. When that lookup fails
or finds nothing we fall back to the role data Django keeps on the user
record itself (superuser/staff flags, legacy admin groups), so accounts that
predate user_roles keep working.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import DatabaseError

from savage_nation.core.exceptions import GatewayError
from savage_nation.core.gateway import get_table

logger = logging.getLogger(__name__)


def legacy_is_admin(user) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "is_superuser", False) or getattr(user, "is_staff", False):
        return True
    group_names = getattr(settings, "LEGACY_ADMIN_GROUPS", ["admin", "Admins"])
    try:
        return user.groups.filter(name__in=group_names).exists()
    except DatabaseError as exc:
        logger.info("Group lookup failed for user %s: %s", user.pk, exc)
        return False


def has_admin_role(user) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False

    legacy = legacy_is_admin(user)
    try:
        row = get_table("user_roles").select_single(
            user_id=user.pk,
            role=getattr(settings, "ADMIN_ROLE", "admin"),
        )
    except GatewayError as exc:
        logger.info("user_roles lookup failed for user %s: %s", user.pk, exc)
        return legacy
    return row is not None or legacy
