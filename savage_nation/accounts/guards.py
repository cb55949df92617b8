"""
Route guards.

    @protected_route
    def account(request): ...

    @protected_route(require_admin=True)
    def dashboard(request): ...

Resolution order: bypass flag, auth disabled, session still loading,
signed out, not an admin. Redirect targets are fixed routes.
"""

from __future__ import annotations

import logging
from functools import wraps

from django.conf import settings
from django.http import HttpResponse
from django.shortcuts import redirect
from django.utils.decorators import method_decorator

from .middleware import get_auth_context

logger = logging.getLogger(__name__)

BYPASS_PARAM = "bypass_auth"
AUTH_ROUTE = "accounts:auth"
FALLBACK_ROUTE = "main:home"


def bypass_requested(request) -> bool:
    return request.GET.get(BYPASS_PARAM) == "true"


def protected_route(view_func=None, *, require_admin: bool = False):
    def decorator(func):
        @wraps(func)
        def _wrapped(request, *args, **kwargs):
            if bypass_requested(request):
                if getattr(settings, "AUTH_BYPASS_ENABLED", False):
                    logger.warning("Auth bypass used for %s", request.path)
                    return func(request, *args, **kwargs)
                logger.warning("Ignoring %s on %s: bypass is disabled", BYPASS_PARAM, request.path)

            snapshot = get_auth_context(request).snapshot
            if not snapshot.enabled:
                return redirect(AUTH_ROUTE)
            if snapshot.loading:
                # Nothing to show until the session resolves
                return HttpResponse(status=204)
            if not snapshot.is_authenticated:
                return redirect(AUTH_ROUTE)
            if require_admin and not snapshot.is_admin:
                logger.info("Non-admin %s refused at %s", snapshot.user, request.path)
                return redirect(FALLBACK_ROUTE)
            return func(request, *args, **kwargs)

        return _wrapped

    if view_func is not None:
        return decorator(view_func)
    return decorator


class AdminRequiredMixin:
    """Class-based view counterpart of ``protected_route(require_admin=True)``."""

    @method_decorator(protected_route(require_admin=True))
    def dispatch(self, request, *args, **kwargs):
        return super().dispatch(request, *args, **kwargs)
