from __future__ import annotations

from typing import Callable

from django.http import HttpRequest, HttpResponse
from django.utils.functional import SimpleLazyObject

from .context import AuthContext


class AuthContextMiddleware:
    """
    Attach ``request.auth`` (built on first access) and tear it down once the
    response is produced. Must run after AuthenticationMiddleware.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        built = []

        def _build():
            ctx = AuthContext(request)
            built.append(ctx)
            return ctx

        request.auth = SimpleLazyObject(_build)
        try:
            return self.get_response(request)
        finally:
            for ctx in built:
                ctx.close()


def get_auth_context(request) -> AuthContext:
    auth = getattr(request, "auth", None)
    if auth is None:
        auth = AuthContext(request)
        request.auth = auth
    return auth
