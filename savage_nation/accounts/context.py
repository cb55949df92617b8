"""
Per-request auth context.

``AuthContextMiddleware`` builds one ``AuthContext`` per request as
``request.auth``. The context holds an immutable ``AuthSnapshot`` and keeps it
current through an ``AuthEventStream``: sign-in, sign-out and role changes
publish a fresh snapshot, and every subscriber (the context itself included)
receives the current snapshot once on subscribe and then each change.
"""

from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.utils.text import slugify

from .roles import has_admin_role

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "Authentication is not configured"

Subscriber = Callable[["AuthSnapshot"], None]


@dataclass(frozen=True)
class AuthSnapshot:
    enabled: bool
    loading: bool = False
    user: Any = None
    session_key: Optional[str] = None
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user is not None and getattr(self.user, "is_authenticated", False))

    @classmethod
    def disabled(cls) -> "AuthSnapshot":
        return cls(enabled=False)

    @classmethod
    def pending(cls) -> "AuthSnapshot":
        return cls(enabled=True, loading=True)


def auth_enabled() -> bool:
    return bool(getattr(settings, "SITE_AUTH_ENABLED", True))


class AuthEventStream:
    """subscribe() returns the matching unsubscribe; the current state is delivered at once."""

    def __init__(self, initial: AuthSnapshot):
        self._state = initial
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    @property
    def current(self) -> AuthSnapshot:
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)
            state = self._state
        callback(state)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, state: AuthSnapshot) -> None:
        with self._lock:
            self._state = state
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(state)

    def close(self) -> None:
        with self._lock:
            self._subscribers.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


# Contexts still serving a request; role changes are pushed to these.
_live_contexts = weakref.WeakSet()
_live_lock = threading.Lock()


def live_contexts():
    with _live_lock:
        return list(_live_contexts)


def _unique_username_from_email(email: str) -> str:
    User = get_user_model()
    base = slugify((email or "").split("@")[0]) or "user"
    candidate = base
    n = 1
    while User.objects.filter(username=candidate).exists():
        n += 1
        candidate = f"{base}{n}"
    return candidate


class AuthContext:
    def __init__(self, request):
        self.request = request
        self.stream = AuthEventStream(self.resolve())
        self._snapshot = self.stream.current
        self._unsubscribe = self.stream.subscribe(self._on_change)
        self.closed = False
        with _live_lock:
            _live_contexts.add(self)

    def __repr__(self) -> str:
        return f"<AuthContext user={self._snapshot.user!r} admin={self._snapshot.is_admin}>"

    def _on_change(self, snapshot: AuthSnapshot) -> None:
        self._snapshot = snapshot

    @property
    def snapshot(self) -> AuthSnapshot:
        return self._snapshot

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self.stream.subscribe(callback)

    def resolve(self) -> AuthSnapshot:
        if not auth_enabled():
            return AuthSnapshot.disabled()
        if not hasattr(self.request, "user"):
            # AuthenticationMiddleware has not run for this request yet
            return AuthSnapshot.pending()

        user = self.request.user
        session = getattr(self.request, "session", None)
        session_key = getattr(session, "session_key", None)
        if not getattr(user, "is_authenticated", False):
            return AuthSnapshot(enabled=True, session_key=session_key)
        return AuthSnapshot(
            enabled=True,
            user=user,
            session_key=session_key,
            is_admin=has_admin_role(user),
        )

    def refresh(self) -> AuthSnapshot:
        self.stream.publish(self.resolve())
        return self._snapshot

    # ------------------------------------------------------------------
    # actions: each returns an error message or None
    # ------------------------------------------------------------------
    def sign_in(self, email: str, password: str) -> Optional[str]:
        if not auth_enabled():
            return NOT_CONFIGURED

        identifier = (email or "").strip()
        if not identifier or not password:
            return "Email and password are required."

        User = get_user_model()
        existing = User.objects.filter(Q(username__iexact=identifier) | Q(email__iexact=identifier)).first()
        username = existing.get_username() if existing else identifier

        user = authenticate(self.request, username=username, password=password)
        if user is None:
            return "Invalid login credentials"
        if not user.is_active:
            return "This account is inactive."
        login(self.request, user)
        return None

    def sign_up(self, email: str, password: str) -> Optional[str]:
        if not auth_enabled():
            return NOT_CONFIGURED

        email = (email or "").strip().lower()
        if not email or not password:
            return "Email and password are required."

        User = get_user_model()
        if User.objects.filter(email__iexact=email).exists():
            return "An account with this email already exists."

        candidate = User(username=_unique_username_from_email(email), email=email)
        try:
            validate_password(password, user=candidate)
        except ValidationError as exc:
            return " ".join(exc.messages)

        candidate.set_password(password)
        candidate.save()
        logger.info("Created account %s", candidate.get_username())
        login(self.request, candidate, backend="django.contrib.auth.backends.ModelBackend")
        return None

    def sign_out(self) -> None:
        if not auth_enabled():
            return
        logout(self.request)
        # logout() signals before it swaps request.user
        self.refresh()

    def close(self) -> None:
        if self.closed:
            return
        self._unsubscribe()
        self.stream.close()
        with _live_lock:
            _live_contexts.discard(self)
        self.closed = True
