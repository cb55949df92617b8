"""
Form/dialog controller for admin create/edit forms.

    closed --open()--> open --submit()--> submitting --succeed()--> closed
                                                     --fail()-----> open
"""

from __future__ import annotations

import enum
import logging

logger = logging.getLogger(__name__)


class DialogState(str, enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"


class InvalidTransition(Exception):
    pass


class DialogController:
    def __init__(self, entity: str):
        self.entity = entity
        self.state = DialogState.CLOSED
        self.instance = None
        self.errors: dict = {}

    def __repr__(self) -> str:
        return f"<DialogController {self.entity} {self.state.value}>"

    @property
    def is_open(self) -> bool:
        return self.state is not DialogState.CLOSED

    @property
    def is_editing(self) -> bool:
        return self.instance is not None

    @property
    def mode(self) -> str:
        return "edit" if self.is_editing else "create"

    def _require(self, *states: DialogState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidTransition(f"{self.entity} dialog is {self.state.value}; expected {allowed}")

    def open(self, instance=None) -> "DialogController":
        self._require(DialogState.CLOSED, DialogState.OPEN)
        self.instance = instance
        self.errors = {}
        self.state = DialogState.OPEN
        return self

    def submit(self) -> None:
        self._require(DialogState.OPEN)
        self.state = DialogState.SUBMITTING

    def succeed(self) -> None:
        self._require(DialogState.SUBMITTING)
        self.close()

    def fail(self, errors=None) -> None:
        self._require(DialogState.SUBMITTING)
        self.errors = dict(errors or {})
        self.state = DialogState.OPEN
        logger.debug("%s dialog submission failed: %s", self.entity, self.errors)

    def close(self) -> None:
        self.state = DialogState.CLOSED
        self.instance = None
        self.errors = {}
