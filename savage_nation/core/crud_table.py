"""Generic list renderer: which of the four list views a manager shows."""

import enum


class ListState(str, enum.Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    TABLE = "table"


def list_state(is_loading, is_error, items) -> ListState:
    if is_loading:
        return ListState.LOADING
    if is_error:
        return ListState.ERROR
    if not items:
        return ListState.EMPTY
    return ListState.TABLE
