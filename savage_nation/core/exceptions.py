"""
Error taxonomy for remote table access.

Views catch ``GatewayError`` and surface it as a user-facing message; nothing
here is fatal to the process.
"""


class GatewayError(Exception):
    """A select/insert/update/delete against a remote collection failed."""

    def __init__(self, message, *, table=None):
        super().__init__(message)
        self.table = table


class RecordNotFound(GatewayError):
    """update/delete addressed an id that does not exist."""


class UnknownTableError(GatewayError):
    pass


class RecordDecodeError(GatewayError):
    """
    A payload failed validation at the boundary.

    ``errors`` maps field names to lists of messages, the same shape as
    ``form.errors.get_json_data()`` flattened to strings. ``form`` is the bound
    form that rejected the payload, when there was one.
    """

    def __init__(self, table, errors, form=None):
        self.errors = dict(errors)
        self.form = form
        fields = ", ".join(sorted(self.errors)) or "payload"
        super().__init__(f"Invalid {table} record ({fields})", table=table)
