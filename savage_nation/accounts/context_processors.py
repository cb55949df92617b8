def auth_state(request):
    """
    Expose the current auth snapshot to templates as ``auth``.
    Falls back to a disabled-looking empty dict outside the middleware.
    """
    auth = getattr(request, "auth", None)
    if auth is None:
        return {}
    return {"auth": auth.snapshot}
