import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .context import NOT_CONFIGURED
from .forms import AuthForm
from .middleware import get_auth_context

logger = logging.getLogger(__name__)

MODES = ("signin", "signup")


def _safe_next(request):
    nxt = request.POST.get("next") or request.GET.get("next") or ""
    if nxt and url_has_allowed_host_and_scheme(nxt, allowed_hosts={request.get_host()}):
        return nxt
    return None


def auth_page(request):
    """
    Sign in / sign up on one page. ``?mode=signup`` switches forms.
    Signed-in visitors are sent home; with auth disabled the page only
    explains that accounts are not configured.
    """
    auth = get_auth_context(request)
    snapshot = auth.snapshot
    mode = request.POST.get("mode") or request.GET.get("mode") or "signin"
    if mode not in MODES:
        mode = "signin"

    if snapshot.is_authenticated:
        return redirect(_safe_next(request) or "main:home")

    form = AuthForm(request.POST or None)
    if request.method == "POST" and snapshot.enabled:
        if form.is_valid():
            email = form.cleaned_data["email"]
            password = form.cleaned_data["password"]
            if mode == "signup":
                error = auth.sign_up(email, password)
            else:
                error = auth.sign_in(email, password)

            if error:
                messages.error(request, error)
            else:
                messages.success(request, "Welcome back!" if mode == "signin" else "Account created.")
                return redirect(_safe_next(request) or "main:home")
        else:
            messages.error(request, "Please correct the errors below.")

    return render(request, "accounts/auth.html", {
        "form": form,
        "mode": mode,
        "auth_disabled": not snapshot.enabled,
        "not_configured_message": NOT_CONFIGURED,
        "next": _safe_next(request) or "",
    })


@require_POST
def sign_out(request):
    get_auth_context(request).sign_out()
    messages.info(request, "You have been signed out.")
    return redirect("main:home")
