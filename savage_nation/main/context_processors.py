# main/context_processors.py
# ------------------------------------------------------------
# Navigation and footer share one list so they never drift.
# ------------------------------------------------------------
from django.conf import settings
from django.urls import reverse

NAV_ITEMS = [
    ("store:index", "Store"),
    ("main:videos", "Videos"),
    ("main:about", "About"),
    ("main:contact", "Contact"),
    ("main:gallery", "Gallery"),
    ("main:faq", "FAQ"),
    ("main:story", "Story"),
    ("main:charities", "Charities"),
    ("main:mission", "Mission"),
    ("toolshed:index", "Toolshed"),
    ("blog:weekly", "Weekly Blog"),
]


def nav_items(current_path=""):
    items = []
    for url_name, label in NAV_ITEMS:
        url = reverse(url_name)
        items.append({
            "url": url,
            "label": label,
            "active": bool(current_path) and current_path.startswith(url),
        })
    return items


def site_navigation(request):
    return {
        "NAV_ITEMS": nav_items(getattr(request, "path", "")),
        "COMPANY_LEGAL_NAME": getattr(settings, "COMPANY_LEGAL_NAME", "Savage Nation USA"),
    }
