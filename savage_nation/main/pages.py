"""
Singleton content pages. Each slug has a fallback title used when the
``pages`` row is missing, plus a short description for the page <title>.
"""

from savage_nation.core.gateway import get_table
from savage_nation.core.query_cache import query_cache

SITE_PAGES = {
    "about": ("About Us", "Learn about our story, mission, and values."),
    "contact": ("Contact Us", "Get in touch with the Savage Nation USA team."),
    "story": ("Our Story", "The origin and journey of Savage Nation USA."),
    "charities": ("Charities", "Veteran-focused charities we support and partner with."),
    "mission": ("Our Mission", "Our mission: honor service, unite communities, and give back."),
    "gallery": ("Gallery", "Explore our gallery of patriotic imagery and community moments."),
    "toolshed": ("The Toolshed", "Guides, downloads and tools for veterans and their families."),
}


def page_key(slug):
    return ("page", slug)


def fetch_page(slug):
    """The page row for ``slug`` or ``None`` when it has not been written yet."""
    return get_table("pages").select_single(slug=slug)


def load_page(slug):
    return query_cache.query(page_key(slug), lambda: fetch_page(slug))


def default_title(slug):
    return SITE_PAGES.get(slug, (slug.replace("-", " ").title(), ""))[0]
