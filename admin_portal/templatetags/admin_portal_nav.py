from django import template

from admin_portal.managers import MANAGERS
from savage_nation.main.pages import SITE_PAGES

register = template.Library()


@register.inclusion_tag("admin_portal/_nav.html", takes_context=True)
def admin_nav(context):
    return {
        "managers": MANAGERS,
        "pages": [(slug, title) for slug, (title, _description) in SITE_PAGES.items()],
        "active": context.get("active_section"),
        "bypass_query": context.get("bypass_query", ""),
    }
