from django import template

from savage_nation.core.crud_table import list_state
from savage_nation.core.utils.formatting import format_currency, format_date, format_datetime

register = template.Library()


@register.inclusion_tag("core/crud_table.html", takes_context=True)
def crud_table(context, title, headers, items, row_template, is_loading=False, is_error=False,
               empty_message="No data found.", toolbar_template=None):
    """
    Render a manager list: loading skeleton, error alert, empty state or a
    table with one ``row_template`` include per item (bound as ``item``).
    """
    return {
        "request": context.get("request"),
        "csrf_token": context.get("csrf_token"),
        "title": title,
        "headers": headers,
        "items": items or [],
        "row_template": row_template,
        "toolbar_template": toolbar_template,
        "empty_message": empty_message,
        "state": list_state(is_loading, is_error, items).value,
        "skeleton_rows": range(3),
        "manager": context.get("manager"),
        "bypass_query": context.get("bypass_query", ""),
    }


@register.filter
def currency(value, code="USD"):
    return format_currency(value, code)


@register.filter
def short_date(value):
    return format_date(value)


@register.filter
def short_datetime(value):
    return format_datetime(value)


