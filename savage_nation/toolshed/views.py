import logging

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from savage_nation.core.exceptions import GatewayError
from savage_nation.core.gateway import get_table
from savage_nation.core.query_cache import query_cache
from savage_nation.main.pages import SITE_PAGES, load_page

from .filters import (
    SORT_CHOICES,
    ResourceFilterState,
    available_categories,
    available_tags,
    filter_resources,
)
from .models import ToolshedResource

logger = logging.getLogger(__name__)

RESOURCES_KEY = ("toolshed_resources",)


def fetch_resources():
    return get_table("toolshed_resources").select(order_by=("-featured", "display_order", "-created_at"))


def toolshed(request):
    """Intro page plus the searchable resource grid."""
    state = ResourceFilterState.from_query(request.GET)
    result = query_cache.query(RESOURCES_KEY, fetch_resources)
    resources = result.data or []

    intro = load_page("toolshed")
    page = None if intro.is_error else intro.data
    title, description = SITE_PAGES["toolshed"]

    return render(request, "toolshed/toolshed.html", {
        "page": page,
        "page_title": page.title if page else title,
        "description": description,
        "error": intro.error,
        "state": state,
        "resources": filter_resources(resources, state),
        "total_count": len(resources),
        "is_error": result.is_error,
        "tags": available_tags(resources),
        "categories": available_categories(resources),
        "types": ToolshedResource.TYPE_CHOICES,
        "sort_choices": SORT_CHOICES,
    })


@require_POST
def access(request, pk):
    """Count the access, then send the visitor to the file or link."""
    table = get_table("toolshed_resources")
    resource = table.select_single(pk=pk)
    if resource is None:
        raise Http404("No such resource")

    target = resource.target_url
    if not target:
        messages.error(request, "This resource has no link yet.")
        return redirect("toolshed:index")

    try:
        table.increment(pk, "download_count")
    except GatewayError as exc:
        # The visitor still gets the resource; only the counter is lost.
        logger.warning("Could not count access to resource %s: %s", pk, exc)
    else:
        query_cache.invalidate(RESOURCES_KEY)
    return redirect(target)
