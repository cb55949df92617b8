# main/views.py
# ======================================================================
# Public pages: home, slug-backed content pages, videos, FAQ, gallery
# and the 404 handler.
# ======================================================================

from __future__ import annotations

import logging

from django.shortcuts import render

from savage_nation.core.gateway import get_table
from savage_nation.core.query_cache import query_cache

from .pages import SITE_PAGES, default_title, load_page

logger = logging.getLogger(__name__)


def home(request):
    return render(request, "main/home.html")


def _page_context(slug):
    result = load_page(slug)
    page = None if result.is_error else result.data
    title, description = SITE_PAGES.get(slug, (default_title(slug), ""))
    return {
        "slug": slug,
        "page": page,
        "page_title": page.title if page else title,
        "description": description,
        "error": result.error,
    }


def generic_page(request, slug):
    """
    Render the singleton page for ``slug``. A missing row shows
    "Content coming soon." under the default title.
    """
    return render(request, "main/page.html", _page_context(slug))


def _page_view(slug):
    def view(request):
        return generic_page(request, slug)

    view.__name__ = f"{slug}_page"
    return view


about = _page_view("about")
contact = _page_view("contact")
story = _page_view("story")
charities = _page_view("charities")
mission = _page_view("mission")


def videos(request):
    result = query_cache.query(
        ("videos", "published"),
        lambda: get_table("videos").select({"published": True}, order_by=("-created_at",)),
    )
    return render(request, "main/videos.html", {
        "videos": result.data or [],
        "is_error": result.is_error,
    })


def faq(request):
    result = query_cache.query(
        ("faqs",),
        lambda: get_table("faqs").select(order_by=("display_order", "id")),
    )
    return render(request, "main/faq.html", {
        "faqs": result.data or [],
        "is_error": result.is_error,
    })


def gallery(request):
    context = _page_context("gallery")
    result = query_cache.query(
        ("gallery_images",),
        lambda: get_table("gallery_images").select(order_by=("display_order", "id")),
    )
    context.update({
        "images": result.data or [],
        "images_error": result.is_error,
    })
    return render(request, "main/gallery.html", context)


def not_found(request, exception=None):
    logger.warning("404: no route for %s", request.path)
    return render(request, "404.html", {"path": request.path}, status=404)
