from django.http import Http404
from django.shortcuts import render

from savage_nation.core.gateway import get_table
from savage_nation.core.query_cache import query_cache


def fetch_published():
    return get_table("blogs").select({"published": True}, order_by=("-created_at",))


def weekly_blog(request):
    """Published posts, newest first."""
    result = query_cache.query(("blogs", "published"), fetch_published)
    return render(request, "blog/weekly_blog.html", {
        "posts": result.data or [],
        "is_error": result.is_error,
    })


def post_detail(request, slug):
    post = get_table("blogs").select_single(slug=slug, published=True)
    if post is None:
        raise Http404("No published post with that slug")
    return render(request, "blog/post_detail.html", {"post": post})
