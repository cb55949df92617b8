from django.shortcuts import render

from savage_nation.core.gateway import get_table
from savage_nation.core.query_cache import query_cache


def fetch_products():
    return get_table("products").select(order_by=("-created_at",))


def store(request):
    """Product grid, newest first."""
    result = query_cache.query(("products",), fetch_products)
    return render(request, "store/store.html", {
        "products": result.data or [],
        "is_error": result.is_error,
    })
