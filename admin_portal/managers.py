"""
One ``Manager`` per admin-managed collection: which table it edits, how the
list is ordered and which row template renders each item.
"""

from dataclasses import dataclass
from typing import Tuple


from savage_nation.core.gateway import get_table


@dataclass(frozen=True)
class Manager:
    slug: str
    table: str
    title: str
    entity: str
    headers: Tuple[str, ...]
    row_template: str
    order_by: Tuple[str, ...] = ("-created_at",)
    empty_message: str = "No data found."

    @property
    def query_key(self):
        return (self.table,)

    @property
    def gateway(self):
        return get_table(self.table)

    @property
    def form_class(self):
        return self.gateway.form_class

    def fetch(self):
        return self.gateway.select(order_by=self.order_by)


MANAGERS = [
    Manager(
        slug="products",
        table="products",
        title="Products",
        entity="Product",
        headers=("Name", "Price", "Created", ""),
        row_template="admin_portal/rows/product.html",
        empty_message="No products yet. Add your first product.",
    ),
    Manager(
        slug="blogs",
        table="blogs",
        title="Blog posts",
        entity="Post",
        headers=("Title", "Status", "Created", ""),
        row_template="admin_portal/rows/blog.html",
        empty_message="No posts yet.",
    ),
    Manager(
        slug="videos",
        table="videos",
        title="Videos",
        entity="Video",
        headers=("Title", "Video", "Status", ""),
        row_template="admin_portal/rows/video.html",
        empty_message="No videos yet.",
    ),
    Manager(
        slug="faqs",
        table="faqs",
        title="FAQs",
        entity="FAQ",
        headers=("Order", "Question", ""),
        row_template="admin_portal/rows/faq.html",
        order_by=("display_order", "id"),
        empty_message="No FAQs yet.",
    ),
    Manager(
        slug="gallery",
        table="gallery_images",
        title="Gallery images",
        entity="Image",
        headers=("Order", "Image", "Title", ""),
        row_template="admin_portal/rows/gallery_image.html",
        order_by=("display_order", "id"),
        empty_message="No images yet.",
    ),
    Manager(
        slug="toolshed",
        table="toolshed_resources",
        title="Toolshed resources",
        entity="Resource",
        headers=("Title", "Category", "Type", "Accesses", ""),
        row_template="admin_portal/rows/toolshed_resource.html",
        order_by=("-featured", "display_order", "-created_at"),
        empty_message="No resources yet.",
    ),
]

MANAGERS_BY_SLUG = {manager.slug: manager for manager in MANAGERS}


def get_manager(slug):
    return MANAGERS_BY_SLUG[slug]
