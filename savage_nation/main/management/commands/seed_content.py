from django.core.management.base import BaseCommand

from savage_nation.core.gateway import get_table
from savage_nation.core.query_cache import query_cache
from savage_nation.main.pages import SITE_PAGES

STARTER_FAQS = [
    (
        "How do you support veterans?",
        "We donate a portion of proceeds and collaborate with vetted charities to support veterans and their families.",
    ),
    (
        "When will the store be live?",
        "The full checkout experience is coming soon. Join our newsletter to be notified.",
    ),
    (
        "Do you ship internationally?",
        "Yes, we plan to offer international shipping for select products.",
    ),
]


class Command(BaseCommand):
    help = 'Creates a placeholder row for every site page and the starter FAQs, skipping any that exist'

    def handle(self, *args, **kwargs):
        created = 0
        skipped = 0

        pages = get_table("pages")
        for slug, (title, description) in SITE_PAGES.items():
            if pages.select_single(slug=slug) is not None:
                skipped += 1
                continue
            pages.insert({"slug": slug, "title": title, "content": description})
            created += 1

        faqs = get_table("faqs")
        for order, (question, answer) in enumerate(STARTER_FAQS):
            if faqs.select({"question": question}):
                skipped += 1
                continue
            faqs.insert({"question": question, "answer": answer, "display_order": order})
            created += 1

        query_cache.invalidate(("page",))
        query_cache.invalidate(("faqs",))
        self.stdout.write(self.style.SUCCESS(
            f'Seeded site content. Created: {created}, Skipped (already exist): {skipped}'
        ))
