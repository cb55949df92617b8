from django.test import TestCase
from django.urls import reverse

from savage_nation.core.query_cache import query_cache

from .models import Blog


class WeeklyBlogTests(TestCase):
    def setUp(self):
        query_cache.clear()
        self.published = Blog.objects.create(title="Week One", content="Boots on.", published=True)
        self.draft = Blog.objects.create(title="Unfinished", content="Soon.", published=False)

    def test_only_published_posts_are_listed(self):
        response = self.client.get(reverse("blog:weekly"))
        self.assertContains(response, "Week One")
        self.assertNotContains(response, "Unfinished")

    def test_slug_is_generated_and_unique(self):
        again = Blog.objects.create(title="Week One", content="Repeat title.", published=True)
        self.assertEqual(self.published.slug, "week-one")
        self.assertEqual(again.slug, "week-one-2")

    def test_detail_hides_drafts(self):
        response = self.client.get(reverse("blog:detail", args=[self.published.slug]))
        self.assertContains(response, "Boots on.")
        response = self.client.get(reverse("blog:detail", args=[self.draft.slug]))
        self.assertEqual(response.status_code, 404)
