from unittest import mock

from django.test import TestCase
from django.urls import reverse

from savage_nation.core.exceptions import GatewayError
from savage_nation.core.query_cache import query_cache

from .models import Faq, GalleryImage, Page, Video


class GenericPageTests(TestCase):
    def setUp(self):
        query_cache.clear()

    def test_missing_page_shows_coming_soon_with_default_title(self):
        response = self.client.get(reverse("main:about"))
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.context["page"])
        self.assertContains(response, "About Us")
        self.assertContains(response, "Content coming soon.")

    def test_page_content_is_rendered(self):
        Page.objects.create(slug="mission", title="What We Stand For", content="Honor service.\n\nGive back.")
        response = self.client.get(reverse("main:mission"))
        self.assertContains(response, "What We Stand For")
        self.assertContains(response, "<p>Honor service.</p>", html=True)
        self.assertNotContains(response, "Content coming soon.")

    def test_page_is_served_from_cache_until_invalidated(self):
        page = Page.objects.create(slug="story", title="Our Story", content="First draft")
        self.client.get(reverse("main:story"))

        Page.objects.filter(pk=page.pk).update(content="Second draft")
        response = self.client.get(reverse("main:story"))
        self.assertContains(response, "First draft")

        query_cache.invalidate(("page", "story"), refetch=False)
        response = self.client.get(reverse("main:story"))
        self.assertContains(response, "Second draft")

    def test_gateway_error_is_reported(self):
        with mock.patch("savage_nation.main.pages.fetch_page", side_effect=GatewayError("database down")):
            response = self.client.get(reverse("main:contact"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Error loading page")
        self.assertNotContains(response, "Content coming soon.")


class ListingPageTests(TestCase):
    def setUp(self):
        query_cache.clear()

    def test_videos_show_published_with_embed_urls(self):
        Video.objects.create(title="Ruck March", url="https://youtu.be/dQw4w9WgXcQ", published=True)
        Video.objects.create(title="Draft Cut", url="https://youtu.be/aaaaaaaaaaa", published=False)

        response = self.client.get(reverse("main:videos"))
        self.assertContains(response, "Ruck March")
        self.assertNotContains(response, "Draft Cut")
        self.assertContains(response, "https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ")

    def test_faq_in_display_order(self):
        Faq.objects.create(question="Second question?", answer="b", display_order=2)
        Faq.objects.create(question="First question?", answer="a", display_order=1)

        response = self.client.get(reverse("main:faq"))
        questions = [faq.question for faq in response.context["faqs"]]
        self.assertEqual(questions, ["First question?", "Second question?"])

    def test_gallery_lists_images_under_intro(self):
        Page.objects.create(slug="gallery", title="Gallery", content="Moments from the road.")
        GalleryImage.objects.create(title="Flag", image_url="https://example.com/flag.jpg", display_order=1)

        response = self.client.get(reverse("main:gallery"))
        self.assertContains(response, "Moments from the road.")
        self.assertContains(response, "https://example.com/flag.jpg")


class SiteChromeTests(TestCase):
    def test_nav_and_footer_share_items(self):
        response = self.client.get(reverse("main:home"))
        self.assertEqual(response.status_code, 200)
        labels = [item["label"] for item in response.context["NAV_ITEMS"]]
        self.assertEqual(labels[0], "Store")
        self.assertIn("Weekly Blog", labels)
        self.assertContains(response, reverse("toolshed:index"), count=2)

    def test_content_security_policy_allows_youtube_only(self):
        csp = self.client.get(reverse("main:home"))["Content-Security-Policy"]
        self.assertIn("frame-src 'self' https://www.youtube.com https://www.youtube-nocookie.com", csp)
        self.assertNotIn("gstatic", csp)

    def test_unknown_route_renders_404_and_logs(self):
        with self.assertLogs("savage_nation.main.views", level="WARNING") as logs:
            response = self.client.get("/no-such-page/")
        self.assertEqual(response.status_code, 404)
        self.assertContains(response, "Oops! Page not found", status_code=404)
        self.assertIn("/no-such-page/", logs.output[0])


class SeedContentCommandTests(TestCase):
    def test_seeds_missing_rows_once(self):
        from io import StringIO

        from django.core.management import call_command

        Page.objects.create(slug="about", title="Custom About", content="Keep me.")
        out = StringIO()
        call_command("seed_content", stdout=out)
        call_command("seed_content", stdout=StringIO())

        self.assertEqual(Page.objects.get(slug="about").title, "Custom About")
        self.assertTrue(Page.objects.filter(slug="mission").exists())
        self.assertEqual(Faq.objects.count(), 3)
        self.assertIn("Skipped (already exist): 1", out.getvalue())
