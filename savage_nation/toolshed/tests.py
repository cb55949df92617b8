from datetime import datetime, timezone

from django.http import QueryDict
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from savage_nation.core.gateway import get_table
from savage_nation.core.query_cache import query_cache

from .filters import (
    ResourceFilterState,
    available_categories,
    available_tags,
    filter_resources,
    sort_resources,
)
from .forms import ToolshedResourceForm, split_tags
from .models import ToolshedResource


def _resource(id, **fields):
    row = {
        "id": id,
        "title": f"Resource {id}",
        "description": "",
        "category": "General",
        "type": "link",
        "tags": [],
        "featured": False,
        "download_count": 0,
        "created_at": datetime(2024, 1, id, tzinfo=timezone.utc),
    }
    row.update(fields)
    return row


class FilterResourcesTests(SimpleTestCase):
    def setUp(self):
        self.resources = [
            _resource(1, title="VA Claims Guide", description="Step by step", category="Benefits",
                      type="download", tags=["va", "claims"], download_count=12),
            _resource(2, title="housing finder", category="Housing", type="tool",
                      tags=["housing"], featured=True, download_count=3),
            _resource(3, title="Resume template", description="For the VA job hunt", category="Careers",
                      type="download", tags=["jobs", "va"], download_count=7),
        ]

    def test_query_matches_title_description_and_tags_case_insensitively(self):
        state = ResourceFilterState(query="va")
        self.assertEqual([r["id"] for r in filter_resources(self.resources, state)], [1, 3])

        state = ResourceFilterState(query="CLAIMS")
        self.assertEqual([r["id"] for r in filter_resources(self.resources, state)], [1])

    def test_filters_are_conjunctive(self):
        state = ResourceFilterState(type="download", tags=("va", "jobs"))
        self.assertEqual([r["id"] for r in filter_resources(self.resources, state)], [3])

        state = ResourceFilterState(category="Housing", type="download")
        self.assertEqual(filter_resources(self.resources, state), [])

    def test_filtering_is_idempotent(self):
        state = ResourceFilterState(query="a", sort="title")
        once = filter_resources(self.resources, state)
        self.assertEqual(filter_resources(once, state), once)

    def test_sort_orders(self):
        by = lambda key: [r["id"] for r in sort_resources(self.resources, key)]  # noqa: E731
        self.assertEqual(by("popular"), [1, 3, 2])
        self.assertEqual(by("title"), [2, 3, 1])
        self.assertEqual(by("recent"), [3, 2, 1])
        self.assertEqual(by("featured"), [2, 1, 3])

    def test_featured_first_then_access_count(self):
        rows = [_resource(1, featured=False, download_count=5), _resource(2, featured=True, download_count=1)]
        self.assertEqual([r["id"] for r in sort_resources(rows, "featured")], [2, 1])

    def test_title_sort_is_non_decreasing(self):
        titles = [r["title"].casefold() for r in sort_resources(self.resources, "title")]
        self.assertEqual(titles, sorted(titles))

    def test_state_from_query(self):
        params = QueryDict("q=+va+&category=Benefits&tag=va&tag=claims&tag=va&sort=bogus&view=list")
        state = ResourceFilterState.from_query(params)
        self.assertEqual(state.query, "va")
        self.assertEqual(state.tags, ("va", "claims"))
        self.assertEqual(state.sort, "featured")
        self.assertEqual(state.view, "list")
        self.assertTrue(state.has_active_filters)
        self.assertFalse(ResourceFilterState.from_query(QueryDict("")).has_active_filters)

    def test_available_tags_and_categories(self):
        self.assertEqual(available_tags(self.resources), ["claims", "housing", "jobs", "va"])
        self.assertEqual(available_categories(self.resources), ["Benefits", "Careers", "Housing"])


class ToolshedFormTests(TestCase):
    def test_tags_are_split_and_trimmed(self):
        self.assertEqual(split_tags(" va, claims ,, housing,"), ["va", "claims", "housing"])
        form = ToolshedResourceForm(data={
            "title": "Guide",
            "category": "Benefits",
            "type": "download",
            "file_url": "https://example.com/guide.pdf",
            "tags": "va, claims,",
            "display_order": "0",
        })
        self.assertTrue(form.is_valid(), form.errors)
        resource = form.save()
        self.assertEqual(resource.tags, ["va", "claims"])
        self.assertEqual(ToolshedResourceForm(instance=resource).initial["tags"], "va, claims")

    def test_type_must_be_known(self):
        form = ToolshedResourceForm(data={"title": "X", "category": "Y", "type": "video", "display_order": "0"})
        self.assertFalse(form.is_valid())
        self.assertIn("type", form.errors)


class ToolshedViewTests(TestCase):
    def setUp(self):
        query_cache.clear()
        self.guide = ToolshedResource.objects.create(
            title="VA Claims Guide", category="Benefits", type="download",
            url="https://example.com/about-guide", file_url="https://example.com/guide.pdf",
            tags=["va"], download_count=2,
        )
        self.finder = ToolshedResource.objects.create(
            title="Housing Finder", category="Housing", type="tool",
            url="https://example.com/housing", tags=["housing"],
        )

    def test_page_filters_by_query_string(self):
        response = self.client.get(reverse("toolshed:index"), {"category": "Housing"})
        self.assertEqual([r.title for r in response.context["resources"]], ["Housing Finder"])
        self.assertEqual(response.context["total_count"], 2)
        self.assertContains(response, "Clear filters")

    def test_access_counts_and_redirects_to_file(self):
        response = self.client.post(reverse("toolshed:access", args=[self.guide.pk]))
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, "https://example.com/guide.pdf")
        self.guide.refresh_from_db()
        self.assertEqual(self.guide.download_count, 3)

    def test_access_for_link_types_uses_url(self):
        response = self.client.post(reverse("toolshed:access", args=[self.finder.pk]))
        self.assertEqual(response.url, "https://example.com/housing")

    def test_access_requires_post_and_existing_resource(self):
        self.assertEqual(self.client.get(reverse("toolshed:access", args=[self.guide.pk])).status_code, 405)
        self.assertEqual(self.client.post(reverse("toolshed:access", args=[9999])).status_code, 404)


class ToolshedGatewayTests(TestCase):
    def setUp(self):
        self.table = get_table("toolshed_resources")

    def test_insert_and_update_accept_tag_lists(self):
        resource = self.table.insert({
            "title": "VA Claims Guide",
            "category": "Benefits",
            "type": "download",
            "tags": ["va", " claims ", ""],
            "display_order": "0",
        })
        resource.refresh_from_db()
        self.assertEqual(resource.tags, ["va", "claims"])

        self.table.update(resource.pk, {"tags": ("housing", "va")})
        resource.refresh_from_db()
        self.assertEqual(resource.tags, ["housing", "va"])
        self.assertEqual(resource.title, "VA Claims Guide")

    def test_comma_separated_tags_still_split(self):
        resource = self.table.insert({
            "title": "Housing Finder",
            "category": "Housing",
            "type": "tool",
            "url": "https://example.com/housing",
            "tags": "housing, rent ,",
            "display_order": "0",
        })
        resource.refresh_from_db()
        self.assertEqual(resource.tags, ["housing", "rent"])
