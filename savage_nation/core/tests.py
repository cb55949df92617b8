from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase

from savage_nation.core.crud_table import ListState, list_state
from savage_nation.core.dialogs import DialogController, DialogState, InvalidTransition
from savage_nation.core.exceptions import (
    GatewayError,
    RecordDecodeError,
    RecordNotFound,
    UnknownTableError,
)
from savage_nation.core.gateway import get_table
from savage_nation.core.optimistic import OptimisticDelete
from savage_nation.core.query_cache import QueryCache, query_cache
from savage_nation.core.utils.formatting import format_currency, format_date
from savage_nation.core.utils.video import extract_youtube_id, youtube_embed_url
from savage_nation.main.models import Faq


class QueryCacheTests(TestCase):
    def setUp(self):
        self.cache = QueryCache()
        self.cache.clear()

    def test_fetch_stores_and_reuses_result(self):
        calls = []

        def fetcher():
            calls.append(1)
            return ["a", "b"]

        self.assertEqual(self.cache.fetch(("products",), fetcher), ["a", "b"])
        self.assertEqual(self.cache.fetch(("products",), fetcher), ["a", "b"])
        self.assertEqual(len(calls), 1)
        self.assertFalse(self.cache.is_stale(("products",)))

    def test_fetch_cancelled_in_flight_does_not_write(self):
        self.cache.set_data(("products",), ["optimistic"])
        self.cache.invalidate(("products",), refetch=False)

        def slow_fetcher():
            # a delete cancels the key while this fetch is running
            self.cache.cancel(("products",))
            return ["from server"]

        self.cache.fetch(("products",), slow_fetcher)
        self.assertEqual(self.cache.get_data(("products",)), ["optimistic"])

    def test_invalidate_covers_prefixed_keys_and_refetches_after_commit(self):
        self.cache.fetch(("page", "about"), lambda: "old about")
        self.cache.fetch(("page", "story"), lambda: "old story")
        self.cache.register(("page", "about"), lambda: "new about")

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            matched = self.cache.invalidate(("page",))

        self.assertIn(("page", "about"), matched)
        self.assertIn(("page", "story"), matched)
        self.assertEqual(len(callbacks), 2)
        self.assertEqual(self.cache.get_data(("page", "about")), "new about")
        self.assertFalse(self.cache.is_stale(("page", "about")))

    def test_invalidate_reaches_keys_stored_by_another_worker(self):
        other_worker = QueryCache()
        other_worker.set_data(("blogs", "published"), ["post"])
        self.cache.set_data(("products",), ["tee"])

        matched = self.cache.invalidate(("blogs",), refetch=False)

        self.assertEqual(matched, [("blogs",)])
        self.assertTrue(self.cache.is_stale(("blogs", "published")))
        self.assertTrue(other_worker.is_stale(("blogs", "published")))
        self.assertEqual(other_worker.get_data(("blogs", "published")), ["post"])
        self.assertFalse(self.cache.is_stale(("products",)))

    def test_invalidation_during_fetch_leaves_result_stale(self):
        def fetcher():
            self.cache.invalidate(("faqs",), refetch=False)
            return ["one"]

        self.cache.fetch(("faqs",), fetcher)
        self.assertEqual(self.cache.get_data(("faqs",)), ["one"])
        self.assertTrue(self.cache.is_stale(("faqs",)))

    def test_clear_forgets_entries(self):
        self.cache.set_data(("products",), ["tee"])
        self.cache.clear()
        self.assertIsNone(self.cache.get_data(("products",)))
        self.assertTrue(self.cache.is_stale(("products",)))

    def test_stale_data_is_served_until_refetch(self):
        self.cache.fetch(("faqs",), lambda: ["one"])
        self.cache.invalidate(("faqs",), refetch=False)
        self.assertTrue(self.cache.is_stale(("faqs",)))
        self.assertEqual(self.cache.get_data(("faqs",)), ["one"])

    def test_query_returns_errors_instead_of_raising(self):
        def failing():
            raise GatewayError("database down")

        result = self.cache.query(("videos",), failing)
        self.assertTrue(result.is_error)
        self.assertIsNone(result.data)
        self.assertIsNone(self.cache.get_data(("videos",)))

    def test_fetch_without_fetcher_raises(self):
        with self.assertRaises(KeyError):
            self.cache.fetch(("never-registered",))


class OptimisticDeleteTests(TestCase):
    key = ("products",)

    def setUp(self):
        query_cache.clear()

    def test_failed_delete_restores_list_exactly(self):
        query_cache.set_data(self.key, [{"id": 3}, {"id": 4}])
        seen_during_call = []

        def failing_delete(pk):
            seen_during_call.append(query_cache.get_data(self.key))
            raise GatewayError("permission denied")

        with self.assertRaises(GatewayError):
            OptimisticDelete(self.key, failing_delete).delete(3)

        self.assertEqual(seen_during_call, [[{"id": 4}]])
        self.assertEqual(query_cache.get_data(self.key), [{"id": 3}, {"id": 4}])
        self.assertTrue(query_cache.is_stale(self.key))

    def test_successful_delete_keeps_item_removed_and_marks_stale(self):
        query_cache.set_data(self.key, [{"id": 1}, {"id": 2}, {"id": 3}])
        deleted = []

        OptimisticDelete(self.key, deleted.append)("2")

        self.assertEqual(deleted, ["2"])
        self.assertEqual(query_cache.get_data(self.key), [{"id": 1}, {"id": 3}])
        self.assertTrue(query_cache.is_stale(self.key))

    def test_delete_discards_fetch_already_in_flight(self):
        query_cache.set_data(self.key, [{"id": 1}, {"id": 2}])
        query_cache.invalidate(self.key, refetch=False)

        def fetch_from_server():
            # the row is deleted while this read is still running
            OptimisticDelete(self.key, lambda pk: None).delete(1)
            return [{"id": 1}, {"id": 2}]

        query_cache.fetch(self.key, fetch_from_server)

        self.assertEqual(query_cache.get_data(self.key), [{"id": 2}])

    def test_empty_cache_is_not_written(self):
        OptimisticDelete(self.key, lambda pk: None).delete(7)
        self.assertIsNone(query_cache.get_data(self.key))

    def test_works_with_model_instances(self):
        first = Faq.objects.create(question="Q1", answer="A1")
        second = Faq.objects.create(question="Q2", answer="A2")
        query_cache.set_data(("faqs",), [first, second])

        OptimisticDelete(("faqs",), get_table("faqs").delete).delete(first.pk)

        self.assertEqual([f.pk for f in query_cache.get_data(("faqs",))], [second.pk])
        self.assertFalse(Faq.objects.filter(pk=first.pk).exists())


class TableGatewayTests(TestCase):
    def setUp(self):
        self.faqs = get_table("faqs")

    def test_unknown_table(self):
        with self.assertRaises(UnknownTableError):
            get_table("orders")

    def test_insert_and_select_ordered(self):
        self.faqs.insert({"question": "Second?", "answer": "B", "display_order": "2"})
        self.faqs.insert({"question": "First?", "answer": "A", "display_order": "1"})
        rows = self.faqs.select(order_by=("display_order",))
        self.assertEqual([r.question for r in rows], ["First?", "Second?"])

    def test_invalid_payload_raises_decode_error_with_field_errors(self):
        with self.assertRaises(RecordDecodeError) as ctx:
            self.faqs.insert({"question": "", "answer": "A", "display_order": "-1"})
        self.assertIn("question", ctx.exception.errors)
        self.assertIn("display_order", ctx.exception.errors)
        self.assertIsNotNone(ctx.exception.form)
        self.assertEqual(Faq.objects.count(), 0)

    def test_select_single_none_one_or_error(self):
        self.assertIsNone(self.faqs.select_single(question="Missing"))
        row = Faq.objects.create(question="Only", answer="x")
        self.assertEqual(self.faqs.select_single(question="Only"), row)
        Faq.objects.create(question="Only", answer="y")
        with self.assertRaises(GatewayError):
            self.faqs.select_single(question="Only")

    def test_select_single_with_non_numeric_id_is_empty(self):
        self.assertIsNone(self.faqs.select_single(pk="abc"))

    def test_partial_update_keeps_other_fields(self):
        row = Faq.objects.create(question="Q", answer="Original", display_order=4)
        self.faqs.update(row.pk, {"answer": "Changed"})
        row.refresh_from_db()
        self.assertEqual(row.answer, "Changed")
        self.assertEqual(row.question, "Q")
        self.assertEqual(row.display_order, 4)

    def test_update_and_delete_missing_id(self):
        with self.assertRaises(RecordNotFound):
            self.faqs.update(999, {"answer": "x"})
        with self.assertRaises(RecordNotFound):
            self.faqs.delete(999)

    def test_increment(self):
        resource = get_table("toolshed_resources").insert({
            "title": "VA forms",
            "category": "Benefits",
            "type": "link",
            "url": "https://www.va.gov/",
            "display_order": "0",
        })
        get_table("toolshed_resources").increment(resource.pk, "download_count")
        get_table("toolshed_resources").increment(resource.pk, "download_count")
        resource.refresh_from_db()
        self.assertEqual(resource.download_count, 2)

    def test_database_errors_are_wrapped(self):
        with mock.patch.object(Faq._default_manager, "filter", side_effect=DatabaseError("connection lost")):
            with self.assertRaises(GatewayError) as ctx:
                self.faqs.select({"display_order": 1})
        self.assertEqual(ctx.exception.table, "faqs")


class ListStateTests(SimpleTestCase):
    def test_precedence(self):
        self.assertEqual(list_state(True, True, [1]), ListState.LOADING)
        self.assertEqual(list_state(False, True, [1]), ListState.ERROR)
        self.assertEqual(list_state(False, False, None), ListState.EMPTY)
        self.assertEqual(list_state(False, False, []), ListState.EMPTY)
        self.assertEqual(list_state(False, False, [1]), ListState.TABLE)


class DialogControllerTests(SimpleTestCase):
    def test_create_flow(self):
        dialog = DialogController("Product").open()
        self.assertEqual(dialog.mode, "create")
        dialog.submit()
        self.assertEqual(dialog.state, DialogState.SUBMITTING)
        dialog.succeed()
        self.assertEqual(dialog.state, DialogState.CLOSED)
        self.assertFalse(dialog.is_open)

    def test_failure_returns_to_open_with_errors(self):
        row = object()
        dialog = DialogController("Product").open(row)
        self.assertEqual(dialog.mode, "edit")
        dialog.submit()
        dialog.fail({"name": ["This field is required."]})
        self.assertEqual(dialog.state, DialogState.OPEN)
        self.assertIs(dialog.instance, row)
        self.assertIn("name", dialog.errors)

    def test_invalid_transitions(self):
        dialog = DialogController("Product")
        with self.assertRaises(InvalidTransition):
            dialog.submit()
        dialog.open()
        with self.assertRaises(InvalidTransition):
            dialog.succeed()
        dialog.submit()
        with self.assertRaises(InvalidTransition):
            dialog.open()


class FormattingTests(SimpleTestCase):
    def test_currency(self):
        self.assertEqual(format_currency(Decimal("1234.5")), "$1,234.50")
        self.assertEqual(format_currency(None), "")
        self.assertEqual(format_currency("3", "EUR"), "€3.00")
        self.assertEqual(format_currency("TBD"), "$TBD")
        self.assertEqual(format_currency("TBD", "EUR"), "€TBD")
        self.assertEqual(format_currency("TBD", "CAD"), "TBD CAD")

    def test_date(self):
        from datetime import date

        self.assertEqual(format_date(date(2024, 7, 4)), "Jul 04, 2024")
        self.assertEqual(format_date(None), "")


class YouTubeIdTests(SimpleTestCase):
    def test_common_link_shapes(self):
        for url in [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
            "https://youtube.com/shorts/dQw4w9WgXcQ",
            "dQw4w9WgXcQ",
        ]:
            with self.subTest(url=url):
                self.assertEqual(extract_youtube_id(url), "dQw4w9WgXcQ")

    def test_non_youtube(self):
        self.assertEqual(extract_youtube_id("https://vimeo.com/123"), "")
        self.assertEqual(youtube_embed_url(""), "")
