from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse

from savage_nation.accounts.models import UserRole
from savage_nation.core.exceptions import GatewayError
from savage_nation.core.gateway import TableGateway
from savage_nation.core.query_cache import query_cache
from savage_nation.main.models import Page
from savage_nation.store.models import Product


class AdminAccessTests(TestCase):
    def setUp(self):
        query_cache.clear()
        User = get_user_model()
        self.member = User.objects.create_user(username="member", email="member@example.com", password="pass1234")

    def test_anonymous_goes_to_auth(self):
        response = self.client.get(reverse("admin_portal:dashboard"))
        self.assertRedirects(response, reverse("accounts:auth"))

    def test_non_admin_goes_home(self):
        self.client.login(username="member", password="pass1234")
        response = self.client.get(reverse("admin_portal:dashboard"))
        self.assertRedirects(response, reverse("main:home"))

    @override_settings(AUTH_BYPASS_ENABLED=True)
    def test_bypass_renders_dashboard(self):
        response = self.client.get(reverse("admin_portal:dashboard"), {"bypass_auth": "true"})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Admin dashboard")

    @override_settings(AUTH_BYPASS_ENABLED=False)
    def test_bypass_is_ignored_when_disabled(self):
        response = self.client.get(reverse("admin_portal:dashboard"), {"bypass_auth": "true"})
        self.assertEqual(response.status_code, 302)

    def test_unknown_section_is_404(self):
        UserRole.objects.create(user=self.member, role=UserRole.ROLE_ADMIN)
        self.client.login(username="member", password="pass1234")
        response = self.client.get(reverse("admin_portal:manager", args=["orders"]))
        self.assertEqual(response.status_code, 404)


class AdminTestCase(TestCase):
    def setUp(self):
        query_cache.clear()
        User = get_user_model()
        self.admin = User.objects.create_user(username="boss", email="boss@example.com", password="pass1234")
        UserRole.objects.create(user=self.admin, role=UserRole.ROLE_ADMIN)
        self.client.login(username="boss", password="pass1234")


class ProductManagerTests(AdminTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("admin_portal:manager", args=["products"])

    def test_empty_list_state(self):
        response = self.client.get(self.url)
        self.assertContains(response, 'data-state="empty"')
        self.assertContains(response, "No products yet.")

    def test_list_renders_rows(self):
        Product.objects.create(name="Flag Tee", price=Decimal("24.99"))
        response = self.client.get(self.url)
        self.assertContains(response, 'data-state="table"')
        self.assertContains(response, "Flag Tee")
        self.assertContains(response, "$24.99")

    def test_list_error_state(self):
        with mock.patch.object(TableGateway, "select", side_effect=GatewayError("database down")):
            response = self.client.get(self.url)
        self.assertContains(response, 'data-state="error"')

    def test_dialog_opens_in_create_and_edit_mode(self):
        product = Product.objects.create(name="Flag Tee")
        response = self.client.get(self.url, {"dialog": "new"})
        self.assertEqual(response.context["dialog"].mode, "create")
        self.assertContains(response, 'data-dialog-state="open"')

        response = self.client.get(self.url, {"edit": product.pk})
        self.assertEqual(response.context["dialog"].mode, "edit")
        self.assertContains(response, 'value="Flag Tee"')

    def test_create_success_closes_dialog(self):
        response = self.client.post(self.url, {"name": "Eagle Hoodie", "price": "49.5"}, follow=True)
        self.assertRedirects(response, self.url)
        self.assertContains(response, "Product created.")
        self.assertEqual(Product.objects.get().price, Decimal("49.50"))
        self.assertFalse(response.context["dialog"].is_open)

    def test_invalid_submission_keeps_dialog_open_with_errors(self):
        response = self.client.post(self.url, {"name": "", "price": "4.999"})
        self.assertEqual(response.status_code, 200)
        dialog = response.context["dialog"]
        self.assertEqual(dialog.state.value, "open")
        self.assertIn("name", dialog.errors)
        self.assertIn("price", dialog.errors)
        self.assertContains(response, "Please correct the errors below.")
        self.assertEqual(Product.objects.count(), 0)

    def test_update_is_a_full_replace(self):
        product = Product.objects.create(name="Flag Tee", description="Cotton", price=Decimal("20"))
        self.client.post(self.url, {"id": product.pk, "name": "Flag Tee v2", "price": ""})
        product.refresh_from_db()
        self.assertEqual(product.name, "Flag Tee v2")
        self.assertEqual(product.description, "")
        self.assertIsNone(product.price)

    def test_delete_removes_row(self):
        product = Product.objects.create(name="Flag Tee")
        self.client.get(self.url)
        response = self.client.post(reverse("admin_portal:delete", args=["products", product.pk]), follow=True)
        self.assertContains(response, "Product deleted.")
        self.assertFalse(Product.objects.exists())
        self.assertEqual(query_cache.get_data(("products",)), [])

    def test_failed_delete_rolls_back_cached_list(self):
        keep = Product.objects.create(name="Keep")
        doomed = Product.objects.create(name="Doomed")
        self.client.get(self.url)
        before = [p.pk for p in query_cache.get_data(("products",))]

        with mock.patch.object(TableGateway, "delete", side_effect=GatewayError("permission denied")):
            response = self.client.post(reverse("admin_portal:delete", args=["products", doomed.pk]))

        self.assertRedirects(response, self.url, fetch_redirect_response=False)
        self.assertEqual([p.pk for p in query_cache.get_data(("products",))], before)
        self.assertTrue(query_cache.is_stale(("products",)))
        self.assertEqual(Product.objects.count(), 2)
        self.assertEqual(set(before), {keep.pk, doomed.pk})

        response = self.client.get(self.url)
        self.assertContains(response, "Could not delete product")


class PageEditorTests(AdminTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("admin_portal:page_editor", args=["about"])

    def test_missing_page_opens_in_create_mode(self):
        response = self.client.get(self.url)
        self.assertEqual(response.context["mode"], "create")
        self.assertIsNone(response.context["page"])
        self.assertEqual(response.context["form"].initial["title"], "About Us")

    def test_create_then_update(self):
        self.client.post(self.url, {"title": "About Savage Nation", "content": "Built by veterans."})
        page = Page.objects.get(slug="about")
        self.assertEqual(page.content, "Built by veterans.")

        response = self.client.get(self.url)
        self.assertEqual(response.context["mode"], "update")

        response = self.client.post(self.url, {"title": "About Us", "content": "Run by veterans."}, follow=True)
        self.assertContains(response, "Page updated")
        page.refresh_from_db()
        self.assertEqual(page.content, "Run by veterans.")
        self.assertEqual(Page.objects.count(), 1)

    def test_save_invalidates_public_page(self):
        self.client.get(reverse("main:about"))
        with self.captureOnCommitCallbacks(execute=True):
            self.client.post(self.url, {"title": "About Us", "content": "Fresh copy."})
        response = self.client.get(reverse("main:about"))
        self.assertContains(response, "Fresh copy.")

    def test_content_is_required(self):
        response = self.client.post(self.url, {"title": "About Us", "content": ""})
        self.assertEqual(response.status_code, 200)
        self.assertIn("content", response.context["form"].errors)
        self.assertFalse(Page.objects.exists())

    def test_unknown_slug_is_404(self):
        response = self.client.get(reverse("admin_portal:page_editor", args=["pricing"]))
        self.assertEqual(response.status_code, 404)
