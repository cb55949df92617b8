from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from savage_nation.core.query_cache import query_cache

from .forms import ProductForm
from .models import Product


class ProductFormTests(TestCase):
    def test_price_formats(self):
        for raw, expected in [("12", Decimal("12")), ("12.5", Decimal("12.5")), (".99", Decimal(".99")), ("", None)]:
            with self.subTest(raw=raw):
                form = ProductForm(data={"name": "Cap", "price": raw})
                self.assertTrue(form.is_valid(), form.errors)
                self.assertEqual(form.cleaned_data["price"], expected)

    def test_rejects_three_decimals_and_text(self):
        for raw in ["1.999", "abc", "-5"]:
            with self.subTest(raw=raw):
                form = ProductForm(data={"name": "Cap", "price": raw})
                self.assertFalse(form.is_valid())
                self.assertIn("price", form.errors)

    def test_name_required(self):
        form = ProductForm(data={"name": "", "price": "5"})
        self.assertFalse(form.is_valid())
        self.assertIn("name", form.errors)


class StoreViewTests(TestCase):
    def setUp(self):
        query_cache.clear()

    def test_products_newest_first_with_prices(self):
        older = Product.objects.create(name="Flag Tee", price=Decimal("24.99"))
        newer = Product.objects.create(name="Eagle Hoodie", price=Decimal("1249.5"))
        Product.objects.filter(pk=older.pk).update(created_at=newer.created_at.replace(year=newer.created_at.year - 1))

        response = self.client.get(reverse("store:index"))
        self.assertEqual([p.name for p in response.context["products"]], ["Eagle Hoodie", "Flag Tee"])
        self.assertContains(response, "$24.99")
        self.assertContains(response, "$1,249.50")

    def test_empty_store(self):
        response = self.client.get(reverse("store:index"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "New gear is on the way")
