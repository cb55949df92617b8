import re
from decimal import Decimal

from django import forms

from .models import Product

PRICE_PATTERN = re.compile(r"^(\d+)?(\.\d{0,2})?$")


class ProductForm(forms.ModelForm):
    # Text in, Decimal out: "12", "12.5", ".99" and "" are all accepted.
    price = forms.CharField(
        required=False,
        max_length=12,
        help_text="Up to two decimal places, e.g. 24.99",
        widget=forms.TextInput(attrs={"inputmode": "decimal", "placeholder": "0.00"}),
    )

    class Meta:
        model = Product
        fields = ["name", "description", "price", "image_url"]
        labels = {"image_url": "Image URL"}
        widgets = {
            "description": forms.Textarea(attrs={"rows": 4}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance and self.instance.pk and self.instance.price is not None:
            self.initial["price"] = f"{self.instance.price:.2f}"

    def clean_price(self):
        raw = (self.cleaned_data.get("price") or "").strip()
        if not PRICE_PATTERN.match(raw):
            raise forms.ValidationError("Enter a price with at most two decimal places.")
        if raw in ("", "."):
            return None
        return Decimal(raw)
