from django.db import models

from savage_nation.core.models import TimeStampedModel


class Product(TimeStampedModel):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    image_url = models.URLField(max_length=500, blank=True)

    class Meta:
        db_table = "products"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return self.name
