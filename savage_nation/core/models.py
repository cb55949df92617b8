# core/models.py
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base for every remote collection row: id plus created/updated stamps."""

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
