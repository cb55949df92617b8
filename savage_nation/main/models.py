from django.core.validators import MinValueValidator
from django.db import models

from savage_nation.core.models import TimeStampedModel
from savage_nation.core.utils.video import extract_youtube_id, youtube_embed_url


class Page(TimeStampedModel):
    """Singleton content page addressed by slug (about, contact, story, ...)."""

    slug = models.SlugField(max_length=64, unique=True)
    title = models.CharField(max_length=200)
    content = models.TextField()

    class Meta:
        db_table = "pages"
        ordering = ("slug",)

    def __str__(self) -> str:
        return f"{self.title} ({self.slug})"


class Faq(TimeStampedModel):
    question = models.CharField(max_length=300)
    answer = models.TextField()
    display_order = models.PositiveIntegerField(default=0, validators=[MinValueValidator(0)])

    class Meta:
        db_table = "faqs"
        ordering = ("display_order", "id")
        verbose_name = "FAQ"

    def __str__(self) -> str:
        return self.question


class Video(TimeStampedModel):
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    url = models.URLField(
        help_text="Paste a YouTube URL, e.g. https://www.youtube.com/watch?v=VIDEO_ID or https://youtu.be/VIDEO_ID"
    )
    published = models.BooleanField(default=True)

    class Meta:
        db_table = "videos"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return self.title

    @property
    def youtube_id(self) -> str:
        return extract_youtube_id(self.url)

    @property
    def embed_url(self) -> str:
        return youtube_embed_url(self.url)


class GalleryImage(TimeStampedModel):
    title = models.CharField(max_length=200, blank=True)
    image_url = models.URLField(max_length=500)
    caption = models.TextField(blank=True)
    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "gallery_images"
        ordering = ("display_order", "id")

    def __str__(self) -> str:
        return self.title or self.image_url
