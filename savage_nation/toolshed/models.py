from django.db import models

from savage_nation.core.models import TimeStampedModel


class ToolshedResource(TimeStampedModel):
    TYPE_LINK = "link"
    TYPE_DOWNLOAD = "download"
    TYPE_TOOL = "tool"
    TYPE_IMAGE = "image"
    TYPE_CHOICES = [
        (TYPE_LINK, "Link"),
        (TYPE_DOWNLOAD, "Download"),
        (TYPE_TOOL, "Tool"),
        (TYPE_IMAGE, "Image"),
    ]

    # Button label per type
    ACTION_LABELS = {
        TYPE_DOWNLOAD: "Download",
        TYPE_LINK: "Visit",
        TYPE_TOOL: "Access",
        TYPE_IMAGE: "View",
    }

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, db_index=True)
    type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_LINK)
    url = models.URLField(max_length=500, blank=True)
    file_url = models.URLField(max_length=500, blank=True)
    tags = models.JSONField(default=list, blank=True)
    featured = models.BooleanField(default=False)
    display_order = models.PositiveIntegerField(default=0)
    download_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "toolshed_resources"
        ordering = ("-featured", "display_order", "-created_at")

    def __str__(self):
        return self.title

    @property
    def action_label(self) -> str:
        return self.ACTION_LABELS.get(self.type, "Open")

    @property
    def target_url(self) -> str:
        """Where the access button sends people: the file for downloads, else the link."""
        if self.type == self.TYPE_DOWNLOAD and self.file_url:
            return self.file_url
        return self.url or ""
