from django.contrib import admin

from .models import ToolshedResource


@admin.register(ToolshedResource)
class ToolshedResourceAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "type", "featured", "display_order", "download_count")
    list_filter = ("type", "featured", "category")
    search_fields = ("title", "description")
    readonly_fields = ("download_count",)
