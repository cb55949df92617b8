from django.contrib import admin

from .models import Faq, GalleryImage, Page, Video


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ("slug", "title", "updated_at")
    search_fields = ("slug", "title", "content")


@admin.register(Faq)
class FaqAdmin(admin.ModelAdmin):
    list_display = ("question", "display_order")
    ordering = ("display_order",)


@admin.register(Video)
class VideoAdmin(admin.ModelAdmin):
    list_display = ("title", "published", "created_at")
    list_filter = ("published",)
    search_fields = ("title", "description")


@admin.register(GalleryImage)
class GalleryImageAdmin(admin.ModelAdmin):
    list_display = ("title", "display_order", "created_at")
    ordering = ("display_order",)
