from django import forms

from .models import Faq, GalleryImage, Page, Video


class PageForm(forms.ModelForm):
    class Meta:
        model = Page
        fields = ["slug", "title", "content"]
        widgets = {
            "content": forms.Textarea(attrs={"rows": 14}),
        }


class FaqForm(forms.ModelForm):
    class Meta:
        model = Faq
        fields = ["question", "answer", "display_order"]
        widgets = {
            "answer": forms.Textarea(attrs={"rows": 5}),
        }
        help_texts = {
            "display_order": "Lower numbers show first.",
        }


class VideoForm(forms.ModelForm):
    class Meta:
        model = Video
        fields = ["title", "description", "url", "published"]
        labels = {"url": "Video URL"}
        widgets = {
            "description": forms.Textarea(attrs={"rows": 4}),
        }


class GalleryImageForm(forms.ModelForm):
    class Meta:
        model = GalleryImage
        fields = ["title", "image_url", "caption", "display_order"]
        labels = {"image_url": "Image URL"}
        widgets = {
            "caption": forms.Textarea(attrs={"rows": 3}),
        }
