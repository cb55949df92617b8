from django import forms

from .models import ToolshedResource


def split_tags(raw) -> list:
    """'a, b,,c ' -> ['a', 'b', 'c']"""
    if isinstance(raw, (list, tuple)):
        parts = raw
    else:
        parts = (raw or "").split(",")
    return [str(tag).strip() for tag in parts if str(tag).strip()]


class TagsField(forms.CharField):
    """Comma separated text from the admin form, or a list from the gateway."""

    def to_python(self, value):
        if isinstance(value, (list, tuple)):
            return list(value)
        return super().to_python(value)


class ToolshedResourceForm(forms.ModelForm):
    tags = TagsField(
        required=False,
        help_text="Comma separated, e.g. housing, benefits, va",
    )

    class Meta:
        model = ToolshedResource
        fields = [
            "title",
            "description",
            "category",
            "type",
            "url",
            "file_url",
            "tags",
            "featured",
            "display_order",
        ]
        labels = {
            "url": "Link URL",
            "file_url": "File URL",
        }
        widgets = {
            "description": forms.Textarea(attrs={"rows": 4}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance and self.instance.pk:
            self.initial["tags"] = ", ".join(self.instance.tags or [])

    def clean_tags(self):
        return split_tags(self.cleaned_data.get("tags"))
