from django import forms

from .models import Blog


class BlogForm(forms.ModelForm):
    class Meta:
        model = Blog
        fields = ["title", "content", "published"]
        labels = {
            "content": "Body",
            "published": "Publish on the weekly blog",
        }
        widgets = {
            "title": forms.TextInput(attrs={"placeholder": "Post title"}),
            "content": forms.Textarea(attrs={"rows": 12, "placeholder": "Write this week's post..."}),
        }
