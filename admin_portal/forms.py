from django import forms


class PageContentForm(forms.Form):
    """Title and body of a singleton page; the slug comes from the URL."""

    title = forms.CharField(max_length=200)
    content = forms.CharField(
        widget=forms.Textarea(attrs={"rows": 16, "class": "admin-textarea"}),
        help_text="Plain text. Blank lines start a new paragraph.",
    )
