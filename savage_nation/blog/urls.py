from django.urls import path

from . import views

app_name = "blog"

urlpatterns = [
    path("", views.weekly_blog, name="weekly"),
    path("<slug:slug>/", views.post_detail, name="detail"),
]
