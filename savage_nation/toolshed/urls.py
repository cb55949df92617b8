from django.urls import path

from . import views

app_name = "toolshed"

urlpatterns = [
    path("", views.toolshed, name="index"),
    path("<int:pk>/access/", views.access, name="access"),
]
