# main/urls.py
from django.urls import path

from . import views

app_name = "main"

urlpatterns = [
    path("", views.home, name="home"),
    path("about/", views.about, name="about"),
    path("contact/", views.contact, name="contact"),
    path("story/", views.story, name="story"),
    path("charities/", views.charities, name="charities"),
    path("mission/", views.mission, name="mission"),
    path("videos/", views.videos, name="videos"),
    path("faq/", views.faq, name="faq"),
    path("gallery/", views.gallery, name="gallery"),
]
