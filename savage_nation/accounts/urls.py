from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("auth/", views.auth_page, name="auth"),
    path("auth/sign-out/", views.sign_out, name="sign_out"),
]
