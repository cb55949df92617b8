from django.urls import path

from . import views

app_name = "admin_portal"

urlpatterns = [
    path("", views.AdminDashboardView.as_view(), name="dashboard"),
    path("pages/<slug:slug>/", views.PageEditorView.as_view(), name="page_editor"),
    path("<slug:resource>/", views.ManagerView.as_view(), name="manager"),
    path("<slug:resource>/<int:pk>/delete/", views.ManagerDeleteView.as_view(), name="delete"),
]
