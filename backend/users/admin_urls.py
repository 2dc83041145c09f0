"""
Role-gated administration endpoints, mounted under ``/api/admin/``.
"""

from django.urls import path

from .views import AdminUserListView

app_name = "users_admin"

urlpatterns = [
    path("users/", AdminUserListView.as_view(), name="user-list"),
]
