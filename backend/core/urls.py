from django.contrib import admin
from django.urls import include, path

from .views import HealthCheckView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/health/", HealthCheckView.as_view(), name="health"),
    path("api/auth/", include("users.urls")),
    path("api/admin/", include("users.admin_urls")),
    path("api/", include("finance.urls")),
]
