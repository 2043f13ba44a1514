"""Root URL configuration — all API routes are versioned under /api/v1/."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/auth/", include("apps.accounts.urls")),
    path("api/v1/", include("apps.social.urls")),
    path("api/v1/", include("apps.messaging.urls")),
    path("api/v1/", include("apps.learning.urls")),
]
