"""
Learning app URL configuration.

Uses DRF Routers for automatic URL generation from ViewSets.
All endpoints are mounted under /api/v1/ by the root URL config.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import CourseViewSet

router = DefaultRouter()
router.register(r"courses", CourseViewSet, basename="course")

urlpatterns = [
    path("", include(router.urls)),
]
