"""
Social app URL configuration.

Posts use a DRF router; the feed and profile endpoints are plain paths.
All endpoints are mounted under /api/v1/ by the root URL config.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import FeedView, FollowToggleView, PostViewSet, ProfileDetailView

router = DefaultRouter()
router.register(r"posts", PostViewSet, basename="post")

urlpatterns = [
    path("", include(router.urls)),
    path("feed/", FeedView.as_view(), name="feed"),
    path("profiles/<str:username>/", ProfileDetailView.as_view(), name="profile-detail"),
    path("profiles/<str:username>/follow/", FollowToggleView.as_view(), name="profile-follow"),
]
