"""
Accounts URL configuration.

All endpoints are mounted under /api/v1/auth/ by the root URL config.
Token refresh is handled by SimpleJWT's built-in view.
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    RegisterView,
    LoginView,
    LogoutView,
    ProfileView,
    ProfilePictureUploadView,
    ChangePasswordView,
    PostalCodeLookupView,
)

urlpatterns = [
    # Authentication
    path("register/", RegisterView.as_view(), name="auth-register"),
    path("login/", LoginView.as_view(), name="auth-login"),
    path("logout/", LogoutView.as_view(), name="auth-logout"),
    path("token/refresh/", TokenRefreshView.as_view(), name="auth-token-refresh"),

    # Account management
    path("profile/", ProfileView.as_view(), name="auth-profile"),
    path("profile/upload-image/", ProfilePictureUploadView.as_view(), name="auth-profile-upload-image"),
    path("change-password/", ChangePasswordView.as_view(), name="auth-change-password"),

    # Registration helpers
    path("postal-code/<str:code>/", PostalCodeLookupView.as_view(), name="auth-postal-code"),
]
