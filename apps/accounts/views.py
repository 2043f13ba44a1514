"""
Views for registration, authentication, account profile management,
password change, profile picture upload and postal-code lookup.

Token generation/refresh is handled by djangorestframework-simplejwt;
custom views add role-aware registration and account management.
External integrations (Cloudinary, the postal lookup service) are
delegated to dedicated utility modules so views stay thin.
"""

import logging

from rest_framework import generics, status
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .cloudinary_utils import ImageValidationError, upload_profile_picture
from .postal import PostalLookupError, lookup_postal_code
from .serializers import (
    RegisterSerializer,
    LoginSerializer,
    UserProfileSerializer,
    ChangePasswordSerializer,
)

logger = logging.getLogger(__name__)


def _token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
class RegisterView(generics.CreateAPIView):
    """
    POST /api/v1/auth/register/

    Creates the account and its role profile, and returns JWT tokens so
    the user is logged-in immediately after registration.
    """

    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return Response(
            {
                "detail": "Registration is successful.",
                "user": UserProfileSerializer(user).data,
                "tokens": _token_pair(user),
            },
            status=status.HTTP_201_CREATED,
        )


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------
class LoginView(APIView):
    """
    POST /api/v1/auth/login/

    Authenticates credentials and returns JWT access + refresh tokens
    together with the user profile.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]

        return Response(
            {
                "user": UserProfileSerializer(user).data,
                "tokens": _token_pair(user),
            },
            status=status.HTTP_200_OK,
        )


# ---------------------------------------------------------------------------
# Logout (blacklist refresh token)
# ---------------------------------------------------------------------------
class LogoutView(APIView):
    """
    POST /api/v1/auth/logout/

    Blacklists the supplied refresh token so it can no longer be used.
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            return Response(
                {"detail": "Refresh token is required."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError:
            return Response(
                {"detail": "Invalid or expired token."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(
            {"detail": "Successfully logged out."},
            status=status.HTTP_200_OK,
        )


# ---------------------------------------------------------------------------
# Profile — GET / PATCH
# ---------------------------------------------------------------------------
class ProfileView(generics.RetrieveUpdateAPIView):
    """
    GET   /api/v1/auth/profile/  → current user's account and role data
    PATCH /api/v1/auth/profile/  → update description / role data
    """

    serializer_class = UserProfileSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "patch", "head", "options"]

    def get_object(self):
        return self.request.user


# ---------------------------------------------------------------------------
# Profile Picture Upload (Cloudinary)
# ---------------------------------------------------------------------------
class ProfilePictureUploadView(APIView):
    """
    POST /api/v1/auth/profile/upload-image/

    Accepts a multipart image file, uploads it to Cloudinary,
    and stores the resulting URL on the user's account.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        image = request.FILES.get("image")
        if not image:
            return Response(
                {"detail": "No image file provided."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            url = upload_profile_picture(image, user_id=str(request.user.pk))
        except ImageValidationError as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except RuntimeError:
            return Response(
                {"detail": "Image upload failed. Please try again later."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        request.user.profile_picture = url
        request.user.save(update_fields=["profile_picture"])

        return Response(
            {
                "profilePicture": url,
                "detail": "Profile picture uploaded successfully.",
            },
            status=status.HTTP_200_OK,
        )


# ---------------------------------------------------------------------------
# Change Password
# ---------------------------------------------------------------------------
class ChangePasswordView(APIView):
    """
    POST /api/v1/auth/change-password/

    Requires the current password; sets a new one.
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ChangePasswordSerializer(
            data=request.data, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)

        request.user.set_password(serializer.validated_data["newPassword"])
        request.user.save()

        return Response(
            {"detail": "Password changed successfully."},
            status=status.HTTP_200_OK,
        )


# ---------------------------------------------------------------------------
# Postal code lookup (registration auto-fill)
# ---------------------------------------------------------------------------
class PostalCodeLookupView(APIView):
    """
    GET /api/v1/auth/postal-code/<code>/

    Resolves a postal code to district / state / country.  Public, since
    it is used on the registration form before an account exists.
    """

    permission_classes = [AllowAny]

    def get(self, request, code):
        try:
            place = lookup_postal_code(code)
        except PostalLookupError:
            return Response(
                {"detail": "Postal code service is unavailable."},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        if place is None:
            return Response(
                {"detail": "No location found for this postal code."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(place, status=status.HTTP_200_OK)
