"""
Serializers for registration, login, account profile management and
password change.

Field names on the wire follow the web client (``userName``,
``additionalData``, ``profilePicture`` ...).  Role-specific data is
validated by one serializer per role, selected from ``ROLE_SERIALIZERS``
by the submitted ``role``.
"""

import logging

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers

from .models import (
    ArtForm,
    ArtistProfile,
    InstitutionProfile,
    ServiceProviderProfile,
    StudentProfile,
)
from .postal import autofill_location
from .registration import REQUIRED_MESSAGE, missing_fields
from .validators import is_alpha_name, validate_alpha_name

User = get_user_model()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Role profile serializers
# ---------------------------------------------------------------------------
class ExpertiseField(serializers.Field):
    """
    Accepts a single expertise string or a list of them.

    Each entry must be letters and spaces; the model normalises the
    stored tags on save.
    """

    default_error_messages = {
        "invalid": "Expertise should only contain letters and spaces.",
        "empty": "This field may not be blank.",
        "type": "Expected a string or a list of strings.",
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = [data]
        if not isinstance(data, (list, tuple)):
            self.fail("type")
        values = [v for v in data if isinstance(v, str) and v.strip()]
        if not values:
            self.fail("empty")
        if len(values) != len(data) or not all(is_alpha_name(v) for v in values):
            self.fail("invalid")
        return values

    def to_representation(self, value):
        return list(value or [])


class InstitutionLocationSerializer(serializers.Serializer):
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    postalCode = serializers.CharField(source="postal_code", max_length=12)
    district = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    country = serializers.CharField(max_length=100)


class ServiceProviderLocationSerializer(InstitutionLocationSerializer):
    address = serializers.CharField(max_length=255)


class ArtistProfileSerializer(serializers.ModelSerializer):
    artForm = serializers.ChoiceField(source="art_form", choices=ArtForm.choices)
    specialisation = serializers.CharField(
        max_length=100, validators=[validate_alpha_name]
    )

    class Meta:
        model = ArtistProfile
        fields = ["artForm", "specialisation"]


class StudentProfileSerializer(serializers.ModelSerializer):
    artForm = serializers.ChoiceField(source="art_form", choices=ArtForm.choices)

    class Meta:
        model = StudentProfile
        fields = ["artForm"]


class InstitutionProfileSerializer(serializers.ModelSerializer):
    universityAffiliation = serializers.CharField(
        source="university_affiliation",
        max_length=200,
        validators=[validate_alpha_name],
    )
    registrationID = serializers.CharField(source="registration_id", max_length=50)
    location = InstitutionLocationSerializer(source="*")

    class Meta:
        model = InstitutionProfile
        fields = ["universityAffiliation", "registrationID", "location"]


class ServiceProviderProfileSerializer(serializers.ModelSerializer):
    ownerName = serializers.CharField(
        source="owner_name", max_length=150, validators=[validate_alpha_name]
    )
    expertise = ExpertiseField()
    phoneNumber = serializers.CharField(
        source="phone_number", max_length=20, required=False, allow_blank=True
    )
    location = ServiceProviderLocationSerializer(source="*")

    class Meta:
        model = ServiceProviderProfile
        fields = ["ownerName", "expertise", "phoneNumber", "location"]


ROLE_SERIALIZERS = {
    User.Role.ARTIST: ArtistProfileSerializer,
    User.Role.VIEWER_STUDENT: StudentProfileSerializer,
    User.Role.INSTITUTION: InstitutionProfileSerializer,
    User.Role.SERVICE_PROVIDER: ServiceProviderProfileSerializer,
}

ROLES_WITH_LOCATION = {User.Role.INSTITUTION, User.Role.SERVICE_PROVIDER}


def role_profile_data(user):
    """Serialised role profile for ``user`` or ``{}`` when there is none."""
    profile = user.role_profile
    if profile is None:
        return {}
    return ROLE_SERIALIZERS[user.role](profile).data


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
class RegisterSerializer(serializers.Serializer):
    """
    Handles new-user registration.

    Accepts the base account fields plus an ``additionalData`` object whose
    shape depends on ``role``.  The role is checked before anything else
    and the user + role profile are written in a single transaction.
    """

    userName = serializers.CharField(max_length=150, validators=[validate_alpha_name])
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True, min_length=8, validators=[validate_password]
    )
    confirmPassword = serializers.CharField(write_only=True, required=False)
    role = serializers.ChoiceField(choices=User.Role.choices)
    additionalData = serializers.DictField(required=False, default=dict)

    # --- field-level ---
    def validate_userName(self, value):
        value = value.strip()
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("A user with this username already exists.")
        return value

    def validate_email(self, value):
        """Normalise and check uniqueness (case-insensitive)."""
        value = value.lower().strip()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    # --- object-level ---
    def validate(self, attrs):
        confirm = attrs.pop("confirmPassword", None)
        if confirm is not None and confirm != attrs["password"]:
            raise serializers.ValidationError(
                {"confirmPassword": "Passwords do not match."}
            )

        role = attrs["role"]
        data = dict(attrs.get("additionalData") or {})
        if role in ROLES_WITH_LOCATION and isinstance(data.get("location"), dict):
            data["location"] = autofill_location(data["location"])

        missing = missing_fields(role, data)
        if missing:
            raise serializers.ValidationError(
                {"additionalData": {field: REQUIRED_MESSAGE for field in missing}}
            )

        role_serializer = ROLE_SERIALIZERS[role](data=data)
        if not role_serializer.is_valid():
            raise serializers.ValidationError({"additionalData": role_serializer.errors})

        attrs["additionalData"] = role_serializer.validated_data
        self._role_serializer = role_serializer
        return attrs

    def create(self, validated_data):
        with transaction.atomic():
            user = User.objects.create_user(
                username=validated_data["userName"],
                email=validated_data["email"],
                password=validated_data["password"],
                role=validated_data["role"],
            )
            self._role_serializer.save(user=user)
        logger.info("Registered %s account for %s", user.role, user.username)
        return user


# ---------------------------------------------------------------------------
# Login (used alongside SimpleJWT — returns extra user info)
# ---------------------------------------------------------------------------
class LoginSerializer(serializers.Serializer):
    """
    Validates login credentials.  The view itself handles token generation
    via SimpleJWT; this serializer authenticates and returns the user.
    """

    userName = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        user = authenticate(
            username=attrs["userName"].strip(), password=attrs["password"]
        )
        if user is None:
            raise serializers.ValidationError("Invalid username or password.")
        if not user.is_active:
            raise serializers.ValidationError("This account has been deactivated.")
        attrs["user"] = user
        return attrs


# ---------------------------------------------------------------------------
# User Profile (read / update)
# ---------------------------------------------------------------------------
class UserProfileSerializer(serializers.ModelSerializer):
    """
    Read / update the authenticated user's own account.

    ``description`` and the role data under ``additionalData`` are
    editable; identity fields are read-only.
    """

    userName = serializers.CharField(source="username", read_only=True)
    profilePicture = serializers.CharField(source="profile_picture", read_only=True)
    dateJoined = serializers.DateTimeField(source="date_joined", read_only=True)
    additionalData = serializers.DictField(required=False, write_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "userName",
            "email",
            "role",
            "description",
            "profilePicture",
            "dateJoined",
            "additionalData",
        ]
        read_only_fields = ["id", "email", "role"]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["additionalData"] = role_profile_data(instance)
        return data

    def validate_additionalData(self, value):
        profile = self.instance.role_profile if self.instance else None
        if profile is None:
            raise serializers.ValidationError("This account has no role profile to update.")
        role_serializer = ROLE_SERIALIZERS[self.instance.role](
            profile, data=value, partial=True
        )
        role_serializer.is_valid(raise_exception=True)
        self._role_serializer = role_serializer
        return role_serializer.validated_data

    def update(self, instance, validated_data):
        role_data = validated_data.pop("additionalData", None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if role_data is not None:
                self._role_serializer.save()
        return instance


# ---------------------------------------------------------------------------
# Change Password
# ---------------------------------------------------------------------------
class ChangePasswordSerializer(serializers.Serializer):
    """Requires the current password before allowing a change."""

    oldPassword = serializers.CharField(write_only=True)
    newPassword = serializers.CharField(
        write_only=True, min_length=8, validators=[validate_password]
    )
    newPasswordConfirm = serializers.CharField(write_only=True, min_length=8)

    def validate_oldPassword(self, value):
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate(self, attrs):
        if attrs["newPassword"] != attrs["newPasswordConfirm"]:
            raise serializers.ValidationError(
                {"newPasswordConfirm": "New passwords do not match."}
            )
        return attrs
