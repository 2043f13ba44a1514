"""
Custom User model plus one profile model per account role.

Every account carries a ``role``; the matching role profile holds the
attributes that only make sense for that role.  ``PROFILE_MODELS`` maps a
role to its profile class so callers never branch on loosely-typed dicts.
"""

import uuid

from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import models

from .validators import normalize_expertise, validate_alpha_name

DEFAULT_PROFILE_PICTURE = "/uploads/default-profile.png"


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.

    Uses UUID as primary key.  Usernames are display names made of letters
    and spaces, unique across the platform, as are email addresses.
    Post and follower counts are never stored here; they are read-model
    queries against the social app.
    """

    class Role(models.TextChoices):
        ARTIST = "Artist", "Artist"
        VIEWER_STUDENT = "Viewer/Student", "Viewer/Student"
        INSTITUTION = "Institution", "Institution"
        SERVICE_PROVIDER = "Service Provider", "Service Provider"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(
        max_length=150,
        unique=True,
        validators=[validate_alpha_name],
        error_messages={"unique": "A user with that username already exists."},
    )
    email = models.EmailField(unique=True, blank=False)
    role = models.CharField(max_length=20, choices=Role.choices)
    description = models.TextField(max_length=1000, blank=True, default="")
    profile_picture = models.CharField(
        max_length=500,
        default=DEFAULT_PROFILE_PICTURE,
        help_text="Cloudinary URL (or placeholder path) for the profile picture.",
    )

    class Meta:
        ordering = ["-date_joined"]

    def __str__(self):
        return f"{self.username} ({self.role})"

    def save(self, *args, **kwargs):
        self.username = (self.username or "").strip()
        self.email = (self.email or "").strip()
        super().save(*args, **kwargs)

    @property
    def role_profile(self):
        """Return the profile matching this user's role, or ``None``."""
        model = PROFILE_MODELS.get(self.role)
        if model is None:
            return None
        try:
            return getattr(self, model.related_name)
        except ObjectDoesNotExist:
            return None


# ---------------------------------------------------------------------------
# Role profiles
# ---------------------------------------------------------------------------
class ArtForm(models.TextChoices):
    PAINTING = "Painting", "Painting"
    SCULPTURE = "Sculpture", "Sculpture"
    ARCHITECTURE = "Architecture", "Architecture"
    LITERATURE = "Literature", "Literature"
    CINEMA = "Cinema", "Cinema"
    THEATER = "Theater", "Theater"
    MUSIC = "Music", "Music"


class RoleProfile(models.Model):
    """Abstract base: one-to-one owner link plus role consistency check."""

    role = None
    related_name = None

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.role} profile of {self.user.username}"

    def clean(self):
        if self.user_id and self.user.role != self.role:
            raise ValidationError(
                {"user": f"Profile owner must have the '{self.role}' role."}
            )


class Location(models.Model):
    """Abstract postal location shared by institutions and service providers."""

    address = models.CharField(max_length=255, blank=True, default="")
    district = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="")
    postal_code = models.CharField(max_length=12, blank=True, default="")

    class Meta:
        abstract = True


class ArtistProfile(RoleProfile):
    role = User.Role.ARTIST
    related_name = "artist_profile"

    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name="artist_profile"
    )
    art_form = models.CharField(max_length=20, choices=ArtForm.choices)
    specialisation = models.CharField(
        max_length=100, validators=[validate_alpha_name]
    )


class StudentProfile(RoleProfile):
    role = User.Role.VIEWER_STUDENT
    related_name = "student_profile"

    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name="student_profile"
    )
    art_form = models.CharField(max_length=20, choices=ArtForm.choices)


class InstitutionProfile(RoleProfile, Location):
    role = User.Role.INSTITUTION
    related_name = "institution_profile"

    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name="institution_profile"
    )
    university_affiliation = models.CharField(
        max_length=200, validators=[validate_alpha_name]
    )
    registration_id = models.CharField(max_length=50)


class ServiceProviderProfile(RoleProfile, Location):
    """
    Service provider details.

    ``expertise`` is normalised on every save, so stored tags may differ
    from what the caller passed in.
    """

    role = User.Role.SERVICE_PROVIDER
    related_name = "service_provider_profile"

    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name="service_provider_profile"
    )
    owner_name = models.CharField(max_length=150, validators=[validate_alpha_name])
    expertise = models.JSONField(default=list, blank=True)
    phone_number = models.CharField(max_length=20, blank=True, default="")

    def save(self, *args, **kwargs):
        self.expertise = normalize_expertise(self.expertise)
        super().save(*args, **kwargs)


PROFILE_MODELS = {
    User.Role.ARTIST: ArtistProfile,
    User.Role.VIEWER_STUDENT: StudentProfile,
    User.Role.INSTITUTION: InstitutionProfile,
    User.Role.SERVICE_PROVIDER: ServiceProviderProfile,
}
