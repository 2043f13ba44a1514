"""Tests for the custom User model and the role profiles."""

import uuid

import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError

from apps.accounts.models import (
    DEFAULT_PROFILE_PICTURE,
    ArtistProfile,
    ServiceProviderProfile,
)
from conftest import (
    ArtistProfileFactory,
    InstitutionProfileFactory,
    ServiceProviderProfileFactory,
    StudentProfileFactory,
    UserFactory,
)

User = get_user_model()


@pytest.mark.django_db
class TestUserModel:
    """Model-level tests: fields, defaults, constraints, __str__."""

    def test_create_user(self):
        user = User.objects.create_user(
            username="modeluser",
            email="model@example.com",
            password="Pass1234!",
            role=User.Role.ARTIST,
        )
        assert isinstance(user.pk, uuid.UUID)
        assert user.email == "model@example.com"
        assert user.check_password("Pass1234!")

    def test_email_unique(self):
        UserFactory(username="a", email="dup@example.com")
        with pytest.raises(IntegrityError):
            UserFactory(username="b", email="dup@example.com")

    def test_username_unique(self):
        UserFactory(username="same")
        with pytest.raises(IntegrityError):
            UserFactory(username="same")

    def test_str_representation(self):
        user = UserFactory(username="struser", role=User.Role.INSTITUTION)
        assert str(user) == "struser (Institution)"

    def test_default_profile_picture(self):
        user = UserFactory()
        assert user.profile_picture == DEFAULT_PROFILE_PICTURE
        assert user.description == ""

    def test_save_strips_identity_fields(self):
        user = UserFactory(username="  padded ", email=" pad@example.com ")
        user.refresh_from_db()
        assert user.username == "padded"
        assert user.email == "pad@example.com"

    def test_username_letters_only(self):
        user = User(username="Jane123", email="jane@example.com", role=User.Role.ARTIST)
        user.set_password("Abcdef1!")
        with pytest.raises(ValidationError) as exc:
            user.full_clean()
        assert "username" in exc.value.message_dict

    def test_ordering_by_date_joined_desc(self):
        u1 = UserFactory()
        u2 = UserFactory()
        ordered = list(User.objects.filter(pk__in=[u1.pk, u2.pk]))
        assert ordered[0] == u2


@pytest.mark.django_db
class TestRoleProfiles:

    def test_role_profile_per_role(self):
        artist = ArtistProfileFactory()
        student = StudentProfileFactory()
        institution = InstitutionProfileFactory()
        provider = ServiceProviderProfileFactory()
        for profile in (artist, student, institution, provider):
            assert profile.user.role_profile == profile

    def test_role_profile_missing(self):
        assert UserFactory().role_profile is None

    def test_one_profile_per_user(self):
        profile = ArtistProfileFactory()
        with pytest.raises(IntegrityError):
            ArtistProfile.objects.create(
                user=profile.user, art_form="Music", specialisation="Jazz"
            )

    def test_clean_rejects_role_mismatch(self):
        student = UserFactory(role=User.Role.VIEWER_STUDENT)
        profile = ArtistProfile(user=student, art_form="Music", specialisation="Jazz")
        with pytest.raises(ValidationError):
            profile.clean()

    def test_expertise_normalised_on_save(self):
        profile = ServiceProviderProfileFactory(expertise=["fine-art ", "MUSIC"])
        profile.refresh_from_db()
        assert profile.expertise == ["Fineart", "Music"]

    def test_expertise_string_accepted(self):
        user = UserFactory(role=User.Role.SERVICE_PROVIDER)
        profile = ServiceProviderProfile.objects.create(
            user=user, owner_name="Ravi", expertise="stage lighting"
        )
        assert profile.expertise == ["Stagelighting"]

    def test_str(self):
        profile = StudentProfileFactory(user__username="learner")
        assert str(profile) == "Viewer/Student profile of learner"
