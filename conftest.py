"""
Root conftest — shared pytest fixtures and factory-boy factories.

All fixtures use the ``db`` marker implicitly via ``@pytest.mark.django_db``
on individual tests, or via ``autouse`` where noted.
"""

import string

import pytest
from rest_framework.test import APIClient

import factory
from django.contrib.auth import get_user_model
from django.core.cache import cache

from apps.accounts.models import (
    ArtForm,
    ArtistProfile,
    InstitutionProfile,
    ServiceProviderProfile,
    StudentProfile,
)
from apps.learning.models import Course
from apps.messaging.models import Message
from apps.social.models import Follow, Post

User = get_user_model()

PASSWORD = "TestPass123!"


def alpha_suffix(n):
    """0 → 'a', 25 → 'z', 26 → 'ba' … usernames may not contain digits."""
    letters = string.ascii_lowercase
    suffix = ""
    while True:
        n, rem = divmod(n, 26)
        suffix = letters[rem] + suffix
        if n == 0:
            return suffix


# ===================================================================
# Factories
# ===================================================================

class UserFactory(factory.django.DjangoModelFactory):
    """Create a User with a hashed password and unique username/email."""

    class Meta:
        model = User
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"tester{alpha_suffix(n)}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    role = User.Role.ARTIST
    password = factory.PostGeneration(
        lambda obj, create, extracted, **kw: obj.set_password(extracted or PASSWORD)
        or obj.save()
    )


class ArtistProfileFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ArtistProfile

    user = factory.SubFactory(UserFactory, role=User.Role.ARTIST)
    art_form = ArtForm.PAINTING
    specialisation = "Oil Portraits"


class StudentProfileFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = StudentProfile

    user = factory.SubFactory(UserFactory, role=User.Role.VIEWER_STUDENT)
    art_form = ArtForm.MUSIC


class InstitutionProfileFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = InstitutionProfile

    user = factory.SubFactory(UserFactory, role=User.Role.INSTITUTION)
    university_affiliation = "Kerala University"
    registration_id = "REG-001"
    postal_code = "682001"
    district = "Ernakulam"
    state = "Kerala"
    country = "India"


class ServiceProviderProfileFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ServiceProviderProfile

    user = factory.SubFactory(UserFactory, role=User.Role.SERVICE_PROVIDER)
    owner_name = "Ravi Kumar"
    expertise = factory.LazyFunction(lambda: ["Framing", "Restoration"])
    phone_number = "9876543210"
    address = "12 MG Road"
    postal_code = "560001"
    district = "Bangalore"
    state = "Karnataka"
    country = "India"


class PostFactory(factory.django.DjangoModelFactory):
    """Create a text Post by a given user."""

    class Meta:
        model = Post

    author = factory.SubFactory(UserFactory)
    content = factory.Sequence(lambda n: f"Post number {n}")


class FollowFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Follow

    follower = factory.SubFactory(UserFactory)
    following = factory.SubFactory(UserFactory)


class MessageFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Message

    sender = factory.SubFactory(UserFactory)
    recipient = factory.SubFactory(UserFactory)
    content = factory.Sequence(lambda n: f"Hello {n}")


class CourseFactory(factory.django.DjangoModelFactory):
    """Create a Course taught by an artist."""

    class Meta:
        model = Course

    instructor = factory.SubFactory(UserFactory, role=User.Role.ARTIST)
    title = factory.Sequence(lambda n: f"Course {n}")
    description = "A test course"
    art_form = ArtForm.PAINTING
    level = Course.Level.BEGINNER


# ===================================================================
# Fixtures
# ===================================================================

@pytest.fixture(autouse=True)
def _test_settings(settings):
    """Plain-HTTP test client and no shared throttle history between tests."""
    settings.SECURE_SSL_REDIRECT = False
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user(db):
    """A persisted artist (password: TestPass123!)."""
    return ArtistProfileFactory().user


@pytest.fixture
def other_user(db):
    """A second user for cross-user isolation tests."""
    return ArtistProfileFactory().user


@pytest.fixture
def student(db):
    """A persisted Viewer/Student."""
    return StudentProfileFactory().user


@pytest.fixture
def auth_client(user):
    """Authenticated DRF client for ``user``."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def other_auth_client(other_user):
    """Authenticated DRF client for ``other_user``."""
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


@pytest.fixture
def student_client(student):
    """Authenticated DRF client for ``student``."""
    client = APIClient()
    client.force_authenticate(user=student)
    return client


@pytest.fixture
def post(user):
    """A Post authored by ``user``."""
    return PostFactory(author=user)
