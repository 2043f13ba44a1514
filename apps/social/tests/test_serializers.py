"""Tests for post and profile serializers."""

import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIRequestFactory

from apps.social.serializers import PostSerializer, ProfileSerializer, flatten_role_profile
from apps.social.views import annotate_profile_counts
from conftest import (
    ArtistProfileFactory,
    FollowFactory,
    InstitutionProfileFactory,
    PostFactory,
    ServiceProviderProfileFactory,
    StudentProfileFactory,
    UserFactory,
)

User = get_user_model()
factory = APIRequestFactory()


def _context(user):
    request = factory.get("/")
    request.user = user
    return {"request": request}


@pytest.mark.django_db
class TestPostSerializer:

    def test_representation(self):
        post = PostFactory(content="Hello")
        liker = UserFactory()
        post.liked_by.add(liker)
        data = PostSerializer(post, context=_context(liker)).data
        assert data["content"] == "Hello"
        assert data["user"]["userName"] == post.author.username
        assert data["likes"] == 1
        assert data["likedBy"] == [str(liker.pk)]
        assert data["liked"] is True
        assert "media" not in data

    def test_not_liked_by_other(self):
        post = PostFactory()
        data = PostSerializer(post, context=_context(UserFactory())).data
        assert data["liked"] is False

    def test_text_post_valid(self):
        s = PostSerializer(data={"content": "Just text"})
        assert s.is_valid(), s.errors

    def test_media_url_post_valid(self):
        s = PostSerializer(data={"mediaUrl": "https://cdn/x.mp4", "mediaType": "video"})
        assert s.is_valid(), s.errors

    def test_empty_post_rejected(self):
        s = PostSerializer(data={"content": "  "})
        assert not s.is_valid()
        assert "content" in s.errors

    def test_media_url_requires_type(self):
        s = PostSerializer(data={"content": "x", "mediaUrl": "https://cdn/x.jpg"})
        assert not s.is_valid()
        assert "mediaType" in s.errors

    def test_unknown_media_type(self):
        s = PostSerializer(data={"mediaUrl": "https://cdn/x.gif", "mediaType": "gif"})
        assert not s.is_valid()

    def test_file_and_url_exclusive(self):
        f = SimpleUploadedFile("a.jpg", b"\xff\xd8\xff", content_type="image/jpeg")
        s = PostSerializer(
            data={"media": f, "mediaUrl": "https://cdn/x.jpg", "mediaType": "image"}
        )
        assert not s.is_valid()


@pytest.mark.django_db
class TestFlattenRoleProfile:

    def test_artist(self):
        user = ArtistProfileFactory(specialisation="Murals").user
        assert flatten_role_profile(user) == {"artForm": "Painting", "specialisation": "Murals"}

    def test_student(self):
        user = StudentProfileFactory().user
        assert flatten_role_profile(user) == {"artForm": "Music"}

    def test_institution(self):
        user = InstitutionProfileFactory().user
        data = flatten_role_profile(user)
        assert data["institutionName"] == "Kerala University"
        assert data["registrationID"] == "REG-001"
        assert data["postalCode"] == "682001"
        assert "address" not in data  # blank values are omitted

    def test_service_provider(self):
        user = ServiceProviderProfileFactory().user
        data = flatten_role_profile(user)
        assert data["ownerName"] == "Ravi Kumar"
        assert data["expertise"] == ["Framing", "Restoration"]
        assert data["address"] == "12 MG Road"

    def test_without_profile(self):
        assert flatten_role_profile(UserFactory()) == {}


@pytest.mark.django_db
class TestProfileSerializer:

    def _annotated(self, user):
        return annotate_profile_counts(User.objects.all()).get(pk=user.pk)

    def test_counts_and_following(self):
        artist = ArtistProfileFactory().user
        viewer = UserFactory()
        PostFactory.create_batch(2, author=artist)
        FollowFactory(follower=viewer, following=artist)
        FollowFactory(follower=artist, following=UserFactory())

        data = ProfileSerializer(self._annotated(artist), context=_context(viewer)).data
        assert data["numberOfPosts"] == 2
        assert data["followerCount"] == 1
        assert data["followingCount"] == 1
        assert data["following"] is True
        assert data["artForm"] == "Painting"

    def test_not_following_self(self):
        artist = ArtistProfileFactory().user
        data = ProfileSerializer(self._annotated(artist), context=_context(artist)).data
        assert data["following"] is False
        assert data["followerCount"] == 0
