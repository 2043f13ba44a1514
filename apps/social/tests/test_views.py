"""
API-level tests for posts, likes, the feed, profiles and following.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from rest_framework import status

from apps.social.models import Follow, Post
from conftest import (
    FollowFactory,
    InstitutionProfileFactory,
    PostFactory,
    UserFactory,
)


def _age(post, minutes):
    """Push ``post`` ``minutes`` into the past so ordering is deterministic."""
    Post.objects.filter(pk=post.pk).update(
        created_at=timezone.now() - timedelta(minutes=minutes)
    )


# ===================================================================
# Posts
# ===================================================================
@pytest.mark.django_db
class TestPostViewSet:

    LIST_URL = "/api/v1/posts/"

    def detail_url(self, pk):
        return f"/api/v1/posts/{pk}/"

    def like_url(self, pk):
        return f"/api/v1/posts/{pk}/toggle-like/"

    # --- Create ---
    def test_create_text(self, auth_client, user):
        r = auth_client.post(self.LIST_URL, {"content": "First post"}, format="json")
        assert r.status_code == status.HTTP_201_CREATED
        assert r.data["user"]["userName"] == user.username
        assert r.data["likes"] == 0
        assert r.data["liked"] is False
        assert Post.objects.get(pk=r.data["id"]).author == user

    def test_create_with_media_url(self, auth_client):
        r = auth_client.post(
            self.LIST_URL,
            {"mediaUrl": "https://cdn.example.com/a.mp3", "mediaType": "audio"},
            format="json",
        )
        assert r.status_code == status.HTTP_201_CREATED
        assert r.data["mediaType"] == "audio"

    @patch("apps.social.views.upload_post_media")
    def test_create_with_uploaded_media(self, mock_upload, auth_client):
        mock_upload.return_value = ("https://cdn.example.com/v.mp4", "video")
        clip = SimpleUploadedFile("clip.mp4", b"\x00\x01", content_type="video/mp4")
        r = auth_client.post(
            self.LIST_URL, {"content": "Rehearsal", "media": clip}, format="multipart"
        )
        assert r.status_code == status.HTTP_201_CREATED
        assert r.data["mediaUrl"] == "https://cdn.example.com/v.mp4"
        assert r.data["mediaType"] == "video"
        mock_upload.assert_called_once()

    def test_create_with_unsupported_media(self, auth_client):
        doc = SimpleUploadedFile("notes.pdf", b"%PDF", content_type="application/pdf")
        r = auth_client.post(self.LIST_URL, {"media": doc}, format="multipart")
        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert not Post.objects.exists()

    def test_create_empty_rejected(self, auth_client):
        r = auth_client.post(self.LIST_URL, {"content": ""}, format="json")
        assert r.status_code == status.HTTP_400_BAD_REQUEST

    # --- Read ---
    def test_list(self, auth_client, user, other_user):
        PostFactory.create_batch(2, author=user)
        PostFactory(author=other_user)
        r = auth_client.get(self.LIST_URL)
        assert r.status_code == status.HTTP_200_OK
        assert r.data["count"] == 3

    def test_filter_by_author(self, auth_client, user, other_user):
        PostFactory(author=user)
        PostFactory(author=other_user)
        r = auth_client.get(self.LIST_URL, {"author": other_user.username})
        assert r.data["count"] == 1
        assert r.data["results"][0]["user"]["userName"] == other_user.username

    def test_search(self, auth_client, user):
        PostFactory(author=user, content="Sunset over the backwaters")
        PostFactory(author=user, content="Morning raga")
        r = auth_client.get(self.LIST_URL, {"search": "raga"})
        assert r.data["count"] == 1

    def test_detail(self, auth_client, post):
        r = auth_client.get(self.detail_url(post.pk))
        assert r.status_code == status.HTTP_200_OK
        assert r.data["content"] == post.content

    # --- Update / delete ---
    def test_author_can_edit_text(self, auth_client, post):
        r = auth_client.patch(
            self.detail_url(post.pk),
            {"content": "Edited", "mediaUrl": "https://cdn/x.jpg"},
            format="json",
        )
        assert r.status_code == status.HTTP_200_OK
        post.refresh_from_db()
        assert post.content == "Edited"
        assert post.media_url == ""

    def test_non_author_cannot_edit(self, other_auth_client, post):
        r = other_auth_client.patch(
            self.detail_url(post.pk), {"content": "Hijacked"}, format="json"
        )
        assert r.status_code == status.HTTP_403_FORBIDDEN

    def test_put_not_allowed(self, auth_client, post):
        r = auth_client.put(self.detail_url(post.pk), {"content": "x"}, format="json")
        assert r.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_author_can_delete(self, auth_client, post):
        r = auth_client.delete(self.detail_url(post.pk))
        assert r.status_code == status.HTTP_204_NO_CONTENT
        assert not Post.objects.filter(pk=post.pk).exists()

    def test_non_author_cannot_delete(self, other_auth_client, post):
        r = other_auth_client.delete(self.detail_url(post.pk))
        assert r.status_code == status.HTTP_403_FORBIDDEN

    # --- Likes ---
    def test_toggle_like_twice(self, other_auth_client, other_user, post):
        r = other_auth_client.post(self.like_url(post.pk))
        assert r.status_code == status.HTTP_200_OK
        assert r.data == {"likes": 1, "liked": True}

        r = other_auth_client.post(self.like_url(post.pk))
        assert r.data == {"likes": 0, "liked": False}
        assert not post.liked_by.filter(pk=other_user.pk).exists()

    def test_likes_from_two_users(self, auth_client, other_auth_client, post):
        auth_client.post(self.like_url(post.pk))
        r = other_auth_client.post(self.like_url(post.pk))
        assert r.data["likes"] == 2

    def test_like_unknown_post(self, auth_client):
        r = auth_client.post(self.like_url("00000000-0000-0000-0000-000000000000"))
        assert r.status_code == status.HTTP_404_NOT_FOUND

    def test_unauthenticated(self, api_client):
        r = api_client.get(self.LIST_URL)
        assert r.status_code == status.HTTP_401_UNAUTHORIZED


# ===================================================================
# Feed
# ===================================================================
@pytest.mark.django_db
class TestFeedView:

    URL = "/api/v1/feed/"

    def test_newest_first(self, auth_client, user, other_user):
        older = PostFactory(author=other_user)
        newer = PostFactory(author=user)
        _age(older, 10)
        r = auth_client.get(self.URL)
        assert r.status_code == status.HTTP_200_OK
        assert r.data["userId"] == str(user.pk)
        assert [p["id"] for p in r.data["posts"]] == [str(newer.pk), str(older.pk)]

    def test_liked_flag(self, auth_client, user, other_user):
        post = PostFactory(author=other_user)
        post.liked_by.add(user)
        r = auth_client.get(self.URL)
        assert r.data["posts"][0]["liked"] is True

    def test_following_scope(self, auth_client, user, other_user):
        stranger = UserFactory()
        FollowFactory(follower=user, following=other_user)
        PostFactory(author=other_user)
        PostFactory(author=user)
        PostFactory(author=stranger)
        r = auth_client.get(self.URL, {"scope": "following"})
        authors = {p["user"]["userName"] for p in r.data["posts"]}
        assert authors == {user.username, other_user.username}

    def test_limit(self, auth_client, user):
        PostFactory.create_batch(5, author=user)
        r = auth_client.get(self.URL, {"limit": 2})
        assert len(r.data["posts"]) == 2

    def test_invalid_limit(self, auth_client):
        r = auth_client.get(self.URL, {"limit": "many"})
        assert r.status_code == status.HTTP_400_BAD_REQUEST

    def test_unauthenticated(self, api_client):
        r = api_client.get(self.URL)
        assert r.status_code == status.HTTP_401_UNAUTHORIZED


# ===================================================================
# Profiles and following
# ===================================================================
@pytest.mark.django_db
class TestProfileDetailView:

    def url(self, username):
        return f"/api/v1/profiles/{username}/"

    def test_aggregated_profile(self, auth_client, user):
        institution = InstitutionProfileFactory().user
        PostFactory.create_batch(2, author=institution)
        FollowFactory(follower=user, following=institution)

        r = auth_client.get(self.url(institution.username))
        assert r.status_code == status.HTTP_200_OK
        profile = r.data["profile"]
        assert profile["userName"] == institution.username
        assert profile["role"] == "Institution"
        assert profile["institutionName"] == "Kerala University"
        assert profile["numberOfPosts"] == 2
        assert profile["followerCount"] == 1
        assert profile["followingCount"] == 0
        assert profile["following"] is True
        assert len(r.data["posts"]) == 2

    def test_own_profile(self, auth_client, user):
        r = auth_client.get(self.url(user.username))
        assert r.data["profile"]["following"] is False
        assert r.data["profile"]["specialisation"] == "Oil Portraits"

    def test_unknown_user(self, auth_client):
        r = auth_client.get(self.url("nobody"))
        assert r.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestFollowToggleView:

    def url(self, username):
        return f"/api/v1/profiles/{username}/follow/"

    def test_follow_then_unfollow(self, auth_client, user, other_user):
        r = auth_client.post(self.url(other_user.username))
        assert r.status_code == status.HTTP_200_OK
        assert r.data == {"following": True, "followerCount": 1}

        r = auth_client.post(self.url(other_user.username))
        assert r.data == {"following": False, "followerCount": 0}
        assert not Follow.objects.filter(follower=user, following=other_user).exists()

    def test_self_follow_rejected(self, auth_client, user):
        r = auth_client.post(self.url(user.username))
        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert not Follow.objects.exists()

    def test_unknown_user(self, auth_client):
        r = auth_client.post(self.url("nobody"))
        assert r.status_code == status.HTTP_404_NOT_FOUND

    def test_unauthenticated(self, api_client, other_user):
        r = api_client.post(self.url(other_user.username))
        assert r.status_code == status.HTTP_401_UNAUTHORIZED
