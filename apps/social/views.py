"""
Views for the social feed: posts and likes, the home feed, aggregated
public profiles, and the follow toggle.

Key patterns:
  - Counts (likes, posts, followers) are computed from the post and
    follow tables at read time, never stored on the user row
  - Like and follow are toggles; both rely on database uniqueness so a
    user's membership is a boolean regardless of how often they click
  - Only the author may edit or delete a post
"""

import logging

from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.cloudinary_utils import ImageValidationError, upload_post_media

from .models import Follow, Post, SelfFollowError
from .permissions import IsAuthorOrReadOnly
from .serializers import PostSerializer, PostUpdateSerializer, ProfileSerializer

User = get_user_model()
logger = logging.getLogger(__name__)

FEED_DEFAULT_LIMIT = 50
FEED_MAX_LIMIT = 100


def post_queryset():
    """Posts with author and likers loaded up front."""
    return Post.objects.select_related("author").prefetch_related("liked_by")


def annotate_profile_counts(queryset):
    """Attach post / follower / following counts as read-model annotations."""
    return queryset.annotate(
        number_of_posts=Count("posts", distinct=True),
        follower_count=Count("follower_edges", distinct=True),
        following_count=Count("following_edges", distinct=True),
    )


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------
class PostViewSet(viewsets.ModelViewSet):
    """
    CRUD for posts plus the like toggle.

    list        → GET    /api/v1/posts/              (?author=<username>)
    create      → POST   /api/v1/posts/              (JSON or multipart)
    read        → GET    /api/v1/posts/{id}/
    update      → PATCH  /api/v1/posts/{id}/         (author only, text only)
    delete      → DELETE /api/v1/posts/{id}/         (author only)
    toggle-like → POST   /api/v1/posts/{id}/toggle-like/
    """

    permission_classes = [IsAuthenticated, IsAuthorOrReadOnly]
    # Disable PUT — only PATCH for partial updates
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    search_fields = ["content", "author__username"]
    ordering_fields = ["created_at"]
    ordering = ["-created_at"]

    def get_serializer_class(self):
        if self.action == "partial_update":
            return PostUpdateSerializer
        return PostSerializer

    def get_queryset(self):
        qs = post_queryset()
        author = self.request.query_params.get("author")
        if author:
            qs = qs.filter(author__username=author)
        return qs

    def perform_create(self, serializer):
        """Assign the author and upload any attached media file."""
        media = serializer.validated_data.pop("media", None)
        extra = {"author": self.request.user}
        if media is not None:
            try:
                url, kind = upload_post_media(media)
            except ImageValidationError as exc:
                raise ValidationError({"media": str(exc)})
            except RuntimeError:
                raise APIException("Media upload failed. Please try again later.")
            extra.update(media_url=url, media_type=kind)
        post = serializer.save(**extra)
        logger.info("Post %s created by %s", post.pk, self.request.user.username)

    @action(
        detail=True,
        methods=["post"],
        url_path="toggle-like",
        permission_classes=[IsAuthenticated],
    )
    def toggle_like(self, request, pk=None):
        """
        POST /api/v1/posts/{id}/toggle-like/

        Adds the requester to the post's likers if absent, else removes
        them.  Returns the new like count and state.
        """
        post = self.get_object()
        liked = post.toggle_like(request.user)
        return Response(
            {"likes": post.liked_by.count(), "liked": liked},
            status=status.HTTP_200_OK,
        )


# ---------------------------------------------------------------------------
# Home feed
# ---------------------------------------------------------------------------
class FeedView(APIView):
    """
    GET /api/v1/feed/

    Newest posts first, with the requester's id so the client can mark
    liked posts.

    Query parameters:
      ?scope=following   — only posts by followed users and the requester
      ?limit=50          — number of posts (max 100)
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = post_queryset()
        if request.query_params.get("scope") == "following":
            followed = Follow.objects.filter(follower=request.user).values("following")
            qs = qs.filter(Q(author__in=followed) | Q(author=request.user))

        try:
            limit = int(request.query_params.get("limit", FEED_DEFAULT_LIMIT))
        except ValueError:
            raise ValidationError({"limit": "Must be an integer."})
        limit = max(1, min(limit, FEED_MAX_LIMIT))

        posts = qs.order_by("-created_at")[:limit]
        serializer = PostSerializer(posts, many=True, context={"request": request})
        return Response(
            {"posts": serializer.data, "userId": str(request.user.pk)},
            status=status.HTTP_200_OK,
        )


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------
class ProfileDetailView(APIView):
    """
    GET /api/v1/profiles/<username>/

    Aggregates the account, its role profile, derived counts, whether
    the requester follows it, and its posts.  Read-only.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, username):
        user = get_object_or_404(
            annotate_profile_counts(User.objects.all()), username=username
        )
        posts = post_queryset().filter(author=user)
        context = {"request": request}
        return Response(
            {
                "profile": ProfileSerializer(user, context=context).data,
                "posts": PostSerializer(posts, many=True, context=context).data,
            },
            status=status.HTTP_200_OK,
        )


class FollowToggleView(APIView):
    """
    POST /api/v1/profiles/<username>/follow/

    Follows the user if the requester does not already, else unfollows.
    Self-follow is rejected with 400.
    """

    permission_classes = [IsAuthenticated]

    def post(self, request, username):
        target = get_object_or_404(User, username=username)
        try:
            following = Follow.objects.toggle(request.user, target)
        except SelfFollowError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(
            "%s %s %s",
            request.user.username,
            "followed" if following else "unfollowed",
            target.username,
        )
        return Response(
            {
                "following": following,
                "followerCount": Follow.objects.filter(following=target).count(),
            },
            status=status.HTTP_200_OK,
        )
