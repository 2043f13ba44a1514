"""
Serializers for posts and the aggregated public profile.

``ProfileSerializer`` flattens the user's role profile onto the response
and omits blank role fields rather than sending nulls.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Follow, Post

User = get_user_model()


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------
class PostAuthorSerializer(serializers.ModelSerializer):
    userName = serializers.CharField(source="username", read_only=True)
    profilePicture = serializers.CharField(source="profile_picture", read_only=True)

    class Meta:
        model = User
        fields = ["id", "userName", "profilePicture"]


class PostSerializer(serializers.ModelSerializer):
    """
    Post CRUD serializer.

    Read-only computed fields:
      - `likes`: number of users in the liking set
      - `likedBy`: ids of those users
      - `liked`: whether the requesting user is one of them

    A post is created either with an external ``mediaUrl`` + ``mediaType``
    pair or with an uploaded ``media`` file (multipart), never both.
    """

    user = PostAuthorSerializer(source="author", read_only=True)
    mediaUrl = serializers.CharField(
        source="media_url", max_length=500, required=False, allow_blank=True
    )
    mediaType = serializers.ChoiceField(
        source="media_type",
        choices=Post.MediaType.choices,
        required=False,
        allow_blank=True,
    )
    media = serializers.FileField(write_only=True, required=False)
    timestamp = serializers.DateTimeField(source="created_at", read_only=True)
    likes = serializers.SerializerMethodField()
    likedBy = serializers.SerializerMethodField()
    liked = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = [
            "id",
            "user",
            "content",
            "mediaUrl",
            "mediaType",
            "media",
            "timestamp",
            "likes",
            "likedBy",
            "liked",
        ]
        read_only_fields = ["id"]

    # Counting the prefetched set keeps list views at a fixed query count.
    def get_likes(self, obj):
        return len(obj.liked_by.all())

    def get_likedBy(self, obj):
        return [str(u.pk) for u in obj.liked_by.all()]

    def get_liked(self, obj):
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return False
        return any(u.pk == request.user.pk for u in obj.liked_by.all())

    def validate(self, attrs):
        media_url = attrs.get("media_url", getattr(self.instance, "media_url", ""))
        media_type = attrs.get("media_type", getattr(self.instance, "media_type", ""))
        content = attrs.get("content", getattr(self.instance, "content", ""))

        if attrs.get("media") is not None:
            if media_url or media_type:
                raise serializers.ValidationError(
                    "Send either a media file or mediaUrl/mediaType, not both."
                )
            return attrs

        if bool(media_url) != bool(media_type):
            raise serializers.ValidationError(
                {"mediaType": "mediaUrl and mediaType must be provided together."}
            )
        if not (content or "").strip() and not media_url:
            raise serializers.ValidationError(
                {"content": "A post needs text content or media."}
            )
        return attrs


class PostUpdateSerializer(PostSerializer):
    """Only the text of an existing post may change."""

    mediaUrl = serializers.CharField(source="media_url", read_only=True)
    mediaType = serializers.CharField(source="media_type", read_only=True)

    class Meta(PostSerializer.Meta):
        fields = [f for f in PostSerializer.Meta.fields if f != "media"]


# ---------------------------------------------------------------------------
# Aggregated profile
# ---------------------------------------------------------------------------
def flatten_role_profile(user):
    """
    Role-specific fields of ``user`` as a flat dict of wire names.

    Blank values are left out so the client only renders what exists.
    """
    profile = user.role_profile
    if profile is None:
        return {}

    fields = {}
    if user.role in (User.Role.ARTIST, User.Role.VIEWER_STUDENT):
        fields["artForm"] = profile.art_form
    if user.role == User.Role.ARTIST:
        fields["specialisation"] = profile.specialisation
    if user.role == User.Role.INSTITUTION:
        fields["institutionName"] = profile.university_affiliation
        fields["registrationID"] = profile.registration_id
    if user.role == User.Role.SERVICE_PROVIDER:
        fields["ownerName"] = profile.owner_name
        fields["expertise"] = list(profile.expertise)
    if user.role in (User.Role.INSTITUTION, User.Role.SERVICE_PROVIDER):
        fields.update({
            "address": profile.address,
            "district": profile.district,
            "state": profile.state,
            "country": profile.country,
            "postalCode": profile.postal_code,
        })

    return {key: value for key, value in fields.items() if value}


class ProfileSerializer(serializers.ModelSerializer):
    """
    Read-only public profile.

    Expects a user annotated with ``number_of_posts``, ``follower_count``
    and ``following_count`` (see ``annotate_profile_counts``) and the
    requesting user in ``context["request"]``.
    """

    userName = serializers.CharField(source="username")
    profilePicture = serializers.CharField(source="profile_picture")
    numberOfPosts = serializers.IntegerField(source="number_of_posts")
    followerCount = serializers.IntegerField(source="follower_count")
    followingCount = serializers.IntegerField(source="following_count")
    following = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "userName",
            "role",
            "profilePicture",
            "description",
            "numberOfPosts",
            "followerCount",
            "followingCount",
            "following",
        ]
        read_only_fields = fields

    def get_following(self, obj):
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return False
        return Follow.objects.is_following(request.user, obj)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data.update(flatten_role_profile(instance))
        return data
