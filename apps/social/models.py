"""Follow edges and posts for the social feed."""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, models, transaction
from django.db.models import F, Q


class SelfFollowError(ValueError):
    """Raised when a user tries to follow themselves."""


class FollowManager(models.Manager):
    def is_following(self, follower, following):
        return self.filter(follower=follower, following=following).exists()

    def toggle(self, follower, following):
        """
        Flip the follower → following edge and return the new state.

        Raises ``SelfFollowError`` when both users are the same.
        """
        if follower.pk == following.pk:
            raise SelfFollowError("You cannot follow yourself.")

        with transaction.atomic():
            deleted, _ = self.filter(follower=follower, following=following).delete()
            if deleted:
                return False
            try:
                with transaction.atomic():
                    self.create(follower=follower, following=following)
            except IntegrityError:
                # A concurrent request created the same edge first.
                pass
            return True


class Follow(models.Model):
    """
    Directed follower → following edge.

    At most one edge exists per ordered pair and a user cannot follow
    themselves; both rules are enforced by database constraints.
    """

    follower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="following_edges",
    )
    following = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="follower_edges",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = FollowManager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["follower", "following"],
                name="unique_follow_edge",
            ),
            models.CheckConstraint(
                condition=~Q(follower=F("following")),
                name="no_self_follow",
            ),
        ]

    def __str__(self):
        return f"{self.follower.username} → {self.following.username}"


class Post(models.Model):
    """
    User-authored content with optional media and a set of likers.

    ``liked_by`` is a set: the M2M table holds at most one row per
    (post, user), so repeated likes never inflate the count.
    """

    class MediaType(models.TextChoices):
        IMAGE = "image", "Image"
        VIDEO = "video", "Video"
        AUDIO = "audio", "Audio"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="posts",
    )
    content = models.TextField(blank=True, default="")
    media_url = models.CharField(max_length=500, blank=True, default="")
    media_type = models.CharField(
        max_length=10, choices=MediaType.choices, blank=True, default=""
    )
    liked_by = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="liked_posts",
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Post by {self.author.username} at {self.created_at:%Y-%m-%d %H:%M}"

    def clean(self):
        if bool(self.media_url) != bool(self.media_type):
            raise ValidationError(
                "mediaUrl and mediaType must be provided together."
            )
        if not self.content.strip() and not self.media_url:
            raise ValidationError("A post needs text content or media.")

    @property
    def likes(self):
        return self.liked_by.count()

    def is_liked_by(self, user):
        return self.liked_by.filter(pk=user.pk).exists()

    def toggle_like(self, user):
        """Add ``user`` to the likers if absent, else remove them; return the new state."""
        if self.is_liked_by(user):
            self.liked_by.remove(user)
            return False
        self.liked_by.add(user)
        return True
