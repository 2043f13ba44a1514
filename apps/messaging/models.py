"""Direct messages between two users."""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import F, Q


class Message(models.Model):
    """
    A single direct message.

    A conversation is the set of messages exchanged by one pair of users;
    there is no separate conversation table.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
    )
    content = models.TextField(max_length=2000)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(
                fields=["sender", "recipient", "created_at"],
                name="message_pair_created_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(sender=F("recipient")),
                name="no_message_to_self",
            ),
        ]

    def __str__(self):
        return f"{self.sender.username} → {self.recipient.username}: {self.content[:30]}"
