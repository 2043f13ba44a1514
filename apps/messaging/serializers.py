"""Serializers for direct messages and the conversation summary."""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Message

User = get_user_model()


class MessageSerializer(serializers.ModelSerializer):
    """
    Send / read a direct message.

    ``recipient`` is addressed by username; the sender is always the
    requesting user.
    """

    sender = serializers.CharField(source="sender.username", read_only=True)
    recipient = serializers.SlugRelatedField(
        slug_field="username", queryset=User.objects.all()
    )
    isRead = serializers.BooleanField(source="is_read", read_only=True)
    timestamp = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Message
        fields = ["id", "sender", "recipient", "content", "isRead", "timestamp"]
        read_only_fields = ["id"]

    def validate_recipient(self, value):
        request = self.context.get("request")
        if request and value == request.user:
            raise serializers.ValidationError("You cannot send a message to yourself.")
        return value

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError("Message cannot be empty.")
        return value


class ConversationSerializer(serializers.Serializer):
    """Read-only summary row for /messages/conversations/."""

    userName = serializers.CharField()
    profilePicture = serializers.CharField()
    lastMessage = MessageSerializer()
    unread = serializers.IntegerField()
