"""
ViewSet for direct messages.

All querysets are scoped to messages the requester sent or received, so
one user can never read another pair's conversation.
"""

import logging

from django.contrib.auth import get_user_model
from django.db.models import Count, Exists, OuterRef, Q, Subquery

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Message
from .permissions import IsSenderOrReadOnly
from .serializers import ConversationSerializer, MessageSerializer

User = get_user_model()
logger = logging.getLogger(__name__)


class MessageViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    list          → GET    /api/v1/messages/               (?with=<username>)
    create        → POST   /api/v1/messages/
    read          → GET    /api/v1/messages/{id}/
    delete        → DELETE /api/v1/messages/{id}/          (sender only)
    conversations → GET    /api/v1/messages/conversations/
    mark read     → POST   /api/v1/messages/{id}/read/     (recipient only)
    """

    serializer_class = MessageSerializer
    permission_classes = [IsAuthenticated, IsSenderOrReadOnly]
    filter_backends = [OrderingFilter]
    ordering_fields = ["created_at"]
    ordering = ["created_at"]

    def get_queryset(self):
        user = self.request.user
        qs = Message.objects.filter(
            Q(sender=user) | Q(recipient=user)
        ).select_related("sender", "recipient")

        partner = self.request.query_params.get("with")
        if partner:
            qs = qs.filter(
                Q(sender__username=partner) | Q(recipient__username=partner)
            )
        return qs

    def perform_create(self, serializer):
        """The requester is always the sender."""
        message = serializer.save(sender=self.request.user)
        logger.info(
            "Message %s sent from %s to %s",
            message.pk,
            message.sender.username,
            message.recipient.username,
        )

    @action(detail=False, methods=["get"], url_path="conversations")
    def conversations(self, request):
        """
        GET /api/v1/messages/conversations/

        One row per conversation partner, most recent first, with the
        last message and how many messages from that partner are unread.
        """
        user = request.user
        exchanged = Message.objects.filter(
            Q(sender=user, recipient=OuterRef("pk"))
            | Q(sender=OuterRef("pk"), recipient=user)
        ).order_by("-created_at")
        partners = list(
            User.objects.filter(Exists(exchanged))
            .annotate(
                last_message_id=Subquery(exchanged.values("pk")[:1]),
                last_message_at=Subquery(exchanged.values("created_at")[:1]),
                unread=Count(
                    "sent_messages",
                    filter=Q(
                        sent_messages__recipient=user,
                        sent_messages__is_read=False,
                    ),
                ),
            )
            .order_by("-last_message_at")
        )
        last_messages = Message.objects.select_related("sender", "recipient").in_bulk(
            [partner.last_message_id for partner in partners]
        )

        rows = [
            {
                "userName": partner.username,
                "profilePicture": partner.profile_picture,
                "lastMessage": last_messages[partner.last_message_id],
                "unread": partner.unread,
            }
            for partner in partners
        ]
        serializer = ConversationSerializer(rows, many=True, context={"request": request})
        return Response(serializer.data)

    @action(
        detail=True,
        methods=["post"],
        url_path="read",
        permission_classes=[IsAuthenticated],
    )
    def mark_read(self, request, pk=None):
        """POST /api/v1/messages/{id}/read/ — only the recipient may mark it."""
        message = self.get_object()
        if message.recipient != request.user:
            return Response(
                {"detail": "Only the recipient can mark a message as read."},
                status=status.HTTP_403_FORBIDDEN,
            )
        if not message.is_read:
            message.is_read = True
            message.save(update_fields=["is_read"])
        return Response(self.get_serializer(message).data)
