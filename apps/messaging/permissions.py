"""Object-level permissions for direct messages."""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsSenderOrReadOnly(BasePermission):
    """
    Participants may read a message; only its sender may delete it.

    Querysets are already scoped to messages the requester sent or
    received, so this only has to separate the two roles.
    """

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return obj.sender == request.user
