"""Custom permissions for enforcing object-level authorship."""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsAuthorOrReadOnly(BasePermission):
    """
    Object-level permission: anyone authenticated may read, only the
    author may modify or delete.

    Expects the object to have an `author` attribute pointing to a User.
    """

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return obj.author == request.user
