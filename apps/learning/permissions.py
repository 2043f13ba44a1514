"""Permissions for course authoring and enrollment."""

from rest_framework.permissions import SAFE_METHODS, BasePermission

from apps.accounts.models import User


class IsArtistInstructorOrReadOnly(BasePermission):
    """
    Reads are open to any authenticated user.  Creating a course needs
    the Artist role; changing one needs to be its instructor.
    """

    message = "Only artists can publish courses, and only their own."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        if view.action == "create":
            return request.user.role == User.Role.ARTIST
        return True

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return obj.instructor == request.user


class IsStudent(BasePermission):
    """Only Viewer/Student accounts may enroll in courses."""

    message = "Only students can enroll in courses."

    def has_permission(self, request, view):
        return request.user.role == User.Role.VIEWER_STUDENT
