"""
ViewSet for Course CRUD plus instructor / student listings and the
enrollment toggle.

Key patterns:
  - Any authenticated user can browse; only artists publish courses
  - Object-level instructor permission on update/delete
  - Enrollment count and the requester's enrollment annotated for list
    and detail views
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Exists, OuterRef

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter, OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from django_filters.rest_framework import DjangoFilterBackend

from .filters import CourseFilter
from .models import Course, Enrollment
from .permissions import IsArtistInstructorOrReadOnly, IsStudent
from .serializers import CourseSerializer

logger = logging.getLogger(__name__)


class CourseViewSet(viewsets.ModelViewSet):
    """
    CRUD for courses, with filtering, search, ordering, and pagination.

    list     → GET    /api/v1/courses/
    create   → POST   /api/v1/courses/             (artists)
    read     → GET    /api/v1/courses/{id}/
    update   → PATCH  /api/v1/courses/{id}/        (instructor)
    delete   → DELETE /api/v1/courses/{id}/        (instructor)
    mine     → GET    /api/v1/courses/mine/
    enrolled → GET    /api/v1/courses/enrolled/
    enroll   → POST   /api/v1/courses/{id}/enroll/ (students, toggle)

    Query parameters:
      ?art_form=Painting,Music    — filter by art form (CSV)
      ?level=beginner             — filter by level (CSV)
      ?instructor=<username>      — filter by instructor
      ?search=keyword             — search title + description
      ?ordering=-created_at       — sort (prefix - for desc)
    """

    serializer_class = CourseSerializer
    permission_classes = [IsAuthenticated, IsArtistInstructorOrReadOnly]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = CourseFilter
    search_fields = ["title", "description"]
    ordering_fields = ["title", "level", "created_at", "updated_at"]
    ordering = ["-created_at"]

    def get_queryset(self):
        enrollment = Enrollment.objects.filter(
            course=OuterRef("pk"), student=self.request.user.pk
        )
        return Course.objects.select_related("instructor").annotate(
            student_count=Count("enrollments", distinct=True),
            is_enrolled=Exists(enrollment),
        )

    def perform_create(self, serializer):
        """The publishing artist becomes the instructor."""
        course = serializer.save(instructor=self.request.user)
        logger.info("Course %s published by %s", course.pk, self.request.user.username)

    def _list(self, queryset):
        queryset = self.filter_queryset(queryset)
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        """GET /api/v1/courses/mine/ — courses the requester teaches."""
        return self._list(self.get_queryset().filter(instructor=request.user))

    @action(detail=False, methods=["get"], url_path="enrolled")
    def enrolled(self, request):
        """GET /api/v1/courses/enrolled/ — courses the requester attends."""
        return self._list(
            self.get_queryset().filter(enrollments__student=request.user)
        )

    @action(
        detail=True,
        methods=["post"],
        url_path="enroll",
        permission_classes=[IsAuthenticated, IsStudent],
    )
    def enroll(self, request, pk=None):
        """
        POST /api/v1/courses/{id}/enroll/

        Enrolls the requesting student, or withdraws them if already
        enrolled.  Returns the new state and enrollment count.
        """
        course = self.get_object()
        with transaction.atomic():
            deleted, _ = Enrollment.objects.filter(
                student=request.user, course=course
            ).delete()
            enrolled = not deleted
            if enrolled:
                try:
                    with transaction.atomic():
                        Enrollment.objects.create(student=request.user, course=course)
                except IntegrityError:
                    pass

        return Response(
            {"enrolled": enrolled, "students": course.enrollments.count()},
            status=status.HTTP_200_OK,
        )
