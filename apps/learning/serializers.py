"""
Serializers for Course.

Includes validation:
  - Title must not be blank
  - `instructor` is set from the request, never accepted from the client
  - `students` and `enrolled` are read-only queryset annotations
"""

from rest_framework import serializers

from apps.accounts.models import ArtForm

from .models import Course


class CourseSerializer(serializers.ModelSerializer):
    """
    CRUD serializer for Course.

    Read-only computed fields:
      - `instructor`: username of the publishing artist
      - `students`: number of enrolled students
      - `enrolled`: whether the requesting user is enrolled
    """

    instructor = serializers.CharField(source="instructor.username", read_only=True)
    artForm = serializers.ChoiceField(source="art_form", choices=ArtForm.choices)
    mediaUrl = serializers.CharField(
        source="media_url", max_length=500, required=False, allow_blank=True
    )
    students = serializers.IntegerField(source="student_count", read_only=True, default=0)
    enrolled = serializers.BooleanField(source="is_enrolled", read_only=True, default=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Course
        fields = [
            "id",
            "instructor",
            "title",
            "description",
            "artForm",
            "level",
            "mediaUrl",
            "students",
            "enrolled",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id"]

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title cannot be blank.")
        return value
