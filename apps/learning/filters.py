"""
django-filter FilterSet for Course queryset filtering.

Supports filtering by:
  - art_form (exact match or comma-separated list)
  - level (exact match or comma-separated list)
  - instructor username
"""

from django_filters import rest_framework as filters

from .models import Course


class CourseFilter(filters.FilterSet):
    """
    Filterable fields exposed as query parameters on GET /courses/.

    Examples:
        ?art_form=Painting,Music
        ?level=beginner
        ?instructor=Jane Doe
    """

    art_form = filters.CharFilter(method="filter_csv_field")
    level = filters.CharFilter(method="filter_csv_field")
    instructor = filters.CharFilter(field_name="instructor__username")

    class Meta:
        model = Course
        fields = ["art_form", "level", "instructor"]

    def filter_csv_field(self, queryset, name, value):
        """Allow comma-separated values, e.g. ?level=beginner,advanced."""
        values = [v.strip() for v in value.split(",") if v.strip()]
        if values:
            return queryset.filter(**{f"{name}__in": values})
        return queryset
