"""Admin configuration for the social app."""

from django.contrib import admin

from .models import Follow, Post


@admin.register(Follow)
class FollowAdmin(admin.ModelAdmin):
    list_display = ("follower", "following", "created_at")
    search_fields = ("follower__username", "following__username")


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ("author", "media_type", "created_at")
    list_filter = ("media_type",)
    search_fields = ("author__username", "content")
    readonly_fields = ("created_at",)
    filter_horizontal = ("liked_by",)
