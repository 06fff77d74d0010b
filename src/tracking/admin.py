from django.contrib import admin
from unfold.admin import ModelAdmin

from tracking import models


@admin.register(models.TrackingLink)
class TrackingLinkAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["name", "code", "organization", "destination_kind", "status", "views", "archived", "created_at"]
    list_filter = ["status", "destination_kind", "archived"]
    search_fields = ["name", "code", "organization__name", "created_by__email"]
    autocomplete_fields = ["organization", "created_by"]
    readonly_fields = ["code", "path", "views", "last_viewed_at"]
