# Error monitoring in the admin.

import json
import typing as t

from django.contrib import admin
from django.utils.html import format_html
from django.utils.safestring import mark_safe
from unfold.admin import ModelAdmin, TabularInline

from . import models


def _pre(text: str) -> str:
    return format_html('<pre style="font-size: 12px; white-space: pre-wrap;">{}</pre>', text)


class ErrorOccurrenceInline(TabularInline):  # type: ignore[misc]
    model = models.ErrorOccurrence
    extra = 0
    can_delete = False
    readonly_fields = ["timestamp"]
    fields = ["timestamp"]


@admin.register(models.Error)
class ErrorAdmin(ModelAdmin):  # type: ignore[misc]
    """Deduplicated internal errors with their request context."""

    list_display = ["path", "server_version", "occurrence_count", "created_at", "issue_status"]
    list_filter = ["server_version", "issue_solved", "created_at"]
    search_fields = ["path", "traceback", "md5"]
    readonly_fields = [
        "md5",
        "path",
        "server_version",
        "created_at",
        "occurrence_count",
        "traceback_display",
        "json_payload_display",
        "request_metadata_display",
    ]
    fields = readonly_fields[:5] + ["issue_url", "issue_solved"] + readonly_fields[5:]
    ordering = ["-created_at"]
    inlines = [ErrorOccurrenceInline]

    @admin.display(description="Occurrences")
    def occurrence_count(self, obj: models.Error) -> int:
        return obj.erroroccurrence_set.count()

    @admin.display(description="Status")
    def issue_status(self, obj: models.Error) -> str:
        if obj.issue_solved:
            return mark_safe('<span style="color: green;">Resolved</span>')
        if obj.issue_url:
            return mark_safe('<span style="color: orange;">Tracked</span>')
        return mark_safe('<span style="color: red;">Open</span>')

    @admin.display(description="Traceback")
    def traceback_display(self, obj: models.Error) -> str:
        return _pre(obj.traceback)

    @admin.display(description="JSON payload")
    def json_payload_display(self, obj: models.Error) -> str:
        return _pre(json.dumps(obj.json_payload, indent=2)) if obj.json_payload else "-"

    @admin.display(description="Request metadata")
    def request_metadata_display(self, obj: models.Error) -> str:
        return _pre(json.dumps(obj.request_metadata, indent=2)) if obj.request_metadata else "-"

    def has_add_permission(self, request: t.Any) -> bool:
        return False
