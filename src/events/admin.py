"""Admin for events, tickets and guests."""

from django.contrib import admin
from unfold.admin import ModelAdmin, TabularInline

from events import models


class TicketInline(TabularInline):  # type: ignore[misc]
    model = models.Ticket
    extra = 0
    fields = ["owner", "order", "ticket_type_label", "price", "status"]
    autocomplete_fields = ["owner", "order"]


class EventGuestInline(TabularInline):  # type: ignore[misc]
    model = models.EventGuest
    extra = 0
    fields = ["full_name", "email", "phone", "status"]
    readonly_fields = ["full_name", "email", "phone"]


@admin.register(models.Organization)
class OrganizationAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["name", "slug", "owner", "created_at"]
    search_fields = ["name", "slug", "owner__email"]
    prepopulated_fields = {"slug": ("name",)}
    autocomplete_fields = ["owner"]


@admin.register(models.Event)
class EventAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["name", "organization", "created_by", "start", "status"]
    list_filter = ["status", "start"]
    search_fields = ["name", "organization__name", "created_by__email"]
    autocomplete_fields = ["organization", "created_by"]
    filter_horizontal = ["pinned_by"]
    inlines = [TicketInline, EventGuestInline]


@admin.register(models.Order)
class OrderAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["id", "event", "user", "status", "total", "currency", "created_at"]
    list_filter = ["status"]
    search_fields = ["id", "user__email", "event__name"]
    autocomplete_fields = ["user", "event"]


@admin.register(models.Ticket)
class TicketAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["id", "event", "owner", "order", "ticket_type_label", "price", "status", "updated_at"]
    list_filter = ["status"]
    search_fields = ["id", "owner__email", "owner__username", "event__name"]
    autocomplete_fields = ["event", "owner", "order"]


@admin.register(models.EventGuest)
class EventGuestAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["full_name", "email", "event", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["full_name", "name", "email", "phone", "event__name"]
    autocomplete_fields = ["event", "user"]
