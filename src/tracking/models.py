from decimal import Decimal

from django.conf import settings
from django.db import models

from common.models import TimeStampedModel
from events.models import Organization


class TrackingLinkQuerySet(models.QuerySet["TrackingLink"]):
    def live(self) -> "TrackingLinkQuerySet":
        """Links that have not been archived."""
        return self.filter(archived=False)

    def for_owner(self, user: object) -> "TrackingLinkQuerySet":
        """Live links inside organizations the user owns."""
        return self.live().filter(organization__owner=user)


class TrackingLink(TimeStampedModel):
    """A short public link that counts visits before redirecting to an event or organization page."""

    class DestinationKind(models.TextChoices):
        EVENT = "event", "Event"
        ORGANIZATION = "organization", "Organization"

    class LinkStatus(models.TextChoices):
        ACTIVE = "active", "Active"
        PAUSED = "paused", "Paused"
        DISABLED = "disabled", "Disabled"

    class IconKey(models.TextChoices):
        INSTAGRAM = "instagram"
        FACEBOOK = "facebook"
        X = "x"
        LINKEDIN = "linkedin"
        GOOGLE = "google"
        YOUTUBE = "youtube"
        SNAPCHAT = "snapchat"
        REDDIT = "reddit"
        TIKTOK = "tiktok"
        TELEGRAM = "telegram"

    name = models.CharField(max_length=150)
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name="tracking_links")
    destination_kind = models.CharField(max_length=20, choices=DestinationKind.choices)
    destination_id = models.UUIDField(db_index=True)
    code = models.CharField(max_length=32, db_index=True)
    path = models.CharField(max_length=64, help_text="Public path, always derived from the code.")
    status = models.CharField(max_length=20, choices=LinkStatus.choices, default=LinkStatus.ACTIVE)
    icon_key = models.CharField(max_length=20, choices=IconKey.choices, null=True, blank=True)
    icon_url = models.URLField(max_length=500, null=True, blank=True)
    views = models.PositiveIntegerField(default=0)
    tickets_sold = models.PositiveIntegerField(default=0)
    revenue = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    archived = models.BooleanField(default=False, db_index=True)
    last_viewed_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="tracking_links"
    )

    objects = TrackingLinkQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["organization", "code"], name="unique_tracking_code_per_organization"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.path})"
