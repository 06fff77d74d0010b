from django.conf import settings
from django.db import models
from django.db.models import Q

from common.models import TimeStampedModel


class EventGuest(TimeStampedModel):
    """A guest added to an event by hand, outside of ticket sales.

    Name and contact fields are a snapshot taken when the guest was added.
    """

    class GuestStatus(models.TextChoices):
        CHECKED_IN = "checked_in", "Checked In"
        PENDING_ARRIVAL = "pending_arrival", "Pending Arrival"

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="manual_guests")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="guest_entries"
    )
    status = models.CharField(
        max_length=20, choices=GuestStatus.choices, default=GuestStatus.PENDING_ARRIVAL, db_index=True
    )
    full_name = models.CharField(max_length=255, blank=True)
    name = models.CharField(max_length=255, blank=True, help_text="Legacy name snapshot.")
    email = models.CharField(max_length=254, blank=True, db_index=True)
    phone = models.CharField(max_length=32, blank=True)
    source = models.CharField(max_length=16, default="manual", editable=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"], condition=Q(user__isnull=False), name="unique_event_guest_user"
            ),
            models.UniqueConstraint(
                fields=["event", "email"], condition=~Q(email=""), name="unique_event_guest_email"
            ),
        ]

    def __str__(self) -> str:
        return self.full_name or self.name or self.email or str(self.id)
