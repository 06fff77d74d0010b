from decimal import Decimal

from django.conf import settings
from django.db import models

from common.models import TimeStampedModel


class Order(TimeStampedModel):
    """A purchase that groups one or more tickets."""

    class OrderStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"
        REFUNDED = "refunded", "Refunded"
        CANCELLED = "cancelled", "Cancelled"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="orders")
    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="orders")
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING, db_index=True)
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    currency = models.CharField(max_length=3, default=settings.DEFAULT_CURRENCY)

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class TicketQuerySet(models.QuerySet["Ticket"]):
    def on_guest_list(self) -> "TicketQuerySet":
        """Tickets that put their owner on the guest list."""
        return self.filter(status__in=Ticket.GUEST_LIST_STATUSES)


class Ticket(TimeStampedModel):
    """A ticket for a specific user to a specific event."""

    class TicketStatus(models.TextChoices):
        RESERVED = "reserved", "Reserved"
        PAID = "paid", "Paid"
        SCANNED = "scanned", "Scanned"
        CANCELLED = "cancelled", "Cancelled"
        REFUNDED = "refunded", "Refunded"

    GUEST_LIST_STATUSES = (TicketStatus.PAID, TicketStatus.SCANNED)

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="tickets")
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="tickets"
    )
    order = models.ForeignKey(Order, on_delete=models.SET_NULL, null=True, blank=True, related_name="tickets")
    ticket_type = models.CharField(max_length=32, default="general", help_text="Legacy ticket kind.")
    ticket_type_label = models.CharField(max_length=255, blank=True, help_text="Display label snapshot.")
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    currency = models.CharField(max_length=3, default=settings.DEFAULT_CURRENCY)
    status = models.CharField(
        max_length=20, choices=TicketStatus.choices, default=TicketStatus.RESERVED, db_index=True
    )

    objects = TicketQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=["event", "status"], name="ix_ticket_event_status"),
            models.Index(fields=["event", "owner", "order"], name="ix_ticket_event_owner_order"),
        ]

    def __str__(self) -> str:
        return f"Ticket {self.id} ({self.status})"
