"""The guest list of an event.

The guest list is never stored. It is recomputed on every read from two
sources: paid or scanned tickets, collapsed into one row per buyer and
order, and guests added by hand. Writes go to whichever record backs the row.
"""

import typing as t
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

import structlog
from django.conf import settings
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError

from accounts.models import GatehouseUser
from common.utils import to_iso
from events import schema
from events.models import Event, EventGuest, Ticket

logger = structlog.get_logger(__name__)

TICKET_ORDER_PREFIX = "ORD-"
MANUAL_ORDER_PREFIX = "GST-"
NO_ORDER = "none"

TICKET_STATUS_FOR_GUEST_STATUS = {
    EventGuest.GuestStatus.CHECKED_IN: Ticket.TicketStatus.SCANNED,
    EventGuest.GuestStatus.PENDING_ARRIVAL: Ticket.TicketStatus.PAID,
}


def order_number(prefix: str, key: t.Any) -> str:
    """Short display reference: a prefix plus the last four characters of the key.

    Not unique; the row id is the real key.
    """
    return f"{prefix}{str(key)[-4:]}"


@dataclass
class _TicketGroup:
    """Accumulates the tickets of one buyer within one order."""

    first: Ticket
    amount: Decimal = Decimal("0")
    labels: set[str] = field(default_factory=set)
    any_scanned: bool = False
    quantity: int = 0
    latest: str = ""

    def add(self, ticket: Ticket) -> None:
        self.amount += ticket.price or Decimal("0")
        if label := (ticket.ticket_type_label or "").strip():
            self.labels.add(label)
        self.any_scanned = self.any_scanned or ticket.status == Ticket.TicketStatus.SCANNED
        self.quantity += 1
        self.latest = max(self.latest, to_iso(ticket.updated_at or ticket.created_at))

    @property
    def ticket_type(self) -> str:
        if len(self.labels) == 1:
            return next(iter(self.labels))
        return "Multiple" if self.labels else "Ticket"

    def to_row(self) -> schema.GuestRowSchema:
        owner = t.cast(GatehouseUser, self.first.owner)
        return schema.GuestRowSchema(
            id=str(self.first.id),
            order_number=order_number(TICKET_ORDER_PREFIX, self.first.order_id or self.first.id),
            full_name=owner.get_display_name(),
            handle=f"@{owner.username}" if owner.username else None,
            phone=owner.phone or None,
            email=owner.email or None,
            amount=self.amount,
            ticket_type=self.ticket_type,
            status="checked_in" if self.any_scanned else "pending_arrival",
            quantity=self.quantity,
            date_time_iso=self.latest,
            source="ticket",
            can_remove=False,
        )


def _manual_row(guest: EventGuest) -> schema.GuestRowSchema:
    status = "checked_in" if guest.status == EventGuest.GuestStatus.CHECKED_IN else "pending_arrival"
    return schema.GuestRowSchema(
        id=str(guest.id),
        order_number=order_number(MANUAL_ORDER_PREFIX, guest.id),
        full_name=guest.full_name.strip() or guest.name.strip() or "Guest",
        phone=guest.phone or None,
        email=guest.email or None,
        amount=Decimal("0"),
        ticket_type="Manual",
        status=status,
        quantity=1,
        date_time_iso=to_iso(guest.updated_at or guest.created_at),
        source="manual",
        can_remove=True,
    )


class GuestListService:
    """Reads and writes the guest list of a single event.

    Callers are expected to have checked that the acting user may manage the event.
    """

    def __init__(self, event: Event) -> None:
        self.event = event

    def list_rows(self) -> list[schema.GuestRowSchema]:
        """Materialize the guest list, newest activity first.

        Ties on the timestamp are broken by order number so the output is stable.
        """
        tickets = (
            Ticket.objects.on_guest_list()
            .filter(event=self.event, owner__isnull=False)
            .select_related("owner")
            .order_by("created_at", "id")
        )
        groups: dict[tuple[str, str], _TicketGroup] = {}
        for ticket in tickets:
            key = (str(ticket.owner_id), str(ticket.order_id) if ticket.order_id else NO_ORDER)
            if key not in groups:
                groups[key] = _TicketGroup(first=ticket)
            groups[key].add(ticket)

        rows = [group.to_row() for group in groups.values()]
        rows.extend(_manual_row(guest) for guest in self.event.manual_guests.order_by("created_at", "id"))

        rows.sort(key=lambda row: row.order_number)
        rows.sort(key=lambda row: row.date_time_iso, reverse=True)

        cap = settings.GUEST_LIST_MAX_ROWS
        if len(rows) > cap:
            logger.warning("guest_list_truncated", event_id=str(self.event.id), total=len(rows), cap=cap)
            rows = rows[:cap]
        return rows

    def add_manual_guests(self, user_ids: t.Iterable[UUID]) -> list[EventGuest]:
        """Add users as manual guests, skipping anyone already on the list.

        A user is already on the list when a manual guest of this event has the
        same email (exact match), or, for users without an email, the same user.
        Unknown user ids are ignored. Concurrent duplicate inserts are dropped by
        the database.
        """
        requested = list(dict.fromkeys(user_ids))
        users = GatehouseUser.objects.in_bulk(requested)

        existing = EventGuest.objects.filter(event=self.event)
        taken_emails = set(existing.exclude(email="").values_list("email", flat=True))
        taken_users = set(existing.filter(user__isnull=False).values_list("user_id", flat=True))

        new_guests: list[EventGuest] = []
        for user_id in requested:
            user = users.get(user_id)
            if user is None:
                continue
            if user.email:
                if user.email in taken_emails:
                    continue
                taken_emails.add(user.email)
            elif user.id in taken_users:
                continue
            taken_users.add(user.id)
            new_guests.append(
                EventGuest(
                    event=self.event,
                    user=user,
                    status=EventGuest.GuestStatus.PENDING_ARRIVAL,
                    full_name=user.get_display_name(),
                    email=user.email,
                    phone=user.phone,
                )
            )

        EventGuest.objects.bulk_create(new_guests, ignore_conflicts=True)
        logger.info(
            "manual_guests_added",
            event_id=str(self.event.id),
            requested=len(requested),
            unknown=len(requested) - len(users),
            inserted=len(new_guests),
        )
        return new_guests

    def set_status(self, guest_id: UUID, status: str) -> None:
        """Check a guest in or out.

        A manual guest is updated directly. Otherwise the id is the first ticket
        of a ticket row, and every paid or scanned ticket of the same buyer (and
        order, when the ticket has one) is moved to the matching ticket status in
        one UPDATE.
        """
        now = timezone.now()
        if EventGuest.objects.filter(pk=guest_id, event=self.event).update(status=status, updated_at=now):
            logger.info("guest_status_updated", event_id=str(self.event.id), guest_id=str(guest_id), status=status)
            return

        ticket = Ticket.objects.filter(pk=guest_id, event=self.event).values("owner_id", "order_id").first()
        if ticket is None or ticket["owner_id"] is None:
            raise HttpError(404, str(_("Guest not found.")))

        match = Q(event=self.event, owner_id=ticket["owner_id"], status__in=Ticket.GUEST_LIST_STATUSES)
        if ticket["order_id"]:
            match &= Q(order_id=ticket["order_id"])
        new_status = TICKET_STATUS_FOR_GUEST_STATUS[EventGuest.GuestStatus(status)]
        updated = Ticket.objects.filter(match).update(status=new_status, updated_at=now)
        logger.info(
            "ticket_row_status_updated",
            event_id=str(self.event.id),
            ticket_id=str(guest_id),
            status=status,
            tickets_updated=updated,
        )

    def remove_manual_guest(self, guest_id: UUID) -> None:
        """Remove a manual guest. Ticket rows cannot be removed."""
        deleted, _unused = EventGuest.objects.filter(pk=guest_id, event=self.event).delete()
        if not deleted:
            raise HttpError(404, str(_("Only manual guests can be removed (or guest not found).")))
        logger.info("manual_guest_removed", event_id=str(self.event.id), guest_id=str(guest_id))

    def candidates(self, q: str = "") -> list[schema.GuestCandidateSchema]:
        """Users who could still be added by hand, newest first.

        Buyers with a paid or scanned ticket and users already added are excluded.
        """
        ticket_owners = Ticket.objects.on_guest_list().filter(event=self.event, owner__isnull=False).values("owner_id")
        manual_users = self.event.manual_guests.filter(user__isnull=False).values("user_id")
        users = GatehouseUser.objects.exclude(pk__in=ticket_owners).exclude(pk__in=manual_users)
        if q := q.strip()[:120]:
            users = users.search(q)
        users = users.order_by("-date_joined")[: settings.GUEST_CANDIDATES_LIMIT]
        return [
            schema.GuestCandidateSchema(
                id=str(user.id),
                name=user.get_full_name() or user.username or user.email or "User",
                email=user.email,
                phone=user.phone or None,
                avatar_url=user.image or None,
            )
            for user in users
        ]
