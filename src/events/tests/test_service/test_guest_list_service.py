import typing as t
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from ninja.errors import HttpError

from accounts.models import GatehouseUser
from events.models import Event, EventGuest, Ticket
from events.service.guest_list import GuestListService, order_number

pytestmark = pytest.mark.django_db


def _rows_by_source(event: Event) -> dict[str, list[t.Any]]:
    rows = GuestListService(event).list_rows()
    return {
        "ticket": [row for row in rows if row.source == "ticket"],
        "manual": [row for row in rows if row.source == "manual"],
    }


class TestListRows:
    def test_groups_tickets_by_buyer_and_order(
        self, event: Event, buyer: GatehouseUser, other_buyer: GatehouseUser, ticket_factory: t.Any
    ) -> None:
        """Two paid tickets in one order collapse; a scanned ticket without order is its own row."""
        order = ticket_factory.order(buyer)
        first = ticket_factory(buyer, order=order, price="10.00")
        ticket_factory(buyer, order=order, price="15.50")
        solo = ticket_factory(other_buyer, status=Ticket.TicketStatus.SCANNED, price="20.00")

        rows = {row.id: row for row in GuestListService(event).list_rows()}

        assert set(rows) == {str(first.id), str(solo.id)}
        grouped = rows[str(first.id)]
        assert grouped.quantity == 2
        assert grouped.amount == Decimal("25.50")
        assert grouped.status == "pending_arrival"
        assert grouped.order_number == f"ORD-{str(order.id)[-4:]}"
        assert grouped.full_name == "Ada Lovelace"
        assert grouped.handle == "@buyer"
        assert grouped.source == "ticket"
        assert grouped.can_remove is False
        single = rows[str(solo.id)]
        assert single.quantity == 1
        assert single.status == "checked_in"
        assert single.order_number == f"ORD-{str(solo.id)[-4:]}"
        assert single.phone == "+4312345"

    def test_same_buyer_different_orders_are_separate_rows(
        self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any
    ) -> None:
        ticket_factory(buyer, order=ticket_factory.order(buyer))
        ticket_factory(buyer, order=ticket_factory.order(buyer))
        ticket_factory(buyer)

        assert len(GuestListService(event).list_rows()) == 3

    def test_any_scanned_ticket_checks_in_the_whole_row(
        self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any
    ) -> None:
        order = ticket_factory.order(buyer)
        ticket_factory(buyer, order=order)
        ticket_factory(buyer, order=order, status=Ticket.TicketStatus.SCANNED)
        ticket_factory(buyer, order=order)

        (row,) = GuestListService(event).list_rows()

        assert row.status == "checked_in"
        assert row.quantity == 3

    def test_only_paid_and_scanned_tickets_count(
        self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any
    ) -> None:
        for status in (Ticket.TicketStatus.RESERVED, Ticket.TicketStatus.CANCELLED, Ticket.TicketStatus.REFUNDED):
            ticket_factory(buyer, status=status)

        assert GuestListService(event).list_rows() == []

    def test_tickets_without_owner_are_dropped(self, event: Event, ticket_factory: t.Any) -> None:
        ticket_factory(None)

        assert GuestListService(event).list_rows() == []

    @pytest.mark.parametrize(
        "labels,expected",
        [
            (["VIP", "VIP"], "VIP"),
            (["VIP", "General"], "Multiple"),
            (["", ""], "Ticket"),
            (["", "Early Bird"], "Early Bird"),
        ],
    )
    def test_ticket_type(
        self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any, labels: list[str], expected: str
    ) -> None:
        order = ticket_factory.order(buyer)
        for label in labels:
            ticket_factory(buyer, order=order, label=label)

        (row,) = GuestListService(event).list_rows()

        assert row.ticket_type == expected

    def test_full_name_fallbacks(self, event: Event, ticket_factory: t.Any, user_factory: t.Any) -> None:
        no_name = user_factory(username="handle_only", first_name="", last_name="")
        only_first = user_factory(username="firsty", first_name="  Grace ", last_name="")
        ticket_factory(no_name)
        ticket_factory(only_first)

        names = {row.handle: row.full_name for row in GuestListService(event).list_rows()}

        assert names == {"@handle_only": "handle_only", "@firsty": "Grace"}

    def test_manual_guest_row(self, event: Event, manual_guest: EventGuest) -> None:
        (row,) = GuestListService(event).list_rows()

        assert row.id == str(manual_guest.id)
        assert row.order_number == f"GST-{str(manual_guest.id)[-4:]}"
        assert row.full_name == "Walk In"
        assert row.amount == 0
        assert row.ticket_type == "Manual"
        assert row.quantity == 1
        assert row.status == "pending_arrival"
        assert row.source == "manual"
        assert row.can_remove is True

    def test_manual_guest_name_falls_back_to_legacy_name_then_guest(self, event: Event) -> None:
        EventGuest.objects.create(event=event, name="Legacy Name", email="legacy@example.com")
        EventGuest.objects.create(event=event, email="anon@example.com")

        names = sorted(row.full_name for row in GuestListService(event).list_rows())

        assert names == ["Guest", "Legacy Name"]

    def test_sorted_by_latest_activity_then_order_number(
        self, event: Event, buyer: GatehouseUser, other_buyer: GatehouseUser, ticket_factory: t.Any
    ) -> None:
        older = ticket_factory(buyer)
        newer = ticket_factory(other_buyer)
        guest = EventGuest.objects.create(event=event, full_name="Tied", email="tied@example.com")
        now = timezone.now()
        Ticket.objects.filter(pk=older.pk).update(updated_at=now - timedelta(hours=2))
        Ticket.objects.filter(pk=newer.pk).update(updated_at=now)
        EventGuest.objects.filter(pk=guest.pk).update(updated_at=now)

        rows = GuestListService(event).list_rows()

        assert rows[-1].id == str(older.id)
        tied = sorted([order_number("ORD-", newer.id), order_number("GST-", guest.id)])
        assert [row.order_number for row in rows[:2]] == tied
        assert rows[0].date_time_iso == rows[1].date_time_iso
        assert rows[0].date_time_iso.endswith("Z")
        assert len(rows[0].date_time_iso) == len("2024-01-01T00:00:00.000Z")

    def test_read_is_stable(
        self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any, manual_guest: EventGuest
    ) -> None:
        ticket_factory(buyer)
        ticket_factory(buyer, order=ticket_factory.order(buyer))
        service = GuestListService(event)

        assert service.list_rows() == service.list_rows()

    def test_rows_are_capped(
        self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any, settings: t.Any
    ) -> None:
        settings.GUEST_LIST_MAX_ROWS = 2
        for _ in range(3):
            ticket_factory(buyer, order=ticket_factory.order(buyer))

        assert len(GuestListService(event).list_rows()) == 2

    def test_other_events_do_not_leak(
        self, event: Event, organization: t.Any, buyer: GatehouseUser
    ) -> None:
        other = Event.objects.create(organization=organization, name="Other")
        Ticket.objects.create(event=other, owner=buyer, status=Ticket.TicketStatus.PAID)
        EventGuest.objects.create(event=other, full_name="Elsewhere", email="x@example.com")

        assert GuestListService(event).list_rows() == []


class TestAddManualGuests:
    def test_adds_pending_guests_with_snapshot(self, event: Event, buyer: GatehouseUser) -> None:
        GuestListService(event).add_manual_guests([buyer.id])

        guest = EventGuest.objects.get(event=event)
        assert guest.user == buyer
        assert guest.status == EventGuest.GuestStatus.PENDING_ARRIVAL
        assert guest.full_name == "Ada Lovelace"
        assert guest.email == buyer.email

    def test_skips_emails_already_on_the_list(
        self, event: Event, buyer: GatehouseUser, other_buyer: GatehouseUser
    ) -> None:
        EventGuest.objects.create(event=event, full_name="Earlier", email=buyer.email)

        added = GuestListService(event).add_manual_guests([buyer.id, other_buyer.id])

        assert [guest.user for guest in added] == [other_buyer]
        assert EventGuest.objects.filter(event=event, email=buyer.email).count() == 1
        assert EventGuest.objects.filter(event=event).count() == 2

    def test_adding_twice_is_idempotent(self, event: Event, buyer: GatehouseUser) -> None:
        service = GuestListService(event)

        service.add_manual_guests([buyer.id])
        service.add_manual_guests([buyer.id, buyer.id])

        assert EventGuest.objects.filter(event=event, email=buyer.email).count() == 1

    def test_email_match_is_case_sensitive(self, event: Event, buyer: GatehouseUser) -> None:
        EventGuest.objects.create(event=event, full_name="Shouty", email=buyer.email.upper())

        GuestListService(event).add_manual_guests([buyer.id])

        assert EventGuest.objects.filter(event=event).count() == 2

    def test_users_without_email_are_deduplicated_by_user(self, event: Event, user_factory: t.Any) -> None:
        no_email = user_factory(email="")
        service = GuestListService(event)

        service.add_manual_guests([no_email.id])
        service.add_manual_guests([no_email.id])

        assert EventGuest.objects.filter(event=event, user=no_email).count() == 1

    def test_unknown_users_are_skipped(self, event: Event) -> None:
        import uuid

        assert GuestListService(event).add_manual_guests([uuid.uuid4()]) == []
        assert not EventGuest.objects.exists()

    def test_concurrent_duplicate_is_ignored(self, event: Event, buyer: GatehouseUser) -> None:
        """A row inserted behind the service's back does not make the insert fail."""
        service = GuestListService(event)
        EventGuest.objects.bulk_create([EventGuest(event=event, user=buyer, email=buyer.email)])

        EventGuest.objects.filter(event=event).update(email="changed@example.com")
        service.add_manual_guests([buyer.id])

        assert EventGuest.objects.filter(event=event, user=buyer).count() == 1


class TestSetStatus:
    def test_manual_guest_status(self, event: Event, manual_guest: EventGuest) -> None:
        GuestListService(event).set_status(manual_guest.id, "checked_in")

        manual_guest.refresh_from_db()
        assert manual_guest.status == EventGuest.GuestStatus.CHECKED_IN

    def test_ticket_row_toggles_whole_order(
        self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any
    ) -> None:
        order = ticket_factory.order(buyer)
        first = ticket_factory(buyer, order=order, price="10.00")
        second = ticket_factory(buyer, order=order, price="5.00")
        other_order = ticket_factory(buyer, order=ticket_factory.order(buyer))
        service = GuestListService(event)
        before = {row.id: row for row in service.list_rows()}[str(first.id)]

        service.set_status(first.id, "checked_in")

        for ticket in (first, second):
            ticket.refresh_from_db()
            assert ticket.status == Ticket.TicketStatus.SCANNED
        other_order.refresh_from_db()
        assert other_order.status == Ticket.TicketStatus.PAID
        after = {row.id: row for row in service.list_rows()}[str(first.id)]
        assert after.status == "checked_in"
        assert after.amount == before.amount
        assert after.quantity == before.quantity

    def test_ticket_row_back_to_pending(self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any) -> None:
        first = ticket_factory(buyer, status=Ticket.TicketStatus.SCANNED)
        second = ticket_factory(buyer, status=Ticket.TicketStatus.SCANNED)

        GuestListService(event).set_status(first.id, "pending_arrival")

        assert set(Ticket.objects.filter(pk__in=[first.pk, second.pk]).values_list("status", flat=True)) == {
            Ticket.TicketStatus.PAID
        }

    def test_ticket_without_order_toggles_all_orderless_and_ordered_tickets_of_buyer(
        self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any
    ) -> None:
        """Without an order the match is owner-wide, as for the original ticket rows."""
        anchor = ticket_factory(buyer)
        ordered = ticket_factory(buyer, order=ticket_factory.order(buyer))
        cancelled = ticket_factory(buyer, status=Ticket.TicketStatus.CANCELLED)

        GuestListService(event).set_status(anchor.id, "checked_in")

        ordered.refresh_from_db()
        cancelled.refresh_from_db()
        assert ordered.status == Ticket.TicketStatus.SCANNED
        assert cancelled.status == Ticket.TicketStatus.CANCELLED

    def test_unknown_id_is_not_found(self, event: Event) -> None:
        import uuid

        with pytest.raises(HttpError) as exc_info:
            GuestListService(event).set_status(uuid.uuid4(), "checked_in")

        assert exc_info.value.status_code == 404

    def test_guest_of_other_event_is_not_found(
        self, event: Event, organization: t.Any, manual_guest: EventGuest
    ) -> None:
        other = Event.objects.create(organization=organization, name="Other")

        with pytest.raises(HttpError):
            GuestListService(other).set_status(manual_guest.id, "checked_in")


class TestRemoveManualGuest:
    def test_removes_manual_guest(self, event: Event, manual_guest: EventGuest) -> None:
        GuestListService(event).remove_manual_guest(manual_guest.id)

        assert not EventGuest.objects.filter(pk=manual_guest.pk).exists()

    def test_ticket_rows_cannot_be_removed(self, event: Event, buyer: GatehouseUser, ticket_factory: t.Any) -> None:
        ticket = ticket_factory(buyer)

        with pytest.raises(HttpError) as exc_info:
            GuestListService(event).remove_manual_guest(ticket.id)

        assert exc_info.value.status_code == 404
        ticket.refresh_from_db()
        assert ticket.status == Ticket.TicketStatus.PAID


class TestCandidates:
    def test_excludes_buyers_and_manual_guests(
        self,
        event: Event,
        buyer: GatehouseUser,
        other_buyer: GatehouseUser,
        manual_guest: EventGuest,
        nonmember_user: GatehouseUser,
        ticket_factory: t.Any,
    ) -> None:
        ticket_factory(buyer)
        ticket_factory(other_buyer, status=Ticket.TicketStatus.RESERVED)

        ids = {candidate.id for candidate in GuestListService(event).candidates()}

        assert str(buyer.id) not in ids
        assert str(manual_guest.user_id) not in ids
        assert {str(other_buyer.id), str(nonmember_user.id)} <= ids

    def test_search_is_case_insensitive(
        self, event: Event, buyer: GatehouseUser, other_buyer: GatehouseUser
    ) -> None:
        results = GuestListService(event).candidates("LOVELACE")

        assert [candidate.id for candidate in results] == [str(buyer.id)]
        assert results[0].name == "Ada Lovelace"

    def test_search_by_phone(self, event: Event, buyer: GatehouseUser, other_buyer: GatehouseUser) -> None:
        assert [c.id for c in GuestListService(event).candidates("4312")] == [str(other_buyer.id)]

    def test_limit(self, event: Event, user_factory: t.Any, settings: t.Any) -> None:
        settings.GUEST_CANDIDATES_LIMIT = 3
        for _ in range(5):
            user_factory()

        assert len(GuestListService(event).candidates()) == 3
