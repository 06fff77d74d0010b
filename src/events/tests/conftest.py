import typing as t
from decimal import Decimal

import pytest
from django.test.client import Client
from django.utils import timezone

from accounts.models import GatehouseUser
from events.models import Event, EventGuest, Order, Organization, Ticket


@pytest.fixture
def organization_owner_user(django_user_model: t.Type[GatehouseUser]) -> GatehouseUser:
    return django_user_model.objects.create_user(
        username="organization_owner_user", email="owner@example.com", password="pass"
    )


@pytest.fixture
def event_creator_user(django_user_model: t.Type[GatehouseUser]) -> GatehouseUser:
    return django_user_model.objects.create_user(
        username="event_creator_user", email="creator@example.com", password="pass"
    )


@pytest.fixture
def nonmember_user(django_user_model: t.Type[GatehouseUser]) -> GatehouseUser:
    return django_user_model.objects.create_user(username="nonmember_user", email="c@example.com", password="pass")


@pytest.fixture
def organization(organization_owner_user: GatehouseUser) -> Organization:
    return Organization.objects.create(name="Org", slug="org", owner=organization_owner_user)


@pytest.fixture
def event(organization: Organization, event_creator_user: GatehouseUser) -> Event:
    return Event.objects.create(
        organization=organization,
        created_by=event_creator_user,
        name="Event",
        start=timezone.now(),
        status=Event.EventStatus.PUBLISHED,
    )


@pytest.fixture
def buyer(django_user_model: t.Type[GatehouseUser]) -> GatehouseUser:
    return django_user_model.objects.create_user(
        username="buyer", email="buyer@example.com", password="pass", first_name="Ada", last_name="Lovelace"
    )


@pytest.fixture
def other_buyer(django_user_model: t.Type[GatehouseUser]) -> GatehouseUser:
    return django_user_model.objects.create_user(
        username="other_buyer", email="other@example.com", password="pass", phone="+4312345"
    )


class TicketFactory:
    def __init__(self, event: Event) -> None:
        self.event = event

    def order(self, user: GatehouseUser) -> Order:
        return Order.objects.create(user=user, event=self.event, status=Order.OrderStatus.PAID)

    def __call__(
        self,
        owner: GatehouseUser | None,
        order: Order | None = None,
        status: str = Ticket.TicketStatus.PAID,
        price: Decimal | str = Decimal("10.00"),
        label: str = "",
    ) -> Ticket:
        return Ticket.objects.create(
            event=self.event,
            owner=owner,
            order=order,
            status=status,
            price=Decimal(price),
            ticket_type_label=label,
        )


@pytest.fixture
def ticket_factory(event: Event) -> TicketFactory:
    return TicketFactory(event)


@pytest.fixture
def manual_guest(event: Event, django_user_model: t.Type[GatehouseUser]) -> EventGuest:
    user = django_user_model.objects.create_user(username="walkin", email="walkin@example.com", password="pass")
    return EventGuest.objects.create(event=event, user=user, full_name="Walk In", email=user.email)


@pytest.fixture
def organization_owner_client(organization_owner_user: GatehouseUser, auth_client_factory: t.Any) -> Client:
    return t.cast(Client, auth_client_factory(organization_owner_user))


@pytest.fixture
def event_creator_client(event_creator_user: GatehouseUser, auth_client_factory: t.Any) -> Client:
    return t.cast(Client, auth_client_factory(event_creator_user))


@pytest.fixture
def nonmember_client(nonmember_user: GatehouseUser, auth_client_factory: t.Any) -> Client:
    return t.cast(Client, auth_client_factory(nonmember_user))
