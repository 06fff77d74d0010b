import typing as t

import pytest
from django.test.client import Client

from accounts.models import GatehouseUser
from events.models import Event, Organization
from tracking.models import TrackingLink


@pytest.fixture
def owner(user_factory: t.Any) -> GatehouseUser:
    return t.cast(GatehouseUser, user_factory(username="owner", email="Owner@Example.com"))


@pytest.fixture
def stranger(user_factory: t.Any) -> GatehouseUser:
    return t.cast(GatehouseUser, user_factory(username="stranger"))


@pytest.fixture
def organization(owner: GatehouseUser) -> Organization:
    return Organization.objects.create(name="Night Owls", slug="night-owls", owner=owner)


@pytest.fixture
def second_organization(owner: GatehouseUser) -> Organization:
    return Organization.objects.create(name="Early Birds", slug="early-birds", owner=owner)


@pytest.fixture
def foreign_organization(stranger: GatehouseUser) -> Organization:
    return Organization.objects.create(name="Elsewhere", slug="elsewhere", owner=stranger)


@pytest.fixture
def event(organization: Organization, owner: GatehouseUser) -> Event:
    return Event.objects.create(organization=organization, created_by=owner, name="Warehouse Party")


@pytest.fixture
def link_factory(organization: Organization, owner: GatehouseUser) -> t.Callable[..., TrackingLink]:
    counter = iter(range(1000))

    def make(**kwargs: t.Any) -> TrackingLink:
        code = kwargs.pop("code", f"code{next(counter):04d}")
        defaults: dict[str, t.Any] = {
            "name": "Story link",
            "organization": organization,
            "destination_kind": TrackingLink.DestinationKind.ORGANIZATION,
            "destination_id": organization.id,
            "code": code,
            "path": f"/t/{code}/",
            "created_by": owner,
        }
        defaults.update(kwargs)
        return TrackingLink.objects.create(**defaults)

    return make


@pytest.fixture
def owner_client(owner: GatehouseUser, auth_client_factory: t.Any) -> Client:
    return t.cast(Client, auth_client_factory(owner))


@pytest.fixture
def stranger_client(stranger: GatehouseUser, auth_client_factory: t.Any) -> Client:
    return t.cast(Client, auth_client_factory(stranger))
