import typing as t
from decimal import Decimal
from uuid import UUID

from ninja import Field
from pydantic import field_serializer

from common.schema import CamelSchema

GuestStatus = t.Literal["checked_in", "pending_arrival"]
GuestSource = t.Literal["ticket", "manual"]


class GuestRowSchema(CamelSchema):
    """One row of an event's guest list, either a ticket purchase group or a manual guest."""

    id: str
    order_number: str
    full_name: str
    handle: str | None = None
    phone: str | None = None
    email: str | None = None
    amount: Decimal
    ticket_type: str
    status: GuestStatus
    quantity: int
    date_time_iso: str = Field(alias="dateTimeISO")
    source: GuestSource
    can_remove: bool

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> float:
        return float(value)


class AddGuestsSchema(CamelSchema):
    user_ids: list[UUID] = Field(..., min_length=1)


class GuestStatusSchema(CamelSchema):
    status: GuestStatus


class GuestCandidateSchema(CamelSchema):
    id: str
    name: str
    email: str
    phone: str | None = None
    avatar_url: str | None = None


class PinSchema(CamelSchema):
    pinned: bool


class PinResponse(CamelSchema):
    ok: bool = True
    pinned: bool


class PinnedEventsSchema(CamelSchema):
    ids: list[str]
