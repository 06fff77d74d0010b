import typing as t
from decimal import Decimal
from uuid import UUID

from pydantic import HttpUrl, StringConstraints, field_serializer

from common.schema import CamelSchema

DestinationKind = t.Literal["event", "organization"]
LinkStatus = t.Literal["active", "paused", "disabled"]
IconKey = t.Literal[
    "instagram", "facebook", "x", "linkedin", "google", "youtube", "snapchat", "reddit", "tiktok", "telegram"
]
LinkName = t.Annotated[str, StringConstraints(min_length=2, max_length=150, strip_whitespace=True)]


class TrackingLinkSchema(CamelSchema):
    id: str
    name: str
    organization_id: str
    destination_kind: DestinationKind
    destination_id: str
    destination_title: str
    url: str
    icon_key: str | None = None
    icon_url: str | None = None
    views: int
    tickets_sold: int
    revenue: Decimal
    status: LinkStatus
    created: str

    @field_serializer("revenue")
    def serialize_revenue(self, value: Decimal) -> float:
        return float(value)


class TrackingLinkListResponse(CamelSchema):
    rows: list[TrackingLinkSchema]


class TrackingLinkRowResponse(CamelSchema):
    row: TrackingLinkSchema



class TrackingLinkCreateSchema(CamelSchema):
    name: LinkName
    destination_kind: DestinationKind
    destination_id: UUID
    status: LinkStatus = "active"
    icon_key: IconKey | None = None
    icon_url: HttpUrl | None = None


class TrackingLinkUpdateSchema(CamelSchema):
    """Every field is optional; only the fields sent are changed."""

    name: LinkName | None = None
    status: LinkStatus | None = None
    icon_key: IconKey | None = None
    icon_url: HttpUrl | None = None
    destination_kind: DestinationKind | None = None
    destination_id: UUID | None = None


class DestinationSchema(CamelSchema):
    kind: DestinationKind
    id: str
    title: str


class DestinationsResponse(CamelSchema):
    destinations: list[DestinationSchema]


class MemberRowSchema(CamelSchema):
    user_id: str
    name: str
    email: str | None = None
    image: str | None = None
    links: int
    views: int
    tickets_sold: int
    revenue: Decimal
    last_link_created_at: str | None = None

    @field_serializer("revenue")
    def serialize_revenue(self, value: Decimal) -> float:
        return float(value)


class MembersResponse(CamelSchema):
    rows: list[MemberRowSchema]


class MemberProfileSchema(CamelSchema):
    id: str
    name: str
    email: str | None = None
    image: str | None = None


class MemberResponse(CamelSchema):
    member: MemberProfileSchema


class TrackingScopeFilter(CamelSchema):
    """Narrow a listing to one organization or to the links pointing at one event."""

    scope: t.Literal["all", "organization", "event"] = "all"
    organization_id: UUID | None = None
    event_id: UUID | None = None
