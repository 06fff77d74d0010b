"""Tracking links: short public codes that count visits on the way to an event or organization page."""

import secrets
import time
import typing as t
from uuid import UUID

import structlog
from django.conf import settings
from django.db.models import Count, F, Max, QuerySet, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone
from ninja.errors import HttpError

from accounts.models import GatehouseUser
from common.utils import to_iso
from events.models import Event, Organization
from tracking import schema
from tracking.models import TrackingLink

logger = structlog.get_logger(__name__)

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789"
FALLBACK_CODE_LENGTH = 10
DESTINATIONS_LIMIT = 30
DESTINATIONS_TOTAL_LIMIT = 40

DESTINATION_PATHS: dict[str, str] = {
    TrackingLink.DestinationKind.EVENT: "events",
    TrackingLink.DestinationKind.ORGANIZATION: "organizations",
}


def random_code(length: int) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = ""
    while number:
        number, rest = divmod(number, 36)
        out = digits[rest] + out
    return out or "0"


def generate_unique_code(organization: Organization) -> str:
    """Draw random codes until one is free within the organization.

    After `TRACKING_CODE_MAX_ATTEMPTS` collisions, fall back to a longer code with a time suffix.
    """
    taken = TrackingLink.objects.filter(organization=organization)
    for _ in range(settings.TRACKING_CODE_MAX_ATTEMPTS):
        code = random_code(settings.TRACKING_CODE_LENGTH)
        if not taken.filter(code=code).exists():
            return code
    logger.warning("tracking_code_fallback", organization_id=str(organization.id))
    return random_code(FALLBACK_CODE_LENGTH) + _base36(time.time_ns() // 1_000_000)[2:6]


def tracking_path(code: str) -> str:
    return f"/t/{code}/"


def destination_url(link: TrackingLink) -> str:
    """Absolute frontend URL the public code redirects to."""
    base = settings.FRONTEND_BASE_URL.rstrip("/")
    return f"{base}/{DESTINATION_PATHS[link.destination_kind]}/{link.destination_id}/"


def resolve_destination(user: GatehouseUser, kind: str, destination_id: UUID) -> Organization:
    """The organization a destination belongs to, provided the user owns it.

    Raises:
        HttpError: 404 if the destination (or an event's organization) does not exist, 403 if it is not owned.
    """
    organization: Organization | None
    if kind == TrackingLink.DestinationKind.EVENT:
        event = get_object_or_404(Event.objects.with_organization(), pk=destination_id)
        organization = event.organization
    else:
        organization = Organization.objects.filter(pk=destination_id).first()
    if organization is None:
        raise HttpError(404, "Organization not found.")
    if organization.owner_id != user.id:
        raise HttpError(403, "You do not own this destination.")
    return organization


def scoped_links(
    user: GatehouseUser, *, organization: Organization | None = None, event: Event | None = None
) -> QuerySet[TrackingLink]:
    """Live links of the organizations the user owns, narrowed to one organization or one event destination."""
    links = TrackingLink.objects.for_owner(user)
    if organization is not None:
        links = links.filter(organization=organization)
    if event is not None:
        links = links.filter(
            organization_id=event.organization_id,
            destination_kind=TrackingLink.DestinationKind.EVENT,
            destination_id=event.id,
        )
    return links


def _destination_titles(links: t.Sequence[TrackingLink]) -> dict[tuple[str, UUID], str]:
    ids: dict[str, set[UUID]] = {kind: set() for kind in TrackingLink.DestinationKind.values}
    for link in links:
        ids[link.destination_kind].add(link.destination_id)
    titles: dict[tuple[str, UUID], str] = {}
    for pk, name in Event.objects.filter(pk__in=ids[TrackingLink.DestinationKind.EVENT]).values_list("pk", "name"):
        titles[(TrackingLink.DestinationKind.EVENT, pk)] = name
    for pk, name in Organization.objects.filter(pk__in=ids[TrackingLink.DestinationKind.ORGANIZATION]).values_list(
        "pk", "name"
    ):
        titles[(TrackingLink.DestinationKind.ORGANIZATION, pk)] = name
    return titles


def to_rows(links: t.Iterable[TrackingLink]) -> list[schema.TrackingLinkSchema]:
    links = list(links)
    titles = _destination_titles(links)
    return [
        schema.TrackingLinkSchema(
            id=str(link.id),
            name=link.name,
            organization_id=str(link.organization_id),
            destination_kind=link.destination_kind,  # type: ignore[arg-type]
            destination_id=str(link.destination_id),
            destination_title=titles.get((link.destination_kind, link.destination_id), ""),
            url=link.path,
            icon_key=link.icon_key,
            icon_url=link.icon_url,
            views=link.views,
            tickets_sold=link.tickets_sold,
            revenue=link.revenue,
            status=link.status,  # type: ignore[arg-type]
            created=to_iso(link.created_at),
        )
        for link in links
    ]


def create_link(user: GatehouseUser, payload: schema.TrackingLinkCreateSchema) -> TrackingLink:
    organization = resolve_destination(user, payload.destination_kind, payload.destination_id)
    code = generate_unique_code(organization)
    link = TrackingLink.objects.create(
        name=payload.name,
        organization=organization,
        destination_kind=payload.destination_kind,
        destination_id=payload.destination_id,
        code=code,
        path=tracking_path(code),
        status=payload.status,
        icon_key=payload.icon_key,
        icon_url=str(payload.icon_url) if payload.icon_url else None,
        created_by=user,
    )
    logger.info("tracking_link_created", tracking_link_id=str(link.id), organization_id=str(organization.id))
    return link


def get_owned_link(user: GatehouseUser, link_id: UUID) -> TrackingLink:
    """A live link of one of the user's organizations; archived, foreign or missing links are a 404."""
    return get_object_or_404(TrackingLink.objects.for_owner(user), pk=link_id)


def update_link(user: GatehouseUser, link_id: UUID, payload: schema.TrackingLinkUpdateSchema) -> TrackingLink:
    """Apply the fields that were sent.

    Moving the destination re-checks ownership and keeps the link's organization in step with it.
    Clearing `destinationKind` or `destinationId` with an explicit null is ignored.
    """
    link = get_owned_link(user, link_id)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "status"):
        if changes.get(field) is not None:
            setattr(link, field, changes[field])
    if "icon_key" in changes:
        link.icon_key = changes["icon_key"]
    if "icon_url" in changes:
        link.icon_url = str(changes["icon_url"]) if changes["icon_url"] else None

    kind = changes.get("destination_kind") or link.destination_kind
    destination_id = changes.get("destination_id") or link.destination_id
    if (kind, destination_id) != (link.destination_kind, link.destination_id):
        organization = resolve_destination(user, kind, destination_id)
        if organization.pk != link.organization_id and organization.tracking_links.filter(code=link.code).exists():
            link.code = generate_unique_code(organization)
            link.path = tracking_path(link.code)
        link.organization = organization
        link.destination_kind = kind
        link.destination_id = destination_id

    link.save()
    logger.info("tracking_link_updated", tracking_link_id=str(link.id), fields=sorted(changes))
    return link


def archive_link(user: GatehouseUser, link_id: UUID) -> None:
    link = get_owned_link(user, link_id)
    link.archived = True
    link.save(update_fields=["archived", "updated_at"])
    logger.info("tracking_link_archived", tracking_link_id=str(link.id))


def search_destinations(user: GatehouseUser, q: str = "") -> list[schema.DestinationSchema]:
    """Owned organizations and their events whose name matches `q`, events first."""
    q = q.strip()
    organizations = list(Organization.objects.owned_by(user)[:DESTINATIONS_LIMIT])
    events = Event.objects.filter(organization__in=organizations)
    if q:
        events = events.filter(name__icontains=q)
        organizations = [org for org in organizations if q.lower() in org.name.lower()]
    destinations = [
        schema.DestinationSchema(kind="event", id=str(event.id), title=event.name)
        for event in events.order_by("-start")[:DESTINATIONS_LIMIT]
    ]
    destinations += [
        schema.DestinationSchema(kind="organization", id=str(org.id), title=org.name) for org in organizations
    ]
    return destinations[:DESTINATIONS_TOTAL_LIMIT]


def _member_name(member: GatehouseUser | None) -> str:
    if member is None:
        return ""
    return member.get_full_name() or member.username or member.email


def member_rollup(links: QuerySet[TrackingLink]) -> list[schema.MemberRowSchema]:
    """Per-creator totals over the given links, best earners first."""
    totals = (
        links.exclude(created_by=None)
        .values("created_by")
        .annotate(
            links=Count("id"),
            total_views=Sum("views"),
            total_tickets_sold=Sum("tickets_sold"),
            total_revenue=Sum("revenue"),
            last_link_created_at=Max("created_at"),
        )
        .order_by("-total_revenue", "-total_views", "-links")[: settings.TRACKING_MEMBERS_LIMIT]
    )
    totals = list(totals)
    users = GatehouseUser.objects.in_bulk([row["created_by"] for row in totals])
    rows = []
    for row in totals:
        member = users.get(row["created_by"])
        rows.append(
            schema.MemberRowSchema(
                user_id=str(row["created_by"]),
                name=_member_name(member) or str(row["created_by"]),
                email=member.email.lower() if member and member.email else None,
                image=(member.image or None) if member else None,
                links=row["links"],
                views=row["total_views"] or 0,
                tickets_sold=row["total_tickets_sold"] or 0,
                revenue=row["total_revenue"] or 0,
                last_link_created_at=to_iso(row["last_link_created_at"]) or None,
            )
        )
    return rows


def member_profile(user: GatehouseUser, member_id: UUID) -> schema.MemberProfileSchema:
    """Profile of someone who made links for one of the user's organizations.

    Raises:
        HttpError: 404 unless the member has a live link in an organization the user owns.
    """
    if not TrackingLink.objects.for_owner(user).filter(created_by_id=member_id).exists():
        raise HttpError(404, "Member not found.")
    member = get_object_or_404(GatehouseUser, pk=member_id)
    return schema.MemberProfileSchema(
        id=str(member.id),
        name=_member_name(member) or "Member",
        email=member.email.lower() or None,
        image=member.image or None,
    )


def register_view(code: str) -> str | None:
    """Count a visit to an active link and return where it points, or None if nothing is live under the code.

    Codes are unique per organization only; the newest matching link wins.
    """
    link = (
        TrackingLink.objects.live()
        .filter(code=code, status=TrackingLink.LinkStatus.ACTIVE)
        .order_by("-created_at")
        .first()
    )
    if link is None:
        return None
    TrackingLink.objects.filter(pk=link.pk).update(views=F("views") + 1, last_viewed_at=timezone.now())
    return destination_url(link)
