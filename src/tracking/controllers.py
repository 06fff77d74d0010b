import typing as t
from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from ninja import Query
from ninja.errors import HttpError
from ninja_extra import api_controller, route

from common.authentication import GatehouseJWTAuth
from common.controllers import UserAwareController
from common.schema import OkResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from events.controllers.permissions import OrganizationOwnerPermission
from events.models import Event, Organization
from tracking import schema, service
from tracking.models import TrackingLink


@api_controller(
    "/tracking-links",
    auth=GatehouseJWTAuth(),
    permissions=[OrganizationOwnerPermission()],
    tags=["Tracking Links"],
    throttle=WriteThrottle(),
)
class TrackingLinkController(UserAwareController):
    """Tracking links of the organizations the current user owns."""

    def get_owned_organization(self, organization_id: UUID) -> Organization:
        """404 if the organization does not exist, 403 if the user does not own it."""
        return t.cast(Organization, self.get_object_or_exception(Organization.objects.all(), pk=organization_id))

    def scoped_links(self, filters: schema.TrackingScopeFilter) -> QuerySet[TrackingLink]:
        organization = event = None
        if filters.scope == "organization":
            if filters.organization_id is None:
                raise HttpError(400, "organizationId is required for the organization scope.")
            organization = self.get_owned_organization(filters.organization_id)
        elif filters.scope == "event":
            if filters.event_id is None:
                raise HttpError(400, "eventId is required for the event scope.")
            event = get_object_or_404(Event, pk=filters.event_id)
            if event.organization_id is None:
                raise HttpError(403, "The event does not belong to an organization.")
            self.get_owned_organization(event.organization_id)
        return service.scoped_links(self.user(), organization=organization, event=event)

    # Handler names decide route order.
    @route.get(
        "/destinations",
        url_name="tracking_link_destinations",
        response=schema.DestinationsResponse,
        throttle=UserDefaultThrottle(),
    )
    def destinations(self, q: str = "") -> schema.DestinationsResponse:
        """Events and organizations a link can point at, filtered by name."""
        return schema.DestinationsResponse(destinations=service.search_destinations(self.user(), q[:120]))

    @route.get(
        "/members",
        url_name="tracking_link_members",
        response=schema.MembersResponse,
        by_alias=True,
        throttle=UserDefaultThrottle(),
    )
    def members(
        self,
        filters: schema.TrackingScopeFilter = Query(...),  # type: ignore[type-arg]
    ) -> schema.MembersResponse:
        """Totals per link creator: links, views, tickets sold and revenue. Best earners first."""
        return schema.MembersResponse(rows=service.member_rollup(self.scoped_links(filters)))

    @route.get(
        "/members/{member_id}",
        url_name="tracking_link_member",
        response=schema.MemberResponse,
        by_alias=True,
        throttle=UserDefaultThrottle(),
    )
    def member(self, member_id: UUID) -> schema.MemberResponse:
        """Profile of a member who created links for one of your organizations."""
        return schema.MemberResponse(member=service.member_profile(self.user(), member_id))

    @route.get(
        "",
        url_name="tracking_links",
        response=schema.TrackingLinkListResponse,
        by_alias=True,
        throttle=UserDefaultThrottle(),
    )
    def list_links(
        self,
        filters: schema.TrackingScopeFilter = Query(...),  # type: ignore[type-arg]
    ) -> schema.TrackingLinkListResponse:
        """Live links, newest first.

        `scope=organization` needs `organizationId`; `scope=event` needs `eventId` and lists links pointing at it.
        """
        return schema.TrackingLinkListResponse(rows=service.to_rows(self.scoped_links(filters)))

    @route.post("", url_name="tracking_links", response=schema.TrackingLinkRowResponse, by_alias=True)
    def create_link(self, payload: schema.TrackingLinkCreateSchema) -> schema.TrackingLinkRowResponse:
        """Create a link to an event or organization you own. A fresh short code is generated."""
        link = service.create_link(self.user(), payload)
        return schema.TrackingLinkRowResponse(row=service.to_rows([link])[0])

    @route.patch("/{link_id}", url_name="tracking_link", response=schema.TrackingLinkRowResponse, by_alias=True)
    def update_link(self, link_id: UUID, payload: schema.TrackingLinkUpdateSchema) -> schema.TrackingLinkRowResponse:
        """Change the fields sent. Archived links answer 404."""
        link = service.update_link(self.user(), link_id, payload)
        return schema.TrackingLinkRowResponse(row=service.to_rows([link])[0])

    @route.delete("/{link_id}", url_name="tracking_link", response=OkResponse)
    def remove_link(self, link_id: UUID) -> OkResponse:
        """Archive a link. Its code stops redirecting."""
        service.archive_link(self.user(), link_id)
        return OkResponse()
