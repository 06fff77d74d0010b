from uuid import UUID

from ninja_extra import api_controller, route

from common.authentication import GatehouseJWTAuth
from common.schema import OkResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import schema
from events.controllers.permissions import EventManagerPermission
from events.service.guest_list import GuestListService

from .base import EventManagerBaseController


@api_controller(
    "/events/{event_id}",
    auth=GatehouseJWTAuth(),
    permissions=[EventManagerPermission()],
    tags=["Event Guests"],
    throttle=WriteThrottle(),
)
class EventGuestsController(EventManagerBaseController):
    """Guest list of an event: ticket buyers plus guests added by hand."""

    # Handler names decide route order.
    @route.get(
        "/guests/candidates",
        url_name="event_guest_candidates",
        response=list[schema.GuestCandidateSchema],
        by_alias=True,
        throttle=UserDefaultThrottle(),
    )
    def guest_candidates(self, event_id: UUID, q: str = "") -> list[schema.GuestCandidateSchema]:
        """Search users who are not on the guest list yet.

        Matches `q` case-insensitively against email, username, phone and name. Returns at most 30 users.
        """
        return GuestListService(self.get_one(event_id)).candidates(q)

    @route.get(
        "/guests",
        url_name="event_guests",
        response=list[schema.GuestRowSchema],
        by_alias=True,
        throttle=UserDefaultThrottle(),
    )
    def list_guests(self, event_id: UUID) -> list[schema.GuestRowSchema]:
        """The full guest list, most recent activity first.

        Tickets of one buyer in one order collapse into a single row; such a row is checked in as soon as any of
        its tickets is scanned. Manually added guests get one row each and are the only removable rows.
        """
        return GuestListService(self.get_one(event_id)).list_rows()

    @route.post("/guests", url_name="event_guests", response=OkResponse)
    def add_guests(self, event_id: UUID, payload: schema.AddGuestsSchema) -> OkResponse:
        """Add users to the guest list by hand.

        Users whose email is already on the manual list are skipped, as are unknown ids.
        """
        GuestListService(self.get_one(event_id)).add_manual_guests(payload.user_ids)
        return OkResponse()

    @route.patch("/guests/{guest_id}", url_name="event_guest", response=OkResponse)
    def update_guest_status(self, event_id: UUID, guest_id: UUID, payload: schema.GuestStatusSchema) -> OkResponse:
        """Check a guest in or out.

        For a ticket row, pass the row id; every ticket of that buyer's order follows.
        """
        GuestListService(self.get_one(event_id)).set_status(guest_id, payload.status)
        return OkResponse()

    @route.delete("/guests/{guest_id}", url_name="event_guest", response=OkResponse)
    def remove_guest(self, event_id: UUID, guest_id: UUID) -> OkResponse:
        """Remove a manually added guest. Ticket rows cannot be removed and answer 404."""
        GuestListService(self.get_one(event_id)).remove_manual_guest(guest_id)
        return OkResponse()
