from uuid import UUID

from ninja_extra import api_controller, route

from common.authentication import GatehouseJWTAuth
from common.throttling import WriteThrottle
from events import schema
from events.controllers.permissions import EventManagerPermission
from events.service import pins

from .base import EventManagerBaseController


@api_controller("/events", auth=GatehouseJWTAuth(), tags=["Event Pins"], throttle=WriteThrottle())
class EventPinsController(EventManagerBaseController):
    @route.get("/pins", url_name="pinned_events", response=schema.PinnedEventsSchema)
    def pinned_events(self) -> schema.PinnedEventsSchema:
        """Ids of the events the current user pinned."""
        return schema.PinnedEventsSchema(ids=pins.pinned_event_ids(self.user()))

    @route.put(
        "/{event_id}/pin",
        url_name="pin_event",
        response=schema.PinResponse,
        permissions=[EventManagerPermission()],
    )
    def pin_event(self, event_id: UUID, payload: schema.PinSchema) -> schema.PinResponse:
        """Pin or unpin an event you manage."""
        event = self.get_one(event_id)
        return schema.PinResponse(pinned=pins.set_pinned(event, self.user(), payload.pinned))
