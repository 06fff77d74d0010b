import structlog

from accounts.models import GatehouseUser
from events.models import Event

logger = structlog.get_logger(__name__)


def set_pinned(event: Event, user: GatehouseUser, pinned: bool) -> bool:
    """Pin or unpin the event for the user. Idempotent either way."""
    if pinned:
        event.pinned_by.add(user)
    else:
        event.pinned_by.remove(user)
    logger.info("event_pin_updated", event_id=str(event.id), user_id=str(user.id), pinned=pinned)
    return pinned


def pinned_event_ids(user: GatehouseUser) -> list[str]:
    """Ids of the events the user pinned, most recently started first."""
    return [str(event_id) for event_id in user.pinned_events.order_by("-start", "id").values_list("id", flat=True)]
