from uuid import UUID

from events.models import Event


def can_manage_event(event: Event, user_id: UUID | None) -> bool:
    """Whether the user may manage the event.

    Managers are the event's creator and the owner of the event's organization.
    An event without an organization is managed by its creator alone.
    """
    if user_id is None:
        return False
    if event.created_by_id is not None and event.created_by_id == user_id:
        return True
    organization = event.organization
    return organization is not None and organization.owner_id == user_id
