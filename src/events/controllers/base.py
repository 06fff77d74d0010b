import typing as t
from uuid import UUID

from common.controllers import UserAwareController
from events import models


class EventManagerBaseController(UserAwareController):
    """Base controller for endpoints scoped to an event the user manages.

    Subclasses should be decorated with @api_controller to register routes.
    """

    def get_one(self, event_id: UUID) -> models.Event:
        """Fetch the event, then run the object permissions on it.

        A missing event is a 404, an event the user may not manage is a 403.
        """
        return t.cast(
            models.Event,
            self.get_object_or_exception(models.Event.objects.with_organization(), pk=event_id),
        )
