from .guests import EventGuestsController
from .pins import EventPinsController

EVENT_CONTROLLERS: list[type] = [
    EventPinsController,
    EventGuestsController,
]

__all__ = ["EVENT_CONTROLLERS", "EventGuestsController", "EventPinsController"]
