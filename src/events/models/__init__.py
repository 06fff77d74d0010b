from .event import Event
from .guest import EventGuest
from .organization import Organization
from .ticket import Order, Ticket

__all__ = [
    "Event",
    "EventGuest",
    "Order",
    "Organization",
    "Ticket",
]
