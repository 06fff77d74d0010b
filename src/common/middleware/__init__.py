"""Common middleware for gatehouse."""

from .cache_control import PrivateCacheControlMiddleware
from .observability import StructlogContextMiddleware

__all__ = ["PrivateCacheControlMiddleware", "StructlogContextMiddleware"]
