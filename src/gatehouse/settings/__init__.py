"""Settings for the gatehouse project.

Each concern lives in its own module; this package re-exports all of them.
"""

from .base import *  # noqa: F401,F403
from .celery import *  # noqa: F401,F403
from .ninja import *  # noqa: F401,F403
from .observability import *  # noqa: F401,F403
