import datetime

from django.utils import timezone


def to_iso(value: datetime.datetime | None) -> str:
    """Render a timestamp as fixed-width UTC ISO-8601 with millisecond precision.

    ``YYYY-MM-DDTHH:MM:SS.mmmZ`` sorts chronologically as a plain string.
    Missing timestamps render as an empty string.
    """
    if value is None:
        return ""
    if timezone.is_naive(value):
        value = timezone.make_aware(value, datetime.timezone.utc)
    value = value.astimezone(datetime.timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
