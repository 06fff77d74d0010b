"""Tasks for tracking internal errors."""

import base64
import typing as t

import structlog
from celery import shared_task
from django.conf import settings
from django.db import transaction

from .models import Error, ErrorOccurrence, error_signature

logger = structlog.get_logger(__name__)


@shared_task
def track_internal_error(
    path: str,
    traceback_str: str,
    encoded_payload: str | None = None,
    json_payload: t.Any = None,
    metadata: dict[str, t.Any] | None = None,
) -> str:
    """Record an internal server error, deduplicated by path and traceback.

    Returns:
        The id of the Error signature the occurrence was attached to.
    """
    md5 = error_signature(path, traceback_str)
    with transaction.atomic():
        error, created = Error.objects.get_or_create(
            md5=md5,
            defaults={
                "path": path[:500],
                "server_version": settings.VERSION,
                "traceback": traceback_str,
                "payload": base64.b64decode(encoded_payload) if encoded_payload else None,
                "json_payload": json_payload,
                "request_metadata": metadata,
            },
        )
        ErrorOccurrence.objects.create(signature=error)
    if created:
        logger.warning("internal_error_signature_created", path=path, md5=md5)
    return str(error.id)
