"""Exception handlers for the API."""

import base64
import traceback
import typing as t
from copy import deepcopy

import orjson
import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.errors import ValidationError as NinjaValidationError
from ninja.responses import Response

from .tasks import track_internal_error

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    logger.exception("internal_server_error", path=request.path)
    data = {"detail": "Internal Server Error."}
    tb_str = traceback.format_exc()
    is_staff = getattr(request, "user", None) and request.user.is_staff
    encoded_payload = base64.b64encode(request.body).decode("utf-8") if request.body else None
    metadata = {
        "headers": obfuscate(dict(request.headers)),
        "method": request.method,
        "path": request.path,
        "GET": obfuscate(request.GET.dict()),
        "POST": obfuscate(request.POST.dict() if request.method == "POST" else {}),
        # request.user is set by the auth flow
        "user": str(request.user) if getattr(request, "user", None) else None,
    }
    if request.method in ("POST", "PUT", "PATCH") and request.headers.get("Content-Type") == "application/json":
        try:
            json_payload = obfuscate(orjson.loads(request.body))
            encoded_payload = None  # No reason to store an encoded payload if we have the json already
        except orjson.JSONDecodeError:  # pragma: no cover
            json_payload = None
    else:
        json_payload = None
    if settings.DEBUG or is_staff:  # pragma: no cover
        data["traceback"] = tb_str
    path = f"{request.method} {request.path}"
    track_internal_error.delay(
        path=path,
        traceback_str=tb_str,
        encoded_payload=encoded_payload,
        json_payload=json_payload,
        metadata=metadata,
    )
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a model validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.warning("model_validation_failed", path=request.path)
    if not hasattr(exc, "error_dict"):
        return Response(status=400, data={"errors": {"__all__": exc.messages}})
    error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    return Response(status=400, data={"errors": error_dict})


def handle_request_validation_error(
    request: HttpRequest, exc: NinjaValidationError | t.Type[NinjaValidationError]
) -> Response:
    """Malformed input is a client error: 400, not ninja's default 422."""
    logger.info("request_validation_failed", path=request.path)
    return Response(status=400, data={"detail": exc.errors})


SENSITIVE_KEYS = {"password", "token", "x-api-key", "authorization", "authentication", "cookie"}


def obfuscate(data: t.Any) -> t.Any:
    """Obfuscate sensitive data in payloads and headers."""
    if not isinstance(data, dict):
        return data
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
