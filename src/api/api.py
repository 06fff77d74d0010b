from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.errors import ValidationError as NinjaValidationError
from ninja_extra import NinjaExtraAPI

from accounts.controllers import AuthController
from common.schema import OkResponse, VersionResponse
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from events.controllers import EVENT_CONTROLLERS
from tracking.controllers import TrackingLinkController

from .exception_handlers import (
    handle_django_validation_error,
    handle_general_exception,
    handle_request_validation_error,
)

api = NinjaExtraAPI(
    title="Gatehouse API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"Gatehouse API {settings.VERSION}",
    app_name=f"gatehouse-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse}, url_name="version")
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version."""
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: OkResponse}, url_name="healthcheck")
def healthcheck(request: HttpRequest) -> tuple[int, OkResponse]:
    """Check the health of the API."""
    return 200, OkResponse()


api.register_controllers(
    AuthController,
    *EVENT_CONTROLLERS,
    TrackingLinkController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    NinjaValidationError: handle_request_validation_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
