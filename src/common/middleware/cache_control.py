"""Keep per-user API responses out of shared caches."""

import typing as t

from django.http import HttpRequest, HttpResponse

PRIVATE_NO_STORE_HEADERS = {
    "Cache-Control": "private, no-store, max-age=0, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class PrivateCacheControlMiddleware:
    """Marks every authenticated API response as private and uncacheable.

    Guest lists, pins and tracking stats are computed per acting user, so
    neither browsers nor intermediaries may store them.
    """

    api_prefix = "/api/"

    def __init__(self, get_response: t.Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        response = self.get_response(request)
        if request.path.startswith(self.api_prefix) and "HTTP_AUTHORIZATION" in request.META:
            for header, value in PRIVATE_NO_STORE_HEADERS.items():
                response[header] = value
        return response
