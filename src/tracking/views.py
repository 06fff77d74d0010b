from django.http import Http404, HttpRequest, HttpResponseRedirect
from django.views.decorators.http import require_GET

from tracking import service


@require_GET
def follow_tracking_link(request: HttpRequest, code: str) -> HttpResponseRedirect:
    """Public entry point of a tracking link: count the visit and send the visitor on."""
    url = service.register_view(code)
    if url is None:
        raise Http404("Tracking link not found.")
    return HttpResponseRedirect(url)
