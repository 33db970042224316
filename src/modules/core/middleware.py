"""Request correlation for both tiers.

A business-tier request and every data-tier call it causes share one
correlation id: the middleware adopts ``X-Request-ID`` (or mints one),
the Store Gateway forwards ``correlation_id_var`` on each outgoing call,
and the data tier adopts the same header on the way in.
"""

import time
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _tier(path: str) -> str:
    if path.startswith("/data/"):
        return "data"
    if path.startswith("/api/"):
        return "business"
    return "service"


class CorrelationIdMiddleware:
    """Bind the request's correlation id for its whole lifetime.

    The id lives in ``correlation_id_var`` and in structlog's context
    variables until the response is built.  Both are restored to their
    previous values afterwards, which keeps a nested in-process call to
    the data tier from clobbering the outer request's binding.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = correlation_id_var.set(cid)
        log = logger.bind(method=request.method, path=request.get_full_path())

        try:
            with structlog.contextvars.bound_contextvars(
                correlation_id=cid, tier=_tier(request.path)
            ):
                log.info("request.started")
                started = time.monotonic()
                response = self.get_response(request)
                log.info(
                    "request.finished",
                    status_code=response.status_code,
                    duration_ms=round((time.monotonic() - started) * 1000, 2),
                )
        finally:
            correlation_id_var.reset(token)

        response[REQUEST_ID_HEADER] = cid
        return response
