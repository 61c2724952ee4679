"""
Request logging middleware.

Each request gets a request id (the caller's ``X-Request-ID`` when it sends a
usable one). Requests addressed to a single order also bind ``order_id``, so
state machine, stock and ledger events logged while serving them can be
joined back to the call that caused them.
"""

import re
import time
import uuid
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from orderflow.config import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")
ORDER_PATH_PATTERN = re.compile(r"^/api/orders/(?P<order_id>[^/]+)")
QUIET_PATHS = frozenset({"/health", "/api/health"})


def request_id_for(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if REQUEST_ID_PATTERN.fullmatch(incoming):
        return incoming
    return uuid.uuid4().hex[:12]


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds request context and logs one completion event per request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request_id_for(request)
        request.state.request_id = request_id
        path = request.url.path

        context = {"request_id": request_id}
        match = ORDER_PATH_PATTERN.match(path)
        if match:
            context["order_id"] = match.group("order_id")
        clear_request_context()
        bind_request_context(**context)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=path,
                error=str(e),
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise
        else:
            duration_ms = (time.perf_counter() - start) * 1000
            status = response.status_code
            if path in QUIET_PATHS and status < 400:
                log = logger.debug
            elif status >= 500:
                log = logger.error
            elif status >= 400:
                log = logger.warning
            else:
                log = logger.info
            log(
                "request_completed",
                method=request.method,
                path=path,
                status=status,
                duration_ms=round(duration_ms, 2),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
            return response
        finally:
            clear_request_context()
