"""Per-request logging context."""

import re
import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from learnease.core.context import clear_context, set_request_id, set_trace_id


logger = structlog.get_logger(__name__)

# Client-supplied ids end up in every log line of the request
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")
# W3C traceparent: version-traceid-parentid-flags
_TRACEPARENT = re.compile(r"^[0-9a-f]{2}-([0-9a-f]{32})-[0-9a-f]{16}-[0-9a-f]{2}$")


def incoming_request_id(value: str | None) -> str | None:
    """Client request id if it is safe to log, else None (a fresh one is minted)."""
    if value and _SAFE_REQUEST_ID.match(value):
        return value
    return None


def trace_id_from_headers(trace_header: str | None, traceparent: str | None) -> str | None:
    if trace_header and _SAFE_REQUEST_ID.match(trace_header):
        return trace_header
    if traceparent:
        match = _TRACEPARENT.match(traceparent.strip().lower())
        if match:
            return match.group(1)
    return None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request and trace ids for logging and time the request.

    The request id is echoed in ``X-Request-ID`` and the handling time in
    ``X-Response-Time-Ms``. Paths in ``exclude_paths`` (probes) still get ids
    but are not logged.
    """

    REQUEST_ID_HEADER = "X-Request-ID"
    TRACE_ID_HEADER = "X-Trace-ID"
    TRACEPARENT_HEADER = "traceparent"
    RESPONSE_TIME_HEADER = "X-Response-Time-Ms"

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = tuple(exclude_paths or ("/health",))

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        headers = request.headers

        request_id = set_request_id(incoming_request_id(headers.get(self.REQUEST_ID_HEADER)))
        trace_id = trace_id_from_headers(
            headers.get(self.TRACE_ID_HEADER), headers.get(self.TRACEPARENT_HEADER)
        )
        if trace_id:
            set_trace_id(trace_id)
        request.state.request_id = request_id

        path = request.url.path
        log_this = self.log_requests and not path.startswith(self.exclude_paths)
        if log_this:
            logger.info(
                "request_started",
                method=request.method,
                path=path,
                client_ip=request.client.host if request.client else None,
            )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(started),
            )
            raise
        else:
            duration_ms = _elapsed_ms(started)
            if log_this:
                log = logger.warning if response.status_code >= 400 else logger.info
                log(
                    "request_completed",
                    method=request.method,
                    path=path,
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                )
            response.headers[self.REQUEST_ID_HEADER] = request_id
            response.headers[self.RESPONSE_TIME_HEADER] = str(duration_ms)
            return response
        finally:
            clear_context()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
