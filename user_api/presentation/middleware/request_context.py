"""
Request context middleware.

Tags every request with an identifier and writes one access log line per
response.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"


def resolve_request_id(submitted: str | None) -> str:
    """Keep a client supplied UUID, otherwise issue a fresh UUIDv4."""
    if submitted:
        try:
            uuid.UUID(submitted)
            return submitted
        except ValueError:
            logger.debug(f"Replacing malformed request id {submitted!r}")
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Correlates requests, responses and log lines.

    The identifier is exposed as ``request.state.request_id`` to handlers and
    echoed back in the ``x-request-id`` response header. The access line
    carries method, path, status and duration.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f} ms) [{request_id}]"
        )
        return response
