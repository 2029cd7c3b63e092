"""Request logging middleware."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("authorship.requests")

# Error bodies longer than this are truncated in the log
MAX_LOGGED_DETAIL = 500


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with method, path, status, and duration.

    Error responses also log their body, so validation details for rejected
    snapshot payloads show up in the terminal.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000

        status = response.status_code
        path = request.url.path

        if status < 400 or not hasattr(response, "body_iterator"):
            logger.info(
                "%s %s -> %d (%.0fms)", request.method, path, status, duration_ms
            )
            return response

        # The body iterator can only be consumed once; rebuild the response after
        body = b""
        async for chunk in response.body_iterator:
            body += chunk.encode("utf-8") if isinstance(chunk, str) else chunk

        detail = body.decode("utf-8", errors="replace")
        if len(detail) > MAX_LOGGED_DETAIL:
            detail = detail[:MAX_LOGGED_DETAIL] + "..."

        log = logger.warning if status < 500 else logger.error
        log(
            "%s %s -> %d (%.0fms): %s",
            request.method,
            path,
            status,
            duration_ms,
            detail,
        )

        return Response(
            content=body,
            status_code=status,
            headers=dict(response.headers),
            media_type=response.media_type,
        )
