"""Request id and timing middleware."""

import logging
import uuid
from time import perf_counter

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger("request")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every request with an X-Request-Id and log its duration."""

    def __init__(self, app: ASGIApp, quiet_paths: set[str] | None = None):
        super().__init__(app)
        self.quiet_paths = quiet_paths if quiet_paths is not None else {"/healthz", "/favicon.ico"}

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
        req_id = incoming or str(uuid.uuid4())
        request.state.request_id = req_id

        t0 = perf_counter()
        response = await call_next(request)
        response.headers["X-Request-Id"] = req_id

        if request.url.path not in self.quiet_paths:
            logger.info(
                "request method=%s path=%s status=%d ms=%d request_id=%s",
                request.method,
                request.url.path,
                response.status_code,
                int((perf_counter() - t0) * 1000),
                req_id,
            )
        return response
