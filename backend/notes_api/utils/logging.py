from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

NOISY_LOGGERS = ("sqlalchemy", "sqlalchemy.engine", "passlib", "httpx")

logger = logging.getLogger("notes_api.http")


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(level)
    if not any(getattr(h, "_notes_api", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._notes_api = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and echo the trace id in `X-Request-ID`."""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())
        request.state.trace_id = trace_id
        start = time.perf_counter()

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(
            "HTTP REQUEST. Method: %s, path: %s, traceId: %s, userId: %s, status: %d, duration_ms: %s",
            request.method,
            request.url.path,
            trace_id,
            getattr(request.state, "user_id", 0),
            response.status_code,
            duration_ms,
        )
        response.headers["X-Request-ID"] = trace_id
        return response
