from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from notes_api.errors import ApplicationError, ErrorKind

logger = logging.getLogger(__name__)

_EXPECTED = {ErrorKind.VALIDATION, ErrorKind.NOT_FOUND, ErrorKind.AUTH}


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """Map the error kind to a status; the cause never leaves the server."""
    if exc.kind in _EXPECTED:
        logger.info("%s for %s %s: %s", exc.kind.value, request.method, request.url.path, exc.message)
    else:
        logger.warning("%s for %s %s: %s", exc.kind.value, request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
