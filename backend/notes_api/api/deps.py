from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notes_api.errors import ApplicationError, ErrorKind
from notes_api.services.auth_service import AuthService
from notes_api.services.folder_service import FolderService
from notes_api.services.note_service import NoteService
from notes_api.services.notebook_service import NotebookService
from notes_api.services.user_service import UserService

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Services:
    auth: AuthService
    users: UserService
    folders: FolderService
    notes: NoteService
    notebook: NotebookService


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_current_user_id(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    services: Services = Depends(get_services),
) -> int:
    """Resolve the caller's user id from `Authorization: Bearer <token>`."""
    if creds is None or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing credentials")

    try:
        claims = services.auth.validate_token(creds.credentials)
    except ApplicationError as exc:
        # only token problems map to 401
        if exc.kind not in (ErrorKind.AUTH, ErrorKind.NOT_FOUND):
            raise
        logger.info("auth.token_rejected", extra={"reason": exc.kind.value})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    request.state.user_id = claims.user_id
    return claims.user_id
