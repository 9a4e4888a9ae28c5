from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from notes_api.api.deps import Services, get_services
from notes_api.errors import ApplicationError, ErrorKind
from notes_api.models.auth import LoginRequest, TokenResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, services: Services = Depends(get_services)) -> TokenResponse:
    try:
        token = services.auth.auth_user(req.login, req.password)
    except ApplicationError as exc:
        if exc.kind == ErrorKind.NOT_FOUND:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
        raise
    return TokenResponse(access_token=token)
