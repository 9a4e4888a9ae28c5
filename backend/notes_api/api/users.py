from __future__ import annotations

from fastapi import APIRouter, Depends, status

from notes_api.api.deps import Services, get_current_user_id, get_services
from notes_api.models.users import CreatedResponse, UserOut, UserRequest

router = APIRouter(prefix="/api/user", tags=["users"])


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_user(req: UserRequest, services: Services = Depends(get_services)) -> CreatedResponse:
    user_id = services.users.create_user(req.login, req.password, req.name, req.surname)
    return CreatedResponse(id=user_id)


@router.get("", response_model=UserOut)
def get_user(user_id: int = Depends(get_current_user_id), services: Services = Depends(get_services)) -> UserOut:
    return UserOut.from_entity(services.users.get_user(user_id))


@router.put("")
def update_user(
    req: UserRequest,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    services.users.update_user(user_id, req.login, req.password, req.name, req.surname)
    return {}


@router.delete("")
def delete_user(user_id: int = Depends(get_current_user_id), services: Services = Depends(get_services)) -> dict:
    services.users.delete_user(user_id)
    return {}
