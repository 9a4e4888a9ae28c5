from __future__ import annotations

from fastapi import APIRouter, Depends, status

from notes_api.api.deps import Services, get_current_user_id, get_services
from notes_api.models.folders import FolderRequest
from notes_api.models.users import CreatedResponse

router = APIRouter(prefix="/api/folders", tags=["folders"])


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_folder(
    payload: FolderRequest,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> CreatedResponse:
    return CreatedResponse(id=services.folders.create_folder(user_id, payload.title))


@router.put("/{folder_id}")
def update_folder(
    folder_id: int,
    payload: FolderRequest,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    services.folders.update_folder(user_id, folder_id, payload.title)
    return {}


# idempotent: deleting a missing folder still answers 200
@router.delete("/{folder_id}")
def delete_folder(
    folder_id: int,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    services.folders.delete_folder(user_id, folder_id)
    return {}
