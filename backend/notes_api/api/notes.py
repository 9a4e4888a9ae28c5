from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from notes_api.api.deps import Services, get_current_user_id, get_services
from notes_api.models.notes import MoveNoteRequest, NoteOut, NoteRequest, NotesResponse
from notes_api.models.users import CreatedResponse

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_note(
    payload: NoteRequest,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> CreatedResponse:
    note_id = services.notes.create_note(user_id, payload.title, payload.content, payload.tags)
    return CreatedResponse(id=note_id)


@router.get("", response_model=NotesResponse)
def list_notes(user_id: int = Depends(get_current_user_id), services: Services = Depends(get_services)) -> NotesResponse:
    return NotesResponse.from_entities(services.notes.find_notes_by_query_phrase(user_id, ""))


# static paths first, otherwise /{note_id} would capture them
@router.get("/search", response_model=NotesResponse)
def find_notes(
    query: str = Query(min_length=1),
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> NotesResponse:
    return NotesResponse.from_entities(services.notes.find_notes_by_query_phrase(user_id, query))


@router.get("/favorites", response_model=NotesResponse)
def get_favorite_notes(
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> NotesResponse:
    return NotesResponse.from_entities(services.notes.get_favorite_notes(user_id))


@router.get("/{note_id}", response_model=NoteOut)
def get_note(
    note_id: int,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> NoteOut:
    return NoteOut.from_entity(services.notes.get_note(user_id, note_id))


@router.put("/{note_id}")
def update_note(
    note_id: int,
    payload: NoteRequest,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    services.notes.update_note(user_id, note_id, payload.title, payload.content, payload.tags)
    return {}


@router.delete("/{note_id}")
def delete_note(
    note_id: int,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    services.notes.delete_note(user_id, note_id)
    return {}


@router.put("/{note_id}/move")
def move_note(
    note_id: int,
    payload: MoveNoteRequest,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    services.notes.move_to_folder(user_id, note_id, payload.folder_id)
    return {}


@router.put("/{note_id}/favorites")
def add_to_favorites(
    note_id: int,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    services.notes.add_to_favorites(user_id, note_id)
    return {}


@router.delete("/{note_id}/favorites")
def delete_from_favorites(
    note_id: int,
    user_id: int = Depends(get_current_user_id),
    services: Services = Depends(get_services),
) -> dict:
    services.notes.delete_from_favorites(user_id, note_id)
    return {}
