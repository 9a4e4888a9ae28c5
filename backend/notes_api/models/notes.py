from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from notes_api.domain.note import Note


class NoteRequest(BaseModel):
    title: str = Field(max_length=255)
    content: str = ""
    tags: Optional[list[str]] = None


class MoveNoteRequest(BaseModel):
    # null takes the note out of its folder
    folder_id: Optional[int] = None


class NoteOut(BaseModel):
    id: int
    title: str
    content: str
    is_favorite: bool
    tags: list[str]
    folder_id: Optional[int] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_entity(cls, note: Note) -> "NoteOut":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            is_favorite=note.is_favorite,
            tags=list(note.tags),
            folder_id=note.folder_id,
            timestamp=note.timestamp,
        )


class NotesResponse(BaseModel):
    notes: list[NoteOut]

    @classmethod
    def from_entities(cls, notes: list[Note]) -> "NotesResponse":
        return cls(notes=[NoteOut.from_entity(n) for n in notes])
