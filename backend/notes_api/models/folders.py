from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from notes_api.domain.folder import Folder
from notes_api.models.notes import NoteOut


class FolderRequest(BaseModel):
    title: str = Field(max_length=255)


class FolderOut(BaseModel):
    id: int
    title: str
    timestamp: Optional[datetime] = None
    notes: list[NoteOut] = []

    @classmethod
    def from_entity(cls, folder: Folder) -> "FolderOut":
        return cls(
            id=folder.id,
            title=folder.title,
            timestamp=folder.timestamp,
            notes=[NoteOut.from_entity(n) for n in folder.notes],
        )
