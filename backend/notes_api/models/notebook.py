from pydantic import BaseModel

from notes_api.domain.notebook import Notebook
from notes_api.models.folders import FolderOut
from notes_api.models.notes import NoteOut


class NotebookOut(BaseModel):
    folders: list[FolderOut]
    notes: list[NoteOut]

    @classmethod
    def from_entity(cls, notebook: Notebook) -> "NotebookOut":
        return cls(
            folders=[FolderOut.from_entity(f) for f in notebook.folders],
            notes=[NoteOut.from_entity(n) for n in notebook.notes],
        )
