from __future__ import annotations

from typing import Optional

from notes_api.domain.folder import Folder
from notes_api.domain.note import Note
from notes_api.domain.notebook import Notebook
from notes_api.storage.repository import Repository


class NotebookService:
    def __init__(self, repository: Repository):
        self.repo = repository

    def get_user_notebook(self, user_id: int) -> Notebook:
        folders = self.repo.get_folders_by_user_id(user_id)
        notes = self.repo.get_notes_by_user_id(user_id)

        return Notebook(
            folders=self._folders_with_notes(folders, notes),
            notes=self._notes_in_folder(notes, None),
        )

    def _folders_with_notes(self, folders: list[Folder], notes: list[Note]) -> list[Folder]:
        for folder in folders:
            folder.append_notes(self._notes_in_folder(notes, folder.id))
        return folders

    @staticmethod
    def _notes_in_folder(notes: list[Note], folder_id: Optional[int]) -> list[Note]:
        # None selects the unfiled notes
        return [note for note in notes if note.folder_id == folder_id]
