from __future__ import annotations

import logging
from typing import Optional

from notes_api.domain.note import Note, new_note
from notes_api.errors import ApplicationError, ErrorKind, validation_error
from notes_api.storage.repository import Repository

logger = logging.getLogger(__name__)

NOTE_TITLE_IS_NOT_FREE = "A note with this title already exists"


class NoteService:
    def __init__(self, repository: Repository):
        self.repo = repository

    def create_note(self, user_id: int, title: str, content: str, tags: Optional[list[str]] = None) -> int:
        note = new_note(title, content, user_id, tags)

        if not self._is_title_free(note.title, user_id, 0):
            raise validation_error(NOTE_TITLE_IS_NOT_FREE)

        note_id = self.repo.save_entity(note)
        logger.info("note.created", extra={"user_id": user_id, "note_id": note_id})
        return note_id

    def get_note(self, user_id: int, note_id: int) -> Note:
        return self.repo.get_note_by_id(note_id, user_id)

    def update_note(
        self,
        user_id: int,
        note_id: int,
        title: str,
        content: str,
        tags: Optional[list[str]] = None,
    ) -> None:
        """Overwrite title, content and tags; favorite flag and folder stay as they are."""
        proposed = new_note(title, content, user_id, tags)

        if not self._is_title_free(proposed.title, user_id, note_id):
            raise validation_error(NOTE_TITLE_IS_NOT_FREE)

        note_db = self.repo.get_note_by_id(note_id, user_id)
        note_db.title = proposed.title
        note_db.content = proposed.content
        note_db.tags = proposed.tags
        self.repo.save_entity(note_db)
        logger.info("note.updated", extra={"user_id": user_id, "note_id": note_id})

    def delete_note(self, user_id: int, note_id: int) -> None:
        """Delete a note; an absent or foreign note is a no-op."""
        try:
            note_db = self.repo.get_note_by_id(note_id, user_id)
        except ApplicationError as exc:
            if exc.kind == ErrorKind.NOT_FOUND:
                return
            raise

        self.repo.delete_entity(note_db)
        logger.info("note.deleted", extra={"user_id": user_id, "note_id": note_id})

    def move_to_folder(self, user_id: int, note_id: int, folder_id: Optional[int]) -> None:
        """Put the note into `folder_id`, or take it out of any folder when None."""
        note = self.repo.get_note_by_id(note_id, user_id)

        if folder_id is not None:
            self.repo.get_folder_by_id(folder_id, user_id)

        note.folder_id = folder_id
        self.repo.save_entity(note)
        logger.info("note.moved", extra={"user_id": user_id, "note_id": note_id, "folder_id": folder_id})

    def add_to_favorites(self, user_id: int, note_id: int) -> None:
        self._set_favorite(user_id, note_id, True)

    def delete_from_favorites(self, user_id: int, note_id: int) -> None:
        self._set_favorite(user_id, note_id, False)

    def find_notes_by_query_phrase(self, user_id: int, query: str) -> list[Note]:
        user_notes = self.repo.get_notes_by_user_id(user_id)

        if not query:
            return user_notes

        return [
            note
            for note in user_notes
            if query in note.title or query in note.content or query in (note.tags or [])
        ]

    def get_favorite_notes(self, user_id: int) -> list[Note]:
        return [note for note in self.repo.get_notes_by_user_id(user_id) if note.is_favorite]

    def _set_favorite(self, user_id: int, note_id: int, value: bool) -> None:
        # unlike delete, a missing note is an error here
        note = self.repo.get_note_by_id(note_id, user_id)
        note.is_favorite = value
        self.repo.save_entity(note)

    def _is_title_free(self, title: str, user_id: int, note_id: int) -> bool:
        for note in self.repo.get_notes_by_user_id(user_id):
            if note.title == title and note.id != note_id:
                return False
        return True
