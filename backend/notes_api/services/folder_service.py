from __future__ import annotations

import logging

from notes_api.domain.folder import new_folder
from notes_api.errors import ApplicationError, ErrorKind, validation_error
from notes_api.storage.repository import Repository

logger = logging.getLogger(__name__)

FOLDER_TITLE_IS_NOT_FREE = "A folder with this title already exists"


class FolderService:
    def __init__(self, repository: Repository):
        self.repo = repository

    def create_folder(self, user_id: int, title: str) -> int:
        folder = new_folder(title, user_id)

        if not self._is_title_free(folder.title, user_id, 0):
            raise validation_error(FOLDER_TITLE_IS_NOT_FREE)

        folder_id = self.repo.save_entity(folder)
        logger.info("folder.created", extra={"user_id": user_id, "folder_id": folder_id})
        return folder_id

    def update_folder(self, user_id: int, folder_id: int, title: str) -> None:
        folder = new_folder(title, user_id)

        if not self._is_title_free(folder.title, user_id, folder_id):
            raise validation_error(FOLDER_TITLE_IS_NOT_FREE)

        folder_db = self.repo.get_folder_by_id(folder_id, user_id)
        folder_db.title = folder.title
        self.repo.save_entity(folder_db)
        logger.info("folder.updated", extra={"user_id": user_id, "folder_id": folder_id})

    def delete_folder(self, user_id: int, folder_id: int) -> None:
        """Delete a folder; an absent or foreign folder is a no-op."""
        try:
            folder_db = self.repo.get_folder_by_id(folder_id, user_id)
        except ApplicationError as exc:
            if exc.kind == ErrorKind.NOT_FOUND:
                return
            raise

        self.repo.delete_entity(folder_db)
        logger.info("folder.deleted", extra={"user_id": user_id, "folder_id": folder_id})

    def _is_title_free(self, title: str, user_id: int, folder_id: int) -> bool:
        for folder in self.repo.get_folders_by_user_id(user_id):
            if folder.title == title and folder.id != folder_id:
                return False
        return True
