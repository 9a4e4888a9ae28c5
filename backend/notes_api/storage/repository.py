"""
Repository contract consumed by the services.

Two adapters implement it: `JsonRepository` (file-backed) and `SqlRepository`
(SQLAlchemy). One of them is selected at startup from configuration.

Errors are always `ApplicationError`. Scoped lookups (`get_folder_by_id`,
`get_note_by_id`) report NotFound both when the entity is absent and when it
belongs to another user. Entities returned by any method are detached copies:
changes reach storage only through `save_entity`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union

from notes_api.domain.folder import Folder
from notes_api.domain.note import Note
from notes_api.domain.user import User

Entity = Union[User, Folder, Note]


class Repository(ABC):
    @abstractmethod
    def save_entity(self, entity: Entity) -> int:
        """Insert when `entity.id == 0` (the new id is set on the entity), else update.

        Sets `entity.timestamp` on every save and returns the id.
        """

    @abstractmethod
    def delete_entity(self, entity: Entity) -> None: ...

    @abstractmethod
    def get_user_by_id(self, user_id: int) -> User: ...

    @abstractmethod
    def get_user(self, login: str, password: str) -> User:
        """Authenticate by login and plaintext password.

        Unknown login and wrong password both raise NotFound.
        """

    @abstractmethod
    def get_folder_by_id(self, folder_id: int, user_id: int) -> Folder: ...

    @abstractmethod
    def get_note_by_id(self, note_id: int, user_id: int) -> Note: ...

    @abstractmethod
    def get_folders_by_user_id(self, user_id: int) -> list[Folder]: ...

    @abstractmethod
    def get_notes_by_user_id(self, user_id: int) -> list[Note]: ...

    @abstractmethod
    def get_users(self) -> list[User]: ...

    @abstractmethod
    def get_folders(self) -> list[Folder]: ...

    @abstractmethod
    def get_notes(self) -> list[Note]: ...
