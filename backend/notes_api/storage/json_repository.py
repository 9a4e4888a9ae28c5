from __future__ import annotations

import json
import logging
import os
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Generic, Iterator, TypeVar

from notes_api.domain.folder import Folder
from notes_api.domain.note import Note
from notes_api.domain.user import User
from notes_api.errors import ApplicationError, ErrorKind, database_error, not_found_error
from notes_api.services.hash_service import HashService
from notes_api.storage.repository import Entity, Repository

logger = logging.getLogger(__name__)

USERS_FILE = "users.json"
FOLDERS_FILE = "folders.json"
NOTES_FILE = "notes.json"

T = TypeVar("T", User, Folder, Note)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)


class ReadWriteLock:
    """Many concurrent readers or a single writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class EntityCollection(Generic[T]):
    """
    One JSON document per entity type: {"next_id": int, "items": [...]}.

    Items are kept as raw dicts in id order and turned into fresh entities on
    every read, so callers never share state with the collection.
    """

    def __init__(self, path: Path, factory: Callable[[dict[str, Any]], T]):
        self.path = path
        self.factory = factory
        self.lock = ReadWriteLock()
        self._items: dict[int, dict[str, Any]] = {}
        self._next_id = 1

    def load(self) -> None:
        if not self.path.exists():
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.exception("storage.load.failed", extra={"path": str(self.path)})
            raise database_error(exc) from exc

        items: dict[int, dict[str, Any]] = {}
        for item in raw.get("items", []):
            try:
                self.factory(item)
                items[int(item["id"])] = item
            except (KeyError, TypeError, ValueError):
                logger.warning("storage.load.skipped_item", extra={"path": str(self.path)})
                continue
        self._items = items
        self._next_id = max(int(raw.get("next_id", 1)), max(items, default=0) + 1)
        logger.info("storage.loaded", extra={"path": str(self.path), "count": len(items)})

    def _persist(self, items: dict[int, dict[str, Any]], next_id: int) -> None:
        try:
            _atomic_write_json(self.path, {"next_id": next_id, "items": list(items.values())})
        except OSError as exc:
            logger.exception("storage.write.failed", extra={"path": str(self.path)})
            raise database_error(exc) from exc
        self._items = items
        self._next_id = next_id

    # callers hold the matching lock for the helpers below

    def _get(self, entity_id: int) -> T | None:
        raw = self._items.get(entity_id)
        return self.factory(raw) if raw is not None else None

    def _all(self) -> list[T]:
        return [self.factory(raw) for raw in self._items.values()]

    def _put(self, entity: T) -> int:
        items = dict(self._items)
        next_id = self._next_id
        is_new = entity.id == 0
        if is_new:
            entity_id = next_id
            next_id += 1
        else:
            entity_id = entity.id
            if entity_id not in items:
                raise not_found_error()

        timestamp = _utc_now()
        raw = entity.to_dict()
        raw["id"] = entity_id
        raw["timestamp"] = timestamp.isoformat()
        items[entity_id] = raw
        self._persist(items, next_id)

        entity.id = entity_id
        entity.timestamp = timestamp
        return entity_id

    def _remove(self, entity_id: int) -> None:
        if entity_id not in self._items:
            return
        items = dict(self._items)
        del items[entity_id]
        self._persist(items, self._next_id)

    def _detach_from_folder(self, folder_id: int) -> None:
        items = {
            item_id: {**raw, "folder_id": None} if raw.get("folder_id") == folder_id else raw
            for item_id, raw in self._items.items()
        }
        if items != self._items:
            self._persist(items, self._next_id)

    def get(self, entity_id: int) -> T | None:
        with self.lock.read():
            return self._get(entity_id)

    def all(self) -> list[T]:
        with self.lock.read():
            return self._all()

    def save(self, entity: T) -> int:
        with self.lock.write():
            return self._put(entity)

    def delete(self, entity_id: int) -> None:
        with self.lock.write():
            self._remove(entity_id)


class JsonRepository(Repository):
    """
    File-backed repository: users.json, folders.json and notes.json under `data_dir`.

    Each collection is locked independently. Deleting a folder detaches its
    notes (their `folder_id` becomes None); nothing else cascades.
    """

    def __init__(self, data_dir: Path, hash_service: HashService):
        self.data_dir = Path(data_dir)
        self.hash_service = hash_service
        self.users: EntityCollection[User] = EntityCollection(self.data_dir / USERS_FILE, User.from_dict)
        self.folders: EntityCollection[Folder] = EntityCollection(self.data_dir / FOLDERS_FILE, Folder.from_dict)
        self.notes: EntityCollection[Note] = EntityCollection(self.data_dir / NOTES_FILE, Note.from_dict)

        for collection in (self.users, self.folders, self.notes):
            collection.load()

    def save_entity(self, entity: Entity) -> int:
        if isinstance(entity, User):
            return self.users.save(entity)
        if isinstance(entity, Note):
            return self.notes.save(entity)
        if isinstance(entity, Folder):
            return self.folders.save(entity)
        raise ApplicationError(ErrorKind.INTERNAL, f"Unsupported entity type: {type(entity).__name__}")

    def delete_entity(self, entity: Entity) -> None:
        if isinstance(entity, User):
            self.users.delete(entity.id)
        elif isinstance(entity, Note):
            self.notes.delete(entity.id)
        elif isinstance(entity, Folder):
            with self.folders.lock.write(), self.notes.lock.write():
                # notes first: a failed write must leave the folder in place
                self.notes._detach_from_folder(entity.id)
                self.folders._remove(entity.id)
        else:
            raise ApplicationError(ErrorKind.INTERNAL, f"Unsupported entity type: {type(entity).__name__}")

    def get_user_by_id(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise not_found_error("User not found")
        return user

    def get_user(self, login: str, password: str) -> User:
        for user in self.users.all():
            if user.login == login and self.hash_service.verify(password, user.password):
                return user
        raise not_found_error("User not found")

    def get_folder_by_id(self, folder_id: int, user_id: int) -> Folder:
        folder = self.folders.get(folder_id)
        if folder is None or folder.user_id != user_id:
            raise not_found_error("Folder not found")
        return folder

    def get_note_by_id(self, note_id: int, user_id: int) -> Note:
        note = self.notes.get(note_id)
        if note is None or note.user_id != user_id:
            raise not_found_error("Note not found")
        return note

    def get_folders_by_user_id(self, user_id: int) -> list[Folder]:
        return [f for f in self.folders.all() if f.user_id == user_id]

    def get_notes_by_user_id(self, user_id: int) -> list[Note]:
        return [n for n in self.notes.all() if n.user_id == user_id]

    def get_users(self) -> list[User]:
        return self.users.all()

    def get_folders(self) -> list[Folder]:
        return self.folders.all()

    def get_notes(self) -> list[Note]:
        return self.notes.all()
