import copy
import os
import tempfile
from dataclasses import replace
from datetime import datetime, timezone

# keep hashing cheap and the import-time app away from the real data dir
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "dev-secret-for-tests")
os.environ.setdefault("ENTITY_WATCH_INTERVAL_MS", "0")
os.environ.setdefault("APP_DATA_DIR", tempfile.mkdtemp(prefix="notes-api-tests-"))

import pytest
from fastapi.testclient import TestClient

from notes_api.config import load_settings
from notes_api.domain.folder import Folder
from notes_api.domain.note import Note
from notes_api.domain.user import User
from notes_api.errors import ApplicationError, ErrorKind, not_found_error
from notes_api.main import create_app
from notes_api.services.folder_service import FolderService
from notes_api.services.hash_service import HashService
from notes_api.services.note_service import NoteService
from notes_api.services.notebook_service import NotebookService
from notes_api.services.user_service import UserService
from notes_api.storage.repository import Repository

VALID_PASSWORD = "StrongPassw0rd!"


class InMemoryRepository(Repository):
    """Dict-backed repository that records every mutation it receives."""

    def __init__(self, hash_service=None):
        self.hash_service = hash_service
        self.users = {}
        self.folders = {}
        self.notes = {}
        self.next_id = 1
        self.saved = []
        self.deleted = []
        self.fail_with = None

    def _table(self, entity):
        if isinstance(entity, User):
            return self.users
        if isinstance(entity, Note):
            return self.notes
        if isinstance(entity, Folder):
            return self.folders
        raise ApplicationError(ErrorKind.INTERNAL, "unsupported entity")

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def save_entity(self, entity):
        self._check()
        table = self._table(entity)
        if entity.id == 0:
            entity.id = self.next_id
            self.next_id += 1
        elif entity.id not in table:
            raise not_found_error()
        entity.timestamp = datetime.now(timezone.utc)
        table[entity.id] = copy.deepcopy(entity)
        self.saved.append(copy.deepcopy(entity))
        return entity.id

    def delete_entity(self, entity):
        self._check()
        self._table(entity).pop(entity.id, None)
        self.deleted.append(copy.deepcopy(entity))

    def get_user_by_id(self, user_id):
        self._check()
        if user_id not in self.users:
            raise not_found_error("User not found")
        return copy.deepcopy(self.users[user_id])

    def get_user(self, login, password):
        self._check()
        for user in self.users.values():
            if user.login == login and self.hash_service.verify(password, user.password):
                return copy.deepcopy(user)
        raise not_found_error("User not found")

    def get_folder_by_id(self, folder_id, user_id):
        self._check()
        folder = self.folders.get(folder_id)
        if folder is None or folder.user_id != user_id:
            raise not_found_error("Folder not found")
        return replace(folder, notes=[])

    def get_note_by_id(self, note_id, user_id):
        self._check()
        note = self.notes.get(note_id)
        if note is None or note.user_id != user_id:
            raise not_found_error("Note not found")
        return copy.deepcopy(note)

    def get_folders_by_user_id(self, user_id):
        return [replace(f, notes=[]) for f in self.folders.values() if f.user_id == user_id]

    def get_notes_by_user_id(self, user_id):
        return [copy.deepcopy(n) for n in self.notes.values() if n.user_id == user_id]

    def get_users(self):
        return [copy.deepcopy(u) for u in self.users.values()]

    def get_folders(self):
        return [replace(f, notes=[]) for f in self.folders.values()]

    def get_notes(self):
        return [copy.deepcopy(n) for n in self.notes.values()]


@pytest.fixture(scope="session")
def hash_service():
    return HashService(rounds=4)


@pytest.fixture()
def repo(hash_service):
    return InMemoryRepository(hash_service)


@pytest.fixture()
def folder_service(repo):
    return FolderService(repo)


@pytest.fixture()
def note_service(repo):
    return NoteService(repo)


@pytest.fixture()
def user_service(repo, hash_service):
    return UserService(repo, hash_service)


@pytest.fixture()
def notebook_service(repo):
    return NotebookService(repo)


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.setenv("ENTITY_WATCH_INTERVAL_MS", "0")

    with TestClient(create_app(load_settings())) as c:
        yield c


def register_and_login(client, login="userAAAA", password=VALID_PASSWORD):
    r = client.post(
        "/api/user",
        json={"login": login, "password": password, "name": "John", "surname": "Doe"},
    )
    assert r.status_code == 201, r.text

    r = client.post("/api/auth/login", json={"login": login, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture()
def login_as(client):
    def _login(login="userAAAA", password=VALID_PASSWORD):
        return register_and_login(client, login, password)

    return _login


@pytest.fixture()
def auth_headers(login_as):
    return login_as()
