from __future__ import annotations

import logging

from notes_api.domain.user import User, new_user
from notes_api.errors import validation_error
from notes_api.services.hash_service import HashService
from notes_api.storage.repository import Repository

logger = logging.getLogger(__name__)

LOGIN_ALREADY_USED = "A user with this login already exists"


class UserService:
    def __init__(self, repository: Repository, hash_service: HashService):
        self.repo = repository
        self.hash_service = hash_service

    def create_user(self, login: str, password: str, name: str, surname: str) -> int:
        user = new_user(name, surname, login, password)

        if not self._is_login_free(user.login, user.id):
            raise validation_error(LOGIN_ALREADY_USED)

        # never store plaintext
        user.password = self.hash_service.get_hash(user.password)

        user_id = self.repo.save_entity(user)
        logger.info("user.created", extra={"user_id": user_id})
        return user_id

    def update_user(self, user_id: int, login: str, password: str, name: str, surname: str) -> None:
        user = new_user(name, surname, login, password)

        if not self._is_login_free(user.login, user_id):
            raise validation_error(LOGIN_ALREADY_USED)

        password_hash = self.hash_service.get_hash(user.password)

        user_db = self.repo.get_user_by_id(user_id)
        user_db.login = login
        user_db.password = password_hash
        user_db.name = name
        user_db.surname = surname
        self.repo.save_entity(user_db)
        logger.info("user.updated", extra={"user_id": user_id})

    def get_user(self, user_id: int) -> User:
        return self.repo.get_user_by_id(user_id)

    def delete_user(self, user_id: int) -> None:
        # not idempotent: a missing user is reported as NotFound
        user = self.repo.get_user_by_id(user_id)
        self.repo.delete_entity(user)
        logger.info("user.deleted", extra={"user_id": user_id})

    def _is_login_free(self, login: str, user_id: int) -> bool:
        for user in self.repo.get_users():
            if user.login == login and user.id != user_id:
                return False
        return True
