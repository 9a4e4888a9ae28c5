from __future__ import annotations

import logging

from notes_api.services.jwt_service import Claims, JwtService
from notes_api.storage.repository import Repository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, repository: Repository, jwt_service: JwtService):
        self.repo = repository
        self.jwt = jwt_service

    def auth_user(self, login: str, password: str) -> str:
        """Return a bearer token for valid credentials; NotFound otherwise."""
        user = self.repo.get_user(login, password)
        token = self.jwt.get_token(user.id)
        logger.info("auth.login", extra={"user_id": user.id})
        return token

    def validate_token(self, token: str) -> Claims:
        claims = self.jwt.parse_token(token)
        # the token may outlive its user
        self.repo.get_user_by_id(claims.user_id)
        return claims
