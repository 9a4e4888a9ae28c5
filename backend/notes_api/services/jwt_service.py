from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from notes_api.errors import ApplicationError, ErrorKind, auth_error

ISSUER = "note-app"


@dataclass(frozen=True)
class Claims:
    user_id: int
    expires_at: int
    issuer: str = ISSUER


class JwtService:
    def __init__(self, secret: str, algorithm: str = "HS256", ttl_hours: int = 24, issuer: str = ISSUER):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl_hours = ttl_hours
        self.issuer = issuer

    def _require_secret(self) -> str:
        if not self.secret:
            # for tests/dev set JWT_SECRET in env; mandatory in prod
            raise ApplicationError(ErrorKind.INTERNAL, "JWT_SECRET is not set")
        return self.secret

    def get_token(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        exp = now + timedelta(hours=self.ttl_hours)
        payload = {
            "sub": str(user_id),
            "iss": self.issuer,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        try:
            return jwt.encode(payload, self._require_secret(), algorithm=self.algorithm)
        except JWTError as exc:
            raise ApplicationError(ErrorKind.INTERNAL, "Failed to issue token", exc) from exc

    def parse_token(self, token: str) -> Claims:
        try:
            payload = jwt.decode(
                token,
                self._require_secret(),
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
        except JWTError:
            raise auth_error("Invalid or expired token")

        sub = payload.get("sub")
        try:
            user_id = int(sub)
        except (TypeError, ValueError):
            raise auth_error("Invalid token")

        return Claims(user_id=user_id, expires_at=int(payload.get("exp", 0)), issuer=payload.get("iss", self.issuer))
