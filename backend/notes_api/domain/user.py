from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from notes_api.errors import validation_error

MIN_LOGIN_LENGTH = 8
MIN_PASSWORD_LENGTH = 10


@dataclass
class User:
    id: int
    name: str
    surname: str
    login: str
    password: str
    timestamp: Optional[datetime] = None

    def get_info(self) -> str:
        return f"User(id={self.id}, login={self.login!r}, name={self.name!r}, surname={self.surname!r})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "surname": self.surname,
            "login": self.login,
            "password": self.password,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "User":
        ts = raw.get("timestamp")
        return cls(
            id=int(raw["id"]),
            name=raw["name"],
            surname=raw["surname"],
            login=raw["login"],
            password=raw["password"],
            timestamp=datetime.fromisoformat(ts) if ts else None,
        )


def new_user(name: str, surname: str, login: str, password: str) -> User:
    """Validate the plaintext input and build an unsaved User (id 0)."""
    _validate_personal_data(name, surname)
    _validate_login(login)
    _validate_password(password)

    return User(id=0, name=name, surname=surname, login=login, password=password)


def _validate_personal_data(name: str, surname: str) -> None:
    if not name:
        raise validation_error("Name cannot be empty")
    if not surname:
        raise validation_error("Surname cannot be empty")


def _validate_login(login: str) -> None:
    if len(login or "") < MIN_LOGIN_LENGTH:
        raise validation_error(
            f"Login is too short. Please create login with at least {MIN_LOGIN_LENGTH} symbols length"
        )


def _validate_password(password: str) -> None:
    password = password or ""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise validation_error(
            f"Password is too short. Please create password with at least {MIN_PASSWORD_LENGTH} symbols length"
        )

    has_upper = has_lower = has_number = has_special = False
    for ch in password:
        category = unicodedata.category(ch)
        if ch.isupper():
            has_upper = True
        elif ch.islower():
            has_lower = True
        elif category.startswith("N"):
            has_number = True
        elif category.startswith("P") or category.startswith("S"):
            has_special = True

    if not has_upper:
        raise validation_error("Password must contain at least one uppercase letter")
    if not has_lower:
        raise validation_error("Password must contain at least one lowercase letter")
    if not has_number:
        raise validation_error("Password must contain at least one number")
    if not has_special:
        raise validation_error("Password must contain at least one special character")
