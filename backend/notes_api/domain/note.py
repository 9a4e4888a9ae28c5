from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from notes_api.errors import validation_error

MAX_CONTENT_LENGTH = 256
MAX_TAGS_COUNT = 3


@dataclass
class Note:
    id: int
    title: str
    content: str
    user_id: int
    is_favorite: bool = False
    tags: list[str] = field(default_factory=list)
    folder_id: Optional[int] = None
    timestamp: Optional[datetime] = None

    def get_info(self) -> str:
        return f"Note(id={self.id}, title={self.title!r}, user_id={self.user_id}, folder_id={self.folder_id})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "user_id": self.user_id,
            "is_favorite": self.is_favorite,
            "tags": list(self.tags),
            "folder_id": self.folder_id,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Note":
        ts = raw.get("timestamp")
        folder_id = raw.get("folder_id")
        return cls(
            id=int(raw["id"]),
            title=raw["title"],
            content=raw["content"],
            user_id=int(raw["user_id"]),
            is_favorite=bool(raw.get("is_favorite", False)),
            tags=list(raw.get("tags") or []),
            folder_id=int(folder_id) if folder_id is not None else None,
            timestamp=datetime.fromisoformat(ts) if ts else None,
        )


def new_note(title: str, content: str, user_id: int, tags: Optional[list[str]] = None) -> Note:
    """
    Validate and build an unsaved Note (id 0).

    `tags=None` means "no tags". Checks run title, content, tags; the first
    failing one is raised.
    """
    if not title:
        raise validation_error("Note title cannot be empty")

    if not content:
        raise validation_error("Note content cannot be empty")
    if len(content) > MAX_CONTENT_LENGTH:
        raise validation_error(f"Note content cannot be longer than {MAX_CONTENT_LENGTH} characters")

    if tags is not None and len(tags) > MAX_TAGS_COUNT:
        raise validation_error(f"A note cannot have more than {MAX_TAGS_COUNT} tags")

    return Note(
        id=0,
        title=title,
        content=content,
        user_id=user_id,
        is_favorite=False,
        tags=list(tags) if tags is not None else [],
    )
