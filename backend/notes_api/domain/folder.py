from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from notes_api.errors import validation_error

if TYPE_CHECKING:
    from notes_api.domain.note import Note


@dataclass
class Folder:
    id: int
    title: str
    user_id: int
    timestamp: Optional[datetime] = None
    # presentation only: filled by the notebook view, never persisted
    notes: list["Note"] = field(default_factory=list, compare=False, repr=False)

    def get_info(self) -> str:
        return f"Folder(id={self.id}, title={self.title!r}, user_id={self.user_id})"

    def append_notes(self, notes: list["Note"]) -> None:
        self.notes.extend(notes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "user_id": self.user_id,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Folder":
        ts = raw.get("timestamp")
        return cls(
            id=int(raw["id"]),
            title=raw["title"],
            user_id=int(raw["user_id"]),
            timestamp=datetime.fromisoformat(ts) if ts else None,
        )


def new_folder(title: str, user_id: int) -> Folder:
    if not title:
        raise validation_error("Folder title cannot be empty")
    return Folder(id=0, title=title, user_id=user_id)
