from __future__ import annotations

from dataclasses import dataclass, field

from notes_api.domain.folder import Folder
from notes_api.domain.note import Note


@dataclass
class Notebook:
    """A user's folders (each with its notes attached) plus the unfiled notes."""

    folders: list[Folder] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
