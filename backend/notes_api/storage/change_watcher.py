from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from notes_api.errors import ApplicationError
from notes_api.storage.repository import Entity, Repository

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 0.2


@dataclass
class WatchState:
    """Highest id already reported, per collection."""

    last_seen: dict[str, int] = field(default_factory=dict)


class EntityChangeWatcher:
    """
    Polls the repository and logs every entity saved since the previous poll.

    State is kept on the instance (see `WatchState`), so several watchers
    can run side by side and tests can drive `poll()` directly.
    """

    def __init__(
        self,
        repository: Repository,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        state: Optional[WatchState] = None,
    ):
        self.repo = repository
        self.interval = interval
        self.state = state or WatchState()
        self._sources: dict[str, Callable[[], Sequence[Entity]]] = {
            "user": repository.get_users,
            "folder": repository.get_folders,
            "note": repository.get_notes,
        }
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def prime(self) -> None:
        """Mark everything already stored as seen."""
        for kind, source in self._sources.items():
            self.state.last_seen[kind] = max((e.id for e in source()), default=0)

    def poll(self) -> list[Entity]:
        new_entities: list[Entity] = []
        for kind, source in self._sources.items():
            last_seen = self.state.last_seen.get(kind, 0)
            fresh = [e for e in source() if e.id > last_seen]
            for entity in fresh:
                logger.info("New %s saved: %s", kind, entity.get_info())
            if fresh:
                self.state.last_seen[kind] = max(e.id for e in fresh)
            new_entities.extend(fresh)
        return new_entities

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.poll()
            except ApplicationError:
                logger.warning("watcher.poll.failed", exc_info=True)

    def start(self) -> None:
        if self._thread is not None:
            return
        self.prime()
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="entity-change-watcher", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout)
        self._thread = None
        logger.info("watcher stopped")
