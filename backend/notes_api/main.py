from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from notes_api.api import auth, folders, notebook, notes, users
from notes_api.api.deps import Services
from notes_api.api.error_handlers import register_exception_handlers
from notes_api.config import Settings, load_settings
from notes_api.services.auth_service import AuthService
from notes_api.services.folder_service import FolderService
from notes_api.services.hash_service import HashService
from notes_api.services.jwt_service import JwtService
from notes_api.services.note_service import NoteService
from notes_api.services.notebook_service import NotebookService
from notes_api.services.user_service import UserService
from notes_api.storage.change_watcher import EntityChangeWatcher
from notes_api.storage.json_repository import JsonRepository
from notes_api.storage.repository import Repository
from notes_api.storage.sql_repository import SqlRepository, make_engine
from notes_api.utils.logging import RequestLoggingMiddleware, configure_logging

logger = logging.getLogger(__name__)


def build_repository(settings: Settings, hash_service: HashService) -> Repository:
    if settings.storage_backend == "sql":
        logger.info("storage.selected", extra={"backend": "sql"})
        return SqlRepository(make_engine(settings.database_url), hash_service)
    logger.info("storage.selected", extra={"backend": "json", "data_dir": str(settings.data_dir)})
    return JsonRepository(settings.data_dir, hash_service)


def build_services(repo: Repository, settings: Settings, hash_service: HashService) -> Services:
    jwt_service = JwtService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_hours=settings.token_ttl_hours,
    )
    return Services(
        auth=AuthService(repo, jwt_service),
        users=UserService(repo, hash_service),
        folders=FolderService(repo),
        notes=NoteService(repo),
        notebook=NotebookService(repo),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    hash_service = HashService(rounds=settings.bcrypt_rounds)
    repo = build_repository(settings, hash_service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        watcher = None
        if settings.watch_interval_ms > 0:
            watcher = EntityChangeWatcher(repo, interval=settings.watch_interval_ms / 1000)
            watcher.start()
        try:
            yield
        finally:
            if watcher is not None:
                watcher.stop()

    app = FastAPI(title="Notebook API", lifespan=lifespan)
    app.state.settings = settings
    app.state.repository = repo
    app.state.services = build_services(repo, settings, hash_service)

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    for router in (auth.router, users.router, folders.router, notes.router, notebook.router):
        app.include_router(router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("notes_api.main:app", host="0.0.0.0", port=app.state.settings.server_port)
