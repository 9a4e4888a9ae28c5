"""
Relational repository backed by SQLAlchemy.

Every public method opens its own short session; nothing spans several
statements issued by a service, so concurrency control is left to the
database engine. Any `SQLAlchemyError` is logged with its stack trace and
re-raised as a Database `ApplicationError` (the raw DB message never reaches
clients).
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, create_engine, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from notes_api.domain.folder import Folder
from notes_api.domain.note import Note
from notes_api.domain.user import User
from notes_api.errors import ApplicationError, ErrorKind, database_error, not_found_error
from notes_api.services.hash_service import HashService
from notes_api.storage.repository import Entity, Repository

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    surname: Mapped[str] = mapped_column(String(255), nullable=False)
    login: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    timestamp: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class FolderRow(Base):
    __tablename__ = "folders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    timestamp: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class NoteRow(Base):
    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    folder_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("folders.id", ondelete="SET NULL"), nullable=True
    )
    timestamp: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops the offset; stored values are always UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _user_from_row(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        surname=row.surname,
        login=row.login,
        password=row.password,
        timestamp=_as_utc(row.timestamp),
    )


def _folder_from_row(row: FolderRow) -> Folder:
    return Folder(id=row.id, title=row.title, user_id=row.user_id, timestamp=_as_utc(row.timestamp))


def _note_from_row(row: NoteRow) -> Note:
    return Note(
        id=row.id,
        title=row.title,
        content=row.content,
        user_id=row.user_id,
        is_favorite=row.is_favorite,
        tags=list(row.tags or []),
        folder_id=row.folder_id,
        timestamp=_as_utc(row.timestamp),
    )


def _row_type(entity: Entity) -> type[Base]:
    if isinstance(entity, User):
        return UserRow
    if isinstance(entity, Note):
        return NoteRow
    if isinstance(entity, Folder):
        return FolderRow
    raise ApplicationError(ErrorKind.INTERNAL, f"Unsupported entity type: {type(entity).__name__}")


def _row_values(entity: Entity) -> dict:
    values = entity.to_dict()
    values.pop("id")
    values["timestamp"] = entity.timestamp
    return values


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


class SqlRepository(Repository):
    def __init__(self, engine: Engine, hash_service: HashService, create_tables: bool = True):
        self.engine = engine
        self.hash_service = hash_service
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        if create_tables:
            try:
                Base.metadata.create_all(engine)
            except SQLAlchemyError as exc:
                logger.exception("repo.create_tables.failed")
                raise database_error(exc) from exc

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except ApplicationError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("repo.%s.failed", operation)
            raise database_error(exc) from exc
        finally:
            session.close()

    def save_entity(self, entity: Entity) -> int:
        row_type = _row_type(entity)
        previous = entity.timestamp
        entity.timestamp = datetime.now(timezone.utc)
        try:
            with self._session("save_entity") as session:
                values = _row_values(entity)
                if entity.id == 0:
                    row = row_type(**values)
                    session.add(row)
                    session.flush()
                    new_id = row.id
                else:
                    result = session.execute(
                        update(row_type).where(row_type.id == entity.id).values(**values)
                    )
                    if result.rowcount == 0:
                        raise not_found_error()
                    new_id = entity.id
        except ApplicationError:
            entity.timestamp = previous
            raise

        entity.id = new_id
        logger.debug("repo.save_entity.ok", extra={"entity": row_type.__tablename__, "id": new_id})
        return new_id

    def delete_entity(self, entity: Entity) -> None:
        row_type = _row_type(entity)
        with self._session("delete_entity") as session:
            if row_type is FolderRow:
                session.execute(update(NoteRow).where(NoteRow.folder_id == entity.id).values(folder_id=None))
            row = session.get(row_type, entity.id)
            if row is not None:
                session.delete(row)

    def get_user_by_id(self, user_id: int) -> User:
        with self._session("get_user_by_id") as session:
            row = session.get(UserRow, user_id)
            if row is None:
                raise not_found_error("User not found")
            return _user_from_row(row)

    def get_user(self, login: str, password: str) -> User:
        with self._session("get_user") as session:
            row = session.scalars(select(UserRow).where(UserRow.login == login)).first()
            user = _user_from_row(row) if row is not None else None

        # wrong password and unknown login are indistinguishable
        if user is None or not self.hash_service.verify(password, user.password):
            raise not_found_error("User not found")
        return user

    def get_folder_by_id(self, folder_id: int, user_id: int) -> Folder:
        with self._session("get_folder_by_id") as session:
            row = session.scalars(
                select(FolderRow).where(FolderRow.id == folder_id, FolderRow.user_id == user_id)
            ).first()
            if row is None:
                raise not_found_error("Folder not found")
            return _folder_from_row(row)

    def get_note_by_id(self, note_id: int, user_id: int) -> Note:
        with self._session("get_note_by_id") as session:
            row = session.scalars(
                select(NoteRow).where(NoteRow.id == note_id, NoteRow.user_id == user_id)
            ).first()
            if row is None:
                raise not_found_error("Note not found")
            return _note_from_row(row)

    def get_folders_by_user_id(self, user_id: int) -> list[Folder]:
        with self._session("get_folders_by_user_id") as session:
            rows = session.scalars(select(FolderRow).where(FolderRow.user_id == user_id).order_by(FolderRow.id))
            return [_folder_from_row(r) for r in rows]

    def get_notes_by_user_id(self, user_id: int) -> list[Note]:
        with self._session("get_notes_by_user_id") as session:
            rows = session.scalars(select(NoteRow).where(NoteRow.user_id == user_id).order_by(NoteRow.id))
            return [_note_from_row(r) for r in rows]

    def get_users(self) -> list[User]:
        with self._session("get_users") as session:
            return [_user_from_row(r) for r in session.scalars(select(UserRow).order_by(UserRow.id))]

    def get_folders(self) -> list[Folder]:
        with self._session("get_folders") as session:
            return [_folder_from_row(r) for r in session.scalars(select(FolderRow).order_by(FolderRow.id))]

    def get_notes(self) -> list[Note]:
        with self._session("get_notes") as session:
            return [_note_from_row(r) for r in session.scalars(select(NoteRow).order_by(NoteRow.id))]
