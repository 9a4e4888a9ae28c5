from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Base data dir: repository_root/data (we are in backend/notes_api)
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    storage_backend: str
    database_url: str
    jwt_secret: str
    jwt_algorithm: str
    token_ttl_hours: int
    bcrypt_rounds: Optional[int]
    log_level: str
    watch_interval_ms: int
    server_port: int = 8080


def load_settings() -> Settings:
    data_dir = Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))
    backend = os.getenv("STORAGE_BACKEND", "json").lower()
    if backend not in ("json", "sql"):
        raise RuntimeError(f"Unknown STORAGE_BACKEND: {backend!r} (expected 'json' or 'sql')")

    rounds_raw = os.getenv("BCRYPT_ROUNDS")
    try:
        rounds = int(rounds_raw) if rounds_raw else None
    except ValueError:
        rounds = None

    return Settings(
        data_dir=data_dir,
        storage_backend=backend,
        database_url=os.getenv("DATABASE_URL", f"sqlite:///{data_dir / 'notes.db'}"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        token_ttl_hours=_int_env("TOKEN_TTL_HOURS", 24),
        bcrypt_rounds=rounds,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        watch_interval_ms=_int_env("ENTITY_WATCH_INTERVAL_MS", 200),
        server_port=_int_env("SERVER_PORT", 8080),
    )
