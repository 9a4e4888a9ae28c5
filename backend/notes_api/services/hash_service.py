"""Password hashing for stored user credentials.

`HashService` wraps a passlib CryptContext. The user service hashes a
password before saving the user; the repositories call `verify` on login.
Failures while hashing surface as Internal `ApplicationError`s.
"""
from __future__ import annotations

import logging
import os
import warnings
from typing import Optional

from passlib.context import CryptContext

from notes_api.errors import ApplicationError, ErrorKind

logger = logging.getLogger(__name__)

PREFERRED_SCHEME = "bcrypt"
FALLBACK_SCHEME = "pbkdf2_sha256"


def rounds_from_env() -> Optional[int]:
    raw = os.environ.get("BCRYPT_ROUNDS")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _context_for(scheme: str, rounds: Optional[int]) -> CryptContext:
    options = {f"{scheme}__rounds": rounds} if rounds else {}
    return CryptContext(schemes=[scheme], deprecated="auto", **options)


def _build_context(rounds: Optional[int]) -> CryptContext:
    try:
        ctx = _context_for(PREFERRED_SCHEME, rounds)
        # the bcrypt backend is only loaded on first use
        ctx.hash("self-check")
        return ctx
    except Exception as exc:
        warnings.warn(
            f"{PREFERRED_SCHEME} is unusable ({exc}); hashing passwords with {FALLBACK_SCHEME}",
            RuntimeWarning,
        )
    return _context_for(FALLBACK_SCHEME, rounds)


class HashService:
    """Hashes and verifies passwords; `rounds` defaults to BCRYPT_ROUNDS."""

    def __init__(self, rounds: Optional[int] = None):
        self._context = _build_context(rounds if rounds is not None else rounds_from_env())

    def get_hash(self, plain: str) -> str:
        """Hash a plaintext password and return the encoded hash string."""
        if plain is None:
            raise ApplicationError(ErrorKind.INTERNAL, "Password must not be None")
        try:
            return self._context.hash(plain)
        except Exception as exc:
            logger.exception("hash.failed")
            raise ApplicationError(ErrorKind.INTERNAL, "Failed to hash password", exc) from exc

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if the password matches the stored hash, False otherwise."""
        if plain is None or hashed is None:
            return False
        try:
            return self._context.verify(plain, hashed)
        except Exception:
            # unknown/corrupted hash format counts as a mismatch
            return False
