"""Password hashing and verification using bcrypt."""

from __future__ import annotations

from functools import lru_cache

import bcrypt


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt. Returns a utf-8 string."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Return True if password matches the stored bcrypt hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("taskflow-timing-equaliser")


def burn_verification(password: str) -> None:
    """Spend one bcrypt check for a login with no matching account.

    Keeps "unknown email" and "wrong password" indistinguishable by timing.
    """
    verify_password(password, _dummy_hash())
