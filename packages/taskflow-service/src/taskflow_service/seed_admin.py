"""Create the first system admin.

Usage:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD='...' python -m taskflow_service.seed_admin

    # or
    python -m taskflow_service.seed_admin --email admin@example.com --password '...'

Does nothing when an admin already exists.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

import structlog

from taskflow_service.auth.passwords import hash_password
from taskflow_service.db.engine import close_db, get_session_factory, init_db
from taskflow_service.db.repositories.users import UsersRepo
from taskflow_service.db.store import UserStore
from taskflow_service.errors import NotFound
from taskflow_service.logging import configure_logging
from taskflow_service.models import SystemRole, User
from taskflow_service.settings import get_settings

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 8


async def seed_admin(users: UserStore, email: str, password: str, name: str) -> User | None:
    """Create an admin account unless one exists. Returns the new user, or None."""
    if await users.count_admins() > 0:
        logger.info("admin_seed_skipped", reason="admin_exists")
        return None
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Admin password must be at least {MIN_PASSWORD_LENGTH} characters")

    try:
        await users.get_user_by_email(email)
    except NotFound:
        pass
    else:
        raise ValueError(f"A non-admin account already uses {email}")

    user = await users.create_user(
        email=email,
        password_hash=hash_password(password),
        name=name,
        system_role=SystemRole.ADMIN,
    )
    logger.info("admin_seeded", user_id=str(user.id))
    return user


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the first taskflow system admin")
    parser.add_argument("--email", default=os.environ.get("ADMIN_EMAIL"))
    parser.add_argument("--password", default=os.environ.get("ADMIN_PASSWORD"))
    parser.add_argument("--name", default=os.environ.get("ADMIN_NAME", "System Admin"))
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    if not args.email or not args.password:
        logger.error("admin_seed_missing_credentials", hint="set ADMIN_EMAIL and ADMIN_PASSWORD")
        return 2

    await init_db(settings)
    try:
        async with get_session_factory()() as session:
            await seed_admin(UsersRepo(session), args.email, args.password, args.name)
    except ValueError as exc:
        logger.error("admin_seed_failed", error=str(exc))
        return 1
    finally:
        await close_db()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
