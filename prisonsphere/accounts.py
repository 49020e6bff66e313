"""Staff account provisioning."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import models
from .errors import Conflict, DomainError, NotFound
from .security import hash_password

logger = logging.getLogger(__name__)

ROLES = ("warden", "admin")


async def get_user(session: AsyncSession, username: str) -> models.User:
    """Load a user by name or raise NotFound."""
    stmt = select(models.User).where(models.User.username == username)
    user = (await session.execute(stmt)).scalar_one_or_none()
    if user is None:
        raise NotFound(f"User '{username}' not found.")
    return user


async def create_user(
    session: AsyncSession, username: str, password: str, role: str = "admin"
) -> models.User:
    """Create an account with a hashed password."""
    if role not in ROLES:
        raise DomainError(f"Role must be one of {', '.join(ROLES)}.")
    if not username or not password:
        raise DomainError("Username and password are required.")

    stmt = select(models.User.id).where(models.User.username == username)
    if (await session.execute(stmt)).first() is not None:
        raise Conflict(f"User '{username}' already exists.")

    user = models.User(
        username=username, password_hash=hash_password(password), role=role
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info("Created %s account %s", role, username)
    return user


async def update_user(
    session: AsyncSession,
    username: str,
    password: str | None = None,
    role: str | None = None,
) -> models.User:
    """Change the password and/or role of an account."""
    user = await get_user(session, username)
    if role is not None:
        if role not in ROLES:
            raise DomainError(f"Role must be one of {', '.join(ROLES)}.")
        user.role = role
    if password:
        user.password_hash = hash_password(password)
    await session.commit()
    logger.info("Updated account %s", username)
    return user


async def delete_user(session: AsyncSession, username: str):
    """Remove an account."""
    user = await get_user(session, username)
    await session.delete(user)
    await session.commit()
    logger.info("Deleted account %s", username)


async def list_users(session: AsyncSession) -> list[models.User]:
    """Return all accounts ordered by name."""
    result = await session.execute(select(models.User).order_by(models.User.username))
    return list(result.scalars().all())
