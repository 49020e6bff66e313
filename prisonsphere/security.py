"""Password hashing, session tokens and role checks."""

import datetime
import logging
from typing import Any, Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import models
from .base import config
from .db import get_db

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "token"
ALGORITHM = "HS256"

bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    # bcrypt only considers the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(
        password_bytes,
        bcrypt.gensalt(rounds=config.getint("server", "bcrypt_rounds", fallback=12)),
    )
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.checkpw(password_bytes, password_hash.encode("utf-8"))


def get_secret_key() -> str:
    """Return the token signing secret."""
    return config.get("server", "secret_key")


def get_token_lifetime() -> datetime.timedelta:
    """Return how long an issued token stays valid."""
    minutes = config.getint("server", "token_expiry_minutes", fallback=60)
    return datetime.timedelta(minutes=minutes)


def create_access_token(user: models.User) -> str:
    """Issue a signed token carrying the user id and role."""
    expire = datetime.datetime.now(datetime.timezone.utc) + get_token_lifetime()
    claims = {"id": user.id, "role": user.role, "exp": expire}
    return jwt.encode(claims, get_secret_key(), algorithm=ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """Decode a token, rejecting expired or tampered ones."""
    try:
        return jwt.decode(token, get_secret_key(), algorithms=[ALGORITHM])
    except JWTError as error:
        logger.debug("Rejected token: %s", error)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        ) from error


def extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    """Read the token from the bearer header or the session cookie."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(TOKEN_COOKIE)


async def authenticate(
    session: AsyncSession, username: str, password: str
) -> Optional[models.User]:
    """Return the user matching the credentials, if any."""
    stmt = select(models.User).where(models.User.username == username)
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


async def load_token_user(db: AsyncSession, token: str) -> models.User:
    """Return the user a token was issued to."""
    user_id = decode_token(token).get("id")
    user = await db.get(models.User, user_id) if user_id is not None else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        )
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> models.User:
    """Dependency resolving the signed-in user."""
    token = extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )

    return await load_token_user(db, token)


async def warden_required(
    user: models.User = Depends(get_current_user),
) -> models.User:
    """Dependency restricting an operation to wardens."""
    if user.role != "warden":
        logger.warning("User %s denied warden-only operation", user.username)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Access denied"
        )
    return user
