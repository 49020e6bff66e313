"""Login, session status and logout."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas, security
from ..base import config
from ..db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=schemas.LoginResponse)
async def login(
    credentials: schemas.LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Verify credentials and issue a session token."""
    user = await security.authenticate(db, credentials.username, credentials.password)
    if user is None:
        logger.warning("Failed login for %s", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )

    token = security.create_access_token(user)
    response.set_cookie(
        security.TOKEN_COOKIE,
        token,
        httponly=True,
        secure=config.getboolean("server", "cookie_secure", fallback=False),
        samesite="lax",
        max_age=int(security.get_token_lifetime().total_seconds()),
    )
    logger.info("User %s logged in", user.username)
    return schemas.LoginResponse(message="Login successful", token=token, role=user.role)


@router.get("/login", response_model=schemas.AuthStatus)
async def session_status(
    request: Request,
    credentials=Depends(security.bearer),
    db: AsyncSession = Depends(get_db),
):
    """Report whether the caller holds a valid session."""
    token = security.extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in"
        )

    user = await security.load_token_user(db, token)
    return schemas.AuthStatus(message="Authenticated", user=user)


@router.get("/logout", response_model=schemas.Message)
async def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(security.TOKEN_COOKIE)
    return schemas.Message(message="Logged out successfully")
