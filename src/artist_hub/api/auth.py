"""Authentication API endpoints (the identity provider of the release service)."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from artist_hub.database import get_db, utcnow
from artist_hub.models.user import User
from artist_hub.schemas.user import Token, UserCreate, UserLogin, UserResponse
from artist_hub.utils.security import (
    CurrentUser,
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Register a new artist account.

    The optional display name is used as a fallback artist name for new
    releases when the account has no profile name.

    Raises:
        HTTPException 409: If username or email already exists
    """
    existing_query = select(User).where(
        or_(User.username == user_data.username, User.email == user_data.email)
    )
    existing = (await db.execute(existing_query)).scalars().first()
    if existing is not None:
        field = "Username" if existing.username == user_data.username else "Email"
        raise HTTPException(status_code=409, detail=f"{field} already registered")

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        display_name=user_data.display_name,
        hashed_password=hash_password(user_data.password),
        created_at=utcnow(),
        is_active=True,
    )
    db.add(new_user)
    await db.flush()
    await db.refresh(new_user)

    logger.info("Registered user %s (%s)", new_user.id, new_user.username)
    return UserResponse.model_validate(new_user)


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Authenticate with username or email and return a JWT token.

    Raises:
        HTTPException 401: If credentials are invalid
        HTTPException 403: If user account is inactive
    """
    login_name = credentials.username.lower()
    query = select(User).where(or_(User.username == login_name, User.email == login_name))
    user = (await db.execute(query)).scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.info("Failed login attempt for %s", login_name)
        raise HTTPException(status_code=401, detail="Invalid username or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is inactive")

    access_token = create_access_token(data={"sub": str(user.id)})
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get the current account (excluding password)."""
    return UserResponse.model_validate(current_user)
