"""Authentication endpoints for the CRM."""

import logging
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_identity
from app.models.user import User
from app.schemas.auth import AuthResponse, UserLogin, UserOut, UserRegister
from app.services.auth import (
    Identity,
    authenticate_user,
    create_user_token,
    get_user,
    get_user_by_email,
    hash_password,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    """Login with email and password; returns a bearer token and the user."""
    user = await authenticate_user(db, credentials.email, credentials.password)

    if not user:
        logger.warning("Failed login for %s", credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    logger.info("User logged in: %s (role: %s)", user.email, user.role.value)
    return AuthResponse(token=create_user_token(user), user=UserOut.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    """Register a new user and log them in."""
    existing_user = await get_user_by_email(db, user_data.email)
    if existing_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        role=user_data.role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("User registered: %s (role: %s)", user.email, user.role.value)
    return AuthResponse(token=create_user_token(user), user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
async def get_me(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Get current authenticated user."""
    user = await get_user(db, identity.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
