"""User management endpoints. All routes require the ADMIN role."""

import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import require_admin
from app.models.user import User
from app.schemas.auth import UserCreate, UserOut, UserUpdate
from app.services.auth import Identity, get_user, get_user_by_email, hash_password

router = APIRouter()
logger = logging.getLogger(__name__)


async def _get_user_or_404(db: AsyncSession, user_id: UUID) -> User:
    user = await get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=List[UserOut])
async def list_users(
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List all users, newest first."""
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return result.scalars().all()


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a user with the given role."""
    if await get_user_by_email(db, user_data.email):
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

    logger.info("Admin %s created user %s (role: %s)", admin.user_id, user.email, user.role.value)
    return user


@router.patch("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: UUID,
    user_data: UserUpdate,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update name, email, role or password."""
    user = await _get_user_or_404(db, user_id)
    changes = user_data.changes()

    new_email = changes.get("email")
    if new_email and new_email != user.email:
        if await get_user_by_email(db, new_email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    password = changes.pop("password", None)
    if password:
        user.hashed_password = hash_password(password)
    for field, value in changes.items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)

    logger.info("Admin %s updated user %s fields=%s", admin.user_id, user_id, sorted(user_data.changes()))
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a user. Their activity entries stay, with no acting user."""
    user = await _get_user_or_404(db, user_id)
    await db.delete(user)
    await db.commit()

    logger.info("Admin %s deleted user %s", admin.user_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
