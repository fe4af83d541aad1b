"""Pydantic schemas for authentication and user management endpoints."""

from typing import ClassVar, FrozenSet, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.models.user import UserRole
from app.schemas.base import CamelModel, PartialUpdate, UtcDatetime


class UserRegister(CamelModel):
    """Request schema for self-registration."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.SALES


class UserLogin(CamelModel):
    """Request schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    """Response schema for user info."""
    id: UUID
    name: str
    email: str
    role: UserRole
    created_at: UtcDatetime
    updated_at: UtcDatetime


class AuthResponse(CamelModel):
    """Response schema for login/register: a JWT plus the user it belongs to."""
    token: str
    user: UserOut


class UserCreate(CamelModel):
    """Admin: create a user."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole


class UserUpdate(PartialUpdate):
    """Admin: update a user. A new password is re-hashed."""
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"name", "email", "role", "password"})

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    password: Optional[str] = Field(None, min_length=6)
