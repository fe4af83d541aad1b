"""Authentication service for the CRM.

Handles password hashing, JWT token generation/validation, and user authentication.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, UserRole
from app.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__default_ident="2b")

# JWT settings
ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    """Verified caller identity, extracted from a bearer token."""
    user_id: UUID
    role: UserRole
    email: Optional[str] = None


def _truncate_password(password: str) -> str:
    """Truncate password to 72 bytes (bcrypt limit)."""
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        return password_bytes[:72].decode('utf-8', errors='ignore')
    return password


def hash_password(password: str) -> str:
    """Hash a plain-text password.

    Note: Bcrypt has a 72-byte password limit. We truncate longer passwords.
    """
    truncated = _truncate_password(password)
    return pwd_context.hash(truncated)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    truncated = _truncate_password(plain_password)
    return pwd_context.verify(truncated, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=ALGORITHM)


def create_user_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a token carrying the user's id, email and role."""
    role = user.role.value if isinstance(user.role, UserRole) else str(user.role)
    return create_access_token(
        {"sub": str(user.id), "email": user.email, "role": role},
        expires_delta=expires_delta,
    )


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT access token (signature and expiry)."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning("JWT decode error: %s", e)
        return None


def verify_token(token: Optional[str]) -> Optional[Identity]:
    """Turn a bearer token into an Identity, or None if it can't be trusted.

    Fails closed: missing, malformed, expired, badly signed tokens and tokens
    with an unknown role all return None.
    """
    if not token:
        return None
    payload = decode_access_token(token)
    if not payload:
        return None
    try:
        return Identity(
            user_id=UUID(str(payload["sub"])),
            role=UserRole(payload["role"]),
            email=payload.get("email"),
        )
    except (KeyError, ValueError) as e:
        logger.warning("Invalid token payload: %s", e)
        return None


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    user = await get_user_by_email(db, email)

    if not user:
        return None

    if not verify_password(password, user.hashed_password):
        return None

    return user


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """Fetch a user by email."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: UUID) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()
