"""FastAPI dependencies for authentication and authorization."""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.models.user import UserRole
from app.services.auth import Identity, verify_token

# auto_error=False so a missing header is a 401 like any other bad credential
security = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """Extract and validate the caller's identity from the bearer token.

    This dependency should be used on all protected endpoints.
    Raises 401 if no token or invalid token.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    identity = verify_token(credentials.credentials)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return identity


def require_role(*roles: UserRole):
    """Dependency factory that checks if the caller has one of the required roles.

    Usage:
        require_admin = require_role(UserRole.ADMIN)

        @router.get("/admin-only")
        async def admin_route(identity: Identity = Depends(require_admin)):
            ...
    """
    async def role_checker(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return identity

    return role_checker


# Pre-configured role dependencies
require_admin = require_role(UserRole.ADMIN)
