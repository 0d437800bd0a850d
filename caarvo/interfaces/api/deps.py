"""FastAPI dependencies: bearer-token authentication and role gates."""

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from caarvo.application.services.auth_service import decode_access_token
from caarvo.core.exceptions import ForbiddenException, UnauthorizedException
from caarvo.domain.models.user import User, UserRole
from caarvo.infrastructure.database import get_db

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Extract and validate the current user from the JWT bearer token."""
    if credentials is None:
        raise UnauthorizedException("Not authorized, no token")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Invalid or expired token")

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise UnauthorizedException("Invalid token")

    user = db.get(User, int(subject))
    if user is None or not user.is_active:
        raise UnauthorizedException("User not found or inactive")

    return user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    allowed = {role.value for role in roles}

    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise ForbiddenException(
                f"User role {user.role} is not authorized to access this route"
            )
        return user

    return checker


require_admin = require_roles(UserRole.ADMIN)
require_worker = require_roles(UserRole.WORKER)
require_customer = require_roles(UserRole.USER)
