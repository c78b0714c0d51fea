import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .errors import Forbidden, Unauthenticated
from .models import Role, User
from .security_utils import TokenExpired, TokenInvalid, decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the calling account from a Bearer token.

    The account is re-read from the database on every request and its current
    role is what callers see; nothing role-related is taken from the token.
    """
    if not credentials or not credentials.credentials:
        raise Unauthenticated("Not authorized, no token")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenExpired:
        logger.info("ℹ️ Expired token presented")
        raise Unauthenticated("Token has expired. Please log in again.")
    except TokenInvalid:
        raise Unauthenticated("Not authorized")

    user = db.query(User).filter(User.id == payload["sub"]).first()
    if not user:
        logger.warning(f"⚠️ Token subject {payload['sub']} no longer exists")
        raise Unauthenticated("User not found")

    logger.debug(f"✅ User authenticated: {user.email} ({user.role})")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.ADMIN:
        logger.warning(f"⚠️ User {user.email} attempted an admin-only route")
        raise Forbidden("Not authorized as admin")
    return user


async def require_doctor(user: User = Depends(get_current_user)) -> User:
    if user.role not in (Role.DOCTOR, Role.ADMIN):
        raise Forbidden(
            "Not authorized as doctor. Your application may still be pending approval."
        )
    return user
