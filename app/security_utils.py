"""
Credential utilities: password hashing and signed access tokens.

Tokens only carry the account id and issue/expiry times. Roles are never
read from a token; the auth dependency re-reads the account on every request.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from passlib.context import CryptContext

from .config import JWT_ALGORITHM, JWT_EXPIRE_DAYS, SECRET_KEY

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenExpired(Exception):
    pass


class TokenInvalid(Exception):
    pass


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


# ============================================================================
# ACCESS TOKENS
# ============================================================================


def create_access_token(account_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT for an account

    Args:
        account_id: Account identity, stored in the "sub" claim
        expires_delta: Token lifetime (default JWT_EXPIRE_DAYS days)
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else timedelta(days=JWT_EXPIRE_DAYS))
    to_encode = {"sub": account_id, "iat": now, "exp": expire}
    return jose_jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry of a token

    Returns:
        Decoded payload

    Raises:
        TokenExpired: signature valid but past "exp"
        TokenInvalid: malformed token, bad signature or missing "sub"
    """
    try:
        payload = jose_jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise TokenInvalid(str(e)) from e

    if not payload.get("sub"):
        raise TokenInvalid("Token missing subject claim")
    return payload
