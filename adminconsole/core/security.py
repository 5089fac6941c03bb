"""JWT authentication and role-gated authorization helpers.

Tokens are trusted statelessly: the gate never looks the user up again,
so a token stays valid until it expires even if the account changes.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from adminconsole.core.config import settings
from adminconsole.models.user import UserRole

# JWT bearer scheme
security_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    pwd_bytes = plain_password.encode("utf-8")
    if len(pwd_bytes) > 72:
        # bcrypt rejects longer inputs; no stored hash can match one
        return False
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRY_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token.

    Expired tokens get their own message so clients can tell a stale
    session apart from a forged one.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except JWTError:
        raise _unauthorized("Invalid token")


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> dict:
    """Return the decoded claims of the bearer token."""
    if credentials is None:
        if request.headers.get("Authorization"):
            raise _unauthorized("Access denied, invalid token format")
        raise _unauthorized("Access denied, token missing")

    payload = decode_token(credentials.credentials)
    if payload.get("user_id") is None or payload.get("role") is None:
        raise _unauthorized("Invalid token payload")
    request.state.user_id = payload["user_id"]
    request.state.role = payload["role"]
    return payload


class RequireRole:
    """Dependency that lets through only tokens carrying the given role."""

    def __init__(self, role: UserRole):
        self.role = role

    async def __call__(self, payload: dict = Depends(get_current_user)) -> dict:
        if payload.get("role") != self.role.value:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden: only {self.role.value}s can perform this action",
            )
        return payload


require_admin = RequireRole(UserRole.admin)
