"""Client-side session: token, user summary and expiry in one object.

A session is created by logging in and then handed explicitly to every
client call; nothing is read from ambient storage.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from adminconsole.core.exceptions import AuthenticationError, AuthorizationError
from adminconsole.models.user import UserRole


class SessionExpiredError(AuthenticationError):
    """Raised when there is no session or its token has expired."""


class ConsoleSession(BaseModel):
    access_token: str
    user: Dict[str, Any]
    expires_at: datetime

    class Config:
        frozen = True

    @classmethod
    def from_token(cls, token: str, user: Optional[Dict[str, Any]] = None) -> "ConsoleSession":
        """Build a session from a bearer token.

        The signature is not checked here; the server does that on every call.
        """
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            raise SessionExpiredError("Invalid token")
        if "exp" not in claims:
            raise SessionExpiredError("Invalid token")

        if user is None:
            user = {key: claims.get(key) for key in ("user_id", "username", "role")}
        return cls(
            access_token=token,
            user=user,
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )

    @classmethod
    def from_login(cls, payload: Dict[str, Any]) -> "ConsoleSession":
        return cls.from_token(payload["accessToken"], payload.get("user"))

    @property
    def user_id(self) -> Optional[int]:
        return self.user.get("user_id")

    @property
    def is_admin(self) -> bool:
        return self.user.get("role") == UserRole.admin.value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


def require_session(session: Optional[ConsoleSession], admin_only: bool = False) -> ConsoleSession:
    """Guard a client action the way a protected route would.

    Raises:
        SessionExpiredError: no session, or its token has expired.
        AuthorizationError: ``admin_only`` and the session is not an Admin.
    """
    if session is None or session.is_expired():
        raise SessionExpiredError("Session expired. Please login again.")
    if admin_only and not session.is_admin:
        raise AuthorizationError("Forbidden: only Admins can perform this action")
    return session
