"""Auth service: email/password login issuing JWT access tokens."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from adminconsole.core.exceptions import AuthenticationError, ValidationError
from adminconsole.core.security import create_access_token, verify_password
from adminconsole.models.user import User

logger = logging.getLogger("admin_console")

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Handles authentication."""

    @staticmethod
    def authenticate(db: Session, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Authenticate user and return an access token with a user summary.

        An unknown email and a wrong password fail with the same message.

        Raises:
            ValidationError: If email or password is missing.
            AuthenticationError: If credentials are invalid.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        role = user.role.value
        token_data = {
            "sub": str(user.user_id),
            "user_id": user.user_id,
            "username": user.username,
            "role": role,
        }

        return {
            "accessToken": create_access_token(token_data),
            "user": {
                "user_id": user.user_id,
                "username": user.username,
                "full_name": user.full_name,
                "role": role,
            },
        }


auth_service = AuthService()
