"""Custom exception classes for the admin console."""

from typing import Any, Dict, Iterable, List, Optional

from fastapi import status


def format_errors(errors: Iterable[Dict[str, Any]]) -> List[str]:
    """Flatten pydantic error dicts into ``field: message`` strings."""
    messages = []
    for error in errors:
        message = error["msg"].removeprefix("Value error, ")
        if error.get("type") == "json_invalid":
            # loc holds a character offset into the body, not a field
            messages.append(message)
            continue
        location = [str(part) for part in error["loc"] if part not in ("body", "path", "query")]
        messages.append(f"{'.'.join(location)}: {message}" if location else message)
    return messages


class AdminConsoleError(Exception):
    """Base exception for the admin console.

    Carries a list of client-facing messages; ``message`` is the first one.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred", errors: Optional[List[str]] = None):
        self.errors = list(errors) if errors else [message]
        self.message = self.errors[0]
        super().__init__(self.message)


class AuthenticationError(AdminConsoleError):
    """Raised when authentication fails."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(AdminConsoleError):
    """Raised when user lacks permission."""
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(AdminConsoleError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(AdminConsoleError):
    """Raised when a username or email is already taken."""
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationError(AdminConsoleError):
    """Raised when input validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST
