from adminconsole.client.api_client import AdminConsoleClient, ApiError
from adminconsole.client.session import ConsoleSession, SessionExpiredError, require_session

__all__ = [
    "AdminConsoleClient", "ApiError",
    "ConsoleSession", "SessionExpiredError", "require_session",
]
