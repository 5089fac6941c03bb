"""HTTP client for the admin console API."""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from adminconsole.client.session import ConsoleSession, require_session
from adminconsole.core.config import settings
from adminconsole.core.exceptions import ValidationError, format_errors
from adminconsole.schemas.schemas import UserCreateRequest, UserUpdateRequest


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, errors: List[str]):
        self.status_code = status_code
        self.errors = errors
        super().__init__(f"{status_code}: {'; '.join(errors)}")

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


def _error_messages(response: httpx.Response) -> List[str]:
    try:
        body = response.json()
    except ValueError:
        return [response.text or response.reason_phrase]
    if isinstance(body, dict):
        if body.get("errors"):
            return [str(e) for e in body["errors"]]
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, list):
            return [str(d) for d in detail]
        if detail:
            return [str(detail)]
    return [response.reason_phrase]


def _validated(schema, payload: Dict[str, Any], **dump_options) -> Dict[str, Any]:
    """Run the server's own schema locally so bad input never leaves the client."""
    try:
        return schema.model_validate(payload).model_dump(mode="json", **dump_options)
    except PydanticValidationError as e:
        raise ValidationError(errors=format_errors(e.errors()))


class AdminConsoleClient:
    """Thin wrapper over the REST endpoints.

    Usage:
        with AdminConsoleClient("http://localhost:8000") as client:
            session = client.login("admin@console.local", "changeme123")
            users = client.list_users(session)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 10,
    ):
        self._http = httpx.Client(
            base_url=base_url or settings.API_BASE_URL,
            transport=transport,
            timeout=timeout,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "AdminConsoleClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        session: Optional[ConsoleSession] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        headers = session.auth_headers() if session else {}
        response = self._http.request(method, path, headers=headers, **kwargs)
        if response.status_code >= 400:
            raise ApiError(response.status_code, _error_messages(response))
        return response.json()

    # ---- Auth ----
    def login(self, email: str, password: str) -> ConsoleSession:
        """Log in and return a fresh session."""
        if not email or not password:
            raise ValidationError("Email and password are required")
        body = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return ConsoleSession.from_login(body)

    # ---- Admin ----
    def list_users(self, session: ConsoleSession) -> List[Dict[str, Any]]:
        session = require_session(session, admin_only=True)
        return self._request("GET", "/admin/all-users", session)["users"]

    def get_user(self, session: ConsoleSession, user_id: int) -> Dict[str, Any]:
        session = require_session(session, admin_only=True)
        return self._request("GET", f"/admin/user/{user_id}", session)["user"]

    def add_user(self, session: ConsoleSession, **fields) -> Dict[str, Any]:
        session = require_session(session, admin_only=True)
        payload = _validated(UserCreateRequest, fields)
        return self._request("POST", "/admin/add-user", session, json=payload)

    def edit_user(self, session: ConsoleSession, user_id: int, **changes) -> Dict[str, Any]:
        session = require_session(session, admin_only=True)
        payload = _validated(UserUpdateRequest, changes, exclude_unset=True)
        return self._request("PUT", f"/admin/edit-user/{user_id}", session, json=payload)["user"]

    def delete_user(self, session: ConsoleSession, user_id: int) -> int:
        session = require_session(session, admin_only=True)
        return self._request("DELETE", f"/admin/delete-user/{user_id}", session)["deletedUserId"]

    def list_projects(self, session: ConsoleSession) -> List[Dict[str, Any]]:
        session = require_session(session, admin_only=True)
        return self._request("GET", "/admin/projects", session)["projects"]

    def audit_logs(self, session: ConsoleSession, **filters) -> Dict[str, Any]:
        session = require_session(session, admin_only=True)
        params = {key: value for key, value in filters.items() if value is not None}
        return self._request("GET", "/admin/audit", session, params=params)

    # ---- Profile ----
    def view_profile(self, session: ConsoleSession, user_id: Optional[int] = None) -> Dict[str, Any]:
        session = require_session(session)
        target = user_id if user_id is not None else session.user_id
        return self._request("GET", f"/profile/{target}", session)["user"]
