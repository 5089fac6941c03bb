"""CORS and access-log middleware."""

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from adminconsole.core.config import settings

logger = logging.getLogger("admin_console")

REQUEST_ID_HEADER = "X-Request-Id"


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One log line per request, naming the token holder when there is one.

    ``get_current_user`` leaves the caller's id and role on ``request.state``;
    anonymous requests (login, health, rejected tokens) log as ``-``.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"

        user_id = getattr(request.state, "user_id", None)
        role = getattr(request.state, "role", None)
        logger.info(
            "[%s] %s %s -> %s (%.1fms) user=%s role=%s",
            request_id, request.method, request.url.path, response.status_code,
            elapsed_ms, user_id if user_id is not None else "-", role or "-",
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AccessLogMiddleware)
