"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from adminconsole.api.admin import router as admin_router
from adminconsole.api.auth import router as auth_router
from adminconsole.api.profile import router as profile_router
from adminconsole.core.config import settings
from adminconsole.core.exceptions import AdminConsoleError, format_errors
from adminconsole.core.middleware import setup_middleware

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("admin_console")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting %s API", settings.APP_NAME)
    yield
    logger.info("Shutting down %s API", settings.APP_NAME)


app = FastAPI(
    title="Admin Console API",
    description="User accounts, project assignments and role-gated administration",
    version="0.1.0",
    lifespan=lifespan,
)

setup_middleware(app)


@app.exception_handler(AdminConsoleError)
async def admin_console_exception_handler(request: Request, exc: AdminConsoleError):
    return JSONResponse(status_code=exc.status_code, content={"errors": exc.errors})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"errors": format_errors(exc.errors())})


app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(profile_router)


@app.get("/health")
async def health():
    """Quick health check endpoint."""
    return {"status": "ok"}
