"""Auth API router: login."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from adminconsole.db.session import get_db
from adminconsole.schemas.schemas import LoginRequest, LoginResponse
from adminconsole.services.audit_service import audit_service
from adminconsole.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Authenticate and return a bearer token."""
    result = auth_service.authenticate(db, body.email, body.password)
    audit_service.record_login(db, request, result["user"]["user_id"], body.email.strip().lower())
    return result
