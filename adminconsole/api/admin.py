"""Admin API router: user accounts, projects and the audit trail.

Every route here requires an Admin bearer token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from adminconsole.core.security import require_admin
from adminconsole.db.session import get_db
from adminconsole.schemas.schemas import (
    AuditLogListResponse,
    AuditLogOut,
    ProjectListResponse,
    UserCreateRequest,
    UserCreatedResponse,
    UserDeletedResponse,
    UserDetailResponse,
    UserListResponse,
    UserOut,
    UserUpdateRequest,
    UserUpdatedResponse,
)
from adminconsole.services.audit_service import AuditAction, audit_service, user_snapshot
from adminconsole.services.project_service import project_service
from adminconsole.services.user_service import user_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/add-user",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_user(
    body: UserCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    """Create a user together with its project assignments."""
    user_service.check_duplicates(db, body.username, body.email)
    user = user_service.create_user(db, body)
    response = UserCreatedResponse(userId=user.user_id, role=user.role)
    audit_service.record_user_created(db, request, payload, user)
    return response


@router.get("/all-users", response_model=UserListResponse)
async def all_users(
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    """List every user, newest first."""
    return UserListResponse(users=user_service.list_users(db))


@router.get("/user/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    """One user with its project assignments."""
    return UserDetailResponse(user=user_service.get_user_detail(db, user_id))


@router.put("/edit-user/{user_id}", response_model=UserUpdatedResponse)
async def edit_user(
    user_id: int,
    body: UserUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    """Partially update a user; omitted fields keep their values."""
    before = user_snapshot(user_service.get_user(db, user_id))
    user = user_service.update_user(db, user_id, body.model_dump(exclude_unset=True))
    response = UserUpdatedResponse(user=UserOut.model_validate(user))
    audit_service.record_user_updated(db, request, payload, before, user)
    return response


@router.delete("/delete-user/{user_id}", response_model=UserDeletedResponse)
async def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    """Delete a user and all of its project assignments."""
    deleted_id = user_service.delete_user(db, user_id)
    audit_service.record_user_deleted(db, request, payload, deleted_id)
    return UserDeletedResponse(deletedUserId=deleted_id)


@router.get("/projects", response_model=ProjectListResponse)
async def list_projects(
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    """Projects available for assignment."""
    return ProjectListResponse(projects=project_service.list_projects(db))


@router.get("/audit", response_model=AuditLogListResponse)
async def get_audit_logs(
    action: Optional[AuditAction] = Query(None),
    actor_id: Optional[int] = Query(None),
    user_id: Optional[int] = Query(None, description="Account the action was applied to"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    """Logins and account changes, newest first."""
    result = audit_service.query_logs(db, action, actor_id, user_id, page, page_size)
    return AuditLogListResponse(
        logs=[AuditLogOut.model_validate(log) for log in result["logs"]],
        total=result["total"],
        page=result["page"],
        page_size=result["page_size"],
    )
