"""Audit service: trail of logins and account changes.

Entries are written after the audited change has been committed and in a
separate transaction. A failed audit write is logged and dropped; it never
turns a completed change into an error response.
"""

import enum
import json
import logging
from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from adminconsole.models.audit_log import AuditLog
from adminconsole.models.user import User
from adminconsole.schemas.schemas import UserOut

logger = logging.getLogger("admin_console")


class AuditAction(str, enum.Enum):
    login = "user.login"
    created = "user.created"
    updated = "user.updated"
    deleted = "user.deleted"


def user_snapshot(user: User) -> Dict[str, Any]:
    """JSON-ready copy of a user's editable fields."""
    return UserOut.model_validate(user).model_dump(mode="json")


def _client_info(request: Request):
    ip = request.client.host if request.client else None
    return ip, request.headers.get("user-agent", "")[:500]


class AuditService:

    @staticmethod
    def _write(
        db: Session,
        request: Request,
        actor_id: Optional[int],
        actor_email: Optional[str],
        action: AuditAction,
        user_id: int,
        before: Optional[Dict[str, Any]] = None,
        after: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditLog]:
        ip, user_agent = _client_info(request)
        try:
            entry = AuditLog(
                actor_id=actor_id,
                actor_email=actor_email,
                action=action.value,
                resource_type="user",
                resource_id=str(user_id),
                old_value_json=json.dumps(before) if before else None,
                new_value_json=json.dumps(after) if after else None,
                ip_address=ip,
                user_agent=user_agent,
            )
            db.add(entry)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Audit write failed: %s on user %s by %s", action.value, user_id, actor_id)
            return None
        return entry

    @staticmethod
    def record_login(db: Session, request: Request, user_id: int, email: str) -> Optional[AuditLog]:
        return AuditService._write(db, request, user_id, email, AuditAction.login, user_id)

    @staticmethod
    def record_user_created(db: Session, request: Request, actor: dict, user: User) -> Optional[AuditLog]:
        return AuditService._write(
            db, request, actor.get("user_id"), actor.get("username"),
            AuditAction.created, user.user_id, after=user_snapshot(user),
        )

    @staticmethod
    def record_user_updated(
        db: Session, request: Request, actor: dict, before: Dict[str, Any], user: User,
    ) -> Optional[AuditLog]:
        """``before`` is the snapshot taken ahead of the update."""
        return AuditService._write(
            db, request, actor.get("user_id"), actor.get("username"),
            AuditAction.updated, user.user_id, before=before, after=user_snapshot(user),
        )

    @staticmethod
    def record_user_deleted(db: Session, request: Request, actor: dict, user_id: int) -> Optional[AuditLog]:
        return AuditService._write(
            db, request, actor.get("user_id"), actor.get("username"), AuditAction.deleted, user_id,
        )

    @staticmethod
    def query_logs(
        db: Session,
        action: Optional[AuditAction] = None,
        actor_id: Optional[int] = None,
        user_id: Optional[int] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Dict[str, Any]:
        """Entries newest first; ``user_id`` is the account acted upon."""
        query = db.query(AuditLog)
        if action is not None:
            query = query.filter(AuditLog.action == action.value)
        if actor_id is not None:
            query = query.filter(AuditLog.actor_id == actor_id)
        if user_id is not None:
            query = query.filter(AuditLog.resource_id == str(user_id))

        total = query.count()
        logs = (
            query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {"logs": logs, "total": total, "page": page, "page_size": page_size}


audit_service = AuditService()
