"""User administration service: create, read, update, delete accounts.

Create and delete touch both ``users`` and ``user_projects`` and run as a
single transaction on the request's session: either every row lands or
the session is rolled back and nothing does.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from adminconsole.core.exceptions import (
    AdminConsoleError,
    ResourceConflictError,
    ResourceNotFoundError,
    ValidationError,
)
from adminconsole.core.security import hash_password
from adminconsole.models.project import Project, UserProject
from adminconsole.models.user import User
from adminconsole.schemas.schemas import UserCreateRequest

logger = logging.getLogger("admin_console")

EDITABLE_FIELDS = ("username", "full_name", "email", "mobile", "role")


class UserService:
    """Account management for admins."""

    @staticmethod
    def check_duplicates(db: Session, username: Optional[str], email: Optional[str]) -> None:
        """Fail if the username or email already belongs to someone.

        Runs before ``create_user``, which does not repeat the check.

        Raises:
            ResourceConflictError: listing every clashing field.
        """
        if not username and not email:
            return

        rows = db.query(User.username, User.email).filter(
            or_(User.username == username, User.email == email)
        ).all()

        errors = []
        for row in rows:
            if row.username == username and "Username already exists" not in errors:
                errors.append("Username already exists")
            if row.email == email and "Email already exists" not in errors:
                errors.append("Email already exists")

        if errors:
            raise ResourceConflictError(errors=errors)

    @staticmethod
    def create_user(db: Session, data: UserCreateRequest) -> User:
        """Insert a user and its project assignments atomically.

        Raises:
            ResourceNotFoundError: a referenced project does not exist.
            ValidationError: a project entry is incomplete or repeated.
            ResourceConflictError: a unique constraint fired at write time.
        """
        try:
            user = User(
                username=data.username,
                full_name=data.full_name,
                email=data.email,
                mobile=data.mobile,
                role=data.role,
                password_hash=hash_password(data.password),
            )
            db.add(user)
            db.flush()

            seen = set()
            for assignment in data.projects:
                if not assignment.project_id or not assignment.support_type:
                    raise ValidationError("Each project must include project_id and support_type")
                if assignment.project_id in seen:
                    raise ValidationError(f"Duplicate project_id: {assignment.project_id}")
                seen.add(assignment.project_id)

                project = db.query(Project).filter(
                    Project.project_id == assignment.project_id
                ).first()
                if project is None:
                    raise ResourceNotFoundError(
                        f"Invalid project_id: {assignment.project_id}. Project does not exist."
                    )

                db.add(UserProject(
                    user_id=user.user_id,
                    project_id=project.project_id,
                    support_type=assignment.support_type,
                ))

            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning("Create user '%s' hit a unique constraint, rolled back", data.username)
            raise ResourceConflictError("Username or email already exists")
        except AdminConsoleError as e:
            db.rollback()
            logger.info("Create user '%s' rolled back: %s", data.username, e.message)
            raise
        except Exception:
            db.rollback()
            logger.exception("Create user '%s' failed, rolled back", data.username)
            raise

        db.refresh(user)
        logger.info("Created user %s (%s)", user.user_id, user.username)
        return user

    @staticmethod
    def list_users(db: Session) -> List[User]:
        """All users, newest first."""
        return (
            db.query(User)
            .order_by(User.created_at.desc(), User.user_id.desc())
            .all()
        )

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        """Get a user by id."""
        user = db.query(User).filter(User.user_id == user_id).first()
        if not user:
            raise ResourceNotFoundError("User not found")
        return user

    @staticmethod
    def get_user_detail(db: Session, user_id: int) -> Dict[str, Any]:
        """Core fields of a user plus the projects it is assigned to."""
        user = UserService.get_user(db, user_id)
        rows = (
            db.query(Project.project_name, UserProject.support_type)
            .join(UserProject, UserProject.project_id == Project.project_id)
            .filter(UserProject.user_id == user_id)
            .order_by(Project.project_name.asc())
            .all()
        )
        return {
            "user_id": user.user_id,
            "username": user.username,
            "full_name": user.full_name,
            "email": user.email,
            "mobile": user.mobile,
            "role": user.role,
            "projects": [
                {"project_name": name, "support_type": support_type}
                for name, support_type in rows
            ],
        }

    @staticmethod
    def update_user(db: Session, user_id: int, changes: Dict[str, Any]) -> User:
        """Apply only the supplied fields; others keep their stored value.

        Uniqueness is checked against other users first. The unique
        constraints on username/email catch a concurrent edit that slips
        between that check and the commit.
        """
        user = UserService.get_user(db, user_id)
        changes = {
            field: value for field, value in changes.items()
            if field in EDITABLE_FIELDS and value is not None
        }

        if changes.get("username"):
            clash = db.query(User.user_id).filter(
                User.username == changes["username"], User.user_id != user_id
            ).first()
            if clash:
                raise ResourceConflictError("Username already in use by another user")

        if changes.get("email"):
            clash = db.query(User.user_id).filter(
                User.email == changes["email"], User.user_id != user_id
            ).first()
            if clash:
                raise ResourceConflictError("Email already in use by another user")

        for field, value in changes.items():
            setattr(user, field, value)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning("Update of user %s hit a unique constraint, rolled back", user_id)
            raise ResourceConflictError("Username or email already in use by another user")

        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user_id: int) -> int:
        """Remove a user and every assignment it has, atomically.

        Raises:
            ResourceNotFoundError: no user with that id.
        """
        try:
            exists = db.query(User.user_id).filter(User.user_id == user_id).first()
            if not exists:
                raise ResourceNotFoundError("User not found")

            db.query(UserProject).filter(
                UserProject.user_id == user_id
            ).delete(synchronize_session=False)
            db.query(User).filter(User.user_id == user_id).delete(synchronize_session=False)

            db.commit()
        except AdminConsoleError:
            db.rollback()
            raise
        except Exception:
            db.rollback()
            logger.exception("Delete of user %s failed, rolled back", user_id)
            raise

        logger.info("Deleted user %s", user_id)
        return user_id


user_service = UserService()
