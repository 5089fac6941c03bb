# tests/test_services.py
import json

import pytest
from unittest.mock import ANY, MagicMock, patch
from sqlalchemy.exc import IntegrityError, OperationalError

from adminconsole.core.exceptions import (
    AuthenticationError, ResourceConflictError, ResourceNotFoundError, format_errors,
)
from adminconsole.models import Project, User, UserProject, UserRole
from adminconsole.schemas.schemas import UserCreateRequest
from adminconsole.services.audit_service import AuditAction, audit_service
from adminconsole.services.auth_service import auth_service
from adminconsole.services.profile_service import profile_service
from adminconsole.services.user_service import user_service


@pytest.fixture
def create_request() -> UserCreateRequest:
    return UserCreateRequest(
        username="alice",
        full_name="Alice Liddell",
        email="Alice@X.com",
        mobile="0123456789",
        role="Tester",
        password="wonderland",
        projects=[{"project_id": 1, "support_type": " Technical Support "}],
    )


# ===================================================================
#  Schema normalization
# ===================================================================
def test_create_request_normalizes_input(create_request: UserCreateRequest):
    assert create_request.email == "alice@x.com"
    assert create_request.role is UserRole.tester
    assert create_request.projects[0].support_type == "Technical Support"


# ===================================================================
#  Transactional create / delete
# ===================================================================
class TestCreateUser:
    def test_store_failure_rolls_back_and_propagates(self, create_request: UserCreateRequest):
        """A database error mid-write must leave nothing committed."""
        # === Arrange ===
        mock_db = MagicMock()
        mock_db.query.return_value.filter.return_value.first.return_value = Project(project_id=1, project_name="Apollo")
        mock_db.commit.side_effect = OperationalError("INSERT", {}, Exception("connection lost"))

        # === Act & Assert ===
        with pytest.raises(OperationalError):
            user_service.create_user(mock_db, create_request)
        mock_db.rollback.assert_called_once()

    def test_unique_violation_at_write_time_is_a_conflict(self, create_request: UserCreateRequest):
        mock_db = MagicMock()
        mock_db.flush.side_effect = IntegrityError("INSERT", {}, Exception("duplicate"))

        with pytest.raises(ResourceConflictError):
            user_service.create_user(mock_db, create_request)
        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()

    def test_missing_project_against_real_session(self, db, projects, create_request: UserCreateRequest):
        create_request.projects[0].project_id = 9999

        with pytest.raises(ResourceNotFoundError, match="Invalid project_id: 9999"):
            user_service.create_user(db, create_request)

        assert db.query(User).count() == 0
        assert db.query(UserProject).count() == 0

    def test_assignments_written_with_user(self, db, projects, create_request: UserCreateRequest):
        create_request.projects[0].project_id = projects["Zeus"]

        user = user_service.create_user(db, create_request)

        rows = db.query(UserProject).filter(UserProject.user_id == user.user_id).all()
        assert [(r.project_id, r.support_type) for r in rows] == [(projects["Zeus"], "Technical Support")]


class TestDeleteUser:
    def test_store_failure_rolls_back(self):
        mock_db = MagicMock()
        mock_db.query.return_value.filter.return_value.first.return_value = (7,)
        mock_db.commit.side_effect = OperationalError("DELETE", {}, Exception("deadlock"))

        with pytest.raises(OperationalError):
            user_service.delete_user(mock_db, 7)
        mock_db.rollback.assert_called_once()

    def test_unknown_user(self):
        mock_db = MagicMock()
        mock_db.query.return_value.filter.return_value.first.return_value = None

        with pytest.raises(ResourceNotFoundError):
            user_service.delete_user(mock_db, 7)
        mock_db.commit.assert_not_called()


# ===================================================================
#  Update
# ===================================================================
class TestUpdateUser:
    def test_concurrent_duplicate_caught_at_commit(self):
        """If another edit wins the race, the unique constraint turns it into a conflict."""
        # === Arrange ===
        existing = User(user_id=3, username="devon", email="devon@x.com")
        mock_db = MagicMock()
        # get_user finds the row; the pre-check sees no clash
        mock_db.query.return_value.filter.return_value.first.side_effect = [existing, None]
        mock_db.commit.side_effect = IntegrityError("UPDATE", {}, Exception("Duplicate entry"))

        # === Act & Assert ===
        with pytest.raises(ResourceConflictError):
            user_service.update_user(mock_db, 3, {"email": "race@x.com"})
        mock_db.rollback.assert_called_once()

    def test_none_values_are_ignored(self, db, make_user):
        user_id = make_user("devon", "devon@x.com")

        user = user_service.update_user(db, user_id, {"full_name": None, "mobile": "5555555555"})

        assert user.full_name == "Devon Example"
        assert user.mobile == "5555555555"


# ===================================================================
#  Auth and profile
# ===================================================================
class TestAuthService:
    def test_unknown_email(self):
        mock_db = MagicMock()
        mock_db.query.return_value.filter.return_value.first.return_value = None

        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            auth_service.authenticate(mock_db, "ghost@x.com", "whatever")

    @patch("adminconsole.services.auth_service.verify_password", return_value=False)
    def test_wrong_password(self, mock_verify: MagicMock):
        mock_db = MagicMock()
        mock_db.query.return_value.filter.return_value.first.return_value = User(
            user_id=1, username="devon", password_hash="stored", role=UserRole.developer,
        )

        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            auth_service.authenticate(mock_db, "devon@x.com", "wrong")
        mock_verify.assert_called_once_with("wrong", "stored")


class TestProfileService:
    @patch("adminconsole.services.profile_service.user_service")
    def test_non_admin_id_is_overridden(self, mock_user_service: MagicMock):
        requester = {"user_id": 5, "username": "devon", "role": "Developer"}

        profile_service.view_profile(MagicMock(), requester, 99)

        mock_user_service.get_user_detail.assert_called_once_with(ANY, 5)

    @patch("adminconsole.services.profile_service.user_service")
    def test_admin_id_is_respected(self, mock_user_service: MagicMock):
        requester = {"user_id": 1, "username": "admin", "role": "Admin"}

        profile_service.view_profile(MagicMock(), requester, 99)

        mock_user_service.get_user_detail.assert_called_once_with(ANY, 99)



# ===================================================================
#  Audit trail
# ===================================================================
class TestAuditService:
    def test_failed_write_is_rolled_back_and_swallowed(self):
        # === Arrange ===
        db = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        request = MagicMock()
        request.client.host = "10.0.0.7"

        # === Act ===
        entry = audit_service.record_user_deleted(db, request, {"user_id": 1, "username": "admin"}, 42)

        # === Assert ===
        assert entry is None
        db.rollback.assert_called_once()

    def test_created_entry_holds_user_snapshot(self, db, projects, create_request):
        create_request.projects[0].project_id = projects["Apollo"]
        user = user_service.create_user(db, create_request)
        request = MagicMock()
        request.client = None
        request.headers = {"user-agent": "pytest"}

        entry = audit_service.record_user_created(db, request, {"user_id": 1, "username": "admin"}, user)

        assert entry.action == AuditAction.created.value
        assert entry.resource_id == str(user.user_id)
        assert json.loads(entry.new_value_json)["email"] == "alice@x.com"
        assert "password_hash" not in entry.new_value_json


# ===================================================================
#  Error formatting
# ===================================================================
def test_format_errors_field_and_body_level_messages():
    errors = [
        {"type": "string_too_short", "loc": ("body", "username"), "msg": "String should have at least 3 characters"},
        {"type": "value_error", "loc": ("body", "projects", 0, "project_id"), "msg": "Value error, bad id"},
        {"type": "json_invalid", "loc": ("body", 1), "msg": "JSON decode error"},
    ]

    assert format_errors(errors) == [
        "username: String should have at least 3 characters",
        "projects.0.project_id: bad id",
        "JSON decode error",
    ]
