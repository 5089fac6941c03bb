"""Models package: import all models so metadata.create_all sees them."""

from adminconsole.models.user import User, UserRole
from adminconsole.models.project import Project, UserProject
from adminconsole.models.audit_log import AuditLog

__all__ = ["User", "UserRole", "Project", "UserProject", "AuditLog"]
