"""Audit log model, append-only."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from adminconsole.db.base import Base


class AuditLog(Base):
    """Trail of logins and account mutations.

    Rows are never updated or deleted. ``actor_id`` is deliberately not a
    foreign key so removing a user leaves its history intact.
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_id = Column(Integer, nullable=True, index=True)
    actor_email = Column(String(255), nullable=True)
    action = Column(String(100), nullable=False, index=True)  # e.g. "user.created"
    resource_type = Column(String(50), nullable=False, index=True)
    resource_id = Column(String(100), nullable=True)
    old_value_json = Column(Text, nullable=True)
    new_value_json = Column(Text, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
