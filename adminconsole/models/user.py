"""User model."""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String, func
from sqlalchemy.orm import relationship

from adminconsole.db.base import Base


class UserRole(str, enum.Enum):
    admin = "Admin"
    developer = "Developer"
    tester = "Tester"
    customer_support = "Customer Support"


class User(Base):
    """Console account; only Admins manage other accounts."""
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    mobile = Column(String(10), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    project_assignments = relationship(
        "UserProject",
        back_populates="user",
        lazy="selectin",
    )
