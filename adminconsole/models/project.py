"""Project and UserProject models."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from adminconsole.db.base import Base


class Project(Base):
    """Pre-seeded project that users get assigned to."""
    __tablename__ = "projects"

    project_id = Column(Integer, primary_key=True, autoincrement=True)
    project_name = Column(String(255), unique=True, nullable=False, index=True)

    user_assignments = relationship("UserProject", back_populates="project")


class UserProject(Base):
    """Assignment of a user to a project with a support type label."""
    __tablename__ = "user_projects"

    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), primary_key=True)
    support_type = Column(String(100), nullable=False)

    user = relationship("User", back_populates="project_assignments")
    project = relationship("Project", back_populates="user_assignments", lazy="joined")
