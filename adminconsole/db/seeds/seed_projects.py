"""Seed the projects users can be assigned to."""

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from adminconsole.core.config import settings
from adminconsole.models.project import Project


def seed_projects(db: Session, names: Optional[Iterable[str]] = None) -> None:
    """Insert projects that don't already exist."""
    names = list(names) if names is not None else settings.SEED_PROJECTS
    for name in names:
        existing = db.query(Project).filter(Project.project_name == name).first()
        if not existing:
            db.add(Project(project_name=name))

    db.commit()
    print(f"✅ Seeded {len(names)} projects")
