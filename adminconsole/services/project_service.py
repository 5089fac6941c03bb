"""Project lookups. Projects are seeded, never written through the API."""

from typing import List

from sqlalchemy.orm import Session

from adminconsole.models.project import Project


class ProjectService:

    @staticmethod
    def list_projects(db: Session) -> List[Project]:
        return db.query(Project).order_by(Project.project_name.asc()).all()


project_service = ProjectService()
