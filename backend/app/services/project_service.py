"""
Service métier pour les projets de classe.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.project import Project
from app.schemas.project import ProjectCreate, ProjectResponse

logger = logging.getLogger(__name__)


def create_project(db: Session, data: ProjectCreate) -> int:
    project = Project(
        class_id=data.class_id,
        title=data.title,
        description=data.description,
        start_date=data.start_date,
        end_date=data.end_date,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("Projet %s créé dans la classe %s", project.id, data.class_id)
    return project.id


def get_projects(db: Session, class_id: int) -> list[ProjectResponse]:
    """Projets d'une classe, par date de fin décroissante."""
    projects = db.execute(
        select(Project)
        .where(Project.class_id == class_id)
        .order_by(Project.end_date.desc(), Project.id.desc())
    ).scalars().all()
    return [ProjectResponse.model_validate(p) for p in projects]
