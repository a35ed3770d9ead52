"""
Router pour les projets de classe.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.authorization import Operation, authorize, require
from app.database import get_db
from app.schemas.project import ProjectCreate, ProjectCreated, ProjectResponse
from app.security import Identity
from app.services import project_service

router = APIRouter(prefix="/api/projects", tags=["Projets"])


@router.post("", response_model=ProjectCreated, status_code=201, summary="Créer un projet")
def create_project(
    data: ProjectCreate,
    identity: Identity = Depends(require(Operation.PROJECT_CREATE)),
    db: Session = Depends(get_db),
):
    """Professeur de la classe, ou Coordinateur inscrit à la classe."""
    authorize(db, identity, Operation.PROJECT_CREATE, data.class_id)
    project_id = project_service.create_project(db, data)
    return ProjectCreated(message="Projet créé avec succès.", project_id=project_id)


@router.get("/class/{class_id}", response_model=List[ProjectResponse], summary="Projets d'une classe")
def list_projects(
    class_id: int,
    identity: Identity = Depends(require(Operation.PROJECT_LIST)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.PROJECT_LIST, class_id)
    return project_service.get_projects(db, class_id)
