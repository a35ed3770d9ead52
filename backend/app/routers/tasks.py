"""
Router pour les tâches : création, consultation, soumission et liste des rendus.
"""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.authorization import Operation, authorize, require
from app.database import get_db
from app.schemas.task import (
    SubmissionCreate,
    SubmissionResponse,
    SubmissionResult,
    TaskCreate,
    TaskCreated,
    TaskResponse,
)
from app.security import Identity
from app.services import submission_service, task_service

router = APIRouter(prefix="/api/tasks", tags=["Tâches"])


@router.post("", response_model=TaskCreated, status_code=201, summary="Assigner une tâche")
def create_task(
    data: TaskCreate,
    identity: Identity = Depends(require(Operation.TASK_CREATE)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.TASK_CREATE, data.class_id)
    task = task_service.create_task(db, identity.id, data)
    return TaskCreated(message="Tâche assignée avec succès !", task=task)


@router.get("/class/{class_id}", response_model=List[TaskResponse], summary="Tâches d'une classe")
def list_tasks(
    class_id: int,
    identity: Identity = Depends(require(Operation.TASK_LIST)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.TASK_LIST, class_id)
    return task_service.get_tasks(db, class_id)


@router.post(
    "/{task_id}/submit",
    response_model=SubmissionResult,
    status_code=201,
    summary="Soumettre une tâche",
    responses={200: {"model": SubmissionResult, "description": "Soumission existante mise à jour"}},
)
def submit_task(
    task_id: int,
    data: SubmissionCreate,
    response: Response,
    identity: Identity = Depends(require(Operation.TASK_SUBMIT)),
    db: Session = Depends(get_db),
):
    """
    Première soumission → 201. Resoumission → 200 : la même soumission (même ID)
    est écrasée, aucune nouvelle ligne n'est créée.
    """
    authorize(db, identity, Operation.TASK_SUBMIT, task_id)
    submission_id, created = task_service.submit_task(db, task_id, identity.id, data)
    if created:
        return SubmissionResult(message="Tâche soumise avec succès !", submission_id=submission_id)
    response.status_code = 200
    return SubmissionResult(message="Soumission de tâche mise à jour avec succès !", submission_id=submission_id)


@router.get("/{task_id}/submissions", response_model=List[SubmissionResponse], summary="Rendus d'une tâche")
def list_task_submissions(
    task_id: int,
    identity: Identity = Depends(require(Operation.TASK_LIST_SUBMISSIONS)),
    db: Session = Depends(get_db),
):
    """Réservé au professeur propriétaire de la classe de la tâche."""
    authorize(db, identity, Operation.TASK_LIST_SUBMISSIONS, task_id)
    return submission_service.get_task_submissions(db, task_id)
