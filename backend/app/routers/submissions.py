"""
Router pour la consultation et la notation des soumissions.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.authorization import Operation, authorize, require
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.task import GradeRequest, SubmissionDetail
from app.security import Identity
from app.services import submission_service

router = APIRouter(prefix="/api", tags=["Soumissions"])


@router.put("/submissions/{submission_id}/grade", response_model=MessageResponse, summary="Noter une soumission")
def grade_submission(
    submission_id: int,
    data: GradeRequest,
    identity: Identity = Depends(require(Operation.SUBMISSION_GRADE)),
    db: Session = Depends(get_db),
):
    """Réservé au professeur propriétaire de la classe de la tâche."""
    authorize(db, identity, Operation.SUBMISSION_GRADE, submission_id)
    submission_service.grade_submission(db, submission_id, data)
    return MessageResponse(message="Soumission notée et corrigée avec succès !")


@router.get("/submissions/{submission_id}", response_model=SubmissionDetail, summary="Détail d'une soumission")
def get_submission(
    submission_id: int,
    identity: Identity = Depends(require(Operation.SUBMISSION_GET)),
    db: Session = Depends(get_db),
):
    """Visible par l'étudiant auteur et par le professeur de la tâche uniquement."""
    authorize(db, identity, Operation.SUBMISSION_GET, submission_id)
    return submission_service.get_submission(db, submission_id)


@router.get("/users/me/submissions", response_model=List[SubmissionDetail], summary="Mes soumissions")
def list_my_submissions(
    identity: Identity = Depends(require(Operation.SUBMISSION_LIST_MINE)),
    db: Session = Depends(get_db),
):
    return submission_service.get_student_submissions(db, identity.id)
