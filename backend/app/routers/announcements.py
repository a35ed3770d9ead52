"""
Router pour les annonces d'une classe.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.authorization import Operation, authorize, require
from app.database import get_db
from app.schemas.publication import AnnouncementCreate, AnnouncementCreated, AnnouncementResponse
from app.security import Identity
from app.services import publication_service

router = APIRouter(prefix="/api/announcements", tags=["Annonces"])


@router.post("", response_model=AnnouncementCreated, status_code=201, summary="Publier une annonce")
def create_announcement(
    data: AnnouncementCreate,
    identity: Identity = Depends(require(Operation.ANNOUNCEMENT_CREATE)),
    db: Session = Depends(get_db),
):
    """Réservé au professeur propriétaire de la classe."""
    authorize(db, identity, Operation.ANNOUNCEMENT_CREATE, data.class_id)
    announcement = publication_service.create_announcement(db, identity.id, data)
    return AnnouncementCreated(message="Annonce créée avec succès !", announcement=announcement)


@router.get("/{class_id}", response_model=List[AnnouncementResponse], summary="Annonces d'une classe")
def list_announcements(
    class_id: int,
    identity: Identity = Depends(require(Operation.ANNOUNCEMENT_LIST)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.ANNOUNCEMENT_LIST, class_id)
    return publication_service.get_announcements(db, class_id)
