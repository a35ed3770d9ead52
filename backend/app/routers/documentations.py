"""
Router pour les documentations partagées dans une classe.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.authorization import Operation, authorize, require
from app.database import get_db
from app.schemas.publication import DocumentationCreate, DocumentationCreated, DocumentationResponse
from app.security import Identity
from app.services import publication_service

router = APIRouter(prefix="/api/documentations", tags=["Documentations"])


@router.post("", response_model=DocumentationCreated, status_code=201, summary="Partager une documentation")
def create_documentation(
    data: DocumentationCreate,
    identity: Identity = Depends(require(Operation.DOCUMENTATION_CREATE)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.DOCUMENTATION_CREATE, data.class_id)
    documentation = publication_service.create_documentation(db, identity.id, data)
    return DocumentationCreated(message="Documentation partagée avec succès !", documentation=documentation)


@router.get("/{class_id}", response_model=List[DocumentationResponse], summary="Documentations d'une classe")
def list_documentations(
    class_id: int,
    identity: Identity = Depends(require(Operation.DOCUMENTATION_LIST)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.DOCUMENTATION_LIST, class_id)
    return publication_service.get_documentations(db, class_id)
