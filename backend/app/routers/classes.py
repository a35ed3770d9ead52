"""
Router pour la gestion des classes : création, inscription par code, listes.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.authorization import Operation, authorize, require
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.school_class import (
    ClassCreate,
    ClassCreated,
    ClassJoin,
    ClassResponse,
    ClassStudentResponse,
    MyClassResponse,
)
from app.security import Identity
from app.services import class_service

router = APIRouter(prefix="/api/classes", tags=["Classes"])


@router.post("", response_model=ClassCreated, status_code=201, summary="Créer une classe")
def create_class(
    data: ClassCreate,
    identity: Identity = Depends(require(Operation.CLASS_CREATE)),
    db: Session = Depends(get_db),
):
    """Crée une classe avec un code d'accès unique ; le professeur y est inscrit d'office."""
    school_class = class_service.create_class(db, identity, data)
    return ClassCreated(message="Classe créée avec succès !", school_class=school_class)


@router.get("/professeur", response_model=List[ClassResponse], summary="Classes du professeur")
def list_owned_classes(
    identity: Identity = Depends(require(Operation.CLASS_LIST_OWNED)),
    db: Session = Depends(get_db),
):
    return class_service.get_owned_classes(db, identity.id)


@router.get("/me", response_model=List[MyClassResponse], summary="Mes classes")
def list_my_classes(
    identity: Identity = Depends(require(Operation.CLASS_LIST_MINE)),
    db: Session = Depends(get_db),
):
    """Classes auxquelles l'utilisateur connecté est inscrit (tous rôles)."""
    return class_service.get_my_classes(db, identity.id)


@router.post("/join", response_model=MessageResponse, summary="Rejoindre une classe")
def join_class(
    data: ClassJoin,
    identity: Identity = Depends(require(Operation.CLASS_JOIN)),
    db: Session = Depends(get_db),
):
    class_service.join_class(db, identity, data.code)
    return MessageResponse(message="Classe rejointe avec succès !")


@router.get("/{class_id}", response_model=ClassResponse, summary="Détail d'une classe")
def get_class(
    class_id: int,
    identity: Identity = Depends(require(Operation.CLASS_GET)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.CLASS_GET, class_id)
    return class_service.get_class(db, class_id)


@router.get("/{class_id}/students", response_model=List[ClassStudentResponse], summary="Étudiants d'une classe")
def list_class_students(
    class_id: int,
    identity: Identity = Depends(require(Operation.CLASS_LIST_STUDENTS)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.CLASS_LIST_STUDENTS, class_id)
    return class_service.get_class_students(db, class_id)
