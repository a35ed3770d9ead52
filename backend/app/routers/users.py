"""
Router d'administration des utilisateurs, réservé au rôle Coordinateur.
Aucune condition d'inscription à une classe n'est exigée ici.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.authorization import Operation, authorize, require
from app.database import get_db
from app.exceptions import ForbiddenError
from app.models.user import Role
from app.schemas.common import MessageResponse
from app.schemas.user import RoleUpdate, UserResponse
from app.security import Identity
from app.services import user_service

router = APIRouter(prefix="/api/users", tags=["Utilisateurs"])


@router.get("/all", response_model=List[UserResponse], summary="Lister tous les utilisateurs")
def list_users(
    identity: Identity = Depends(require(Operation.USER_LIST)),
    db: Session = Depends(get_db),
):
    return user_service.get_users(db)


@router.put("/{user_id}/role", response_model=MessageResponse, summary="Modifier le rôle d'un utilisateur")
def change_role(
    user_id: int,
    data: RoleUpdate,
    identity: Identity = Depends(require(Operation.USER_CHANGE_ROLE)),
    db: Session = Depends(get_db),
):
    """Un Coordinateur ne peut pas se rétrograder lui-même."""
    if user_id == identity.id and data.role != Role.COORDINATOR:
        raise ForbiddenError("Un Coordinateur ne peut pas se rétrograder lui-même.")
    authorize(db, identity, Operation.USER_CHANGE_ROLE, user_id)
    user_service.change_role(db, user_id, data.role)
    return MessageResponse(message=f"Rôle de l'utilisateur {user_id} mis à jour en \"{data.role.value}\".")


@router.delete("/{user_id}", response_model=MessageResponse, summary="Supprimer un utilisateur")
def delete_user(
    user_id: int,
    identity: Identity = Depends(require(Operation.USER_DELETE)),
    db: Session = Depends(get_db),
):
    """Interdit sur son propre compte et sur le dernier Coordinateur."""
    authorize(db, identity, Operation.USER_DELETE, user_id)
    user_service.delete_user(db, user_id)
    return MessageResponse(message=f"Utilisateur {user_id} supprimé avec succès.")
