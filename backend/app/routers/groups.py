"""
Router pour les groupes de projet, leurs membres et leur responsable.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.authorization import Operation, authorize, require
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.project import (
    GroupCreate,
    GroupCreated,
    GroupMemberAdd,
    GroupResponse,
    GroupUpdate,
    MyGroupResponse,
)
from app.security import Identity
from app.services import group_service

router = APIRouter(prefix="/api/groups", tags=["Groupes"])


@router.post("", response_model=GroupCreated, status_code=201, summary="Créer un groupe")
def create_group(
    data: GroupCreate,
    identity: Identity = Depends(require(Operation.GROUP_CREATE)),
    db: Session = Depends(get_db),
):
    """Professeur de la classe du projet, ou Coordinateur inscrit à cette classe."""
    authorize(db, identity, Operation.GROUP_CREATE, data.project_id)
    group_id = group_service.create_group(db, data)
    return GroupCreated(message="Groupe créé avec succès.", group_id=group_id)


@router.get("/me", response_model=List[MyGroupResponse], summary="Mes groupes")
def list_my_groups(
    identity: Identity = Depends(require(Operation.GROUP_LIST_MINE)),
    db: Session = Depends(get_db),
):
    return group_service.get_my_groups(db, identity.id)


@router.get("/project/{project_id}", response_model=List[GroupResponse], summary="Groupes d'un projet")
def list_groups(
    project_id: int,
    identity: Identity = Depends(require(Operation.GROUP_LIST)),
    db: Session = Depends(get_db),
):
    """Groupes du projet avec leurs membres ; réservé aux membres de la classe."""
    authorize(db, identity, Operation.GROUP_LIST, project_id)
    return group_service.get_groups(db, project_id)


@router.put("/{group_id}", response_model=GroupResponse, summary="Modifier un groupe")
def update_group(
    group_id: int,
    data: GroupUpdate,
    identity: Identity = Depends(require(Operation.GROUP_UPDATE)),
    db: Session = Depends(get_db),
):
    """Réservé au responsable du groupe."""
    authorize(db, identity, Operation.GROUP_UPDATE, group_id)
    return group_service.update_group(db, group_id, data)


@router.post("/{group_id}/members", response_model=MessageResponse, summary="Ajouter un membre")
def add_member(
    group_id: int,
    data: GroupMemberAdd,
    identity: Identity = Depends(require(Operation.GROUP_ADD_MEMBER)),
    db: Session = Depends(get_db),
):
    group = authorize(db, identity, Operation.GROUP_ADD_MEMBER, group_id)
    group_service.add_member(db, group, data.user_id)
    return MessageResponse(message="Membre ajouté au groupe avec succès.")


@router.delete("/{group_id}/members/{user_id}", response_model=MessageResponse, summary="Retirer un membre")
def remove_member(
    group_id: int,
    user_id: int,
    identity: Identity = Depends(require(Operation.GROUP_REMOVE_MEMBER)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.GROUP_REMOVE_MEMBER, group_id)
    group_service.remove_member(db, group_id, user_id)
    return MessageResponse(message="Membre supprimé du groupe avec succès.")


@router.put("/{group_id}/leader", response_model=MessageResponse, summary="Désigner le responsable")
def set_leader(
    group_id: int,
    data: GroupMemberAdd,
    identity: Identity = Depends(require(Operation.GROUP_SET_LEADER)),
    db: Session = Depends(get_db),
):
    """Le membre désigné devient responsable ; l'ancien responsable perd ce statut."""
    authorize(db, identity, Operation.GROUP_SET_LEADER, group_id)
    group_service.set_leader(db, group_id, data.user_id)
    return MessageResponse(message="Responsable du groupe mis à jour.")
