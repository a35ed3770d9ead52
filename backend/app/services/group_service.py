"""
Service métier pour les groupes de projet et leurs membres.

Seuls des Étudiants inscrits à la classe du projet peuvent rejoindre un groupe.
Un membre par groupe peut être désigné responsable (is_group_coordinator).
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.authorization import ResourceContext, is_member
from app.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models.project import Group, GroupMember, Project
from app.models.user import Role, User
from app.schemas.project import (
    GroupCreate,
    GroupMemberResponse,
    GroupResponse,
    GroupUpdate,
    MyGroupResponse,
)

logger = logging.getLogger(__name__)


def create_group(db: Session, data: GroupCreate) -> int:
    group = Group(project_id=data.project_id, name=data.name, description=data.description)
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("Groupe %s créé pour le projet %s", group.id, data.project_id)
    return group.id


def get_group_members(db: Session, group_id: int) -> list[GroupMemberResponse]:
    rows = db.execute(
        select(User.id, User.first_name, User.last_name, User.role, GroupMember.is_group_coordinator)
        .join(GroupMember, GroupMember.user_id == User.id)
        .where(GroupMember.group_id == group_id)
        .order_by(User.first_name, User.last_name)
    ).all()
    return [
        GroupMemberResponse(
            id=r.id,
            first_name=r.first_name,
            last_name=r.last_name,
            role=r.role,
            is_group_coordinator=bool(r.is_group_coordinator),
        )
        for r in rows
    ]


def get_groups(db: Session, project_id: int) -> list[GroupResponse]:
    """Groupes d'un projet triés par nom ; les membres sont chargés groupe par groupe."""
    groups = db.execute(
        select(Group).where(Group.project_id == project_id).order_by(Group.name)
    ).scalars().all()
    return [
        GroupResponse(
            id=g.id,
            project_id=g.project_id,
            name=g.name,
            description=g.description,
            members=get_group_members(db, g.id),
        )
        for g in groups
    ]


def add_member(db: Session, group: ResourceContext, user_id: int) -> None:
    """
    Ajoute un étudiant au groupe.
    Lève BadRequestError si l'utilisateur n'existe pas, n'est pas Étudiant ou n'est pas
    inscrit à la classe du projet ; ConflictError s'il est déjà membre du groupe.
    """
    target = db.execute(select(User.id, User.role).where(User.id == user_id)).first()
    if target is None or target.role != Role.STUDENT.value:
        raise BadRequestError("L'utilisateur à ajouter n'existe pas ou n'est pas un étudiant.")

    if not is_member(db, user_id, group.class_id):
        raise BadRequestError("L'étudiant n'est pas membre de la classe de ce projet.")

    db.add(GroupMember(group_id=group.id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not _is_group_member(db, group.id, user_id):
            raise
        raise ConflictError("Cet utilisateur est déjà membre de ce groupe.")
    logger.info("Utilisateur %s ajouté au groupe %s", user_id, group.id)


def remove_member(db: Session, group_id: int, user_id: int) -> None:
    member = _get_member(db, group_id, user_id)
    db.delete(member)
    db.commit()
    logger.info("Utilisateur %s retiré du groupe %s", user_id, group_id)


def set_leader(db: Session, group_id: int, user_id: int) -> None:
    """Désigne le responsable du groupe ; l'ancien responsable perd ce statut."""
    member = _get_member(db, group_id, user_id)
    db.execute(
        update(GroupMember)
        .where(GroupMember.group_id == group_id, GroupMember.id != member.id)
        .values(is_group_coordinator=False)
    )
    member.is_group_coordinator = True
    db.commit()
    logger.info("Utilisateur %s désigné responsable du groupe %s", user_id, group_id)


def update_group(db: Session, group_id: int, data: GroupUpdate) -> GroupResponse:
    group = db.get(Group, group_id)
    if group is None:
        raise NotFoundError("Groupe non trouvé.")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(group, field, value)
    db.commit()
    db.refresh(group)
    return GroupResponse(
        id=group.id,
        project_id=group.project_id,
        name=group.name,
        description=group.description,
        members=get_group_members(db, group.id),
    )


def get_my_groups(db: Session, user_id: int) -> list[MyGroupResponse]:
    rows = db.execute(
        select(Group, Project.title, Project.class_id, GroupMember.is_group_coordinator)
        .join(GroupMember, GroupMember.group_id == Group.id)
        .join(Project, Project.id == Group.project_id)
        .where(GroupMember.user_id == user_id)
        .order_by(Project.title, Group.name)
    ).all()
    return [
        MyGroupResponse(
            id=g.id,
            name=g.name,
            description=g.description,
            project_id=g.project_id,
            project_title=title,
            class_id=class_id,
            is_group_coordinator=bool(leader),
        )
        for g, title, class_id, leader in rows
    ]


def _is_group_member(db: Session, group_id: int, user_id: int) -> bool:
    return db.execute(
        select(GroupMember.id).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
    ).first() is not None


def _get_member(db: Session, group_id: int, user_id: int) -> GroupMember:
    member = db.execute(
        select(GroupMember).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
    ).scalar_one_or_none()
    if member is None:
        raise NotFoundError("Membre non trouvé dans ce groupe.")
    return member
