"""
Service d'administration des utilisateurs (Coordinateurs).

Invariant : il reste toujours au moins un Coordinateur. Le dernier ne peut être
ni supprimé ni rétrogradé.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.exceptions import ForbiddenError, NotFoundError
from app.models.user import Role, User
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)


def get_users(db: Session) -> list[UserResponse]:
    """Tous les utilisateurs, triés par rôle, nom puis prénom."""
    users = db.execute(
        select(User).order_by(User.role, User.last_name, User.first_name)
    ).scalars().all()
    return [UserResponse.model_validate(u) for u in users]


def _count_coordinators(db: Session) -> int:
    return db.execute(
        select(func.count()).select_from(User).where(User.role == Role.COORDINATOR.value)
    ).scalar() or 0


def change_role(db: Session, user_id: int, role: Role) -> UserResponse:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("Utilisateur non trouvé.")

    if user.role == Role.COORDINATOR.value and role != Role.COORDINATOR and _count_coordinators(db) <= 1:
        raise ForbiddenError("Impossible de rétrograder le seul compte Coordinateur.")

    user.role = role.value
    db.commit()
    db.refresh(user)
    logger.info("Rôle de l'utilisateur %s mis à jour en %s", user_id, role.value)
    return UserResponse.model_validate(user)


def delete_user(db: Session, user_id: int) -> None:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("Utilisateur non trouvé.")

    if user.role == Role.COORDINATOR.value and _count_coordinators(db) <= 1:
        raise ForbiddenError("Impossible de supprimer le seul compte Coordinateur.")

    db.delete(user)
    db.commit()
    logger.info("Utilisateur %s supprimé", user_id)
