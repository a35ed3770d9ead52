"""
Service d'inscription et de connexion.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, ForbiddenError, InvalidCredentialError
from app.models.user import Role, User
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from app.security import hash_password, issue_token, verify_password

logger = logging.getLogger(__name__)


def register(db: Session, data: RegisterRequest) -> AuthResponse:
    """
    Crée un compte et retourne un token.
    Le rôle Coordinateur ne peut être choisi à l'inscription que s'il n'existe
    encore aucun Coordinateur (amorçage) ; ensuite seul un Coordinateur attribue ce rôle.
    Lève ConflictError si l'email est déjà enregistré.
    """
    if data.role == Role.COORDINATOR:
        nb_coordinators = db.execute(
            select(func.count()).select_from(User).where(User.role == Role.COORDINATOR.value)
        ).scalar() or 0
        if nb_coordinators > 0:
            raise ForbiddenError("Le rôle Coordinateur ne peut pas être choisi à l'inscription.")

    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        password_hash=hash_password(data.password),
        role=data.role.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Cet email est déjà enregistré.")
    db.refresh(user)

    logger.info("Utilisateur %s inscrit avec le rôle %s", user.id, user.role)
    return AuthResponse(
        message="Utilisateur enregistré avec succès !",
        token=issue_token(user.id, user.email, Role(user.role)),
        user=UserPublic.model_validate(user),
    )


def login(db: Session, data: LoginRequest) -> AuthResponse:
    """Vérifie les identifiants. Email inconnu et mauvais mot de passe sont indiscernables."""
    user = db.execute(select(User).where(User.email == data.email)).scalar_one_or_none()
    if user is None or not verify_password(data.password, user.password_hash):
        raise InvalidCredentialError("Email ou mot de passe incorrect.")

    return AuthResponse(
        message="Connexion réussie.",
        token=issue_token(user.id, user.email, Role(user.role)),
        user=UserPublic.model_validate(user),
    )
