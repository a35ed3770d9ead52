"""
Service d'identité : hachage des mots de passe, émission et vérification des tokens JWT.

Le token est autoporteur ({id, email, role, exp}) : aucune session côté serveur
et aucun accès BDD lors de la vérification. Conséquence assumée : un changement
de rôle ne prend effet qu'à l'émission du token suivant.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, ValidationError

from app.config import settings
from app.exceptions import InvalidCredentialError, MissingCredentialError
from app.models.user import Role

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# En-tête historique des clients web ; Authorization: Bearer accepté en second.
token_header = APIKeyHeader(name="x-auth-token", auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    """Identité décodée d'un token. Ce n'est pas un utilisateur lu en base."""
    id: int
    email: str
    role: Role

    model_config = ConfigDict(frozen=True)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def issue_token(user_id: int, email: str, role: Role, expires_delta: Optional[timedelta] = None) -> str:
    """Émet un token signé valable ACCESS_TOKEN_EXPIRE_MINUTES (1h par défaut)."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {"id": user_id, "email": email, "role": Role(role).value, "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Identity:
    """
    Vérifie la signature et l'expiration puis retourne l'identité portée par le token.
    Token expiré, falsifié, mal formé ou incomplet : même InvalidCredentialError.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return Identity(id=payload["id"], email=payload["email"], role=payload["role"])
    except (JWTError, KeyError, ValidationError) as e:
        logger.debug("Token rejeté : %s", e)
        raise InvalidCredentialError()


def get_current_identity(
    request: Request,
    x_auth_token: Optional[str] = Depends(token_header),
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """
    Dépendance FastAPI d'authentification.
    Attache l'identité décodée à request.state pour les traitements en aval.
    """
    token = x_auth_token or (bearer.credentials if bearer else None)
    if not token:
        raise MissingCredentialError()

    identity = decode_token(token)
    request.state.identity = identity
    return identity
