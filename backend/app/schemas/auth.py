"""
Schémas Pydantic pour l'inscription et la connexion.
"""

from pydantic import BaseModel, EmailStr, field_validator

from app.models.user import Role
from app.schemas.common import strip_required


class RegisterRequest(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    password: str
    role: Role

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Le mot de passe est requis.")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserPublic(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: Role

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Réponse d'inscription / connexion : token JWT et profil public."""
    message: str
    token: str
    user: UserPublic


class IdentityResponse(BaseModel):
    """Identité portée par le token courant."""
    id: int
    email: str
    role: Role
