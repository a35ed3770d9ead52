"""
Router d'authentification : inscription, connexion, identité courante.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.auth import AuthResponse, IdentityResponse, LoginRequest, RegisterRequest
from app.security import Identity, get_current_identity
from app.services import auth_service

router = APIRouter(prefix="/api/auth", tags=["Authentification"])


@router.post("/register", response_model=AuthResponse, status_code=201, summary="Inscription")
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Crée un compte et retourne un token valable une heure."""
    return auth_service.register(db, data)


@router.post("/login", response_model=AuthResponse, summary="Connexion")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    return auth_service.login(db, data)


@router.get("/me", response_model=IdentityResponse, summary="Identité du token courant")
def me(identity: Identity = Depends(get_current_identity)):
    """Retourne les informations portées par le token, sans lecture en base."""
    return IdentityResponse(id=identity.id, email=identity.email, role=identity.role)
