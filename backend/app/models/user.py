"""
Modèle SQLAlchemy pour les utilisateurs et énumération des rôles globaux.
"""

import enum

from sqlalchemy import Column, DateTime, Integer, String, func

from app.database import Base


class Role(str, enum.Enum):
    """Rôle global d'un utilisateur. Les valeurs sont celles stockées en base."""
    STUDENT = "Etudiant"
    TEACHER = "Professeur"
    COORDINATOR = "Coordinateur"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # Etudiant, Professeur, Coordinateur
    created_at = Column(DateTime, server_default=func.now())
