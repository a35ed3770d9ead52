"""
Configuration partagée pour tous les tests.
Override la dépendance get_db pour éviter toute connexion réelle à PostgreSQL.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models.user import Role
from app.security import issue_token


@pytest.fixture
def mock_db():
    """Session BDD mockée : permet de vérifier qu'aucun accès n'a eu lieu."""
    return MagicMock()


@pytest.fixture
def client(mock_db):
    """Client HTTP de test avec la BDD mockée."""
    app.dependency_overrides[get_db] = lambda: mock_db
    with patch("app.main.init_db"), TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def headers():
    """Fabrique d'en-têtes d'authentification : headers(user_id, role)."""
    def _make(user_id: int = 1, role: Role = Role.TEACHER) -> dict:
        token = issue_token(user_id, f"user{user_id}@ecole.be", role)
        return {"x-auth-token": token}
    return _make


@pytest.fixture
def sqlite_app():
    """
    Client HTTP branché sur une base SQLite en mémoire (schéma complet).
    Retourne (client, fabrique de sessions) pour les scénarios de bout en bout.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with patch("app.main.init_db"), TestClient(app) as c:
        yield c, TestingSession
    app.dependency_overrides.clear()
    engine.dispose()
