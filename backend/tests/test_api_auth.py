"""
Tests d'intégration API pour l'authentification : inscription, connexion,
rejet des requêtes sans token ou avec un token invalide.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest

from app.exceptions import ConflictError, ForbiddenError, InvalidCredentialError
from app.models.user import Role
from app.schemas.auth import AuthResponse, UserPublic
from app.security import issue_token


PROTECTED_ROUTES = [
    ("post", "/api/classes"),
    ("get", "/api/classes/professeur"),
    ("get", "/api/classes/me"),
    ("post", "/api/classes/join"),
    ("get", "/api/classes/1"),
    ("get", "/api/classes/1/students"),
    ("post", "/api/announcements"),
    ("get", "/api/announcements/1"),
    ("post", "/api/documentations"),
    ("get", "/api/documentations/1"),
    ("post", "/api/tasks"),
    ("get", "/api/tasks/class/1"),
    ("post", "/api/tasks/1/submit"),
    ("get", "/api/tasks/1/submissions"),
    ("put", "/api/submissions/1/grade"),
    ("get", "/api/submissions/1"),
    ("get", "/api/users/me/submissions"),
    ("post", "/api/messages"),
    ("get", "/api/messages/public/class/1"),
    ("get", "/api/messages/private/me"),
    ("get", "/api/users/all"),
    ("put", "/api/users/1/role"),
    ("delete", "/api/users/1"),
    ("post", "/api/projects"),
    ("get", "/api/projects/class/1"),
    ("post", "/api/groups"),
    ("get", "/api/groups/me"),
    ("get", "/api/groups/project/1"),
    ("put", "/api/groups/1"),
    ("post", "/api/groups/1/members"),
    ("delete", "/api/groups/1/members/2"),
    ("put", "/api/groups/1/leader"),
    ("get", "/api/auth/me"),
]


def make_auth_response(role=Role.STUDENT) -> AuthResponse:
    return AuthResponse(
        message="Connexion réussie.",
        token=issue_token(3, "etu@ecole.be", role),
        user=UserPublic(id=3, first_name="Lina", last_name="Mertens", email="etu@ecole.be", role=role),
    )


# ============================================================
# Requêtes non authentifiées
# ============================================================

@pytest.mark.parametrize("method,url", PROTECTED_ROUTES)
def test_sans_token_401_sans_acces_bdd(client, mock_db, method, url):
    """Aucun token → 401, même avec un body invalide, et la base n'est jamais touchée."""
    response = client.request(method, url, json={})
    assert response.status_code == 401
    assert "message" in response.json()
    assert mock_db.method_calls == []


@pytest.mark.parametrize("method,url", PROTECTED_ROUTES)
def test_token_falsifie_401(client, mock_db, method, url):
    response = client.request(method, url, json={}, headers={"x-auth-token": "abc.def.ghi"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token non valide."
    assert mock_db.method_calls == []


def test_token_expire_401(client, mock_db):
    token = issue_token(1, "prof@ecole.be", Role.TEACHER, expires_delta=timedelta(seconds=-5))
    response = client.get("/api/classes/professeur", headers={"x-auth-token": token})
    assert response.status_code == 401
    assert response.json()["message"] == "Token non valide."
    assert mock_db.method_calls == []


def test_token_bearer_accepte(client):
    token = issue_token(1, "prof@ecole.be", Role.TEACHER)
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json() == {"id": 1, "email": "prof@ecole.be", "role": "Professeur"}


def test_health_sans_token(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ============================================================
# Filtre de rôle (403 avant validation et sans accès BDD)
# ============================================================

@pytest.mark.parametrize("role,method,url", [
    (Role.STUDENT, "post", "/api/classes"),
    (Role.COORDINATOR, "post", "/api/classes"),
    (Role.TEACHER, "post", "/api/classes/join"),
    (Role.STUDENT, "post", "/api/announcements"),
    (Role.COORDINATOR, "post", "/api/documentations"),
    (Role.STUDENT, "post", "/api/tasks"),
    (Role.TEACHER, "post", "/api/tasks/1/submit"),
    (Role.STUDENT, "put", "/api/submissions/1/grade"),
    (Role.COORDINATOR, "get", "/api/submissions/1"),
    (Role.TEACHER, "get", "/api/users/all"),
    (Role.STUDENT, "delete", "/api/users/2"),
    (Role.STUDENT, "post", "/api/projects"),
    (Role.STUDENT, "post", "/api/groups/1/members"),
])
def test_mauvais_role_403_sans_acces_bdd(client, mock_db, headers, role, method, url):
    response = client.request(method, url, json={}, headers=headers(1, role))
    assert response.status_code == 403
    assert mock_db.method_calls == []


# ============================================================
# POST /api/auth/register
# ============================================================

def test_register_succes(client):
    with patch("app.routers.auth.auth_service.register") as mock:
        mock.return_value = make_auth_response()
        response = client.post("/api/auth/register", json={
            "first_name": "Lina",
            "last_name": "Mertens",
            "email": "etu@ecole.be",
            "password": "secret123",
            "role": "Etudiant",
        })

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["user"]["role"] == "Etudiant"
    assert "password_hash" not in body["user"]


def test_register_role_inconnu_400(client, mock_db):
    response = client.post("/api/auth/register", json={
        "first_name": "Lina",
        "last_name": "Mertens",
        "email": "etu@ecole.be",
        "password": "secret123",
        "role": "Admin",
    })
    assert response.status_code == 400
    assert "errors" in response.json()
    assert mock_db.method_calls == []


def test_register_email_invalide_400(client):
    response = client.post("/api/auth/register", json={
        "first_name": "Lina",
        "last_name": "Mertens",
        "email": "pas-un-email",
        "password": "secret123",
        "role": "Etudiant",
    })
    assert response.status_code == 400


def test_register_champ_manquant_400(client):
    response = client.post("/api/auth/register", json={"email": "etu@ecole.be"})
    assert response.status_code == 400


def test_register_email_duplique_409(client):
    with patch("app.routers.auth.auth_service.register") as mock:
        mock.side_effect = ConflictError("Cet email est déjà enregistré.")
        response = client.post("/api/auth/register", json={
            "first_name": "Lina",
            "last_name": "Mertens",
            "email": "etu@ecole.be",
            "password": "secret123",
            "role": "Etudiant",
        })

    assert response.status_code == 409
    assert response.json()["message"] == "Cet email est déjà enregistré."


def test_register_coordinateur_refuse_403(client):
    with patch("app.routers.auth.auth_service.register") as mock:
        mock.side_effect = ForbiddenError("Le rôle Coordinateur ne peut pas être choisi à l'inscription.")
        response = client.post("/api/auth/register", json={
            "first_name": "Marc",
            "last_name": "Dupont",
            "email": "coord@ecole.be",
            "password": "secret123",
            "role": "Coordinateur",
        })

    assert response.status_code == 403


# ============================================================
# POST /api/auth/login
# ============================================================

def test_login_succes(client):
    with patch("app.routers.auth.auth_service.login") as mock:
        mock.return_value = make_auth_response()
        response = client.post("/api/auth/login", json={"email": "etu@ecole.be", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["message"] == "Connexion réussie."


def test_login_identifiants_incorrects_401(client):
    with patch("app.routers.auth.auth_service.login") as mock:
        mock.side_effect = InvalidCredentialError("Email ou mot de passe incorrect.")
        response = client.post("/api/auth/login", json={"email": "etu@ecole.be", "password": "faux"})

    assert response.status_code == 401
    assert response.json()["message"] == "Email ou mot de passe incorrect."
