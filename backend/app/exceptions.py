"""
Erreurs métier de l'API.

Chaque erreur porte son code HTTP et un message destiné au client.
Les gestionnaires enregistrés dans app.main les convertissent en réponse JSON
{"message": ...}.
"""

from typing import Optional


class AppError(Exception):
    status_code = 500
    default_message = "Erreur interne du serveur."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredentialError(AppError):
    status_code = 401
    default_message = "Aucun token, autorisation refusée."


class InvalidCredentialError(AppError):
    status_code = 401
    default_message = "Token non valide."


class ForbiddenError(AppError):
    """
    Refus d'autorisation.
    `scope` distingue en interne un refus de rôle ("role") d'un refus lié à la
    ressource ("resource") ; le client reçoit un 403 identique dans les deux cas.
    """
    status_code = 403
    default_message = "Accès non autorisé."

    def __init__(self, message: Optional[str] = None, scope: str = "resource"):
        super().__init__(message)
        self.scope = scope


class NotFoundError(AppError):
    status_code = 404
    default_message = "Ressource introuvable."


class ConflictError(AppError):
    status_code = 409
    default_message = "Cette ressource existe déjà."


class BadRequestError(AppError):
    status_code = 400
    default_message = "Requête invalide."
