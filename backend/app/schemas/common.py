"""
Schémas Pydantic partagés entre les routers.
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Réponse minimale : un message de confirmation."""
    message: str


def strip_required(v: str) -> str:
    """Refuse une chaîne vide ou composée d'espaces, retourne la valeur sans espaces."""
    if not v.strip():
        raise ValueError("Le champ ne peut pas être vide.")
    return v.strip()
