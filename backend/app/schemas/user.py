"""
Schémas Pydantic pour l'administration des utilisateurs (réservée aux Coordinateurs).
"""

from pydantic import BaseModel

from app.models.user import Role


class UserResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: Role

    model_config = {"from_attributes": True}


class RoleUpdate(BaseModel):
    role: Role
