"""
Schémas Pydantic pour les projets de classe et les groupes de projet.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, field_validator, model_validator

from app.schemas.common import strip_required


class ProjectCreate(BaseModel):
    class_id: int
    title: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        return strip_required(v)

    @model_validator(mode="after")
    def dates_in_order(self) -> "ProjectCreate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("La date de fin doit être postérieure à la date de début.")
        return self


class ProjectResponse(BaseModel):
    id: int
    class_id: int
    title: str
    description: Optional[str]
    start_date: Optional[date]
    end_date: Optional[date]
    status: Optional[str]

    model_config = {"from_attributes": True}


class ProjectCreated(BaseModel):
    message: str
    project_id: int


class GroupCreate(BaseModel):
    project_id: int
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return strip_required(v)


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom du groupe ne peut pas être vide.")
        return v.strip() if v else v

    @model_validator(mode="after")
    def name_not_null(self) -> "GroupUpdate":
        # Champ absent : inchangé. Champ présent à null : refusé (colonne NOT NULL).
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("Le nom du groupe ne peut pas être vide.")
        return self


class GroupCreated(BaseModel):
    message: str
    group_id: int


class GroupMemberAdd(BaseModel):
    user_id: int


class GroupMemberResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    role: str
    is_group_coordinator: bool


class GroupResponse(BaseModel):
    id: int
    project_id: int
    name: str
    description: Optional[str]
    members: List[GroupMemberResponse] = []


class MyGroupResponse(BaseModel):
    """Groupe auquel appartient l'utilisateur connecté."""
    id: int
    name: str
    description: Optional[str]
    project_id: int
    project_title: str
    class_id: int
    is_group_coordinator: bool
