"""
Schémas Pydantic pour les classes et les inscriptions.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ClassCreate(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de la classe est requis.")
        return v.strip()


class ClassResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    code: str
    teacher_id: int

    model_config = {"from_attributes": True}


class ClassCreated(BaseModel):
    message: str
    school_class: ClassResponse = Field(alias="class")

    model_config = {"populate_by_name": True}


class MyClassResponse(BaseModel):
    """Classe à laquelle l'utilisateur connecté est inscrit."""
    id: int
    name: str
    description: Optional[str]
    code: str
    teacher_first_name: str
    teacher_last_name: str
    role_in_class: str


class ClassJoin(BaseModel):
    code: str

    @field_validator("code")
    @classmethod
    def code_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le code de la classe est requis.")
        return v.strip().upper()


class ClassStudentResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
