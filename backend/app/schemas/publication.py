"""
Schémas Pydantic pour les annonces et les documentations d'une classe.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from app.schemas.common import strip_required


class AnnouncementCreate(BaseModel):
    class_id: int
    title: str
    content: str

    @field_validator("title", "content")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return strip_required(v)


class AnnouncementResponse(BaseModel):
    id: int
    class_id: int
    teacher_id: int
    title: str
    content: str
    created_at: Optional[datetime] = None
    teacher_first_name: Optional[str] = None
    teacher_last_name: Optional[str] = None

    model_config = {"from_attributes": True}


class AnnouncementCreated(BaseModel):
    message: str
    announcement: AnnouncementResponse


class DocumentationCreate(BaseModel):
    class_id: int
    title: str
    description: Optional[str] = None
    file_path: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        return strip_required(v)


class DocumentationResponse(BaseModel):
    id: int
    class_id: int
    teacher_id: int
    title: str
    description: Optional[str]
    file_path: Optional[str]
    created_at: Optional[datetime] = None
    teacher_first_name: Optional[str] = None
    teacher_last_name: Optional[str] = None

    model_config = {"from_attributes": True}


class DocumentationCreated(BaseModel):
    message: str
    documentation: DocumentationResponse
