"""
Schémas Pydantic pour les tâches, les soumissions et leur notation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, model_validator, field_validator

from app.schemas.common import strip_required


class TaskCreate(BaseModel):
    class_id: int
    title: str
    description: Optional[str] = None
    deadline: datetime

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        return strip_required(v)


class TaskResponse(BaseModel):
    id: int
    class_id: int
    teacher_id: int
    title: str
    description: Optional[str]
    deadline: datetime
    created_at: Optional[datetime] = None
    teacher_first_name: Optional[str] = None
    teacher_last_name: Optional[str] = None

    model_config = {"from_attributes": True}


class TaskCreated(BaseModel):
    message: str
    task: TaskResponse


class SubmissionCreate(BaseModel):
    """Corps d'une soumission : un chemin de fichier ou un contenu est requis."""
    file_path: Optional[str] = None
    content: Optional[str] = None

    @model_validator(mode="after")
    def file_or_content(self) -> "SubmissionCreate":
        if not self.file_path and not self.content:
            raise ValueError("Un chemin de fichier ou un contenu est requis pour la soumission.")
        return self


class SubmissionResult(BaseModel):
    message: str
    submission_id: int


class GradeRequest(BaseModel):
    grade: float
    feedback: str


class SubmissionResponse(BaseModel):
    """Soumission vue par le professeur de la tâche (liste des rendus)."""
    id: int
    task_id: int
    student_id: int
    file_path: Optional[str]
    content: Optional[str]
    submitted_at: Optional[datetime]
    grade: Optional[float]
    feedback: Optional[str]
    student_first_name: Optional[str] = None
    student_last_name: Optional[str] = None


class SubmissionDetail(SubmissionResponse):
    """Soumission détaillée avec le rappel de la tâche."""
    task_title: str
    task_description: Optional[str]
    task_deadline: datetime
    class_id: int
    class_name: Optional[str] = None
