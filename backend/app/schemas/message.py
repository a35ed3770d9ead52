"""
Schémas Pydantic pour la messagerie (messages publics de classe et messages privés).
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator, model_validator


class MessageCreate(BaseModel):
    message_type: Literal["public", "private"]
    content: str
    receiver_id: Optional[int] = None
    class_id: Optional[int] = None

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le contenu du message ne peut pas être vide.")
        return v

    @model_validator(mode="after")
    def target_present(self) -> "MessageCreate":
        if self.message_type == "private" and self.receiver_id is None:
            raise ValueError("L'ID du destinataire est requis pour un message privé.")
        if self.message_type == "public" and self.class_id is None:
            raise ValueError("L'ID de la classe est requis pour un message public.")
        return self


class PublicMessageResponse(BaseModel):
    id: int
    content: str
    created_at: Optional[datetime]
    sender_id: int
    sender_first_name: str
    sender_last_name: str
    sender_role: str


class PrivateMessageResponse(BaseModel):
    id: int
    content: str
    created_at: Optional[datetime]
    message_type: str
    sender_id: int
    sender_first_name: str
    sender_last_name: str
    sender_role: str
    receiver_id: Optional[int]
    receiver_first_name: Optional[str]
    receiver_last_name: Optional[str]
    receiver_role: Optional[str]
