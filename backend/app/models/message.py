"""
Modèle SQLAlchemy pour la messagerie.

- public  : rattaché à une classe (class_id), receiver_id NULL
- private : rattaché à un destinataire (receiver_id), class_id NULL
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from app.database import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=True)
    content = Column(Text, nullable=False)
    message_type = Column(String(10), nullable=False)  # public, private
    created_at = Column(DateTime, server_default=func.now())
