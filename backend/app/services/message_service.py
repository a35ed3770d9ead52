"""
Service de messagerie : messages publics de classe et messages privés entre utilisateurs.
Stockage puis consultation, sans garantie de remise.
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, aliased

from app.models.message import Message
from app.models.user import User
from app.schemas.message import PrivateMessageResponse, PublicMessageResponse

logger = logging.getLogger(__name__)

PUBLIC = "public"
PRIVATE = "private"


def send_public_message(db: Session, sender_id: int, class_id: int, content: str) -> int:
    message = Message(sender_id=sender_id, class_id=class_id, content=content, message_type=PUBLIC)
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("Message public %s envoyé dans la classe %s", message.id, class_id)
    return message.id


def send_private_message(db: Session, sender_id: int, receiver_id: int, content: str) -> int:
    message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content, message_type=PRIVATE)
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("Message privé %s envoyé de %s à %s", message.id, sender_id, receiver_id)
    return message.id


def get_public_messages(db: Session, class_id: int) -> list[PublicMessageResponse]:
    """Messages publics d'une classe, les plus récents en premier."""
    rows = db.execute(
        select(Message, User)
        .join(User, User.id == Message.sender_id)
        .where(Message.class_id == class_id, Message.message_type == PUBLIC)
        .order_by(Message.created_at.desc(), Message.id.desc())
    ).all()
    return [
        PublicMessageResponse(
            id=m.id,
            content=m.content,
            created_at=m.created_at,
            sender_id=sender.id,
            sender_first_name=sender.first_name,
            sender_last_name=sender.last_name,
            sender_role=sender.role,
        )
        for m, sender in rows
    ]


def get_private_messages(db: Session, user_id: int) -> list[PrivateMessageResponse]:
    """Messages privés envoyés ou reçus par l'utilisateur, les plus récents en premier."""
    Sender = aliased(User)
    Receiver = aliased(User)
    rows = db.execute(
        select(Message, Sender, Receiver)
        .join(Sender, Sender.id == Message.sender_id)
        .outerjoin(Receiver, Receiver.id == Message.receiver_id)
        .where(
            or_(Message.sender_id == user_id, Message.receiver_id == user_id),
            Message.message_type == PRIVATE,
        )
        .order_by(Message.created_at.desc(), Message.id.desc())
    ).all()
    return [
        PrivateMessageResponse(
            id=m.id,
            content=m.content,
            created_at=m.created_at,
            message_type=m.message_type,
            sender_id=sender.id,
            sender_first_name=sender.first_name,
            sender_last_name=sender.last_name,
            sender_role=sender.role,
            receiver_id=receiver.id if receiver else None,
            receiver_first_name=receiver.first_name if receiver else None,
            receiver_last_name=receiver.last_name if receiver else None,
            receiver_role=receiver.role if receiver else None,
        )
        for m, sender, receiver in rows
    ]
