"""
Router pour la messagerie : messages publics de classe et messages privés.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.authorization import Operation, authorize, require
from app.database import get_db
from app.exceptions import BadRequestError
from app.schemas.common import MessageResponse
from app.schemas.message import MessageCreate, PrivateMessageResponse, PublicMessageResponse
from app.security import Identity, get_current_identity
from app.services import message_service

router = APIRouter(prefix="/api/messages", tags=["Messagerie"])


@router.post("", response_model=MessageResponse, status_code=201, summary="Envoyer un message")
def send_message(
    data: MessageCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    - public  : réservé aux Professeurs et Coordinateurs membres de la classe visée
    - private : tout utilisateur, vers un destinataire existant autre que lui-même
    """
    if data.message_type == "private":
        if data.receiver_id == identity.id:
            raise BadRequestError("Vous ne pouvez pas vous envoyer un message privé à vous-même.")
        authorize(db, identity, Operation.MESSAGE_SEND_PRIVATE, data.receiver_id)
        message_service.send_private_message(db, identity.id, data.receiver_id, data.content)
        return MessageResponse(message="Message privé envoyé avec succès.")

    authorize(db, identity, Operation.MESSAGE_SEND_PUBLIC, data.class_id)
    message_service.send_public_message(db, identity.id, data.class_id, data.content)
    return MessageResponse(message="Message public envoyé avec succès.")


@router.get("/public/class/{class_id}", response_model=List[PublicMessageResponse], summary="Messages publics d'une classe")
def list_public_messages(
    class_id: int,
    identity: Identity = Depends(require(Operation.MESSAGE_LIST_PUBLIC)),
    db: Session = Depends(get_db),
):
    authorize(db, identity, Operation.MESSAGE_LIST_PUBLIC, class_id)
    return message_service.get_public_messages(db, class_id)


@router.get("/private/me", response_model=List[PrivateMessageResponse], summary="Mes messages privés")
def list_private_messages(
    identity: Identity = Depends(require(Operation.MESSAGE_LIST_PRIVATE)),
    db: Session = Depends(get_db),
):
    return message_service.get_private_messages(db, identity.id)
