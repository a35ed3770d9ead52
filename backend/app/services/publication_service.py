"""
Service métier pour les annonces et documentations publiées dans une classe.
L'autorisation (propriété de la classe, inscription) est vérifiée en amont par le router.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.publication import Announcement, Documentation
from app.models.user import User
from app.schemas.publication import (
    AnnouncementCreate,
    AnnouncementResponse,
    DocumentationCreate,
    DocumentationResponse,
)

logger = logging.getLogger(__name__)


def create_announcement(db: Session, teacher_id: int, data: AnnouncementCreate) -> AnnouncementResponse:
    announcement = Announcement(
        class_id=data.class_id,
        teacher_id=teacher_id,
        title=data.title,
        content=data.content,
    )
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    logger.info("Annonce %s publiée dans la classe %s", announcement.id, data.class_id)
    return AnnouncementResponse.model_validate(announcement)


def get_announcements(db: Session, class_id: int) -> list[AnnouncementResponse]:
    """Annonces d'une classe, les plus récentes en premier."""
    rows = db.execute(
        select(Announcement, User.first_name, User.last_name)
        .join(User, User.id == Announcement.teacher_id)
        .where(Announcement.class_id == class_id)
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
    ).all()
    return [
        AnnouncementResponse.model_validate(a).model_copy(
            update={"teacher_first_name": first_name, "teacher_last_name": last_name}
        )
        for a, first_name, last_name in rows
    ]


def create_documentation(db: Session, teacher_id: int, data: DocumentationCreate) -> DocumentationResponse:
    documentation = Documentation(
        class_id=data.class_id,
        teacher_id=teacher_id,
        title=data.title,
        description=data.description,
        file_path=data.file_path,
    )
    db.add(documentation)
    db.commit()
    db.refresh(documentation)
    logger.info("Documentation %s partagée dans la classe %s", documentation.id, data.class_id)
    return DocumentationResponse.model_validate(documentation)


def get_documentations(db: Session, class_id: int) -> list[DocumentationResponse]:
    """Documentations d'une classe, les plus récentes en premier."""
    rows = db.execute(
        select(Documentation, User.first_name, User.last_name)
        .join(User, User.id == Documentation.teacher_id)
        .where(Documentation.class_id == class_id)
        .order_by(Documentation.created_at.desc(), Documentation.id.desc())
    ).all()
    return [
        DocumentationResponse.model_validate(d).model_copy(
            update={"teacher_first_name": first_name, "teacher_last_name": last_name}
        )
        for d, first_name, last_name in rows
    ]
