"""
Service métier pour les classes : création avec code d'accès unique, inscriptions, listes.
"""

import logging
import secrets
import string

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.authorization import is_member
from app.config import settings
from app.exceptions import ConflictError, NotFoundError
from app.models.school_class import ClassMember, SchoolClass
from app.models.user import Role, User
from app.schemas.school_class import (
    ClassCreate,
    ClassResponse,
    ClassStudentResponse,
    MyClassResponse,
)
from app.security import Identity

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_class_code(length: int = settings.CLASS_CODE_LENGTH) -> str:
    """Tire un code aléatoire, ex: "K7Q2ZP"."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def _code_exists(db: Session, code: str) -> bool:
    return db.execute(select(SchoolClass.id).where(SchoolClass.code == code)).first() is not None


def create_class(db: Session, teacher: Identity, data: ClassCreate) -> ClassResponse:
    """
    Crée une classe et y inscrit son professeur.

    L'unicité du code repose sur la contrainte UNIQUE de classes.code : en cas de
    collision, l'insertion échoue et un nouveau code est tiré. Abandon après
    CLASS_CODE_MAX_ATTEMPTS tentatives. Toute autre violation de contrainte (ex: professeur
    supprimé alors que son token est encore valide) est propagée.
    """
    for attempt in range(1, settings.CLASS_CODE_MAX_ATTEMPTS + 1):
        code = generate_class_code()
        school_class = SchoolClass(
            name=data.name,
            description=data.description,
            code=code,
            teacher_id=teacher.id,
        )
        db.add(school_class)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            # Seule une collision sur classes.code justifie un nouveau tirage.
            if not _code_exists(db, code):
                raise
            logger.warning("Collision de code de classe (tentative %d)", attempt)
            continue

        db.add(ClassMember(
            user_id=teacher.id,
            class_id=school_class.id,
            role_in_class=Role.TEACHER.value,
        ))
        db.commit()
        db.refresh(school_class)
        logger.info("Classe %s créée par %s (code %s)", school_class.id, teacher.id, school_class.code)
        return ClassResponse.model_validate(school_class)

    raise RuntimeError("Impossible de générer un code de classe unique.")


def get_owned_classes(db: Session, teacher_id: int) -> list[ClassResponse]:
    """Classes dont l'utilisateur est le professeur propriétaire."""
    classes = db.execute(
        select(SchoolClass)
        .where(SchoolClass.teacher_id == teacher_id)
        .order_by(SchoolClass.name)
    ).scalars().all()
    return [ClassResponse.model_validate(c) for c in classes]


def get_my_classes(db: Session, user_id: int) -> list[MyClassResponse]:
    """Classes auxquelles l'utilisateur est inscrit, avec le nom du professeur."""
    rows = db.execute(
        select(
            SchoolClass.id,
            SchoolClass.name,
            SchoolClass.description,
            SchoolClass.code,
            User.first_name,
            User.last_name,
            ClassMember.role_in_class,
        )
        .join(SchoolClass, SchoolClass.id == ClassMember.class_id)
        .join(User, User.id == SchoolClass.teacher_id)
        .where(ClassMember.user_id == user_id)
        .order_by(SchoolClass.name)
    ).all()
    return [
        MyClassResponse(
            id=r.id,
            name=r.name,
            description=r.description,
            code=r.code,
            teacher_first_name=r.first_name,
            teacher_last_name=r.last_name,
            role_in_class=r.role_in_class,
        )
        for r in rows
    ]


def join_class(db: Session, identity: Identity, code: str) -> int:
    """
    Inscrit l'utilisateur à la classe correspondant au code.
    Retourne l'ID de la classe. Lève NotFoundError (code inconnu) ou ConflictError (déjà inscrit).
    """
    class_id = db.execute(select(SchoolClass.id).where(SchoolClass.code == code)).scalar()
    if class_id is None:
        raise NotFoundError("Classe introuvable avec ce code.")

    db.add(ClassMember(user_id=identity.id, class_id=class_id, role_in_class=identity.role.value))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not is_member(db, identity.id, class_id):
            raise
        raise ConflictError("Vous êtes déjà inscrit à cette classe.")

    logger.info("Utilisateur %s inscrit à la classe %s", identity.id, class_id)
    return class_id


def get_class(db: Session, class_id: int) -> ClassResponse:
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        raise NotFoundError("Classe introuvable.")
    return ClassResponse.model_validate(school_class)


def get_class_students(db: Session, class_id: int) -> list[ClassStudentResponse]:
    """Étudiants inscrits à la classe, triés par prénom puis nom."""
    rows = db.execute(
        select(User.id, User.first_name, User.last_name)
        .join(ClassMember, ClassMember.user_id == User.id)
        .where(ClassMember.class_id == class_id, User.role == Role.STUDENT.value)
        .order_by(User.first_name, User.last_name)
    ).all()
    return [ClassStudentResponse(id=r.id, first_name=r.first_name, last_name=r.last_name) for r in rows]
