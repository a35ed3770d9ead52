"""
Service métier pour les tâches d'une classe et leur soumission par les étudiants.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.task import Submission, Task
from app.models.user import User
from app.schemas.task import SubmissionCreate, TaskCreate, TaskResponse

logger = logging.getLogger(__name__)


def create_task(db: Session, teacher_id: int, data: TaskCreate) -> TaskResponse:
    task = Task(
        class_id=data.class_id,
        teacher_id=teacher_id,
        title=data.title,
        description=data.description,
        deadline=data.deadline,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Tâche %s assignée dans la classe %s", task.id, data.class_id)
    return TaskResponse.model_validate(task)


def get_tasks(db: Session, class_id: int) -> list[TaskResponse]:
    """Tâches d'une classe, par date limite croissante."""
    rows = db.execute(
        select(Task, User.first_name, User.last_name)
        .join(User, User.id == Task.teacher_id)
        .where(Task.class_id == class_id)
        .order_by(Task.deadline.asc(), Task.id.asc())
    ).all()
    return [
        TaskResponse.model_validate(t).model_copy(
            update={"teacher_first_name": first_name, "teacher_last_name": last_name}
        )
        for t, first_name, last_name in rows
    ]


def _find_submission(db: Session, task_id: int, student_id: int) -> Optional[Submission]:
    return db.execute(
        select(Submission).where(Submission.task_id == task_id, Submission.student_id == student_id)
    ).scalar_one_or_none()


def submit_task(db: Session, task_id: int, student_id: int, data: SubmissionCreate) -> Tuple[int, bool]:
    """
    Enregistre la soumission d'un étudiant. Une seule ligne par (tâche, étudiant) :
    une resoumission écrase le contenu et l'horodatage de la ligne existante.

    La contrainte uq_submission_task_student arbitre deux premières soumissions
    concurrentes : la perdante bascule sur la mise à jour.
    Retourne (id de la soumission, True si créée / False si mise à jour).
    """
    submission = _find_submission(db, task_id, student_id)

    if submission is None:
        submission = Submission(
            task_id=task_id,
            student_id=student_id,
            file_path=data.file_path,
            content=data.content,
        )
        db.add(submission)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            submission = _find_submission(db, task_id, student_id)
            if submission is None:
                raise
        else:
            db.refresh(submission)
            logger.info("Soumission %s créée (tâche %s, étudiant %s)", submission.id, task_id, student_id)
            return submission.id, True

    submission.file_path = data.file_path
    submission.content = data.content
    submission.submitted_at = func.now()
    db.commit()
    logger.info("Soumission %s mise à jour (tâche %s, étudiant %s)", submission.id, task_id, student_id)
    return submission.id, False
