"""
Service métier pour la consultation et la notation des soumissions.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.school_class import SchoolClass
from app.models.task import Submission, Task
from app.models.user import User
from app.schemas.task import GradeRequest, SubmissionDetail, SubmissionResponse

logger = logging.getLogger(__name__)


def get_task_submissions(db: Session, task_id: int) -> list[SubmissionResponse]:
    """Soumissions d'une tâche, dans l'ordre de dépôt."""
    rows = db.execute(
        select(Submission, User.first_name, User.last_name)
        .join(User, User.id == Submission.student_id)
        .where(Submission.task_id == task_id)
        .order_by(Submission.submitted_at.asc(), Submission.id.asc())
    ).all()
    return [_to_response(s, first_name, last_name) for s, first_name, last_name in rows]


def grade_submission(db: Session, submission_id: int, data: GradeRequest) -> None:
    submission = db.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError("Soumission non trouvée.")
    submission.grade = data.grade
    submission.feedback = data.feedback
    db.commit()
    logger.info("Soumission %s notée %s", submission_id, data.grade)


def get_submission(db: Session, submission_id: int) -> SubmissionDetail:
    row = db.execute(
        select(Submission, Task, SchoolClass.name, User.first_name, User.last_name)
        .join(Task, Task.id == Submission.task_id)
        .join(SchoolClass, SchoolClass.id == Task.class_id)
        .join(User, User.id == Submission.student_id)
        .where(Submission.id == submission_id)
    ).first()
    if row is None:
        raise NotFoundError("Soumission non trouvée.")
    submission, task, class_name, first_name, last_name = row
    return _to_detail(submission, task, class_name, first_name, last_name)


def get_student_submissions(db: Session, student_id: int) -> list[SubmissionDetail]:
    """Toutes les soumissions d'un étudiant, les plus récentes en premier."""
    rows = db.execute(
        select(Submission, Task, SchoolClass.name, User.first_name, User.last_name)
        .join(Task, Task.id == Submission.task_id)
        .join(SchoolClass, SchoolClass.id == Task.class_id)
        .join(User, User.id == Submission.student_id)
        .where(Submission.student_id == student_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
    ).all()
    return [_to_detail(*row) for row in rows]


def _to_response(submission: Submission, first_name: str, last_name: str) -> SubmissionResponse:
    return SubmissionResponse(
        id=submission.id,
        task_id=submission.task_id,
        student_id=submission.student_id,
        file_path=submission.file_path,
        content=submission.content,
        submitted_at=submission.submitted_at,
        grade=submission.grade,
        feedback=submission.feedback,
        student_first_name=first_name,
        student_last_name=last_name,
    )


def _to_detail(
    submission: Submission,
    task: Task,
    class_name: str,
    first_name: str,
    last_name: str,
) -> SubmissionDetail:
    return SubmissionDetail(
        **_to_response(submission, first_name, last_name).model_dump(),
        task_title=task.title,
        task_description=task.description,
        task_deadline=task.deadline,
        class_id=task.class_id,
        class_name=class_name,
    )
