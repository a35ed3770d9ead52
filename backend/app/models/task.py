"""
Modèles SQLAlchemy pour les tâches et les soumissions des étudiants.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, func

from app.database import Base


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    deadline = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Submission(Base):
    """Une seule soumission par (tâche, étudiant) : une resoumission écrase la précédente."""
    __tablename__ = "submissions"
    __table_args__ = (UniqueConstraint("task_id", "student_id", name="uq_submission_task_student"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    file_path = Column(String(500), nullable=True)
    content = Column(Text, nullable=True)
    submitted_at = Column(DateTime, server_default=func.now())
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
