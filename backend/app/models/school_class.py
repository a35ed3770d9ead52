"""
Modèles SQLAlchemy pour les classes et leurs membres.
Nommé school_class pour éviter le conflit avec le mot-clé Python 'class'.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func

from app.database import Base


class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    code = Column(String(12), unique=True, nullable=False)  # Code d'accès, ex: "K7Q2ZP"
    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class ClassMember(Base):
    """Inscription d'un utilisateur à une classe, avec son rôle dans la classe."""
    __tablename__ = "class_members"
    __table_args__ = (UniqueConstraint("user_id", "class_id", name="uq_class_member"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    role_in_class = Column(String(20), nullable=False)
    joined_at = Column(DateTime, server_default=func.now())
