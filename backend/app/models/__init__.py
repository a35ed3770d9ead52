# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# users doit être chargé en premier : toutes les autres tables y font référence.

from app.models.user import Role, User  # noqa: F401
from app.models.school_class import ClassMember, SchoolClass  # noqa: F401
from app.models.publication import Announcement, Documentation  # noqa: F401
from app.models.task import Submission, Task  # noqa: F401
from app.models.message import Message  # noqa: F401
from app.models.project import Group, GroupMember, Project  # noqa: F401
