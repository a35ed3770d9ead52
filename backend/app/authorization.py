"""
Moteur d'autorisation : table de politiques par opération.

Chaque opération protégée est décrite une seule fois dans POLICIES :
- rôles autorisés (filtre de rôle, évalué à partir du token, sans accès BDD)
- ressource visée (chargée pour tester son existence → 404)
- prédicat de relation (propriété, inscription, coordinateur inscrit,
  responsable de groupe…) évalué en BDD → 403

Ordre d'évaluation fixe : rôle → existence → relation.
Le moteur ne fait que des lectures ; il ne modifie jamais les données.

Politique Coordinateur : le rôle Coordinateur n'est PAS un sur-ensemble du rôle
Professeur. Il remplace la propriété de la classe uniquement pour les projets et
les groupes, et seulement s'il est lui-même membre de la classe concernée.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import ForbiddenError, NotFoundError
from app.models.project import Group, GroupMember, Project
from app.models.school_class import ClassMember, SchoolClass
from app.models.task import Submission, Task
from app.models.user import Role, User
from app.security import Identity, get_current_identity

logger = logging.getLogger(__name__)

ALL_ROLES = frozenset(Role)
STUDENT = frozenset({Role.STUDENT})
TEACHER = frozenset({Role.TEACHER})
COORDINATOR = frozenset({Role.COORDINATOR})
TEACHER_OR_COORDINATOR = frozenset({Role.TEACHER, Role.COORDINATOR})


class Operation(str, enum.Enum):
    CLASS_CREATE = "class:create"
    CLASS_LIST_OWNED = "class:list-owned"
    CLASS_LIST_MINE = "class:list-mine"
    CLASS_JOIN = "class:join"
    CLASS_GET = "class:get"
    CLASS_LIST_STUDENTS = "class:list-students"
    ANNOUNCEMENT_CREATE = "announcement:create"
    ANNOUNCEMENT_LIST = "announcement:list"
    DOCUMENTATION_CREATE = "documentation:create"
    DOCUMENTATION_LIST = "documentation:list"
    TASK_CREATE = "task:create"
    TASK_LIST = "task:list"
    TASK_SUBMIT = "task:submit"
    TASK_LIST_SUBMISSIONS = "task:list-submissions"
    SUBMISSION_GRADE = "submission:grade"
    SUBMISSION_GET = "submission:get"
    SUBMISSION_LIST_MINE = "submission:list-mine"
    MESSAGE_SEND_PUBLIC = "message:send-public"
    MESSAGE_SEND_PRIVATE = "message:send-private"
    MESSAGE_LIST_PUBLIC = "message:list-public"
    MESSAGE_LIST_PRIVATE = "message:list-private"
    USER_LIST = "user:list"
    USER_CHANGE_ROLE = "user:change-role"
    USER_DELETE = "user:delete"
    PROJECT_CREATE = "project:create"
    PROJECT_LIST = "project:list"
    GROUP_CREATE = "group:create"
    GROUP_LIST = "group:list"
    GROUP_LIST_MINE = "group:list-mine"
    GROUP_ADD_MEMBER = "group:add-member"
    GROUP_REMOVE_MEMBER = "group:remove-member"
    GROUP_SET_LEADER = "group:set-leader"
    GROUP_UPDATE = "group:update"


@dataclass(frozen=True)
class ResourceContext:
    """
    Clés minimales d'une ressource nécessaires à la décision.
    owner_id est toujours le professeur propriétaire de la classe de rattachement.
    """
    kind: str
    id: int
    class_id: Optional[int] = None
    owner_id: Optional[int] = None
    subject_id: Optional[int] = None  # auteur d'une soumission, utilisateur ciblé
    role: Optional[str] = None        # rôle de l'utilisateur ciblé


# --- Chargement des ressources (chaîne transitive jusqu'à la classe) ---

def _load_class(db: Session, class_id: int) -> Optional[ResourceContext]:
    row = db.execute(
        select(SchoolClass.id, SchoolClass.teacher_id).where(SchoolClass.id == class_id)
    ).first()
    if row is None:
        return None
    return ResourceContext(kind="class", id=row.id, class_id=row.id, owner_id=row.teacher_id)


def _load_task(db: Session, task_id: int) -> Optional[ResourceContext]:
    row = db.execute(
        select(Task.id, Task.class_id, SchoolClass.teacher_id)
        .join(SchoolClass, SchoolClass.id == Task.class_id)
        .where(Task.id == task_id)
    ).first()
    if row is None:
        return None
    return ResourceContext(kind="task", id=row.id, class_id=row.class_id, owner_id=row.teacher_id)


def _load_submission(db: Session, submission_id: int) -> Optional[ResourceContext]:
    row = db.execute(
        select(Submission.id, Submission.student_id, Task.class_id, SchoolClass.teacher_id)
        .join(Task, Task.id == Submission.task_id)
        .join(SchoolClass, SchoolClass.id == Task.class_id)
        .where(Submission.id == submission_id)
    ).first()
    if row is None:
        return None
    return ResourceContext(
        kind="submission",
        id=row.id,
        class_id=row.class_id,
        owner_id=row.teacher_id,
        subject_id=row.student_id,
    )


def _load_project(db: Session, project_id: int) -> Optional[ResourceContext]:
    row = db.execute(
        select(Project.id, Project.class_id, SchoolClass.teacher_id)
        .join(SchoolClass, SchoolClass.id == Project.class_id)
        .where(Project.id == project_id)
    ).first()
    if row is None:
        return None
    return ResourceContext(kind="project", id=row.id, class_id=row.class_id, owner_id=row.teacher_id)


def _load_group(db: Session, group_id: int) -> Optional[ResourceContext]:
    row = db.execute(
        select(Group.id, Project.class_id, SchoolClass.teacher_id)
        .join(Project, Project.id == Group.project_id)
        .join(SchoolClass, SchoolClass.id == Project.class_id)
        .where(Group.id == group_id)
    ).first()
    if row is None:
        return None
    return ResourceContext(kind="group", id=row.id, class_id=row.class_id, owner_id=row.teacher_id)


def _load_user(db: Session, user_id: int) -> Optional[ResourceContext]:
    row = db.execute(select(User.id, User.role).where(User.id == user_id)).first()
    if row is None:
        return None
    return ResourceContext(kind="user", id=row.id, subject_id=row.id, role=row.role)


@dataclass(frozen=True)
class Resolver:
    load: Callable[[Session, int], Optional[ResourceContext]]
    not_found: str


CLASS = Resolver(_load_class, "Classe introuvable.")
TASK = Resolver(_load_task, "Tâche non trouvée.")
SUBMISSION = Resolver(_load_submission, "Soumission non trouvée.")
PROJECT = Resolver(_load_project, "Projet non trouvé.")
GROUP = Resolver(_load_group, "Groupe non trouvé.")
USER = Resolver(_load_user, "Utilisateur non trouvé.")


# --- Prédicats de relation ---

def is_member(db: Session, user_id: int, class_id: int) -> bool:
    """Vrai si une inscription (user, classe) existe."""
    row = db.execute(
        select(ClassMember.id)
        .where(ClassMember.user_id == user_id, ClassMember.class_id == class_id)
        .limit(1)
    ).first()
    return row is not None


def is_class_owner(db: Session, identity: Identity, ctx: ResourceContext) -> bool:
    return ctx.owner_id == identity.id


def is_class_member(db: Session, identity: Identity, ctx: ResourceContext) -> bool:
    return is_member(db, identity.id, ctx.class_id)


def is_class_member_or_owner(db: Session, identity: Identity, ctx: ResourceContext) -> bool:
    return is_class_owner(db, identity, ctx) or is_class_member(db, identity, ctx)


def is_author_or_class_owner(db: Session, identity: Identity, ctx: ResourceContext) -> bool:
    """Soumission : l'étudiant auteur ou le professeur de la tâche."""
    return ctx.subject_id == identity.id or ctx.owner_id == identity.id


def is_owner_or_enrolled_coordinator(db: Session, identity: Identity, ctx: ResourceContext) -> bool:
    """Le professeur de la classe, ou un Coordinateur inscrit à cette classe."""
    if is_class_owner(db, identity, ctx):
        return True
    return identity.role == Role.COORDINATOR and is_class_member(db, identity, ctx)


def is_group_leader(db: Session, identity: Identity, ctx: ResourceContext) -> bool:
    """Responsable de CE groupe (drapeau is_group_coordinator), distinct du rôle global."""
    row = db.execute(
        select(GroupMember.id)
        .where(
            GroupMember.group_id == ctx.id,
            GroupMember.user_id == identity.id,
            GroupMember.is_group_coordinator.is_(True),
        )
        .limit(1)
    ).first()
    return row is not None


def is_other_user(db: Session, identity: Identity, ctx: ResourceContext) -> bool:
    return ctx.subject_id != identity.id


Predicate = Callable[[Session, Identity, ResourceContext], bool]


@dataclass(frozen=True)
class Policy:
    roles: frozenset
    resource: Optional[Resolver] = None
    predicate: Optional[Predicate] = None
    denial: str = "Accès non autorisé."


POLICIES: dict[Operation, Policy] = {
    Operation.CLASS_CREATE: Policy(TEACHER),
    Operation.CLASS_LIST_OWNED: Policy(TEACHER),
    Operation.CLASS_LIST_MINE: Policy(ALL_ROLES),
    Operation.CLASS_JOIN: Policy(frozenset({Role.STUDENT, Role.COORDINATOR})),
    Operation.CLASS_GET: Policy(
        ALL_ROLES, CLASS, is_class_member_or_owner,
        "Accès non autorisé à cette classe.",
    ),
    Operation.CLASS_LIST_STUDENTS: Policy(
        ALL_ROLES, CLASS, is_class_member_or_owner,
        "Accès non autorisé à cette classe.",
    ),
    Operation.ANNOUNCEMENT_CREATE: Policy(
        TEACHER, CLASS, is_class_owner,
        "Vous n'êtes pas autorisé à publier une annonce dans cette classe.",
    ),
    Operation.ANNOUNCEMENT_LIST: Policy(
        ALL_ROLES, CLASS, is_class_member_or_owner,
        "Accès non autorisé à cette classe.",
    ),
    Operation.DOCUMENTATION_CREATE: Policy(
        TEACHER, CLASS, is_class_owner,
        "Vous n'êtes pas autorisé à partager de la documentation dans cette classe.",
    ),
    Operation.DOCUMENTATION_LIST: Policy(
        ALL_ROLES, CLASS, is_class_member_or_owner,
        "Accès non autorisé à cette classe.",
    ),
    Operation.TASK_CREATE: Policy(
        TEACHER, CLASS, is_class_owner,
        "Vous n'êtes pas autorisé à assigner une tâche dans cette classe.",
    ),
    Operation.TASK_LIST: Policy(
        ALL_ROLES, CLASS, is_class_member_or_owner,
        "Accès non autorisé à ces tâches.",
    ),
    Operation.TASK_SUBMIT: Policy(
        STUDENT, TASK, is_class_member,
        "Vous n'êtes pas autorisé à soumettre à cette tâche (non inscrit à la classe).",
    ),
    Operation.TASK_LIST_SUBMISSIONS: Policy(
        TEACHER, TASK, is_class_owner,
        "Vous n'êtes pas autorisé à voir les soumissions de cette tâche.",
    ),
    Operation.SUBMISSION_GRADE: Policy(
        TEACHER, SUBMISSION, is_class_owner,
        "Vous n'êtes pas autorisé à noter cette soumission.",
    ),
    Operation.SUBMISSION_GET: Policy(
        frozenset({Role.STUDENT, Role.TEACHER}), SUBMISSION, is_author_or_class_owner,
        "Vous n'êtes pas autorisé à voir cette soumission.",
    ),
    Operation.SUBMISSION_LIST_MINE: Policy(STUDENT),
    Operation.MESSAGE_SEND_PUBLIC: Policy(
        TEACHER_OR_COORDINATOR, CLASS, is_class_member,
        "Vous devez être membre de cette classe pour y envoyer un message public.",
    ),
    Operation.MESSAGE_SEND_PRIVATE: Policy(ALL_ROLES, USER),
    Operation.MESSAGE_LIST_PUBLIC: Policy(
        ALL_ROLES, CLASS, is_class_member,
        "Accès non autorisé à cette classe.",
    ),
    Operation.MESSAGE_LIST_PRIVATE: Policy(ALL_ROLES),
    Operation.USER_LIST: Policy(COORDINATOR),
    Operation.USER_CHANGE_ROLE: Policy(COORDINATOR, USER),
    Operation.USER_DELETE: Policy(
        COORDINATOR, USER, is_other_user,
        "Un Coordinateur ne peut pas supprimer son propre compte.",
    ),
    Operation.PROJECT_CREATE: Policy(
        TEACHER_OR_COORDINATOR, CLASS, is_owner_or_enrolled_coordinator,
        "Vous n'avez pas la permission de créer un projet pour cette classe.",
    ),
    Operation.PROJECT_LIST: Policy(
        ALL_ROLES, CLASS, is_class_member,
        "Accès non autorisé à cette classe.",
    ),
    Operation.GROUP_CREATE: Policy(
        TEACHER_OR_COORDINATOR, PROJECT, is_owner_or_enrolled_coordinator,
        "Vous n'avez pas la permission de créer un groupe pour ce projet.",
    ),
    Operation.GROUP_LIST: Policy(
        ALL_ROLES, PROJECT, is_class_member,
        "Accès non autorisé à ce projet ou à sa classe.",
    ),
    Operation.GROUP_LIST_MINE: Policy(ALL_ROLES),
    Operation.GROUP_ADD_MEMBER: Policy(
        TEACHER_OR_COORDINATOR, GROUP, is_owner_or_enrolled_coordinator,
        "Vous n'avez pas la permission de modifier ce groupe.",
    ),
    Operation.GROUP_REMOVE_MEMBER: Policy(
        TEACHER_OR_COORDINATOR, GROUP, is_owner_or_enrolled_coordinator,
        "Vous n'avez pas la permission de modifier ce groupe.",
    ),
    Operation.GROUP_SET_LEADER: Policy(
        TEACHER_OR_COORDINATOR, GROUP, is_owner_or_enrolled_coordinator,
        "Vous n'avez pas la permission de modifier ce groupe.",
    ),
    Operation.GROUP_UPDATE: Policy(
        ALL_ROLES, GROUP, is_group_leader,
        "Accès refusé. Seul le responsable de ce groupe est autorisé.",
    ),
}


# --- Points d'entrée ---

def check_role(identity: Identity, operation: Operation) -> None:
    """Filtre de rôle : uniquement à partir du token, aucun accès BDD."""
    if identity.role not in POLICIES[operation].roles:
        logger.info(
            "Refus (role) : utilisateur %s (%s) sur %s",
            identity.id, identity.role.value, operation.value,
        )
        raise ForbiddenError("Accès non autorisé.", scope="role")


def authorize(
    db: Session,
    identity: Identity,
    operation: Operation,
    resource_id: Optional[int] = None,
) -> Optional[ResourceContext]:
    """
    Évalue la politique complète d'une opération et retourne le contexte de la
    ressource visée (ou None si l'opération ne vise pas de ressource).
    Lève ForbiddenError (403) ou NotFoundError (404).
    """
    check_role(identity, operation)
    policy = POLICIES[operation]
    if policy.resource is None:
        return None

    ctx = policy.resource.load(db, resource_id)
    if ctx is None:
        raise NotFoundError(policy.resource.not_found)

    if policy.predicate is not None and not policy.predicate(db, identity, ctx):
        logger.info(
            "Refus (resource) : utilisateur %s sur %s %s (%s)",
            identity.id, ctx.kind, ctx.id, operation.value,
        )
        raise ForbiddenError(policy.denial, scope="resource")
    return ctx


def require(operation: Operation):
    """
    Dépendance FastAPI : authentifie puis applique le filtre de rôle de l'opération.
    Résolue avant la validation du corps de requête.
    """
    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        check_role(identity, operation)
        return identity

    return dependency
