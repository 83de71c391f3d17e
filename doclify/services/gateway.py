"""Per-entity data access, always scoped by the owner's user id.

The module-level functions work on a caller-provided ``Session`` (request
handlers). ``ProjectGateway`` exposes the calls the commit protocol needs,
each one in its own short session so they can run from worker threads.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from doclify.models.audience import Audience
from doclify.models.milestone import Milestone
from doclify.models.objective import Objective
from doclify.models.payment import PaymentInfo
from doclify.models.project import Project
from doclify.models.requirement import FunctionalRequirement, NonFunctionalRequirement
from doclify.models.stakeholder import Stakeholder
from doclify.models.team_member import TeamMember
from doclify.models.technology import Technology
from doclify.utils.dates import utcnow

logger = logging.getLogger(__name__)

CHILD_MODELS = {
    "team": TeamMember,
    "technologies": Technology,
    "objectives": Objective,
    "functional_requirements": FunctionalRequirement,
    "non_functional_requirements": NonFunctionalRequirement,
    "milestones": Milestone,
    "audiences": Audience,
    "stakeholders": Stakeholder,
}

PROJECT_FIELDS = (
    "title",
    "description",
    "company_name",
    "project_type",
    "status",
    "architecture",
    "success_criteria",
    "constraints",
    "start_date",
    "end_date",
    "methodology",
)


# ---------- projects ----------

def create_project(session: Session, owner_id: str, data: Dict[str, Any]) -> Project:
    values = {k: v for k, v in data.items() if k in PROJECT_FIELDS}
    project = Project(user_id=owner_id, **values)
    session.add(project)
    session.commit()
    session.refresh(project)
    return project

def list_projects(session: Session, owner_id: str) -> List[Project]:
    return session.exec(
        select(Project)
        .where(Project.user_id == owner_id)
        .order_by(Project.created_at.desc(), Project.id.desc())
    ).all()

def get_project(session: Session, owner_id: str, project_id: int) -> Optional[Project]:
    project = session.get(Project, project_id)
    if not project or project.user_id != owner_id:
        return None
    return project

def update_project(session: Session, owner_id: str, project_id: int, data: Dict[str, Any]) -> Optional[Project]:
    project = get_project(session, owner_id, project_id)
    if project is None:
        return None
    for key, value in data.items():
        if key in PROJECT_FIELDS:
            setattr(project, key, value)
    project.updated_at = utcnow()
    session.add(project)
    session.commit()
    session.refresh(project)
    return project

def delete_project(session: Session, owner_id: str, project_id: int) -> bool:
    project = get_project(session, owner_id, project_id)
    if project is None:
        return False
    for model in list(CHILD_MODELS.values()) + [PaymentInfo]:
        for row in session.exec(select(model).where(model.project_id == project_id)).all():
            session.delete(row)
    session.flush()
    session.delete(project)
    session.commit()
    return True


# ---------- child collections ----------

def _child_model(resource: str):
    try:
        return CHILD_MODELS[resource]
    except KeyError:
        raise ValueError(f"Unknown resource: {resource}") from None

def create_children(session: Session, resource: str, project_id: int, rows: List[Dict[str, Any]]) -> list:
    """Bulk insert: all rows of one resource are committed together or not at all."""
    model = _child_model(resource)
    records = [model(project_id=project_id, **row) for row in rows]
    session.add_all(records)
    session.commit()
    for record in records:
        session.refresh(record)
    return records

def list_children(session: Session, resource: str, project_id: int) -> list:
    model = _child_model(resource)
    return session.exec(
        select(model)
        .where(model.project_id == project_id)
        .order_by(model.created_at, model.id)
    ).all()

def create_team_members(session: Session, project_id: int, members: List[Dict[str, Any]]) -> List[TeamMember]:
    return create_children(session, "team", project_id, members)

def list_team_members(session: Session, project_id: int) -> List[TeamMember]:
    return list_children(session, "team", project_id)

def create_technologies(session: Session, project_id: int, technologies: List[Dict[str, Any]]) -> List[Technology]:
    return create_children(session, "technologies", project_id, technologies)

def list_technologies(session: Session, project_id: int) -> List[Technology]:
    return list_children(session, "technologies", project_id)

def create_objectives(session: Session, project_id: int, objectives: List[Dict[str, Any]]) -> List[Objective]:
    return create_children(session, "objectives", project_id, objectives)

def list_objectives(session: Session, project_id: int) -> List[Objective]:
    return list_children(session, "objectives", project_id)

def create_functional_requirements(session: Session, project_id: int, requirements: List[Dict[str, Any]]):
    return create_children(session, "functional_requirements", project_id, requirements)

def list_functional_requirements(session: Session, project_id: int) -> List[FunctionalRequirement]:
    return list_children(session, "functional_requirements", project_id)

def create_non_functional_requirements(session: Session, project_id: int, requirements: List[Dict[str, Any]]):
    return create_children(session, "non_functional_requirements", project_id, requirements)

def list_non_functional_requirements(session: Session, project_id: int) -> List[NonFunctionalRequirement]:
    return list_children(session, "non_functional_requirements", project_id)

def create_milestones(session: Session, project_id: int, milestones: List[Dict[str, Any]]) -> List[Milestone]:
    return create_children(session, "milestones", project_id, milestones)

def list_milestones(session: Session, project_id: int) -> List[Milestone]:
    return list_children(session, "milestones", project_id)

def create_audiences(session: Session, project_id: int, audiences: List[Dict[str, Any]]) -> List[Audience]:
    return create_children(session, "audiences", project_id, audiences)

def list_audiences(session: Session, project_id: int) -> List[Audience]:
    return list_children(session, "audiences", project_id)

def create_stakeholders(session: Session, project_id: int, stakeholders: List[Dict[str, Any]]) -> List[Stakeholder]:
    return create_children(session, "stakeholders", project_id, stakeholders)

def list_stakeholders(session: Session, project_id: int) -> List[Stakeholder]:
    return list_children(session, "stakeholders", project_id)


# ---------- payment (una fila por proyecto) ----------

def get_payment(session: Session, project_id: int) -> Optional[PaymentInfo]:
    return session.exec(select(PaymentInfo).where(PaymentInfo.project_id == project_id)).first()

def upsert_payment(session: Session, project_id: int, data: Dict[str, Any]) -> PaymentInfo:
    payment = get_payment(session, project_id)
    if payment is None:
        payment = PaymentInfo(project_id=project_id, **data)
    else:
        for key, value in data.items():
            setattr(payment, key, value)
    session.add(payment)
    session.commit()
    session.refresh(payment)
    return payment


# ---------- aggregate ----------

def load_project_bundle(session: Session, owner_id: str, project_id: int) -> Optional[Dict[str, Any]]:
    """Project plus every child collection, or None if not found / not owned."""
    project = get_project(session, owner_id, project_id)
    if project is None:
        return None
    bundle: Dict[str, Any] = {"project": project}
    for resource in CHILD_MODELS:
        bundle[resource] = list_children(session, resource, project_id)
    bundle["payment"] = get_payment(session, project_id)
    return bundle


class ProjectGateway:
    """Owner-bound gateway used by the commit protocol.

    Every call opens and closes its own session, so concurrent calls from a
    thread pool never share a connection.
    """

    def __init__(self, engine, owner_id: str):
        self.engine = engine
        self.owner_id = owner_id

    def create_project(self, payload: Dict[str, Any]) -> int:
        with Session(self.engine) as session:
            project = create_project(session, self.owner_id, payload)
            logger.info("Project %s created for user %s", project.id, self.owner_id)
            return project.id

    def create_children(self, resource: str, project_id: int, rows: List[Dict[str, Any]]) -> int:
        with Session(self.engine) as session:
            if get_project(session, self.owner_id, project_id) is None:
                raise LookupError(f"Project {project_id} not found")
            records = create_children(session, resource, project_id, rows)
            return len(records)
