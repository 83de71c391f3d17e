import logging
from fastapi import APIRouter, HTTPException, Depends, Response, status
from fastapi.responses import HTMLResponse, JSONResponse
from sqlmodel import Session
from typing import Any, Dict, List

from doclify.api.endpoints.auth import get_current_user
from doclify.api.errors import validation_exception
from doclify.database import get_session
from doclify.schemas.project import ProjectCreate, ProjectFull, ProjectRead, ProjectUpdate
from doclify.schemas.resources import READ_SCHEMAS, PaymentRead
from doclify.schemas.user import CurrentUser
from doclify.services import document, gateway
from doclify.validations.project import (
    AudienceForm,
    FunctionalRequirementForm,
    MilestoneForm,
    NonFunctionalRequirementForm,
    ObjectiveForm,
    PaymentForm,
    ProjectInfoForm,
    StakeholderForm,
    TeamMemberForm,
    TechnologyForm,
)
from doclify.validations.rules import Violation, validate

logger = logging.getLogger(__name__)

router = APIRouter()

ITEM_FORMS = {
    "team": TeamMemberForm,
    "technologies": TechnologyForm,
    "objectives": ObjectiveForm,
    "functional_requirements": FunctionalRequirementForm,
    "non_functional_requirements": NonFunctionalRequirementForm,
    "milestones": MilestoneForm,
    "audiences": AudienceForm,
    "stakeholders": StakeholderForm,
}

def _owned_project(session: Session, current_user: CurrentUser, project_id: int):
    project = gateway.get_project(session, current_user.id, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project

def _owned_bundle(session: Session, current_user: CurrentUser, project_id: int) -> Dict[str, Any]:
    bundle = gateway.load_project_bundle(session, current_user.id, project_id)
    if bundle is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return bundle

@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = project_in.model_dump()
    model, violations = validate(ProjectInfoForm, data)
    if violations:
        raise validation_exception(violations)
    data.update(model.model_dump())
    data["title"] = data["title"].strip()
    return gateway.create_project(session, current_user.id, data)

@router.get("/", response_model=List[ProjectRead])
def list_projects(
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return gateway.list_projects(session, current_user.id)

@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return _owned_project(session, current_user, project_id)

@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    project_in: ProjectUpdate,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    project = _owned_project(session, current_user, project_id)
    changes = project_in.model_dump(exclude_unset=True)
    merged = {**project.model_dump(), **changes}
    _, violations = validate(ProjectInfoForm, merged)
    if violations:
        raise validation_exception(violations)
    return gateway.update_project(session, current_user.id, project_id, changes)

@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    if not gateway.delete_project(session, current_user.id, project_id):
        raise HTTPException(status_code=404, detail="Project not found")

@router.get("/{project_id}/full", response_model=ProjectFull)
def get_project_full(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return ProjectFull.model_validate(_owned_bundle(session, current_user, project_id), from_attributes=True)

@router.get("/{project_id}/payment", response_model=PaymentRead)
def get_payment(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    _owned_project(session, current_user, project_id)
    payment = gateway.get_payment(session, project_id)
    if payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment

@router.put("/{project_id}/payment", response_model=PaymentRead)
def put_payment(
    project_id: int,
    payment_in: Dict[str, Any],
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    _owned_project(session, current_user, project_id)
    model, violations = validate(PaymentForm, payment_in)
    if violations:
        raise validation_exception(violations)
    return gateway.upsert_payment(session, project_id, model.model_dump())

@router.get("/{project_id}/document", response_class=HTMLResponse)
def get_document(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    bundle = _owned_bundle(session, current_user, project_id)
    return HTMLResponse(document.render(bundle["project"], bundle))

@router.get("/{project_id}/export")
def export_document(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    bundle = _owned_bundle(session, current_user, project_id)
    project = bundle["project"]
    result = document.export_to_pdf(project, document.render(project, bundle))
    if not result.success:
        return JSONResponse(status_code=500, content={"success": False, "error": result.error})
    return Response(
        content=result.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{result.file_name}"'},
    )

@router.get("/{project_id}/{resource}")
def list_resource(
    project_id: int,
    resource: str,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    if resource not in READ_SCHEMAS:
        raise HTTPException(status_code=404, detail="Resource not found")
    _owned_project(session, current_user, project_id)
    schema = READ_SCHEMAS[resource]
    return [schema.model_validate(row) for row in gateway.list_children(session, resource, project_id)]

@router.post("/{project_id}/{resource}", status_code=status.HTTP_201_CREATED)
def create_resource(
    project_id: int,
    resource: str,
    items: List[Dict[str, Any]],
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    if resource not in ITEM_FORMS:
        raise HTTPException(status_code=404, detail="Resource not found")
    _owned_project(session, current_user, project_id)

    rows, violations = [], []
    for i, item in enumerate(items):
        model, item_violations = validate(ITEM_FORMS[resource], item)
        violations.extend(Violation(path=f"{i}.{v.path}", message=v.message) for v in item_violations)
        if model is not None:
            rows.append(model.model_dump())
    if violations:
        raise validation_exception(violations)

    records = gateway.create_children(session, resource, project_id, rows)
    logger.info("%d %s rows added to project %s", len(records), resource, project_id)
    schema = READ_SCHEMAS[resource]
    return [schema.model_validate(r) for r in records]
