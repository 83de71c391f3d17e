import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Response, status
from fastapi.responses import HTMLResponse, JSONResponse
from sqlmodel import Session, select

from doclify.api.endpoints.auth import get_current_user
from doclify.api.errors import ledger_failure_exception, partial_failure_exception, validation_exception
from doclify.core.config import settings
from doclify.core.errors import (
    CommitLedgerError,
    CommitNotFoundError,
    DraftValidationError,
    RootCreationError,
    WizardStateError,
)
from doclify.database import get_engine, get_session
from doclify.models.wizard_session import WizardSession, new_commit_key
from doclify.schemas.draft import ProjectDraft
from doclify.schemas.user import CurrentUser
from doclify.schemas.wizard import CommitRead, JumpRequest, StepInfo, StepResponse, WizardRead
from doclify.services import document
from doclify.services.commit import CommitProtocol
from doclify.services.commit_ledger import CommitLedger
from doclify.services.gateway import ProjectGateway
from doclify.services.wizard import WizardOrchestrator
from doclify.services.wizard_store import WizardStore
from doclify.utils.dates import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------- helpers ----------

def _load(session: Session, current_user: CurrentUser, wizard_id: int) -> WizardSession:
    row = session.get(WizardSession, wizard_id)
    if not row or row.user_id != current_user.id:
        raise HTTPException(status_code=404, detail="Wizard session not found")
    return row

def _orchestrator(row: WizardSession) -> WizardOrchestrator:
    store = WizardStore.from_snapshot(row.draft, row.step_index)
    wizard = WizardOrchestrator(store, validated=row.validated_steps)
    wizard.submitting = row.status == "submitting"
    wizard.finished = row.status == "finished"
    return wizard

def _save(session: Session, row: WizardSession, wizard: WizardOrchestrator) -> WizardSession:
    snapshot = wizard.store.snapshot()
    row.draft = snapshot["draft"]
    row.step_index = snapshot["step_index"]
    row.validated_steps = sorted(wizard.validated)
    if wizard.finished:
        row.status = "finished"
    elif wizard.submitting:
        row.status = "submitting"
    else:
        row.status = "editing"
    row.last_updated = utcnow()
    session.add(row)
    session.commit()
    session.refresh(row)
    return row

def _read(row: WizardSession, wizard: WizardOrchestrator) -> WizardRead:
    redirect_to = settings.editor_path(row.project_id) if row.status == "finished" and row.project_id else None
    return WizardRead(
        id=row.id,
        status=row.status,
        step_index=wizard.index,
        step_id=wizard.current_step.id,
        step_count=wizard.step_count,
        progress=wizard.progress,
        validated_steps=sorted(wizard.validated),
        form_data=wizard.current_step.form_data(wizard.store.get_draft()),
        draft=row.draft,
        steps=[StepInfo(**s) for s in wizard.steps_overview()],
        project_id=row.project_id,
        redirect_to=redirect_to,
    )

def _commit_read(outcome) -> CommitRead:
    return CommitRead(
        attempt_id=outcome.attempt_id,
        project_id=outcome.project_id,
        status="completed" if outcome.success else "partial_failure",
        succeeded=outcome.succeeded,
        failed=outcome.failed,
        errors=outcome.errors,
        redirect_to=outcome.redirect_to(settings.editor_path_template),
    )

def _protocol(engine, current_user: CurrentUser) -> CommitProtocol:
    return CommitProtocol(
        ProjectGateway(engine, current_user.id),
        ledger=CommitLedger(engine, current_user.id),
        timeout=settings.child_operation_timeout,
    )


# ---------- commit attempts ----------

@router.get("/commits/{attempt_id}", response_model=CommitRead)
def get_commit(
    attempt_id: int,
    engine=Depends(get_engine),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        attempt = CommitLedger(engine, current_user.id).get(attempt_id)
    except CommitNotFoundError:
        raise HTTPException(status_code=404, detail="Commit attempt not found")
    redirect_to = settings.editor_path(attempt.project_id) if attempt.status == "completed" else None
    return CommitRead(
        attempt_id=attempt.id,
        project_id=attempt.project_id,
        status=attempt.status,
        succeeded=[r for r in attempt.succeeded or [] if r != "project"],
        failed=list((attempt.pending or {}).keys()),
        errors=attempt.errors or {},
        redirect_to=redirect_to,
    )

@router.post("/commits/{attempt_id}/retry", response_model=CommitRead)
async def retry_commit(
    attempt_id: int,
    session: Session = Depends(get_session),
    engine=Depends(get_engine),
    current_user: CurrentUser = Depends(get_current_user),
):
    protocol = _protocol(engine, current_user)
    try:
        outcome = await protocol.resume(attempt_id)
    except CommitNotFoundError:
        raise HTTPException(status_code=404, detail="Commit attempt not found")
    except CommitLedgerError as exc:
        raise ledger_failure_exception(exc)
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if not outcome.success:
        raise partial_failure_exception(outcome)

    # cierra la sesión de wizard que originó el intento, si la hay
    key = protocol.ledger.get(attempt_id).idempotency_key
    row = session.exec(
        select(WizardSession)
        .where(WizardSession.commit_key == key)
        .where(WizardSession.user_id == current_user.id)
    ).first()
    if row is not None and row.status != "finished":
        wizard = _orchestrator(row)
        wizard.finished = True
        wizard.store.reset_draft()
        row.project_id = outcome.project_id
        _save(session, row, wizard)
    return _commit_read(outcome)


# ---------- wizard sessions ----------

@router.post("/", response_model=WizardRead, status_code=status.HTTP_201_CREATED)
def create_wizard(
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    row = WizardSession(user_id=current_user.id)
    session.add(row)
    session.commit()
    session.refresh(row)
    return _read(row, _orchestrator(row))

@router.get("/{wizard_id}", response_model=WizardRead)
def get_wizard(
    wizard_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    row = _load(session, current_user, wizard_id)
    return _read(row, _orchestrator(row))

@router.delete("/{wizard_id}", response_model=WizardRead)
def reset_wizard(
    wizard_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    row = _load(session, current_user, wizard_id)
    if row.status == "finished":
        raise HTTPException(status_code=400, detail="Wizard already finished")
    wizard = _orchestrator(row)
    wizard.store.reset_draft()
    wizard.validated.clear()
    wizard.submitting = False
    row.commit_key = new_commit_key()
    row.project_id = None
    row = _save(session, row, wizard)
    return _read(row, wizard)

@router.post("/{wizard_id}/next", response_model=StepResponse)
async def next_step(
    wizard_id: int,
    data: Optional[Dict[str, Any]] = Body(None),
    idempotency_key: Optional[str] = Header(None),
    session: Session = Depends(get_session),
    engine=Depends(get_engine),
    current_user: CurrentUser = Depends(get_current_user),
):
    row = _load(session, current_user, wizard_id)
    wizard = _orchestrator(row)
    try:
        result = wizard.next(data)
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if not result.ok:
        raise validation_exception(result.violations)

    row = _save(session, row, wizard)
    if not result.ready_to_submit:
        return StepResponse(ok=True, wizard=_read(row, wizard))

    try:
        outcome = await wizard.submit(_protocol(engine, current_user), idempotency_key or row.commit_key)
    except DraftValidationError as exc:
        _save(session, row, wizard)
        raise validation_exception(exc.violations)
    except RootCreationError as exc:
        _save(session, row, wizard)
        raise HTTPException(status_code=502, detail={"message": str(exc)})
    except CommitLedgerError as exc:
        _save(session, row, wizard)
        raise ledger_failure_exception(exc)
    except Exception:
        logger.exception("Wizard %s submit failed", row.id)
        _save(session, row, wizard)
        raise HTTPException(status_code=500, detail={"message": "Erro inesperado ao enviar o projeto. Tente novamente."})

    row.project_id = outcome.project_id
    row = _save(session, row, wizard)
    if not outcome.success:
        raise partial_failure_exception(outcome)
    logger.info("Wizard %s finished with project %s", row.id, outcome.project_id)
    return StepResponse(ok=True, wizard=_read(row, wizard), commit=_commit_read(outcome))

@router.post("/{wizard_id}/previous", response_model=WizardRead)
def previous_step(
    wizard_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    row = _load(session, current_user, wizard_id)
    wizard = _orchestrator(row)
    try:
        wizard.previous()
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    row = _save(session, row, wizard)
    return _read(row, wizard)

@router.post("/{wizard_id}/skip", response_model=WizardRead)
def skip_step(
    wizard_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    row = _load(session, current_user, wizard_id)
    wizard = _orchestrator(row)
    try:
        wizard.skip()
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    row = _save(session, row, wizard)
    return _read(row, wizard)

@router.post("/{wizard_id}/jump", response_model=WizardRead)
def jump_to_step(
    wizard_id: int,
    jump: JumpRequest,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    row = _load(session, current_user, wizard_id)
    wizard = _orchestrator(row)
    try:
        wizard.jump_to(jump.step_index)
    except WizardStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    row = _save(session, row, wizard)
    return _read(row, wizard)

@router.get("/{wizard_id}/document", response_class=HTMLResponse)
def wizard_document(
    wizard_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    row = _load(session, current_user, wizard_id)
    draft = ProjectDraft.model_validate(row.draft or {})
    return HTMLResponse(document.render_draft(draft))

@router.get("/{wizard_id}/export")
def wizard_export(
    wizard_id: int,
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    row = _load(session, current_user, wizard_id)
    draft = ProjectDraft.model_validate(row.draft or {})
    result = document.export_to_pdf(draft, document.render_draft(draft))
    if not result.success:
        return JSONResponse(status_code=500, content={"success": False, "error": result.error})
    return Response(
        content=result.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{result.file_name}"'},
    )
