"""Saves a finished wizard draft: root project first, then the child fan-out."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from doclify.core.errors import CommitLedgerError, DraftValidationError, RootCreationError, WizardStateError
from doclify.schemas.draft import ProjectDraft
from doclify.utils.format import truncate_text
from doclify.validations.draft import validate_draft
from doclify.validations.project import normalize_requirement_priority

logger = logging.getLogger(__name__)

ROOT_ERROR_MESSAGE = "Erro ao criar projeto. Tente novamente."
ERROR_DETAIL_LENGTH = 300

# (colección del borrador, recurso del gateway), en orden de envío
CHILD_COLLECTIONS = (
    ("members", "team"),
    ("technologies", "technologies"),
    ("objectives", "objectives"),
    ("functional_requirements", "functional_requirements"),
    ("non_functional_requirements", "non_functional_requirements"),
    ("milestones", "milestones"),
)


def _text(value: Optional[str]) -> str:
    return (value or "").strip()

def _compact(row: Dict[str, Any]) -> Dict[str, Any]:
    # None deja actuar el default de la tabla
    return {k: v for k, v in row.items() if v is not None}


def build_project_payload(draft: ProjectDraft) -> Dict[str, Any]:
    return {
        "title": _text(draft.title),
        "description": _text(draft.description),
        "company_name": _text(draft.company_name),
        "project_type": _text(draft.project_type),
        "status": "draft",
        "architecture": _text(draft.architecture),
        "success_criteria": _text(draft.success_criteria),
        "constraints": _text(draft.constraints),
        "start_date": _text(draft.start_date) or None,
        "end_date": _text(draft.end_date) or None,
        "methodology": _text(draft.methodology),
    }

def _member_row(item) -> Dict[str, Any]:
    return {"name": _text(item.name), "role": item.role, "email": _text(item.email)}

def _technology_row(item) -> Dict[str, Any]:
    return _compact({
        "name": _text(item.name),
        "category": item.category,
        "version": _text(item.version),
        "description": _text(item.description),
    })

def _objective_row(item) -> Dict[str, Any]:
    return _compact({
        "title": _text(item.title),
        "description": _text(item.description),
        "priority": item.priority,
        "type": item.type,
    })

def _functional_row(item) -> Dict[str, Any]:
    return _compact({
        "title": _text(item.title),
        "description": _text(item.description),
        "priority": normalize_requirement_priority(item.priority) if item.priority else None,
        "acceptance_criteria": _text(item.acceptance_criteria),
    })

def _non_functional_row(item) -> Dict[str, Any]:
    return _compact({
        "title": _text(item.title),
        "description": _text(item.description),
        "category": item.category,
        "metric": _text(item.metric),
        "target_value": _text(item.target_value),
    })

def _milestone_row(item) -> Dict[str, Any]:
    return _compact({
        "title": _text(item.title),
        "due_date": item.due_date,
        "type": _text(item.type),
        "status": item.status,
        "description": _text(item.description),
    })

ROW_BUILDERS = {
    "team": _member_row,
    "technologies": _technology_row,
    "objectives": _objective_row,
    "functional_requirements": _functional_row,
    "non_functional_requirements": _non_functional_row,
    "milestones": _milestone_row,
}


@dataclass
class ChildOperation:
    resource: str
    rows: List[Dict[str, Any]]


@dataclass
class CommitOutcome:
    project_id: int
    succeeded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    attempt_id: Optional[int] = None

    @property
    def success(self) -> bool:
        return not self.failed

    def redirect_to(self, template: str = "/editor/{project_id}") -> Optional[str]:
        if not self.success:
            return None
        return template.format(project_id=self.project_id)


def plan_children(draft: ProjectDraft) -> List[ChildOperation]:
    """One bulk insert per non-empty collection; absent or empty ones are skipped."""
    operations = []
    for collection, resource in CHILD_COLLECTIONS:
        items = draft.items(collection)
        if not items:
            continue
        build = ROW_BUILDERS[resource]
        operations.append(ChildOperation(resource, [build(item) for item in items]))
    return operations


class CommitProtocol:
    """Runs the save of a draft against a gateway.

    ``gateway`` needs ``create_project(payload) -> id`` and
    ``create_children(resource, project_id, rows)``; both are blocking and
    are run in worker threads. ``ledger`` (optional) makes partial failures
    resumable and idempotency keys effective.
    """

    def __init__(self, gateway, ledger=None, timeout: Optional[float] = None):
        self.gateway = gateway
        self.ledger = ledger
        self.timeout = timeout or None

    async def commit(self, draft: ProjectDraft, idempotency_key: Optional[str] = None) -> CommitOutcome:
        violations = validate_draft(draft)
        if violations:
            logger.info("Commit aborted: %d validation errors", len(violations))
            raise DraftValidationError(violations)

        attempt_id = None
        if self.ledger is not None:
            previous = self.ledger.find(idempotency_key)
            if previous is not None and previous.project_id is not None:
                if previous.status == "completed":
                    logger.info("Commit attempt %s already completed, nothing to do", previous.id)
                    return self._outcome_from(previous)
                return await self.resume(previous.id)
            attempt_id = self.ledger.start(idempotency_key).id

        operations = plan_children(draft)

        try:
            project_id = await asyncio.to_thread(self.gateway.create_project, build_project_payload(draft))
        except Exception as exc:
            logger.error("Root project creation failed: %s", exc)
            if attempt_id is not None:
                self.ledger.root_failed(attempt_id, truncate_text(str(exc) or exc.__class__.__name__, ERROR_DETAIL_LENGTH))
            raise RootCreationError(ROOT_ERROR_MESSAGE, exc) from exc

        logger.info("Root project %s created, %d child operations queued", project_id, len(operations))
        if attempt_id is not None:
            try:
                self.ledger.root_created(attempt_id, project_id, {op.resource: op.rows for op in operations})
            except CommitLedgerError as exc:
                exc.project_id = project_id
                raise

        outcome = await self._fan_out(project_id, operations)
        return self._record(attempt_id, outcome)

    async def resume(self, attempt_id: int) -> CommitOutcome:
        """Re-runs only the child operations still pending for an attempt."""
        if self.ledger is None:
            raise WizardStateError("Commit retry needs a ledger")
        attempt = self.ledger.get(attempt_id)
        if attempt.project_id is None:
            raise WizardStateError("Project was never created for this attempt; submit again")

        operations = [ChildOperation(resource, rows) for resource, rows in (attempt.pending or {}).items()]
        logger.info("Resuming commit attempt %s: %s", attempt_id, ", ".join(op.resource for op in operations) or "-")
        outcome = await self._fan_out(attempt.project_id, operations)
        return self._record(attempt_id, outcome)

    async def _run(self, project_id: int, operation: ChildOperation):
        logger.debug("Creating %d %s rows for project %s", len(operation.rows), operation.resource, project_id)
        call = asyncio.to_thread(self.gateway.create_children, operation.resource, project_id, operation.rows)
        if self.timeout:
            try:
                return await asyncio.wait_for(call, self.timeout)
            except asyncio.TimeoutError:
                raise TimeoutError(f"{operation.resource} timed out after {self.timeout}s") from None
        return await call

    async def _fan_out(self, project_id: int, operations: List[ChildOperation]) -> CommitOutcome:
        outcome = CommitOutcome(project_id=project_id)
        if not operations:
            return outcome

        results = await asyncio.gather(
            *(self._run(project_id, op) for op in operations),
            return_exceptions=True,
        )
        for op, result in zip(operations, results):
            if isinstance(result, BaseException):
                logger.error("Child operation %s failed for project %s: %s", op.resource, project_id, result)
                outcome.failed.append(op.resource)
                outcome.errors[op.resource] = truncate_text(str(result) or result.__class__.__name__, ERROR_DETAIL_LENGTH)
            else:
                outcome.succeeded.append(op.resource)

        if outcome.failed:
            logger.warning("Project %s saved with failed resources: %s", project_id, ", ".join(outcome.failed))
        else:
            logger.info("Project %s saved with all child resources", project_id)
        return outcome

    def _record(self, attempt_id: Optional[int], outcome: CommitOutcome) -> CommitOutcome:
        if attempt_id is None:
            return outcome
        try:
            attempt = self.ledger.settle(attempt_id, outcome.succeeded, outcome.errors)
        except CommitLedgerError as exc:
            exc.project_id = outcome.project_id
            raise
        merged = self._outcome_from(attempt)
        merged.errors = dict(outcome.errors)
        return merged

    @staticmethod
    def _outcome_from(attempt) -> CommitOutcome:
        return CommitOutcome(
            project_id=attempt.project_id,
            succeeded=[r for r in (attempt.succeeded or []) if r != "project"],
            failed=list((attempt.pending or {}).keys()),
            errors=dict(attempt.errors or {}),
            attempt_id=attempt.id,
        )
