"""Wizard steps and the navigation state machine that drives them."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel

from doclify.core.errors import WizardStateError
from doclify.schemas.draft import ProjectDraft
from doclify.services.wizard_store import WizardStore
from doclify.validations.project import (
    FunctionalRequirementsForm,
    NonFunctionalRequirementsForm,
    ObjectivesForm,
    ProjectInfoForm,
    ReviewForm,
    TeamForm,
    TechStackForm,
    TimelineForm,
)
from doclify.validations.rules import Violation, validate

logger = logging.getLogger(__name__)


@dataclass
class WizardStep:
    """One page of the wizard.

    ``fields`` maps each form field to the draft field it writes, so a
    validated form becomes a draft patch and a draft can be read back as the
    step's form data.
    """

    id: str
    title: str
    description: str
    schema: Type[BaseModel]
    fields: Dict[str, str]
    skip_patch: Optional[Dict[str, Any]] = None

    @property
    def skippable(self) -> bool:
        return self.skip_patch is not None

    def to_patch(self, model: BaseModel) -> Dict[str, Any]:
        data = model.model_dump()
        return {draft_key: data[form_key] for form_key, draft_key in self.fields.items()}

    def form_data(self, draft: Optional[ProjectDraft]) -> Dict[str, Any]:
        # lo que el borrador no tiene toma el default del formulario (version "1.0.0")
        data = draft.model_dump() if draft is not None else {}
        form = {}
        for form_key, draft_key in self.fields.items():
            value = data.get(draft_key)
            if value is None:
                value = self.schema.model_fields[form_key].get_default(call_default_factory=True)
            form[form_key] = value
        return form


STEPS = [
    WizardStep(
        "project-info",
        "Informações do Projeto",
        "Dados básicos e descrição",
        ProjectInfoForm,
        {f: f for f in ("title", "description", "company_name", "project_type", "status")},
    ),
    WizardStep(
        "team",
        "Equipe",
        "Membros e responsabilidades",
        TeamForm,
        {"members": "members"},
        skip_patch={"members": []},
    ),
    WizardStep(
        "tech-stack",
        "Tecnologias",
        "Stack tecnológico e arquitetura",
        TechStackForm,
        {"technologies": "technologies", "architecture": "architecture"},
        skip_patch={"technologies": []},
    ),
    WizardStep(
        "objectives",
        "Objetivos",
        "Metas e critérios de sucesso",
        ObjectivesForm,
        {f: f for f in ("objectives", "success_criteria", "constraints")},
        skip_patch={"objectives": []},
    ),
    WizardStep(
        "functional-requirements",
        "Requisitos Funcionais",
        "Funcionalidades do sistema",
        FunctionalRequirementsForm,
        {"requirements": "functional_requirements"},
    ),
    WizardStep(
        "non-functional-requirements",
        "Requisitos Não Funcionais",
        "Qualidade e performance",
        NonFunctionalRequirementsForm,
        {"requirements": "non_functional_requirements"},
    ),
    WizardStep(
        "timeline",
        "Cronograma",
        "Prazos e marcos importantes",
        TimelineForm,
        {f: f for f in ("start_date", "end_date", "milestones", "methodology")},
        skip_patch={"milestones": []},
    ),
    WizardStep(
        "review",
        "Revisão",
        "Finalização e exportação",
        ReviewForm,
        {"version": "version", "notes": "notes"},
    ),
]


@dataclass
class StepResult:
    ok: bool
    step_index: int
    violations: List[Violation] = field(default_factory=list)
    ready_to_submit: bool = False


class WizardOrchestrator:
    """Sequences the steps over a ``WizardStore``.

    Index states 0..N-1 plus a ``submitting`` sub-state entered only from
    the last step. A successful submit finishes the wizard; nothing else
    moves past the last index.
    """

    def __init__(self, store: WizardStore, steps: Optional[List[WizardStep]] = None, validated=None):
        self.store = store
        self.steps = list(steps or STEPS)
        self.validated = set(validated or [])
        self.submitting = False
        self.finished = False

    @property
    def index(self) -> int:
        return self.store.get_step_index()

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def current_step(self) -> WizardStep:
        return self.steps[self.index]

    @property
    def is_last_step(self) -> bool:
        return self.index == self.step_count - 1

    @property
    def progress(self) -> float:
        return (self.index + 1) / self.step_count

    def _ensure_open(self):
        if self.finished:
            raise WizardStateError("Wizard already finished")

    def _move(self, index: int):
        self.submitting = False
        self.store.set_step_index(index)

    def next(self, data: Optional[Dict[str, Any]] = None) -> StepResult:
        self._ensure_open()
        step = self.current_step
        if data is None:
            data = step.form_data(self.store.get_draft())

        model, violations = validate(step.schema, data)
        if violations:
            logger.debug("Step %s blocked: %d violations", step.id, len(violations))
            return StepResult(ok=False, step_index=self.index, violations=violations)

        self.store.set_draft(step.to_patch(model))
        self.validated.add(self.index)

        if self.is_last_step:
            self.submitting = True
            return StepResult(ok=True, step_index=self.index, ready_to_submit=True)

        self._move(self.index + 1)
        return StepResult(ok=True, step_index=self.index)

    def previous(self) -> int:
        self._ensure_open()
        self._move(max(self.index - 1, 0))
        return self.index

    def skip(self) -> int:
        self._ensure_open()
        step = self.current_step
        if not step.skippable or self.is_last_step:
            raise WizardStateError(f"Step '{step.id}' cannot be skipped")
        self.store.set_draft(dict(step.skip_patch))
        self._move(self.index + 1)
        return self.index

    def can_jump_to(self, target: int) -> bool:
        if target < 0 or target >= self.step_count:
            return False
        if target <= self.index:
            return True
        return target == self.index + 1 and self.index in self.validated

    def jump_to(self, target: int) -> int:
        self._ensure_open()
        if not self.can_jump_to(target):
            raise WizardStateError(f"Cannot jump to step {target} from step {self.index}")
        self._move(target)
        return self.index

    async def submit(self, protocol, idempotency_key: Optional[str] = None):
        """Commits the draft; the wizard closes only if every resource was saved."""
        self._ensure_open()
        if not self.submitting:
            raise WizardStateError("The review step has not been validated yet")

        draft = self.store.get_draft() or ProjectDraft()
        try:
            outcome = await protocol.commit(draft, idempotency_key=idempotency_key)
        except Exception:
            # el borrador se conserva; el wizard vuelve a la revisión
            self.submitting = False
            raise

        if outcome.success:
            self.finished = True
            self.submitting = False
            self.store.reset_draft()
        else:
            # el borrador se conserva para reintentar
            self.submitting = False
        return outcome

    def steps_overview(self) -> List[Dict[str, Any]]:
        overview = []
        for i, step in enumerate(self.steps):
            if i < self.index:
                status = "completed"
            elif i == self.index:
                status = "current"
            else:
                status = "pending"
            overview.append({
                "id": step.id,
                "title": step.title,
                "description": step.description,
                "status": status,
                "disabled": i > self.index + 1,
            })
        return overview
