from typing import List, Optional

from pydantic import ValidationInfo, field_validator, Field

from doclify.validations.rules import (
    Email,
    FormModel,
    IsoDate,
    NonEmptyList,
    OneOf,
    OptionalText,
    RequiredText,
    fail,
)

PROJECT_STATUSES = ("draft", "in_progress", "review", "completed")
TEAM_ROLES = (
    "front_end_developer",
    "back_end_developer",
    "full_stack_developer",
    "mobile_developer",
    "database_administrator",
    "project_manager",
    "tech_lead",
    "designer",
    "analyst",
    "qa",
    "devops",
    "product_owner",
    "scrum_master",
    "stakeholder",
    "other",
)
TECH_CATEGORIES = ("frontend", "backend", "database", "mobile", "devops", "other")
OBJECTIVE_PRIORITIES = ("high", "medium", "low")
OBJECTIVE_TYPES = ("business", "technical", "user", "performance", "security", "other")
REQUIREMENT_PRIORITIES = ("must_have", "should_have", "could_have", "wont_have")
# nombres que usa el formulario en portugués
REQUIREMENT_PRIORITY_ALIASES = {
    "obrigatorio": "must_have",
    "importante": "should_have",
    "desejavel": "could_have",
    "nao_prioritario": "wont_have",
}
NFR_CATEGORIES = ("performance", "security", "usability", "reliability", "scalability", "other")
MILESTONE_STATUSES = ("pending", "in_progress", "completed")
AUDIENCE_PRIORITIES = ("primary", "secondary")


def normalize_requirement_priority(value: str) -> str:
    return REQUIREMENT_PRIORITY_ALIASES.get(value, value)


# --- project info ---

class ProjectInfoForm(FormModel):
    title: RequiredText(
        "Título é obrigatório",
        min_length=3,
        min_message="Título deve ter pelo menos 3 caracteres",
        max_length=100,
        max_message="Título deve ter no máximo 100 caracteres",
    ) = ""
    description: OptionalText = ""
    company_name: OptionalText = ""
    project_type: OptionalText = ""
    status: OneOf(PROJECT_STATUSES, "Status inválido") = "draft"


# --- team ---

class TeamMemberForm(FormModel):
    name: RequiredText("Nome é obrigatório") = ""
    role: OneOf(TEAM_ROLES, "Cargo inválido", required_message="Cargo é obrigatório") = ""
    email: Email("Email inválido") = ""


class TeamForm(FormModel):
    members: NonEmptyList(TeamMemberForm, "Pelo menos um membro da equipe é obrigatório") = Field(default_factory=list)


# --- technologies ---

class TechnologyForm(FormModel):
    name: RequiredText("Nome da tecnologia é obrigatório") = ""
    category: OneOf(TECH_CATEGORIES, "Categoria inválida") = "other"
    version: OptionalText = ""
    description: OptionalText = ""


class TechStackForm(FormModel):
    technologies: NonEmptyList(TechnologyForm, "Pelo menos uma tecnologia é obrigatória") = Field(default_factory=list)
    architecture: OptionalText = ""


# --- objectives ---

class ObjectiveForm(FormModel):
    title: RequiredText("Título do objetivo é obrigatório") = ""
    description: OptionalText = ""
    priority: OneOf(OBJECTIVE_PRIORITIES, "Prioridade inválida") = "medium"
    type: OneOf(OBJECTIVE_TYPES, "Tipo inválido", optional=True) = None


class ObjectivesForm(FormModel):
    objectives: NonEmptyList(ObjectiveForm, "Pelo menos um objetivo é obrigatório") = Field(default_factory=list)
    success_criteria: OptionalText = ""
    constraints: OptionalText = ""


# --- requirements ---

class FunctionalRequirementForm(FormModel):
    title: RequiredText("Título do requisito é obrigatório") = ""
    description: RequiredText("Descrição do requisito é obrigatória") = ""
    priority: OneOf(REQUIREMENT_PRIORITIES, "Prioridade inválida", aliases=REQUIREMENT_PRIORITY_ALIASES) = "must_have"
    acceptance_criteria: OptionalText = ""


class FunctionalRequirementsForm(FormModel):
    requirements: NonEmptyList(
        FunctionalRequirementForm, "Pelo menos um requisito funcional é obrigatório"
    ) = Field(default_factory=list)


class NonFunctionalRequirementForm(FormModel):
    title: RequiredText("Título do requisito é obrigatório") = ""
    description: RequiredText("Descrição do requisito é obrigatória") = ""
    category: OneOf(NFR_CATEGORIES, "Categoria inválida", required_message="Categoria é obrigatória") = ""
    metric: OptionalText = ""
    target_value: OptionalText = ""


class NonFunctionalRequirementsForm(FormModel):
    requirements: NonEmptyList(
        NonFunctionalRequirementForm, "Pelo menos um requisito não funcional é obrigatório"
    ) = Field(default_factory=list)


# --- timeline ---

class MilestoneForm(FormModel):
    title: RequiredText("Título do marco é obrigatório") = ""
    description: OptionalText = ""
    due_date: IsoDate("Data é obrigatória") = ""
    type: OptionalText = ""
    status: OneOf(MILESTONE_STATUSES, "Status inválido") = "pending"


class TimelineForm(FormModel):
    start_date: IsoDate("Data de início é obrigatória") = ""
    end_date: IsoDate("Data de fim é obrigatória") = ""
    milestones: List[MilestoneForm] = Field(default_factory=list)
    methodology: OptionalText = ""

    @field_validator("end_date")
    @classmethod
    def end_not_before_start(cls, value: str, info: ValidationInfo) -> str:
        start = info.data.get("start_date")
        # ISO yyyy-mm-dd ordena igual como texto
        if start and value.strip() < start.strip():
            fail("date_order", "Data de fim deve ser igual ou posterior à data de início")
        return value


# --- review ---

class ReviewForm(FormModel):
    version: RequiredText("Versão é obrigatória") = "1.0.0"
    notes: OptionalText = ""


# --- extra project sections ---

class AudienceForm(FormModel):
    name: RequiredText("Nome do público é obrigatório") = ""
    description: OptionalText = ""
    priority: OneOf(AUDIENCE_PRIORITIES, "Prioridade inválida") = "primary"


class PaymentForm(FormModel):
    total_amount: float = 0
    currency: RequiredText("Moeda é obrigatória") = "BRL"
    payment_terms: OptionalText = ""
    milestones: OptionalText = ""

    @field_validator("total_amount")
    @classmethod
    def positive_amount(cls, value: float) -> float:
        if value < 0:
            fail("too_small", "Valor deve ser positivo")
        return value


class StakeholderForm(FormModel):
    name: RequiredText("Nome é obrigatório") = ""
    role: RequiredText("Cargo é obrigatório") = ""
    email: Email("Email inválido", required=True) = ""
    phone: OptionalText = ""
    company: OptionalText = ""
    signature_required: bool = False

