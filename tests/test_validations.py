import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from doclify.schemas.draft import ProjectDraft
from doclify.validations.auth import LoginForm, RegisterForm, ResetPasswordForm, UpdatePasswordForm
from doclify.validations.draft import validate_draft
from doclify.validations.project import (
    FunctionalRequirementsForm,
    NonFunctionalRequirementsForm,
    ObjectivesForm,
    PaymentForm,
    ProjectInfoForm,
    ReviewForm,
    StakeholderForm,
    TeamForm,
    TimelineForm,
)
from doclify.validations.rules import validate


def messages(violations):
    return [v.message for v in violations]


def paths(violations):
    return [v.path for v in violations]


# ---------- step schemas ----------

def test_project_info_requires_title_of_three_chars():
    model, violations = validate(ProjectInfoForm, {"title": "ab"})
    assert model is None
    assert paths(violations) == ["title"]
    assert "pelo menos 3 caracteres" in violations[0].message

    model, violations = validate(ProjectInfoForm, {})
    assert messages(violations) == ["Título é obrigatório"]


def test_project_info_rejects_unknown_status_and_long_title():
    _, violations = validate(ProjectInfoForm, {"title": "x" * 101, "status": "archived"})
    assert sorted(paths(violations)) == ["status", "title"]


def test_project_info_defaults():
    model, violations = validate(ProjectInfoForm, {"title": "Sistema X", "description": None})
    assert violations == []
    assert model.status == "draft"
    assert model.description == ""


def test_team_requires_at_least_one_member():
    _, violations = validate(TeamForm, {"members": []})
    assert messages(violations) == ["Pelo menos um membro da equipe é obrigatório"]


def test_team_collects_every_member_error():
    data = {
        "members": [
            {"name": "", "role": "tech_lead"},
            {"name": "Bia", "role": "astronaut", "email": "not-an-email"},
        ]
    }
    _, violations = validate(TeamForm, data)
    assert sorted(paths(violations)) == ["members.0.name", "members.1.email", "members.1.role"]
    assert "Cargo inválido" in messages(violations)
    assert "Email inválido" in messages(violations)


def test_team_member_missing_role_has_required_message():
    _, violations = validate(TeamForm, {"members": [{"name": "Ana"}]})
    assert messages(violations) == ["Cargo é obrigatório"]


def test_objective_type_is_optional_but_checked():
    model, violations = validate(ObjectivesForm, {"objectives": [{"title": "Vender", "priority": "high"}]})
    assert violations == []
    assert model.objectives[0].type is None

    _, violations = validate(ObjectivesForm, {"objectives": [{"title": "Vender", "type": "magic"}]})
    assert paths(violations) == ["objectives.0.type"]


def test_functional_priority_aliases_are_normalized():
    data = {"requirements": [{"title": "Login", "description": "Entrar", "priority": "desejavel"}]}
    model, violations = validate(FunctionalRequirementsForm, data)
    assert violations == []
    assert model.requirements[0].priority == "could_have"


def test_non_functional_category_required():
    data = {"requirements": [{"title": "Rápido", "description": "p95 < 200ms"}]}
    _, violations = validate(NonFunctionalRequirementsForm, data)
    assert messages(violations) == ["Categoria é obrigatória"]


def test_timeline_end_before_start_is_rejected():
    data = {"start_date": "2026-05-10", "end_date": "2026-05-01"}
    _, violations = validate(TimelineForm, data)
    assert paths(violations) == ["end_date"]
    assert "posterior à data de início" in violations[0].message


def test_timeline_milestones_need_title_and_valid_date():
    data = {
        "start_date": "2026-01-01",
        "end_date": "2026-12-31",
        "milestones": [{"title": "", "due_date": "31/12/2026"}],
    }
    _, violations = validate(TimelineForm, data)
    assert sorted(paths(violations)) == ["milestones.0.due_date", "milestones.0.title"]
    assert "Data inválida" in messages(violations)


def test_review_has_default_version():
    model, violations = validate(ReviewForm, {})
    assert violations == []
    assert model.version == "1.0.0"

    _, violations = validate(ReviewForm, {"version": "  "})
    assert messages(violations) == ["Versão é obrigatória"]


def test_payment_and_stakeholder_forms():
    _, violations = validate(PaymentForm, {"total_amount": -1})
    assert messages(violations) == ["Valor deve ser positivo"]

    _, violations = validate(StakeholderForm, {"name": "Rui", "role": "CEO"})
    assert paths(violations) == ["email"]


# ---------- auth forms ----------

def test_register_requires_matching_passwords():
    data = {
        "name": "Ana",
        "email": "ana@example.com",
        "password": "secret1",
        "confirm_password": "secret2",
    }
    _, violations = validate(RegisterForm, data)
    assert paths(violations) == ["confirm_password"]
    assert messages(violations) == ["Senhas não coincidem"]


def test_register_valid():
    data = {
        "name": "Ana",
        "email": "ana@example.com",
        "password": "secret1",
        "confirm_password": "secret1",
    }
    model, violations = validate(RegisterForm, data)
    assert violations == []
    assert model.email == "ana@example.com"


@pytest.mark.parametrize("form,data,field", [
    (LoginForm, {"email": "ana@example.com", "password": "123"}, "password"),
    (LoginForm, {"email": "nope", "password": "secret1"}, "email"),
    (ResetPasswordForm, {"email": ""}, "email"),
    (UpdatePasswordForm, {"password": "abc", "confirm_password": "abc"}, "password"),
])
def test_auth_forms_reject_bad_fields(form, data, field):
    _, violations = validate(form, data)
    assert field in paths(violations)


# ---------- draft pre-flight ----------

@pytest.mark.parametrize("title", [None, "", "   ", "a", "ab", " ab "])
def test_preflight_flags_short_or_missing_title(title):
    violations = validate_draft(ProjectDraft(title=title, description="desc"))
    assert "title" in paths(violations)


def test_preflight_title_too_short_message():
    violations = validate_draft(ProjectDraft(title="ab", description="desc"))
    assert messages(violations) == ["Título deve ter pelo menos 3 caracteres"]


def test_preflight_collects_all_violations():
    draft = ProjectDraft.model_validate({
        "title": "Sistema X",
        "description": "desc",
        "members": [
            {"name": "", "role": "tech_lead"},
            {"role": "designer"},
        ],
        "functional_requirements": [{"title": "Login", "description": ""}],
    })
    violations = validate_draft(draft)
    assert len(set(messages(violations))) >= 3
    assert paths(violations) == [
        "members.0.name",
        "members.1.name",
        "functional_requirements.0.description",
    ]
    assert "Nome do membro 2 é obrigatório" in messages(violations)


def test_preflight_checks_email_and_non_functional_category():
    draft = ProjectDraft.model_validate({
        "title": "Sistema X",
        "description": "desc",
        "members": [{"name": "Ana", "role": "qa", "email": "ana@"}],
        "non_functional_requirements": [{"title": "Rápido", "description": "p95"}],
    })
    violations = validate_draft(draft)
    assert paths(violations) == ["members.0.email", "non_functional_requirements.0.category"]


def test_preflight_passes_minimal_draft():
    assert validate_draft(ProjectDraft(title="Sistema X", description="desc")) == []
