import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from doclify.models.commit_attempt import CommitAttempt
from doclify.models.project import Project
from doclify.services import gateway
from doclify.services.gateway import ProjectGateway


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


def test_project_crud_is_owner_scoped(engine):
    with Session(engine) as session:
        project = gateway.create_project(session, "u1", {"title": "Sistema X", "user_id": "hacker"})
        assert project.user_id == "u1"
        assert gateway.get_project(session, "u2", project.id) is None

        updated = gateway.update_project(session, "u1", project.id, {"description": "nova"})
        assert updated.description == "nova"
        assert updated.updated_at >= updated.created_at
        assert gateway.update_project(session, "u2", project.id, {"title": "x"}) is None

        assert gateway.delete_project(session, "u2", project.id) is False
        assert gateway.delete_project(session, "u1", project.id) is True
        assert gateway.list_projects(session, "u1") == []


def test_named_entity_functions(engine):
    with Session(engine) as session:
        pid = gateway.create_project(session, "u1", {"title": "Sistema X"}).id

        gateway.create_team_members(session, pid, [{"name": "Ana", "role": "qa"}, {"name": "Bia", "role": "designer"}])
        gateway.create_technologies(session, pid, [{"name": "FastAPI", "category": "backend"}])
        gateway.create_objectives(session, pid, [{"title": "Vender"}])
        gateway.create_functional_requirements(session, pid, [{"title": "Login", "description": "Entrar"}])
        gateway.create_non_functional_requirements(session, pid, [{"title": "Rápido", "description": "p95"}])
        gateway.create_milestones(session, pid, [{"title": "MVP", "due_date": "2026-03-01"}])
        gateway.create_audiences(session, pid, [{"name": "Lojistas"}])
        gateway.create_stakeholders(session, pid, [{"name": "Rui", "role": "CEO", "email": "rui@example.com"}])

        assert [m.name for m in gateway.list_team_members(session, pid)] == ["Ana", "Bia"]
        assert gateway.list_technologies(session, pid)[0].category == "backend"
        assert gateway.list_objectives(session, pid)[0].priority == "medium"
        assert gateway.list_functional_requirements(session, pid)[0].priority == "must_have"
        assert gateway.list_non_functional_requirements(session, pid)[0].category == "other"
        assert gateway.list_milestones(session, pid)[0].status == "pending"
        assert gateway.list_audiences(session, pid)[0].priority == "primary"
        assert gateway.list_stakeholders(session, pid)[0].signature_required is False


def test_payment_upsert_keeps_one_row(engine):
    with Session(engine) as session:
        pid = gateway.create_project(session, "u1", {"title": "Sistema X"}).id
        first = gateway.upsert_payment(session, pid, {"total_amount": 100.0})
        second = gateway.upsert_payment(session, pid, {"total_amount": 250.0, "currency": "USD"})
        assert first.id == second.id
        assert gateway.get_payment(session, pid).currency == "USD"


def test_bundle_contains_every_collection(engine):
    with Session(engine) as session:
        pid = gateway.create_project(session, "u1", {"title": "Sistema X"}).id
        gateway.create_team_members(session, pid, [{"name": "Ana", "role": "qa"}])

        bundle = gateway.load_project_bundle(session, "u1", pid)
        assert bundle["project"].id == pid
        assert len(bundle["team"]) == 1
        assert bundle["milestones"] == []
        assert bundle["payment"] is None
        assert gateway.load_project_bundle(session, "u2", pid) is None


def test_unknown_resource_raises(engine):
    with Session(engine) as session:
        with pytest.raises(ValueError):
            gateway.list_children(session, "invoices", 1)


def test_project_gateway_checks_ownership(engine):
    mine = ProjectGateway(engine, "u1")
    pid = mine.create_project({"title": "Sistema X", "status": "draft"})
    assert mine.create_children("team", pid, [{"name": "Ana", "role": "qa"}]) == 1

    with pytest.raises(LookupError):
        ProjectGateway(engine, "u2").create_children("team", pid, [{"name": "Eve", "role": "qa"}])


def test_new_rows_get_timezone_aware_timestamps():
    project = Project(title="Sistema X", user_id="u1")
    attempt = CommitAttempt(user_id="u1")

    assert project.created_at.tzinfo is not None
    assert project.created_at.utcoffset().total_seconds() == 0
    assert attempt.updated_at.tzinfo is not None
