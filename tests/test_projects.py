import sys
import os
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("database_url", "sqlite:///:memory:")

from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine, select
from sqlalchemy.pool import StaticPool

from doclify.main import app
from doclify.models.project import Project
from doclify.models.team_member import TeamMember
from doclify.schemas.user import CurrentUser
from doclify.api.endpoints.auth import get_current_user
from doclify.database import get_session


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
SQLModel.metadata.create_all(engine)

ALICE = CurrentUser(id="user-1", email="alice@example.com")


def override_get_session():
    with Session(engine) as session:
        yield session


def reset_database():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)


def make_client(user=ALICE):
    reset_database()
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_session] = override_get_session
    return TestClient(app)


def add_project(title, user_id="user-1", **extra):
    with Session(engine) as session:
        project = Project(title=title, user_id=user_id, **extra)
        session.add(project)
        session.commit()
        session.refresh(project)
        return project.id


def test_create_project():
    client = make_client()

    response = client.post("/projects/", json={"title": "  Sistema X ", "description": "Desc"})

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Sistema X"
    assert data["description"] == "Desc"
    assert data["user_id"] == "user-1"
    assert data["status"] == "draft"
    app.dependency_overrides.clear()


def test_create_project_validation_error_shape():
    client = make_client()

    response = client.post("/projects/", json={"title": "ab"})

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["errors"][0]["path"] == "title"
    assert "pelo menos 3 caracteres" in detail["errors"][0]["message"]
    app.dependency_overrides.clear()


def test_list_projects_filtered_by_owner_newest_first():
    client = make_client()
    add_project("first")
    add_project("second")
    add_project("other", user_id="user-2")

    response = client.get("/projects/")

    assert response.status_code == 200
    assert [p["title"] for p in response.json()] == ["second", "first"]
    app.dependency_overrides.clear()


def test_get_project_by_id_and_404_for_non_owner():
    client = make_client()
    own_id = add_project("own")
    other_id = add_project("other", user_id="user-2")

    assert client.get(f"/projects/{own_id}").json()["id"] == own_id
    assert client.get(f"/projects/{other_id}").status_code == 404
    assert client.get(f"/projects/{other_id}/full").status_code == 404
    app.dependency_overrides.clear()


def test_update_project_title_and_description():
    client = make_client()
    pid = add_project("old", description="old")

    response = client.put(f"/projects/{pid}", json={"title": "new title", "description": "new desc"})
    assert response.status_code == 200
    assert response.json()["title"] == "new title"

    with Session(engine) as session:
        updated = session.get(Project, pid)
        assert updated.description == "new desc"

    assert client.put(f"/projects/{pid}", json={"title": "x"}).status_code == 422
    app.dependency_overrides.clear()


def test_delete_project_removes_children():
    client = make_client()
    pid = add_project("todel")
    client.post(f"/projects/{pid}/team", json=[{"name": "Ana", "role": "qa"}])

    assert client.delete(f"/projects/{pid}").status_code == 204
    assert client.delete(f"/projects/{pid}").status_code == 404
    with Session(engine) as session:
        assert session.exec(select(TeamMember)).all() == []
    app.dependency_overrides.clear()


def test_child_resources_bulk_create_and_list():
    client = make_client()
    pid = add_project("Sistema X")

    response = client.post(f"/projects/{pid}/functional_requirements", json=[
        {"title": "Login", "description": "Entrar", "priority": "obrigatorio"},
        {"title": "Busca", "description": "Buscar", "priority": "should_have"},
    ])
    assert response.status_code == 201
    assert [r["priority"] for r in response.json()] == ["must_have", "should_have"]

    listed = client.get(f"/projects/{pid}/functional_requirements").json()
    assert [r["title"] for r in listed] == ["Login", "Busca"]
    app.dependency_overrides.clear()


def test_child_resource_validation_reports_item_paths():
    client = make_client()
    pid = add_project("Sistema X")

    response = client.post(f"/projects/{pid}/team", json=[
        {"name": "Ana", "role": "qa"},
        {"name": "", "role": "qa", "email": "bad"},
    ])

    assert response.status_code == 422
    paths = [e["path"] for e in response.json()["detail"]["errors"]]
    assert paths == ["1.name", "1.email"]
    assert client.get(f"/projects/{pid}/team").json() == []
    app.dependency_overrides.clear()


def test_unknown_resource_is_404():
    client = make_client()
    pid = add_project("Sistema X")
    assert client.get(f"/projects/{pid}/invoices").status_code == 404
    assert client.post(f"/projects/{pid}/invoices", json=[]).status_code == 404
    app.dependency_overrides.clear()


def test_payment_upsert():
    client = make_client()
    pid = add_project("Sistema X")
    assert client.get(f"/projects/{pid}/payment").status_code == 404

    assert client.put(f"/projects/{pid}/payment", json={"total_amount": 1000}).status_code == 200
    response = client.put(f"/projects/{pid}/payment", json={"total_amount": 2500, "payment_terms": "30 dias"})
    assert response.status_code == 200

    data = client.get(f"/projects/{pid}/payment").json()
    assert data["total_amount"] == 2500
    assert data["currency"] == "BRL"

    assert client.put(f"/projects/{pid}/payment", json={"total_amount": -5}).status_code == 422
    app.dependency_overrides.clear()


def test_full_project_bundle():
    client = make_client()
    pid = add_project("Sistema X")
    client.post(f"/projects/{pid}/team", json=[{"name": "Ana", "role": "tech_lead"}])
    client.post(f"/projects/{pid}/audiences", json=[{"name": "Lojistas"}])

    data = client.get(f"/projects/{pid}/full").json()

    assert data["project"]["title"] == "Sistema X"
    assert data["team"][0]["name"] == "Ana"
    assert data["audiences"][0]["priority"] == "primary"
    assert data["technologies"] == []
    assert data["payment"] is None
    app.dependency_overrides.clear()


def test_document_and_export():
    client = make_client()
    pid = add_project("Sistema X", description="Gestão")
    client.post(f"/projects/{pid}/non_functional_requirements", json=[
        {"title": "Rápido", "description": "p95", "category": "performance"},
    ])

    html = client.get(f"/projects/{pid}/document")
    assert html.status_code == 200
    assert html.headers["content-type"].startswith("text/html")
    assert "RNF01 - Rápido" in html.text

    pdf = client.get(f"/projects/{pid}/export")
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert "Sistema_X_" in pdf.headers["content-disposition"]
    assert pdf.content.startswith(b"%PDF")
    app.dependency_overrides.clear()
