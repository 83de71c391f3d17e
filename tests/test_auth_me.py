import sys
import os
from datetime import timedelta
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("database_url", "sqlite:///:memory:")
os.environ.setdefault("secret_key", "testsecret")

from fastapi.testclient import TestClient
from doclify.main import app
from doclify.core.security import create_access_token
from doclify.schemas.user import CurrentUser
from doclify.api.endpoints.auth import get_current_user


def test_me_returns_subject_and_email_from_token():
    client = TestClient(app)
    token = create_access_token({"sub": "auth0|abc", "email": "alice@example.com"})

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"id": "auth0|abc", "email": "alice@example.com"}


def test_me_rejects_missing_invalid_and_expired_tokens():
    client = TestClient(app)
    assert client.get("/auth/me").status_code == 401

    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401

    expired = create_access_token({"sub": "u1"}, expires_delta=timedelta(minutes=-5))
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


def test_me_rejects_token_without_subject():
    client = TestClient(app)
    token = create_access_token({"email": "alice@example.com"})
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_me_with_overridden_user():
    client = TestClient(app)
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(id="user-1")

    response = client.get("/auth/me")

    assert response.status_code == 200
    assert response.json()["id"] == "user-1"
    assert response.json()["email"] is None

    app.dependency_overrides.clear()


def test_validate_auth_forms():
    client = TestClient(app)

    response = client.post("/auth/validate/login", json={"email": "alice@example.com", "password": "secret1"})
    assert response.status_code == 204

    response = client.post("/auth/validate/register", json={
        "name": "Alice",
        "email": "alice@example.com",
        "password": "secret1",
        "confirm_password": "secret2",
    })
    assert response.status_code == 422
    errors = response.json()["detail"]["errors"]
    assert errors == [{"path": "confirm_password", "message": "Senhas não coincidem"}]

    response = client.post("/auth/validate/reset-password", json={"email": "nope"})
    assert response.status_code == 422

    assert client.post("/auth/validate/signup", json={}).status_code == 404
