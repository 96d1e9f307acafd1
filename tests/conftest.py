"""
Shared fixtures: an in-memory MongoDB (mongomock) per test, a TestClient,
and helpers to create logged-in accounts of each role.
"""
import mongomock
import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.db import mongodb
from app.main import app
from app.services.storage_service import LocalStorage, get_storage

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def mongo_db(monkeypatch):
    """Fresh mongomock database with the real indexes for every test."""
    db = mongomock.MongoClient()["placement_portal_test"]
    monkeypatch.setattr(mongodb, "_db", db)
    mongodb.init_mongo_indexes()
    yield db


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def local_storage(tmp_path):
    """Resume uploads go to tmp_path instead of the configured backend."""
    settings = get_settings().model_copy(
        update={"upload_dir": str(tmp_path), "public_base_url": "http://testserver"}
    )
    app.dependency_overrides[get_storage] = lambda: LocalStorage(settings)
    yield tmp_path
    app.dependency_overrides.pop(get_storage, None)


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_and_login(client, type_: str, email: str, name: str = "Test User") -> dict:
    """Register an account through the API and log in. Returns {"id", "token"}."""
    if type_ == "tpo":
        resp = client.post("/tpo/register", json={"name": name, "email": email, "password": PASSWORD})
        assert resp.status_code == 201, resp.text
        resp = client.post("/tpo/login", json={"email": email, "password": PASSWORD})
    else:
        resp = client.post(
            "/register", json={"name": name, "email": email, "password": PASSWORD, "type": type_}
        )
        assert resp.status_code == 201, resp.text
        resp = client.post("/login", json={"email": email, "password": PASSWORD, "type": type_})
    assert resp.status_code == 200, resp.text
    data = resp.json()
    return {"id": data["user"]["id"], "token": data["token"]}


@pytest.fixture
def student(client):
    return register_and_login(client, "student", "alice@example.com", "Alice")


@pytest.fixture
def company(client):
    return register_and_login(client, "recruiter", "hr@acme.com", "Acme")


@pytest.fixture
def other_company(client):
    return register_and_login(client, "company", "jobs@globex.com", "Globex")


@pytest.fixture
def tpo(client):
    return register_and_login(client, "tpo", "tpo@college.edu", "Placement Office")


def create_opportunity(client, company: dict, **fields) -> dict:
    body = {"title": "Backend Engineer", "role": "SDE", "package": "12 LPA", **fields}
    resp = client.post("/company/opportunities", json=body, headers=auth_header(company["token"]))
    assert resp.status_code == 201, resp.text
    return resp.json()["opportunity"]
