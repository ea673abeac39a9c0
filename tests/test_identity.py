import json

import pytest
from fastapi.testclient import TestClient

from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


OPERATOR = {"name": "Olivia Ops", "email": "olivia@example.com"}
USER_HEADER = {"user": json.dumps(OPERATOR)}
CSV_SHEET = b"Business Name,Business Category,Email\nNew Shop,Retail,new@shop.test\n"

LEAD = {
    "businessName": "Acme Bakery",
    "businessCategory": "Food",
    "email": "ann@acme.test",
    "country": "United States",
    "state": "Texas",
    "city": "Austin",
}

MUTATING_ROUTES = [
    ("post", "/api/leads", {"json": {**LEAD, "user": OPERATOR}}),
    (
        "post",
        "/api/leads/import",
        {"files": {"file": ("leads.csv", CSV_SHEET, "text/csv")}, "data": {"userData": json.dumps(OPERATOR)}},
    ),
    ("post", "/api/leads/archive", {"json": {"leadIds": ["{lead}"]}}),
    ("post", "/api/leads/update", {"json": {"leadIds": ["{lead}"], "updates": {"status": "contacted"}}}),
    ("put", "/api/leads/{lead}", {"json": {"status": "contacted"}}),
    ("post", "/api/leads/{lead}/archive", {}),
    ("delete", "/api/leads/{lead}", {}),
    ("post", "/api/segments", {"json": {"name": "Texas", "filterCriteria": {"state": ["Texas"]}}}),
    ("post", "/api/segments/{segment}/refresh-count", {}),
    ("post", "/api/tasks", {"json": {"leadId": "{lead}", "title": "Call", "description": "Intro call"}}),
    ("post", "/api/tasks/create", {"json": {"leadId": "{lead}", "title": "Call", "description": "Intro call"}}),
    ("put", "/api/tasks/{task}", {"json": {"status": "completed"}}),
    ("put", "/api/tasks/update", {"json": {"taskId": "{task}", "updates": {"status": "completed"}}}),
]


def seed(client: TestClient) -> dict:
    lead = client.post("/api/leads", json={**LEAD, "user": OPERATOR}).json()["_id"]
    task = client.post(
        "/api/tasks", json={"leadId": lead, "title": "Follow up", "description": "Second call"}, headers=USER_HEADER
    ).json()["_id"]
    segment = client.post(
        "/api/segments", json={"name": "Everyone", "filterCriteria": {}}, headers=USER_HEADER
    ).json()["_id"]
    return {"lead": lead, "task": task, "segment": segment}


def fill_ids(value, ids: dict):
    """Swap ``"{lead}"`` style placeholders for the seeded primary keys."""
    if isinstance(value, dict):
        return {key: fill_ids(item, ids) for key, item in value.items()}
    if isinstance(value, list):
        return [fill_ids(item, ids) for item in value]
    if isinstance(value, str) and value.startswith("{") and value.endswith("}") and value[1:-1] in ids:
        return ids[value[1:-1]]
    return value


def strict_mode(monkeypatch):
    monkeypatch.setattr(get_settings(), "require_verified_identity", True)


def sign_in(client: TestClient) -> str:
    response = client.post("/api/users", json={"id": "google-1", "email": "sam@example.com", "name": "Sam"})
    assert response.status_code == 200
    return response.json()["accessToken"]


@pytest.mark.parametrize("method,path,kwargs", MUTATING_ROUTES)
def test_mutating_route_needs_token_when_identity_must_be_verified(monkeypatch, method, path, kwargs):
    client = TestClient(app)
    ids = seed(client)
    strict_mode(monkeypatch)

    response = client.request(method.upper(), path.format(**ids), headers=USER_HEADER, **fill_ids(kwargs, ids))

    assert response.status_code == 401
    assert "error" in response.json()


@pytest.mark.parametrize("method,path,kwargs", MUTATING_ROUTES)
def test_mutating_route_leaves_data_alone_when_rejected(monkeypatch, method, path, kwargs):
    client = TestClient(app)
    ids = seed(client)
    strict_mode(monkeypatch)

    client.request(method.upper(), path.format(**ids), **fill_ids(kwargs, ids))

    leads = client.get("/api/leads").json()
    assert [(lead["_id"], lead["status"], lead["isArchived"]) for lead in leads] == [(ids["lead"], "new", False)]
    tasks = client.get("/api/tasks").json()
    assert [(task["_id"], task["status"]) for task in tasks] == [(ids["task"], "pending")]
    assert [segment["_id"] for segment in client.get("/api/segments").json()] == [ids["segment"]]


def test_bearer_token_is_accepted_when_identity_must_be_verified(monkeypatch):
    client = TestClient(app)
    ids = seed(client)
    token = sign_in(client)
    strict_mode(monkeypatch)
    auth = {"Authorization": f"Bearer {token}"}

    archived = client.post(f"/api/leads/{ids['lead']}/archive", headers=auth)
    assert archived.status_code == 200
    assert archived.json()["updatedBy"] == {"name": "Sam", "email": "sam@example.com"}

    refreshed = client.post(f"/api/segments/{ids['segment']}/refresh-count", headers=auth)
    assert refreshed.status_code == 200

    assert client.delete(f"/api/leads/{ids['lead']}", headers=auth).status_code == 200


def test_archive_routes_stamp_acting_user():
    client = TestClient(app)
    ids = seed(client)
    other = client.post("/api/leads", json={**LEAD, "businessName": "Other", "user": OPERATOR}).json()["_id"]
    ned = {"user": json.dumps({"name": "Ned", "email": "ned@example.com"})}

    single = client.post(f"/api/leads/{ids['lead']}/archive", headers=ned)
    assert single.json()["updatedBy"] == {"name": "Ned", "email": "ned@example.com"}

    bulk = client.post("/api/leads/archive", json={"leadIds": [other]}, headers=ned)
    assert bulk.json()["modifiedCount"] == 1
    assert client.get(f"/api/leads/{other}").json()["updatedBy"] == {"name": "Ned", "email": "ned@example.com"}


def test_archive_without_identity_still_allowed_by_default():
    client = TestClient(app)
    ids = seed(client)
    response = client.post(f"/api/leads/{ids['lead']}/archive")
    assert response.status_code == 200
    assert response.json()["isArchived"] is True
