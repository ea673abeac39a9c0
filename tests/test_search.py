import json

import pytest
from fastapi.testclient import TestClient

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


def create_lead(client: TestClient, name: str, **extra) -> int:
    payload = {
        "businessName": name,
        "businessCategory": "Hospitality",
        "email": "owner@example.test",
        "country": "France",
        "state": "Occitanie",
        "city": "Toulouse",
        "user": OPERATOR,
    }
    payload.update(extra)
    response = client.post("/api/leads", json=payload)
    assert response.status_code == 200
    return response.json()["_id"]


def search(client: TestClient, **params):
    response = client.get("/api/search", params=params)
    assert response.status_code == 200
    return response.json()


def test_empty_query_returns_nothing():
    client = TestClient(app)
    create_lead(client, "Harbor Hotel")
    assert search(client, query="") == {
        "segments": [],
        "tasks": [],
        "leads": [],
        "pagination": {"hasMore": False, "page": 1, "total": 0},
    }


def test_search_across_categories():
    client = TestClient(app)
    lead_id = create_lead(client, "Harbor Hotel")
    create_lead(client, "Mountain Inn")
    client.post(
        "/api/segments",
        json={"name": "Harbor prospects", "filterCriteria": {}},
        headers={"user": json.dumps(OPERATOR)},
    )
    client.post(
        "/api/tasks",
        json={"leadId": lead_id, "title": "Visit harbor", "description": "Walk-through"},
        headers={"user": json.dumps(OPERATOR)},
    )

    results = search(client, query="HARBOR")
    assert [lead["businessName"] for lead in results["leads"]] == ["Harbor Hotel"]
    assert [segment["name"] for segment in results["segments"]] == ["Harbor prospects"]
    assert results["segments"][0]["leadCount"] == 2
    assert [task["title"] for task in results["tasks"]] == ["Visit harbor"]
    assert results["tasks"][0]["lead"]["businessName"] == "Harbor Hotel"
    assert results["pagination"] == {"hasMore": False, "page": 1, "total": 1}


def test_search_type_narrows_categories():
    client = TestClient(app)
    lead_id = create_lead(client, "Harbor Hotel")
    client.post(
        "/api/tasks",
        json={"leadId": lead_id, "title": "Harbor call", "description": "Intro"},
        headers={"user": json.dumps(OPERATOR)},
    )
    results = search(client, query="harbor", type="tasks")
    assert results["leads"] == []
    assert [task["title"] for task in results["tasks"]] == ["Harbor call"]


def test_search_paginates_leads():
    client = TestClient(app)
    for index in range(7):
        create_lead(client, f"Cafe {index}")

    first = search(client, query="cafe", limit=3)
    assert len(first["leads"]) == 3
    assert first["pagination"] == {"hasMore": True, "page": 1, "total": 7}

    last = search(client, query="cafe", limit=3, page=3)
    assert [lead["businessName"] for lead in last["leads"]] == ["Cafe 0"]
    assert last["pagination"] == {"hasMore": False, "page": 3, "total": 7}


def test_search_defaults_to_five_leads():
    client = TestClient(app)
    for index in range(6):
        create_lead(client, f"Bistro {index}")
    results = search(client, query="bistro")
    assert len(results["leads"]) == 5
    assert results["pagination"]["hasMore"] is True


def test_search_excludes_archived_leads():
    client = TestClient(app)
    archived = create_lead(client, "Harbor Old")
    client.post(f"/api/leads/{archived}/archive")
    assert search(client, query="harbor")["leads"] == []


def test_search_rejects_unknown_type():
    client = TestClient(app)
    response = client.get("/api/search", params={"query": "x", "type": "people"})
    assert response.status_code == 400
