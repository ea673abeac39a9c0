import json

import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app
from backend.app.models.lead import Lead
from backend.app.models.task import Task
from backend.app.models.timeline import TimelineEvent


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


OPERATOR = {"name": "Olivia Ops", "email": "olivia@example.com"}


def user_header(user: dict = OPERATOR) -> dict:
    return {"user": json.dumps(user)}


def lead_payload(**overrides) -> dict:
    payload = {
        "businessName": "Acme Bakery",
        "businessCategory": "Food",
        "contactPerson": "Ann Baker",
        "email": "ann@acme.test",
        "phoneNumber": "555-0100",
        "country": "United States",
        "state": "Texas",
        "city": "Austin",
        "user": OPERATOR,
    }
    payload.update(overrides)
    return payload


def create_lead(client: TestClient, **overrides):
    return client.post("/api/leads", json=lead_payload(**overrides))


def sign_in(client: TestClient, uid: str = "google-1", email: str = "olivia@example.com", name: str = "Olivia Ops") -> str:
    response = client.post("/api/users", json={"id": uid, "email": email, "name": name})
    assert response.status_code == 200
    return response.json()["accessToken"]


def test_create_lead_success():
    client = TestClient(app)
    response = create_lead(client)
    assert response.status_code == 200
    data = response.json()
    assert data["businessName"] == "Acme Bakery"
    assert data["leadId"] == "0000001"
    assert data["status"] == "new"
    assert data["priority"] == "medium"
    assert data["businessType"] == "Other"
    assert data["source"] == "manual"
    assert data["isArchived"] is False
    assert data["createdBy"] == OPERATOR
    assert isinstance(data["_id"], int)


def test_lead_ids_are_sequential():
    client = TestClient(app)
    ids = [create_lead(client, businessName=f"Shop {i}").json()["leadId"] for i in range(3)]
    assert ids == ["0000001", "0000002", "0000003"]


def test_lead_counter_seeds_from_existing_leads():
    db = SessionLocal()
    db.add(Lead(lead_id="0000041", business_name="Legacy", business_category="Retail", email="l@x.test"))
    db.commit()
    db.close()

    client = TestClient(app)
    response = create_lead(client)
    assert response.json()["leadId"] == "0000042"


def test_create_lead_requires_email_or_phone():
    client = TestClient(app)
    response = create_lead(client, email=None, phoneNumber="")
    assert response.status_code == 400
    assert response.json() == {"error": "Either email or phone number must be provided"}


def test_create_lead_accepts_phone_only():
    client = TestClient(app)
    response = create_lead(client, email=None)
    assert response.status_code == 200
    assert response.json()["email"] is None


def test_create_lead_requires_location():
    client = TestClient(app)
    response = create_lead(client, city=None)
    assert response.status_code == 400
    assert "Location fields" in response.json()["error"]


def test_create_lead_requires_business_fields():
    client = TestClient(app)
    response = create_lead(client, businessName="  ", businessCategory=None)
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: businessName, businessCategory"


def test_create_lead_requires_user():
    client = TestClient(app)
    payload = lead_payload()
    payload.pop("user")
    response = client.post("/api/leads", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "User information is required"


def test_create_lead_with_bearer_token_uses_signed_in_user():
    client = TestClient(app)
    token = sign_in(client, email="sam@example.com", name="Sam")
    payload = lead_payload()
    payload.pop("user")
    response = client.post("/api/leads", json=payload, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["createdBy"] == {"name": "Sam", "email": "sam@example.com"}


def test_invalid_status_rejected():
    client = TestClient(app)
    response = create_lead(client, status="won")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_create_lead_records_timeline_event():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    events = client.get("/api/timeline", params={"leadId": lead_id}).json()
    assert [event["type"] for event in events] == ["lead_created"]
    assert events[0]["createdBy"] == OPERATOR


def test_list_and_get_leads():
    client = TestClient(app)
    first = create_lead(client, businessName="First").json()
    create_lead(client, businessName="Second")

    listed = client.get("/api/leads").json()
    assert [lead["businessName"] for lead in listed] == ["Second", "First"]

    response = client.get(f"/api/leads/{first['_id']}")
    assert response.status_code == 200
    assert response.json()["leadId"] == first["leadId"]


def test_get_missing_lead_returns_404():
    client = TestClient(app)
    response = client.get("/api/leads/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Lead not found"}


def test_update_lead_records_status_change():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    response = client.put(
        f"/api/leads/{lead_id}",
        json={"status": "contacted", "notes": "Called twice"},
        headers=user_header({"name": "Ned", "email": "ned@example.com"}),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "contacted"
    assert data["notes"] == "Called twice"
    assert data["updatedBy"] == {"name": "Ned", "email": "ned@example.com"}

    events = client.get("/api/timeline", params={"leadId": lead_id}).json()
    assert events[0]["type"] == "lead_updated"
    assert events[0]["metadata"] == {"field": "status", "oldValue": "new", "newValue": "contacted"}


def test_update_lead_without_tracked_change_records_no_event():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    client.put(f"/api/leads/{lead_id}", json={"status": "new", "notes": "same"}, headers=user_header())
    events = client.get("/api/timeline", params={"leadId": lead_id}).json()
    assert [event["type"] for event in events] == ["lead_created"]


def test_update_lead_requires_user():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    response = client.put(f"/api/leads/{lead_id}", json={"status": "contacted"})
    assert response.status_code == 400
    assert response.json()["error"] == "User information is required"


def test_update_lead_rejects_malformed_user_header():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    response = client.put(f"/api/leads/{lead_id}", json={"status": "contacted"}, headers={"user": "not-json"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid user information"


def test_update_lead_cannot_clear_both_contacts():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    response = client.put(
        f"/api/leads/{lead_id}", json={"email": None, "phoneNumber": None}, headers=user_header()
    )
    assert response.status_code == 400


def test_update_lead_with_invalid_token_is_unauthorized():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    response = client.put(
        f"/api/leads/{lead_id}", json={"status": "contacted"}, headers={"Authorization": "Bearer garbage"}
    )
    assert response.status_code == 401


def test_archive_single_lead():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    response = client.post(f"/api/leads/{lead_id}/archive")
    assert response.status_code == 200
    assert response.json()["isArchived"] is True
    assert [lead["_id"] for lead in client.get("/api/leads", params={"isArchived": "true"}).json()] == [lead_id]


def test_bulk_archive():
    client = TestClient(app)
    ids = [create_lead(client, businessName=f"Shop {i}").json()["_id"] for i in range(3)]
    response = client.post("/api/leads/archive", json={"leadIds": ids[:2]})
    assert response.status_code == 200
    assert response.json()["modifiedCount"] == 2

    again = client.post("/api/leads/archive", json={"leadIds": ids[:2]})
    assert again.status_code == 404
    assert again.json()["error"] == "No leads were updated"


def test_bulk_archive_requires_ids():
    client = TestClient(app)
    response = client.post("/api/leads/archive", json={"leadIds": []})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid lead IDs"


def test_bulk_update_status_writes_events():
    client = TestClient(app)
    ids = [create_lead(client, businessName=f"Shop {i}").json()["_id"] for i in range(2)]
    response = client.post(
        "/api/leads/update",
        json={"leadIds": ids, "updates": {"status": "converted", "priority": "high"}},
        headers=user_header(),
    )
    assert response.status_code == 200
    assert response.json()["modifiedCount"] == 2
    for lead_id in ids:
        lead = client.get(f"/api/leads/{lead_id}").json()
        assert lead["status"] == "converted"
        assert lead["priority"] == "high"
        fields = {
            event["metadata"]["field"]
            for event in client.get("/api/timeline", params={"leadId": lead_id}).json()
            if event["type"] == "lead_updated"
        }
        assert fields == {"status", "priority"}


def test_bulk_update_rejects_unknown_fields():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    response = client.post("/api/leads/update", json={"leadIds": [lead_id], "updates": {"leadId": "9"}})
    assert response.status_code == 400


def test_bulk_update_requires_updates():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    response = client.post("/api/leads/update", json={"leadIds": [lead_id], "updates": {}})
    assert response.status_code == 400
    assert response.json()["error"] == "No updates provided"


def test_search_count():
    client = TestClient(app)
    create_lead(client, businessName="Blue Bottle Cafe")
    create_lead(client, businessName="Red Door Bistro", city="Dallas")
    archived = create_lead(client, businessName="Blue Moon Bar").json()["_id"]
    client.post(f"/api/leads/{archived}/archive")

    assert client.get("/api/leads/search-count", params={"query": "blue"}).json() == {"leadsCount": 1}
    assert client.get("/api/leads/search-count", params={"query": "dallas"}).json() == {"leadsCount": 1}
    assert client.get("/api/leads/search-count", params={"query": "  "}).json() == {"leadsCount": 0}


def test_search_count_treats_wildcards_literally():
    client = TestClient(app)
    create_lead(client, businessName="Plain Shop")
    assert client.get("/api/leads/search-count", params={"query": "%"}).json() == {"leadsCount": 0}


def test_export_requires_token():
    client = TestClient(app)
    create_lead(client)
    response = client.get("/api/leads/export")
    assert response.status_code == 401


def test_export_returns_csv():
    client = TestClient(app)
    token = sign_in(client)
    create_lead(client, businessName='Quote "Co"')
    response = client.get("/api/leads/export", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.splitlines()
    assert lines[0].startswith('"Lead ID","Business Name"')
    assert '"0000001","Quote ""Co"""' in lines[1]


def test_export_with_no_leads_returns_404():
    client = TestClient(app)
    token = sign_in(client)
    response = client.get("/api/leads/export", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404


def test_delete_lead_removes_tasks_and_timeline():
    client = TestClient(app)
    lead_id = create_lead(client).json()["_id"]
    client.post(
        "/api/tasks",
        json={"leadId": lead_id, "title": "Call", "description": "Intro call"},
        headers=user_header(),
    )

    response = client.delete(f"/api/leads/{lead_id}")
    assert response.status_code == 200
    assert response.json() == {"message": "Lead deleted successfully"}
    assert client.get(f"/api/leads/{lead_id}").status_code == 404

    db = SessionLocal()
    try:
        assert db.query(Task).filter(Task.lead_id == lead_id).count() == 0
        assert db.query(TimelineEvent).filter(TimelineEvent.lead_id == lead_id).count() == 0
    finally:
        db.close()
