import uuid
from datetime import datetime

from leadcrm.models import Lead, LeadQuality, LeadStatus, SiteVisit, Task
from tests.conftest import make_lead


NEW_LEAD = {
    "name": "Rohit Sharma",
    "email": "rohit@mail.com",
    "mobile": "9812345678",
    "city": "Pune",
    "what_to_buy": "2BHK",
    "budget": "60 lakhs",
}


def test_admin_creates_unassigned_new_lead(client, admin_headers):
    response = client.post("/api/leads", json=NEW_LEAD, headers=admin_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "new"
    assert body["assigned_to"] is None
    assert body["quality"] is None


def test_user_lead_is_self_assigned(client, user_headers, sales_user):
    response = client.post("/api/leads", json=NEW_LEAD, headers=user_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "assigned"
    assert body["assigned_to"] == str(sales_user.id)
    assert body["assignee_name"] == "Sanjay Sales"


def test_create_requires_name_mobile_city(client, admin_headers):
    response = client.post("/api/leads", json={**NEW_LEAD, "city": "   "}, headers=admin_headers)
    assert response.status_code == 422


def test_create_rejects_unknown_quality(client, admin_headers):
    response = client.post("/api/leads", json={**NEW_LEAD, "quality": "lukewarm"}, headers=admin_headers)
    assert response.status_code == 422


def test_status_outside_taxonomy_rejected(client, db_session, admin_headers):
    lead = make_lead(db_session)
    response = client.patch(f"/api/leads/{lead.id}/status", json={"status": "closed"}, headers=admin_headers)
    assert response.status_code == 422
    db_session.refresh(lead)
    assert lead.status == LeadStatus.NEW


def test_status_change_any_to_any(client, db_session, admin_headers):
    lead = make_lead(db_session, status=LeadStatus.CONVERTED)
    for target in ("new", "site_visit_scheduled", "lost"):
        response = client.patch(f"/api/leads/{lead.id}/status", json={"status": target}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == target


def test_reassignment_overwrites(client, db_session, admin_headers, sales_user, other_user):
    lead = make_lead(db_session)

    first = client.patch(f"/api/leads/{lead.id}/assign", json={"user_id": str(sales_user.id)}, headers=admin_headers)
    assert first.status_code == 200
    assert first.json()["status"] == "in_progress"

    second = client.patch(f"/api/leads/{lead.id}/assign", json={"user_id": str(other_user.id)}, headers=admin_headers)
    assert second.status_code == 200

    db_session.refresh(lead)
    assert lead.assigned_to == other_user.id
    assert lead.status == LeadStatus.IN_PROGRESS


def test_assign_to_missing_profile(client, db_session, admin_headers):
    lead = make_lead(db_session)
    response = client.patch(f"/api/leads/{lead.id}/assign", json={"user_id": str(uuid.uuid4())}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


def test_assign_requires_admin(client, db_session, user_headers, sales_user):
    lead = make_lead(db_session)
    response = client.patch(f"/api/leads/{lead.id}/assign", json={"user_id": str(sales_user.id)}, headers=user_headers)
    assert response.status_code == 403


def test_list_filter_conjunction(client, db_session, admin_headers):
    make_lead(db_session, name="A", status=LeadStatus.NEW, city="Pune")
    make_lead(db_session, name="B", status=LeadStatus.NEW, city="Mumbai")
    make_lead(db_session, name="C", status=LeadStatus.CONVERTED, city="Pune")

    response = client.get("/api/leads", params={"status": "new", "city": "Pune"}, headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert [l["name"] for l in body["leads"]] == ["A"]


def test_list_all_sentinel(client, db_session, admin_headers):
    make_lead(db_session, name="A")
    make_lead(db_session, name="B", city="Mumbai")
    response = client.get("/api/leads", params={"status": "all", "city": "all"}, headers=admin_headers)
    assert response.json()["total"] == 2


def test_list_unknown_status_filter(client, admin_headers):
    response = client.get("/api/leads", params={"status": "pending"}, headers=admin_headers)
    assert response.status_code == 422


def test_list_newest_first_with_pagination(client, db_session, admin_headers, days_ago):
    for n, name in enumerate(["today", "yesterday", "older", "oldest"]):
        make_lead(db_session, name=name, created_at=days_ago(n))

    response = client.get("/api/leads", params={"skip": 1, "limit": 2}, headers=admin_headers)
    body = response.json()
    assert body["total"] == 4
    assert [l["name"] for l in body["leads"]] == ["yesterday", "older"]


def test_budget_filter_through_api(client, db_session, admin_headers):
    make_lead(db_session, name="cheap", budget="20 lakhs")
    make_lead(db_session, name="fits", budget="75 lakhs")
    make_lead(db_session, name="pricey", budget="2 crore")

    response = client.get("/api/leads", params={"budget_min": 50, "budget_max": 100}, headers=admin_headers)
    body = response.json()
    assert body["total"] == 1
    assert body["leads"][0]["name"] == "fits"


def test_user_sees_only_own_leads(client, db_session, user_headers, sales_user, other_user):
    make_lead(db_session, name="mine", assigned_to=sales_user.id, status=LeadStatus.ASSIGNED)
    theirs = make_lead(db_session, name="theirs", assigned_to=other_user.id)
    make_lead(db_session, name="unassigned")

    response = client.get("/api/leads", headers=user_headers)
    assert [l["name"] for l in response.json()["leads"]] == ["mine"]

    assert client.get(f"/api/leads/{theirs.id}", headers=user_headers).status_code == 404
    update = client.put(f"/api/leads/{theirs.id}", json={"notes": "hi"}, headers=user_headers)
    assert update.status_code == 404


def test_partial_update(client, db_session, user_headers, sales_user):
    lead = make_lead(
        db_session,
        assigned_to=sales_user.id,
        quality=LeadQuality.WARM,
        budget="40 lakhs",
        notes="Called once",
    )
    response = client.put(
        f"/api/leads/{lead.id}",
        json={"quality": "", "followup_date": "2024-06-01", "notes": "Wants east facing"},
        headers=user_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["quality"] is None
    assert body["followup_date"] == "2024-06-01"
    assert body["notes"] == "Wants east facing"
    assert body["budget"] == "40 lakhs"


def test_update_cannot_blank_required_field(client, db_session, admin_headers):
    lead = make_lead(db_session)
    response = client.put(f"/api/leads/{lead.id}", json={"mobile": ""}, headers=admin_headers)
    assert response.status_code == 422


def test_lead_detail_includes_site_visits(client, db_session, admin_headers):
    lead = make_lead(db_session)
    client.post(
        f"/api/leads/{lead.id}/site-visits",
        json={"scheduled_date": "2024-07-01", "scheduled_time": "11:00:00"},
        headers=admin_headers,
    )
    response = client.get(f"/api/leads/{lead.id}", headers=admin_headers)
    assert response.status_code == 200
    assert len(response.json()["site_visits"]) == 1


def test_delete_cascades(client, db_session, admin_headers, admin_user):
    lead = make_lead(db_session)
    lead_id = lead.id
    db_session.add(SiteVisit(lead_id=lead_id, scheduled_date=lead.created_at.date(),
                             scheduled_time=lead.created_at.time()))
    db_session.add(Task(lead_id=lead_id, user_id=admin_user.id, task_type="call",
                        task_date=lead.created_at.date()))
    db_session.commit()

    response = client.delete(f"/api/leads/{lead_id}", headers=admin_headers)
    assert response.status_code == 204

    db_session.expire_all()
    assert db_session.get(Lead, lead_id) is None
    assert db_session.query(SiteVisit).count() == 0
    assert db_session.query(Task).count() == 0


def test_delete_requires_admin(client, db_session, user_headers, sales_user):
    lead = make_lead(db_session, assigned_to=sales_user.id)
    assert client.delete(f"/api/leads/{lead.id}", headers=user_headers).status_code == 403


def test_filter_options(client, db_session, admin_headers, sales_user):
    make_lead(db_session, city="Pune")
    make_lead(db_session, city="Mumbai")
    make_lead(db_session, city="Pune")

    response = client.get("/api/leads/filter-options", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["cities"] == ["Mumbai", "Pune"]
    assert [u["full_name"] for u in body["users"]] == ["Sanjay Sales"]


def test_date_range_through_api(client, db_session, admin_headers):
    make_lead(db_session, name="before", created_at=datetime(2024, 3, 4, 23, 59, 59, 999999))
    make_lead(db_session, name="first", created_at=datetime(2024, 3, 5, 0, 0, 0))
    make_lead(db_session, name="last", created_at=datetime(2024, 3, 5, 23, 59, 59, 500000))
    make_lead(db_session, name="after", created_at=datetime(2024, 3, 6, 0, 0, 0))

    response = client.get(
        "/api/leads",
        params={"date_from": "2024-03-05", "date_to": "2024-03-05"},
        headers=admin_headers,
    )
    body = response.json()
    assert body["total"] == 2
    assert [l["name"] for l in body["leads"]] == ["last", "first"]


def test_search_treats_wildcards_literally(client, db_session, admin_headers):
    make_lead(db_session, name="Ravi", what_to_buy="2BHK")
    make_lead(db_session, name="Flat_Hunter", what_to_buy="100% loan")

    percent = client.get("/api/leads", params={"search": "%"}, headers=admin_headers).json()
    assert percent["total"] == 0

    underscore = client.get("/api/leads", params={"search": "_"}, headers=admin_headers).json()
    assert [l["name"] for l in underscore["leads"]] == ["Flat_Hunter"]

    what = client.get("/api/leads", params={"what_to_buy": "0%"}, headers=admin_headers).json()
    assert [l["name"] for l in what["leads"]] == ["Flat_Hunter"]
