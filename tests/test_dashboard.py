import uuid
from datetime import date

import pytest

from leadcrm.models import LeadStatus, Task, UserRole
from leadcrm.services.dashboard_service import conversion_label, conversion_rate
from tests.conftest import make_lead


@pytest.mark.parametrize("assigned, converted, label", [
    (0, 0, "No leads assigned"),
    (4, 1, "25% conversion rate"),
    (3, 1, "33% conversion rate"),
    (3, 2, "67% conversion rate"),
    (8, 1, "13% conversion rate"),
    (5, 5, "100% conversion rate"),
])
def test_conversion_label(assigned, converted, label):
    assert conversion_label(assigned, converted) == label


def test_conversion_rate_rounds_half_up():
    # 1/8 = 12.5%
    assert conversion_rate(8, 1) == 13
    assert conversion_rate(0, 0) == 0


def test_admin_dashboard(client, db_session, admin_headers, sales_user):
    make_lead(db_session, status=LeadStatus.NEW)
    make_lead(db_session, status=LeadStatus.NEW)
    lead = make_lead(db_session, status=LeadStatus.IN_PROGRESS, assigned_to=sales_user.id)
    make_lead(db_session, status=LeadStatus.CONVERTED, assigned_to=sales_user.id)
    db_session.add(Task(lead_id=lead.id, user_id=sales_user.id, task_type="call", task_date=date.today()))
    db_session.commit()

    response = client.get("/api/dashboard/admin", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {
        "total_leads": 4,
        "new_leads": 2,
        "in_progress_leads": 1,
        "converted_leads": 1,
        "total_users": 2,
        "today_tasks": 1,
    }


def test_user_dashboard(client, db_session, user_headers, sales_user, other_user):
    make_lead(db_session, status=LeadStatus.IN_PROGRESS, assigned_to=sales_user.id)
    make_lead(db_session, status=LeadStatus.ASSIGNED, assigned_to=sales_user.id)
    make_lead(db_session, status=LeadStatus.CONVERTED, assigned_to=other_user.id)

    response = client.get("/api/dashboard/me", headers=user_headers)
    assert response.json() == {
        "assigned_leads": 2,
        "in_progress_leads": 1,
        "converted_leads": 0,
        "today_tasks": 0,
    }


def test_user_performance(client, db_session, admin_headers, sales_user):
    for status in (LeadStatus.CONVERTED, LeadStatus.IN_PROGRESS, LeadStatus.LOST, LeadStatus.ASSIGNED):
        make_lead(db_session, status=status, assigned_to=sales_user.id)

    response = client.get(f"/api/dashboard/users/{sales_user.id}/performance", headers=admin_headers)
    body = response.json()
    assert body["assigned_leads"] == 4
    assert body["converted_leads"] == 1
    assert body["conversion_rate"] == 25
    assert body["conversion_label"] == "25% conversion rate"


def test_user_performance_without_leads(client, admin_headers, sales_user):
    response = client.get(f"/api/dashboard/users/{sales_user.id}/performance", headers=admin_headers)
    assert response.json()["conversion_label"] == "No leads assigned"


def test_user_performance_unknown_profile(client, admin_headers):
    response = client.get(f"/api/dashboard/users/{uuid.uuid4()}/performance", headers=admin_headers)
    assert response.status_code == 404


def test_user_list_with_counts_and_role_change(client, db_session, admin_headers, admin_user, sales_user):
    make_lead(db_session, status=LeadStatus.CONVERTED, assigned_to=sales_user.id)
    make_lead(db_session, status=LeadStatus.IN_PROGRESS, assigned_to=sales_user.id)

    response = client.get("/api/users", params={"search": "sanjay"}, headers=admin_headers)
    body = response.json()
    assert body["total"] == 1
    row = body["users"][0]
    assert row["assigned_leads"] == 2
    assert row["in_progress_leads"] == 1
    assert row["converted_leads"] == 1

    promoted = client.patch(f"/api/users/{sales_user.id}/role", json={"role": "admin"}, headers=admin_headers)
    assert promoted.status_code == 200
    db_session.refresh(sales_user)
    assert sales_user.role == UserRole.ADMIN

    bad = client.patch(f"/api/users/{sales_user.id}/role", json={"role": "owner"}, headers=admin_headers)
    assert bad.status_code == 422
