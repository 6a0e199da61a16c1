from datetime import date, datetime

from leadcrm.models import Lead, LeadQuality, LeadStatus, User
from leadcrm.services.export_service import EXPORT_HEADERS, render_csv
from tests.conftest import make_lead


def test_header_row_order():
    text = render_csv([])
    assert text == ",".join(f'"{h}"' for h in EXPORT_HEADERS)
    assert len(EXPORT_HEADERS) == 14


def test_null_cells_render_empty():
    lead = Lead(
        name="Anil", mobile="98", city="Pune", status=LeadStatus.NEW,
        created_at=datetime(2024, 3, 10, 15, 30),
    )
    lines = render_csv([lead]).split("\n")
    assert len(lines) == 2
    assert lines[1] == '"Anil","","98","Pune","new","","","","","","","","Unassigned","2024-03-10"'


def test_full_row_and_quote_escaping():
    lead = Lead(
        name="Anil",
        email="anil@mail.com",
        mobile="98",
        city="Pune",
        status=LeadStatus.CONVERTED,
        quality=LeadQuality.HOT,
        what_to_buy="Villa",
        budget="1 crore",
        professional_background="Doctor",
        notes='Said "call after 6", prefers Sunday',
        followup_date=date(2024, 4, 1),
        buying_date=date(2024, 5, 1),
        created_at=datetime(2024, 3, 10),
    )
    lead.assignee = User(full_name="Sanjay Sales", email="s@example.com")
    row = render_csv([lead]).split("\n")[1]
    assert '"Said ""call after 6"", prefers Sunday"' in row
    assert row.endswith('"2024-04-01","2024-05-01","Sanjay Sales","2024-03-10"')
    assert row.startswith('"Anil","anil@mail.com","98","Pune","converted","hot","Villa","1 crore","Doctor",')


def test_export_endpoint(client, db_session, admin_headers, days_ago):
    make_lead(db_session, name="Older", city="Pune", created_at=days_ago(2))
    make_lead(db_session, name="Newer", city="Pune", created_at=days_ago(1))
    make_lead(db_session, name="Elsewhere", city="Goa")

    response = client.get("/api/leads/export", params={"city": "Pune"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="leads_export.csv"' in response.headers["content-disposition"]

    lines = response.text.split("\n")
    assert len(lines) == 3
    assert lines[1].startswith('"Newer"')
    assert lines[2].startswith('"Older"')


def test_export_with_no_matches(client, db_session, admin_headers):
    make_lead(db_session, city="Pune")
    response = client.get("/api/leads/export", params={"city": "Goa"}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "No data found with the selected filters"
