import io

from openpyxl import Workbook

from leadcrm.core.config import settings
from leadcrm.models import Lead, LeadStatus
from leadcrm.services.import_service import parse_rows

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
HEADER = ("Name", "Email", "Mobile", "City")


def workbook_bytes(*rows):
    wb = Workbook()
    ws = wb.active
    ws.append(HEADER)
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def upload(client, headers, content, filename="leads.xlsx"):
    return client.post(
        "/api/leads/import",
        files={"file": (filename, content, XLSX_TYPE)},
        headers=headers,
    )


def test_parse_rows_skips_header_and_incomplete_rows():
    rows = [
        HEADER,
        ("Anil", "anil@mail.com", "9811111111", "Pune"),
        ("Bina", "bina@mail.com", "", "Mumbai"),
    ]
    accepted, skipped = parse_rows(rows)
    assert [r.name for r in accepted] == ["Anil"]
    assert skipped == 1


def test_parse_rows_trims_and_nulls_empty_email():
    accepted, _ = parse_rows([HEADER, ("  Anil ", "  ", 9811111111.0, " Pune ")])
    row = accepted[0]
    assert row.name == "Anil"
    assert row.email is None
    assert row.mobile == "9811111111"
    assert row.city == "Pune"


def test_parse_rows_short_rows_and_blank_lines():
    accepted, skipped = parse_rows([HEADER, ("Anil",), (None, None, None, None)])
    assert accepted == []
    assert skipped == 1


def test_import_inserts_new_unassigned(client, db_session, admin_headers):
    content = workbook_bytes(
        ("Anil", "anil@mail.com", 9811111111, "Pune"),
        ("Bina", "bina@mail.com", None, "Mumbai"),
    )
    response = upload(client, admin_headers, content)
    assert response.status_code == 200
    body = response.json()
    assert body["imported"] == 1
    assert body["skipped"] == 1

    leads = db_session.query(Lead).all()
    assert len(leads) == 1
    assert leads[0].name == "Anil"
    assert leads[0].mobile == "9811111111"
    assert leads[0].status == LeadStatus.NEW
    assert leads[0].assigned_to is None


def test_import_with_no_valid_rows(client, db_session, admin_headers):
    content = workbook_bytes(("Only Name", None, None, None))
    response = upload(client, admin_headers, content)
    assert response.status_code == 400
    assert response.json()["detail"] == "No valid leads found in the file"
    assert db_session.query(Lead).count() == 0


def test_import_rejects_legacy_xls(client, admin_headers):
    response = upload(client, admin_headers, b"\xd0\xcf\x11\xe0", filename="leads.xls")
    assert response.status_code == 400


def test_import_rejects_unreadable_workbook(client, admin_headers):
    response = upload(client, admin_headers, b"not a spreadsheet")
    assert response.status_code == 400


def test_import_requires_admin(client, user_headers):
    response = upload(client, user_headers, workbook_bytes(("Anil", None, "98", "Pune")))
    assert response.status_code == 403


def test_import_rejects_oversized_upload(client, db_session, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 1024)
    content = workbook_bytes(("Anil", None, "9811111111", "Pune"))
    assert len(content) > 1024

    response = upload(client, admin_headers, content)
    assert response.status_code == 400
    assert response.json()["detail"].startswith("File too large")
    assert db_session.query(Lead).count() == 0
