from __future__ import annotations

import pytest

from src.recruit_portal.recruit_portal.main import create_app
from tests.fakes import PASSWORD, make_container


@pytest.fixture
def container():
    return make_container()


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


def login(client, username):
    resp = client.post("/auth/login", json={"username": username, "password": PASSWORD})
    assert resp.status_code == 200, resp.get_json()
    return resp


def test_requests_without_session_are_401(app):
    client = app.test_client()

    resp = client.get("/timesheets")

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "authentication_error"


def test_bad_login_is_401(app):
    resp = app.test_client().post("/auth/login", json={"username": "cam", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_me_and_logout(app):
    client = app.test_client()
    login(client, "cam")

    assert client.get("/auth/me").get_json()["data"]["username"] == "cam"
    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401


def test_candidate_submits_week_and_admin_approves_and_invoices(app):
    cam = app.test_client()
    login(cam, "cam")
    resp = cam.post("/timesheets", json={"week_start_date": "2024-03-04", "day_hours": [8, 8, 8, 8, 8, 0, 0]})

    assert resp.status_code == 201
    body = resp.get_json()["data"]
    assert body["total_weekly_hours"] == "40.0"
    assert body["total_weekly_amount"] == "1000.00"
    assert body["status"] == "submitted"
    timesheet_id = body["timesheet_id"]

    dup = cam.post("/timesheets", json={"week_start_date": "2024-03-04", "day_hours": [1, 0, 0, 0, 0, 0, 0]})
    assert dup.status_code == 400
    assert dup.get_json()["error"] == "validation_error"
    assert "week_start_date" in dup.get_json()["fields"]

    admin = app.test_client()
    login(admin, "admin")
    approved = admin.patch(f"/admin/timesheets/{timesheet_id}/approve")
    assert approved.status_code == 200
    assert approved.get_json()["data"]["status"] == "approved"

    again = admin.patch(f"/admin/timesheets/{timesheet_id}/approve")
    assert again.status_code == 400
    assert again.get_json()["error"] == "state_conflict"

    edit = cam.put(f"/timesheets/{timesheet_id}", json={"monday_hours": 2})
    assert edit.status_code == 403

    invoice = admin.post("/admin/generate-invoice", json={"timesheet_id": timesheet_id})
    assert invoice.status_code == 201
    assert invoice.get_json()["data"]["invoice_number"].startswith("INV-")

    mine = cam.get("/invoices").get_json()
    assert mine["meta"]["total"] == 1
    assert mine["data"][0]["total_amount"] == "1000.00"

    biweekly = admin.get("/admin/biweekly-timesheets").get_json()
    assert biweekly["data"][0]["is_partial"] is True
    assert cam.get("/timesheets/monthly").get_json()["data"][0]["total_hours"] == "40.0"

    dashboard = admin.get("/admin/dashboard").get_json()["data"]
    assert dashboard["timesheets"]["by_status"]["approved"] == 1


def test_reject_requires_reason(app):
    cam = app.test_client()
    login(cam, "cam")
    ts_id = cam.post("/timesheets", json={"week_start_date": "2024-03-04", "monday_hours": 8}).get_json()["data"][
        "timesheet_id"
    ]
    admin = app.test_client()
    login(admin, "admin")

    assert admin.patch(f"/admin/timesheets/{ts_id}/reject", json={}).status_code == 400
    resp = admin.patch(f"/admin/timesheets/{ts_id}/reject", json={"rejection_reason": "Missing days"})
    assert resp.get_json()["data"]["rejection_reason"] == "Missing days"


def test_admin_routes_forbidden_for_candidates(app):
    cam = app.test_client()
    login(cam, "cam")

    for path in ("/admin/timesheets", "/admin/invoices", "/admin/dashboard", "/admin/billing", "/admin/audit"):
        resp = cam.get(path)
        assert resp.status_code == 403, path
        assert resp.get_json()["error"] == "authorization_error"


def test_admin_list_filters_and_pagination_meta(app):
    cam = app.test_client()
    login(cam, "cam")
    for start in ("2024-03-04", "2024-03-11", "2024-03-18"):
        cam.post("/timesheets", json={"week_start_date": start, "monday_hours": 8})

    admin = app.test_client()
    login(admin, "admin")
    body = admin.get("/admin/timesheets?status=all&page=2&limit=2").get_json()

    assert body["meta"] == {"total": 3, "page": 2, "limit": 2, "pages": 2}
    assert len(body["data"]) == 1
    assert admin.get("/admin/timesheets?status=pending_approval").get_json()["meta"]["total"] == 0
    assert admin.get("/admin/timesheets?status=bogus").status_code == 400


def test_unknown_timesheet_is_404(app):
    admin = app.test_client()
    login(admin, "admin")

    resp = admin.get("/timesheets/999")

    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "error": "not_found", "message": "Timesheet not found"}


def test_billing_endpoints(app):
    admin = app.test_client()
    login(admin, "admin")

    saved = admin.put("/admin/billing/3", json={"hourly_rate": "42.50", "currency": "gbp", "pay_rate": "30"})
    assert saved.status_code == 200
    assert saved.get_json()["data"]["margin_per_hour"] == "12.50"

    bad = admin.put("/admin/billing/3", json={"working_days_per_week": 4})
    assert bad.status_code == 400
    assert "working_days_per_week" in bad.get_json()["fields"]

    cam = app.test_client()
    login(cam, "cam")
    assert cam.get("/billing/me").get_json()["data"]["hourly_rate"] == "25.00"
