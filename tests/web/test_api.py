import io

import pytest

from fakes import DOWNTOWN, FakeAIService, north_of
from fieldforce.config import FieldForceSettings
from fieldforce.container import assemble_container
from fieldforce.main import create_app


@pytest.fixture
def app(repos, tmp_path):
    container = assemble_container(
        settings=FieldForceSettings(blob_root=str(tmp_path)),
        users_repo=repos.users,
        branches_repo=repos.branches,
        attendance_repo=repos.attendance,
        locations_repo=repos.locations,
        vehicles_repo=repos.vehicles,
        expenses_repo=repos.expenses,
        blobs=repos.blobs,
        ai_service=FakeAIService(),
    )
    return create_app(container, settings_module="fieldforce.config.testing")


def _login(app, username):
    client = app.test_client()
    resp = client.post("/api/login", json={"username": username, "password": "pw"})
    assert resp.status_code == 200, resp.get_json()
    return client


def _pos(meters):
    c = north_of(DOWNTOWN, meters)
    return {"lat": c.latitude, "lng": c.longitude}


def test_requires_login(app):
    resp = app.test_client().get("/api/me")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "authentication"


def test_bad_login(app):
    resp = app.test_client().post("/api/login", json={"username": "officer_a", "password": "nope"})
    assert resp.status_code == 401


def test_me_and_logout(app):
    client = _login(app, "officer_a")
    me = client.get("/api/me").get_json()["user"]
    assert me["role"] == "officer"
    assert me["branch_name"] == "Downtown Branch"

    client.post("/api/logout")
    assert client.get("/api/me").status_code == 401


def test_attendance_flow(app):
    client = _login(app, "officer_a")

    far = client.post("/api/attendance/check-in", json=_pos(5000))
    assert far.status_code == 422
    body = far.get_json()
    assert body["error"] == "geofence_violation"
    assert body["overage_meters"] == pytest.approx(4750, abs=1)
    assert client.get("/api/attendance/today").get_json()["state"] == "NOT_STARTED"

    ok = client.post("/api/attendance/check-in", json=_pos(50))
    assert ok.status_code == 201
    assert ok.get_json()["record"]["status"] == "present"

    dup = client.post("/api/attendance/check-in", json=_pos(50))
    assert dup.status_code == 409
    assert dup.get_json()["error"] == "duplicate_check_in"

    assert client.get("/api/attendance/today").get_json()["state"] == "CHECKED_IN"

    out = client.post("/api/attendance/check-out", json=_pos(3000))
    assert out.status_code == 200
    assert out.get_json()["record"]["status"] == "on-field"

    again = client.post("/api/attendance/check-out", json=_pos(10))
    assert again.status_code == 409
    assert again.get_json()["error"] == "already_checked_out"

    history = client.get("/api/attendance/history").get_json()["rows"]
    assert history[0]["state"] == "CHECKED_OUT"


def test_check_in_without_position_is_428(app):
    client = _login(app, "officer_a")
    resp = client.post("/api/attendance/check-in", json={})
    assert resp.status_code == 428
    assert resp.get_json()["error"] == "location_unavailable"


def test_check_out_before_check_in_is_409(app):
    client = _login(app, "officer_a")
    resp = client.post("/api/attendance/check-out", json=_pos(10))
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "not_checked_in"


def test_missing_branch_is_configuration_conflict(app):
    client = _login(app, "officer_nobranch")
    resp = client.post("/api/attendance/check-in", json=_pos(10))
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "configuration"


def test_location_ingest_and_live_feed_visibility(app):
    officer = _login(app, "officer_a")
    assert officer.post("/api/locations", json={"lat": 123, "lng": 90}).status_code == 400
    assert officer.post("/api/locations", json=_pos(10)).status_code == 201

    other_branch = _login(app, "officer_b")
    assert other_branch.post("/api/locations", json={"lat": 23.7940, "lng": 90.4043}).status_code == 201

    admin = _login(app, "downtown_admin")
    live = admin.get("/api/live").get_json()
    assert [loc["user_id"] for loc in live["locations"]] == [3]
    assert live["markers"][0]["color"] == "online"

    super_admin = _login(app, "super_admin")
    assert len(super_admin.get("/api/live").get_json()["locations"]) == 2


def test_tracking_toggle(app):
    client = _login(app, "officer_a")
    client.post("/api/attendance/check-in", json=_pos(10))

    started = client.post("/api/tracking/start", json=_pos(2500)).get_json()
    assert started["tracking"] is True
    assert started["status"] == "on-field"

    stopped = client.post("/api/tracking/stop", json={}).get_json()
    assert stopped["tracking"] is False
    assert stopped["status"] is None


def test_dashboard_is_admin_only(app):
    assert _login(app, "officer_a").get("/api/dashboard").status_code == 403

    resp = _login(app, "downtown_admin").get("/api/dashboard")
    assert resp.status_code == 200
    assert resp.get_json()["total_staff"] == 2

    insight = _login(app, "super_admin").get("/api/dashboard/insight").get_json()
    assert insight["summary"] == "0 checked in"


def test_field_advice(app):
    advice = _login(app, "officer_a").get("/api/advice?context=Downtown").get_json()["advice"]
    assert advice == "advice for Officer A (officer) at Downtown"


def test_expense_upload_and_report(app, repos):
    client = _login(app, "driver_c")
    resp = client.post(
        "/api/expenses",
        data={
            "date": "2026-03-02",
            "type": "fuel",
            "amount": "600",
            "vehicle_id": "10",
            "fuel_type": "lpg",
            "unit_price": "60",
            "voucher": (io.BytesIO(b"jpegbytes"), "voucher.jpg"),
        },
        content_type="multipart/form-data",
    )
    assert resp.status_code == 201, resp.get_json()
    expense = resp.get_json()["expense"]
    assert expense["quantity"] == 10.0
    assert expense["voucher_url"].endswith(".jpg")

    listed = client.get("/api/expenses?month=2026-03").get_json()["expenses"]
    assert len(listed) == 1

    report = client.get("/api/expenses/report?month=2026-03").get_json()
    assert report["rows"][0]["vehicles"]["10"]["lpg"] == 600.0
    assert report["rows"][0]["total"] == 600.0


def test_expense_validation_error(app):
    client = _login(app, "driver_c")
    resp = client.post("/api/expenses", json={"date": "2026-03-02", "type": "other", "amount": "-1"})
    assert resp.status_code == 400


def test_attendance_report_scoped_to_self(app):
    client = _login(app, "officer_a")
    client.post("/api/attendance/check-in", json=_pos(10))
    data = client.get("/api/reports/attendance").get_json()
    assert [r["full_name"] for r in data["rows"]] == ["Officer A"]


def test_unknown_route_is_json_404(app):
    resp = app.test_client().get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_register_and_login(app):
    client = app.test_client()
    resp = client.post(
        "/api/register",
        json={"full_name": "Field Rookie", "username": "rookie", "password": "secret1", "branch_id": "1"},
    )
    assert resp.status_code == 201, resp.get_json()
    assert resp.get_json()["user"]["role"] == "officer"

    admin = client.post(
        "/api/register", json={"full_name": "X", "username": "x", "password": "secret1", "role": "super_admin"}
    )
    assert admin.status_code == 403

    login = client.post("/api/login", json={"username": "rookie", "password": "secret1"})
    assert login.status_code == 200


def test_profile_update_refreshes_session_name(app):
    client = _login(app, "officer_a")
    resp = client.put("/api/me/profile", json={"full_name": "Officer Alpha", "phone_number": "017", "staff_pin": "12"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["phone_number"] == "017"
    assert client.get("/api/me").get_json()["user"]["full_name"] == "Officer Alpha"
    assert client.get("/api/me/profile").get_json()["user"]["staff_pin"] == "12"


def test_remove_user(app, repos):
    client = _login(app, "downtown_admin")
    client_officer = _login(app, "officer_a")
    client_officer.post("/api/locations", json=_pos(10))

    assert client.delete("/api/users/2").status_code == 403
    assert client.delete("/api/users/4").status_code == 403
    assert client_officer.delete("/api/users/5").status_code == 403

    assert client.delete("/api/users/3").status_code == 200
    assert repos.users.get_by_id(3) is None
    assert repos.locations.samples == []


def test_admin_creates_user(app):
    resp = _login(app, "super_admin").post(
        "/api/users",
        json={"full_name": "Uptown Lead", "username": "uptown_lead", "password": "secret1", "role": "branch_admin", "branch_id": 2},
    )
    assert resp.status_code == 201
    assert resp.get_json()["user"]["branch_id"] == 2
