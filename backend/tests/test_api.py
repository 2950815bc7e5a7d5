"""
HTTP API tests through the Flask test client.

Covers the front-desk flow end to end and the error-to-status mapping:
404 unknown ids, 409 wrong state / duplicates, 400 validation.
"""

from zoneinfo import ZoneInfo

import pytest

from salon.time_utils import parse_iso_datetime, to_local_date

from conftest import cut


def _start(client, auth, seat_id, **body):
    payload = {"staff_id": "s001", "member_name": "손님1", "services": [cut()]}
    payload.update(body)
    return client.post(f"/api/seats/{seat_id}/start", json=payload, headers=auth)


# =============================================================================
# FRONT DESK FLOW
# =============================================================================


class TestFrontDeskFlow:

    def test_member_visit_end_to_end(self, client, auth, staff, seats):
        resp = client.post("/api/members", json={"name": "홍길동", "phone": "010-1234-5678"}, headers=auth)
        assert resp.status_code == 201
        member_id = resp.json["member"]["id"]

        found = client.get("/api/members/search", query_string={"phone": "010-1234-5678"}, headers=auth)
        assert found.json["member"]["id"] == member_id

        seat_id = seats[0].id
        started = _start(client, auth, seat_id, member_id=member_id, member_name=None, total_price=11000)
        assert started.status_code == 201
        assert started.json["seat"]["status"] == "in_use"
        assert started.json["seat"]["current_session"]["member_name"] == "홍길동"

        done = client.post(f"/api/seats/{seat_id}/complete", headers=auth)
        assert done.status_code == 200
        assert done.json["seat"]["status"] == "available"
        assert done.json["seat"]["current_session"] is None
        assert done.json["stamps"] == 1
        assert done.json["benefit_eligible"] is False
        assert done.json["ledger"]["total_price"] == 11000

        ledger = client.get("/api/ledger", headers=auth)
        assert [e["id"] for e in ledger.json["entries"]] == [done.json["ledger"]["id"]]

        entry = client.get(f"/api/ledger/{done.json['ledger']['id']}", headers=auth)
        assert entry.json["entry"]["services"] == [cut()]

        report = client.get("/api/reports/summary", query_string={"preset": "today"}, headers=auth)
        assert report.status_code == 200
        assert report.json["total_revenue"] == 11000
        assert report.json["total_count"] == 1
        assert report.json["average_ticket"] == 11000

    def test_cancel_writes_nothing(self, client, auth, staff, seats):
        seat_id = seats[0].id
        _start(client, auth, seat_id)
        resp = client.post(f"/api/seats/{seat_id}/cancel", headers=auth)
        assert resp.status_code == 200
        assert resp.json["seat"]["status"] == "available"
        assert client.get("/api/ledger", headers=auth).json["entries"] == []

    def test_ledger_date_filter_covers_whole_day(self, client, auth, staff, seats):
        seat_id = seats[0].id
        _start(client, auth, seat_id)
        done = client.post(f"/api/seats/{seat_id}/complete", headers=auth)
        completed_at = parse_iso_datetime(done.json["ledger"]["completed_at"])
        day = to_local_date(completed_at, ZoneInfo("Asia/Seoul")).isoformat()

        same_day = client.get("/api/ledger", query_string={"start": day, "end": day}, headers=auth)
        assert same_day.status_code == 200
        assert [e["id"] for e in same_day.json["entries"]] == [done.json["ledger"]["id"]]

        bad = client.get("/api/ledger", query_string={"end": "2026-13-01"}, headers=auth)
        assert bad.status_code == 400

    def test_reservation_started_on_a_seat(self, client, auth, staff, seats):
        created = client.post("/api/reservations", json={
            "staff_id": "s002",
            "member_name": "예약손님",
            "selections": [{"service_id": "perm-basic", "length": "short"}],
            "reserved_at": "2030-01-05T02:00:00Z",
            "estimated_duration": 120,
        }, headers=auth)
        assert created.status_code == 201
        reservation_id = created.json["reservation"]["id"]
        assert created.json["reservation"]["total_price"] == 33000

        started = client.post(
            f"/api/reservations/{reservation_id}/start",
            json={"seat_id": seats[1].id},
            headers=auth,
        )
        assert started.status_code == 201
        assert started.json["reservation"]["status"] == "in_progress"
        assert started.json["reservation"]["seat_id"] == seats[1].id
        assert started.json["seat"]["current_session"]["reservation_id"] == reservation_id

        client.post(f"/api/seats/{seats[1].id}/complete", headers=auth)
        closed = client.patch(
            f"/api/reservations/{reservation_id}/status",
            json={"status": "completed"},
            headers=auth,
        )
        assert closed.status_code == 200
        assert closed.json["reservation"]["status"] == "completed"


# =============================================================================
# ERROR MAPPING
# =============================================================================


class TestErrorMapping:

    def test_start_occupied_seat_is_409(self, client, auth, staff, seats):
        _start(client, auth, seats[0].id)
        resp = _start(client, auth, seats[0].id, member_name="다른손님")
        assert resp.status_code == 409
        seat = client.get(f"/api/seats/{seats[0].id}", headers=auth).json["seat"]
        assert seat["current_session"]["member_name"] == "손님1"

    def test_complete_available_seat_is_409(self, client, auth, staff, seats):
        resp = client.post(f"/api/seats/{seats[0].id}/complete", headers=auth)
        assert resp.status_code == 409
        assert "no active session" in resp.json["error"]

    def test_unknown_seat_is_404(self, client, auth, staff, seats):
        assert _start(client, auth, 9999).status_code == 404
        assert client.get("/api/seats/9999", headers=auth).status_code == 404

    @pytest.mark.parametrize(
        "body",
        [
            {"staff_id": None},
            {"services": []},
            {"member_name": None},
            {"total_price": 1},
        ],
    )
    def test_start_validation_is_400(self, client, auth, staff, seats, body):
        resp = _start(client, auth, seats[0].id, **body)
        assert resp.status_code == 400
        seat = client.get(f"/api/seats/{seats[0].id}", headers=auth).json["seat"]
        assert seat["status"] == "available"

    def test_duplicate_phone_is_409(self, client, auth, member):
        resp = client.post("/api/members", json={"name": "다른사람", "phone": member.phone}, headers=auth)
        assert resp.status_code == 409

    def test_unknown_member_is_404(self, client, auth):
        assert client.get("/api/members/missing", headers=auth).status_code == 404
        assert client.post("/api/members/missing/stamp", headers=auth).status_code == 404

    def test_bad_report_range_is_400(self, client, auth):
        resp = client.get(
            "/api/reports/summary",
            query_string={"start": "2026-03-05", "end": "2026-03-01"},
            headers=auth,
        )
        assert resp.status_code == 400

    def test_delete_in_progress_reservation_is_409(self, client, auth, staff, seats):
        created = client.post("/api/reservations", json={
            "staff_id": "s001",
            "member_name": "예약손님",
            "services": [cut()],
            "reserved_at": "2030-01-05T02:00:00Z",
            "estimated_duration": 30,
        }, headers=auth)
        reservation_id = created.json["reservation"]["id"]
        client.post(f"/api/reservations/{reservation_id}/start", json={"seat_id": seats[0].id}, headers=auth)

        assert client.delete(f"/api/reservations/{reservation_id}", headers=auth).status_code == 409


# =============================================================================
# SMALLER ENDPOINTS
# =============================================================================


def test_stamp_endpoints(client, auth, member):
    for _ in range(12):
        client.post(f"/api/members/{member.id}/stamp", headers=auth)

    used = client.post(f"/api/members/{member.id}/use-stamps", headers=auth)
    assert used.json["stamps"] == 2

    reset = client.post(f"/api/members/{member.id}/reset-stamps", headers=auth)
    assert reset.json["member"]["stamps"] == 0


def test_staff_crud(client, auth):
    created = client.post("/api/staff", json={"name": "원장", "id": "staff-1"}, headers=auth)
    assert created.status_code == 201
    assert created.json["staff"]["id"] == "staff-1"

    assert client.post("/api/staff", json={"name": "원장", "id": "staff-1"}, headers=auth).status_code == 409

    renamed = client.patch("/api/staff/staff-1", json={"name": "대표원장"}, headers=auth)
    assert renamed.json["staff"]["name"] == "대표원장"

    assert [s["name"] for s in client.get("/api/staff", headers=auth).json["staff"]] == ["대표원장"]
    assert client.delete("/api/staff/staff-1", headers=auth).status_code == 200
    assert client.get("/api/staff/staff-1", headers=auth).status_code == 404


def test_seat_create_and_rename(client, auth):
    created = client.post("/api/seats", json={"name": "7번 좌석"}, headers=auth)
    assert created.status_code == 201
    seat_id = created.json["seat"]["id"]

    renamed = client.patch(f"/api/seats/{seat_id}", json={"name": "창가 좌석"}, headers=auth)
    assert renamed.json["seat"]["name"] == "창가 좌석"
    assert client.post("/api/seats", json={"name": "  "}, headers=auth).status_code == 400


def test_catalog_quote(client, auth):
    catalog = client.get("/api/catalog", headers=auth)
    assert "기본 서비스" in catalog.json["categories"]

    quote = client.post("/api/catalog/quote", json={
        "selections": [
            {"service_id": "perm-basic", "length": "medium"},
            {"service_id": "cut-female", "options": ["샴푸"]},
        ],
    }, headers=auth)
    assert quote.status_code == 200
    assert quote.json["total_price"] == 60000

    missing_length = client.post("/api/catalog/quote", json={
        "selections": [{"service_id": "perm-basic"}],
    }, headers=auth)
    assert missing_length.status_code == 400


def test_daily_report(client, auth):
    resp = client.get("/api/reports/daily", query_string={"year": 2026, "month": 3}, headers=auth)
    assert resp.status_code == 200
    assert resp.json["days"] == []
    assert resp.json["total_revenue"] == 0


def test_cors_headers_for_known_origin(client, db_session):
    resp = client.get("/api/health", headers={"Origin": "http://localhost:3000"})
    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

    other = client.get("/api/health", headers={"Origin": "http://evil.example"})
    assert "Access-Control-Allow-Origin" not in other.headers
