"""
Tests for the operator endpoints: authentication, status changes, schedule
planning, the deadline sweep and the work-service board.
"""
from datetime import datetime, time, timedelta

import pytest

import sandwich_slots.config as config_mod
from sandwich_slots.models import WorkingDay
from sandwich_slots.services.admission import create_order

from tests.helpers import SERVICE_DAY


@pytest.fixture
def order_id(db_session, make_working_day, users, sandwich):
    day = make_working_day(capacity=3)
    return create_order(db_session, users["alice"].id, day.time_slots[0].id, sandwich).id


def _set_status(client, auth, order_id, status):
    return client.patch(f"/admin/orders/{order_id}/status", json={"status": status}, auth=auth)


class TestAdminAuth:

    def test_requires_credentials(self, client, order_id):
        response = client.patch(f"/admin/orders/{order_id}/status", json={"status": "confirmed"})

        assert response.status_code == 401

    def test_rejects_wrong_password(self, client, order_id):
        response = _set_status(client, ("testadmin", "wrong"), order_id, "confirmed")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Basic"

    def test_unconfigured_password_answers_503(self, client, order_id, admin_auth, monkeypatch):
        monkeypatch.setattr(config_mod, "ADMIN_PASSWORD", "")

        assert _set_status(client, admin_auth, order_id, "confirmed").status_code == 503

    def test_customer_header_is_not_enough(self, client, order_id, as_user):
        response = client.get("/admin/work-service", headers=as_user("alice"))

        assert response.status_code == 401


class TestOrderStatus:

    def test_moves_order_forward(self, client, order_id, admin_auth):
        response = _set_status(client, admin_auth, order_id, "confirmed")

        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"
        assert response.json()["is_modifiable"] is False

    def test_skips_are_allowed(self, client, order_id, admin_auth):
        assert _set_status(client, admin_auth, order_id, "picked_up").json()["status"] == "picked_up"

    def test_back_to_pending_answers_422(self, client, order_id, admin_auth):
        _set_status(client, admin_auth, order_id, "ready")

        response = _set_status(client, admin_auth, order_id, "pending")

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "INVALID_STATE_TRANSITION"
        assert body["details"] == {"from": "ready", "to": "pending"}

    def test_rejected_is_final(self, client, order_id, admin_auth):
        _set_status(client, admin_auth, order_id, "rejected")

        response = _set_status(client, admin_auth, order_id, "confirmed")

        assert response.status_code == 422
        assert response.json()["details"]["from"] == "rejected"

    def test_unknown_status_answers_422(self, client, order_id, admin_auth):
        response = _set_status(client, admin_auth, order_id, "eaten")

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_FAILED"

    def test_unknown_order_answers_404(self, client, admin_auth):
        assert _set_status(client, admin_auth, 4242, "confirmed").status_code == 404


class TestWeeklySchedule:

    TEMPLATE = {
        "capacity": 5,
        "deadline_minutes": 20,
        "location": "Piazza Centrale",
        "days": {
            "tuesday": {"enabled": True, "start_time": "12:00", "end_time": "13:00"},
            "monday": {"enabled": False},
        },
    }

    def test_applies_template_to_next_week(self, client, admin_auth, db_session):
        response = client.put("/admin/schedule/weekly", json=self.TEMPLATE, auth=admin_auth)

        assert response.status_code == 200
        report = response.json()
        assert report["applied_on"] == SERVICE_DAY.isoformat()
        assert report["slots_created"] == 4
        tuesday = next(d for d in report["days"] if d["weekday"] == "tuesday")
        assert tuesday["action"] == "created"
        assert tuesday["date"] == (SERVICE_DAY + timedelta(days=1)).isoformat()
        monday = next(d for d in report["days"] if d["weekday"] == "monday")
        assert monday["date"] == (SERVICE_DAY + timedelta(days=7)).isoformat()
        assert monday["action"] == "unchanged"
        assert db_session.query(WorkingDay).count() == 1

    def test_misaligned_hours_answer_422(self, client, admin_auth, db_session):
        template = dict(self.TEMPLATE, days={"friday": {"enabled": True, "start_time": "12:05", "end_time": "13:00"}})

        response = client.put("/admin/schedule/weekly", json=template, auth=admin_auth)

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_FAILED"
        assert db_session.query(WorkingDay).count() == 0

    def test_unknown_weekday_answers_422(self, client, admin_auth):
        template = dict(self.TEMPLATE, days={"funday": {"enabled": False}})

        assert client.put("/admin/schedule/weekly", json=template, auth=admin_auth).status_code == 422

    def test_reads_week_configuration(self, client, admin_auth, make_working_day):
        make_working_day(day=SERVICE_DAY + timedelta(days=2))

        response = client.get(
            "/admin/schedule/week", params={"week_start": SERVICE_DAY.isoformat()}, auth=admin_auth,
        )

        assert response.status_code == 200
        week = response.json()
        assert week["week_start"] == SERVICE_DAY.isoformat()
        assert [d["is_configured"] for d in week["days"]] == [False, False, True, False, False, False, False]
        assert week["days"][0]["is_editable"] is False
        assert week["days"][1]["is_editable"] is True

    def test_week_defaults_to_current_week(self, client, admin_auth):
        response = client.get("/admin/schedule/week", auth=admin_auth)

        assert response.json()["week_start"] == SERVICE_DAY.isoformat()


class TestDeadlineSweep:

    def test_confirms_orders_past_their_deadline(self, client, order_id, admin_auth, as_user, frozen_clock):
        frozen_clock.now = datetime.combine(SERVICE_DAY, time(11, 31))

        response = client.post("/admin/schedule/deadline-sweep", auth=admin_auth)

        assert response.status_code == 200
        assert response.json() == {"ran_at": "2026-03-02T11:31:00", "confirmed": 1}
        order = client.get(f"/orders/{order_id}", headers=as_user("alice")).json()
        assert order["status"] == "confirmed"

    def test_leaves_orders_before_their_deadline(self, client, order_id, admin_auth):
        response = client.post("/admin/schedule/deadline-sweep", auth=admin_auth)

        assert response.json()["confirmed"] == 0


class TestWorkService:

    def test_board_for_today(self, client, order_id, admin_auth, frozen_clock):
        frozen_clock.now = datetime.combine(SERVICE_DAY, time(12, 5))

        response = client.get("/admin/work-service", auth=admin_auth)

        assert response.status_code == 200
        board = response.json()
        assert board["date"] == SERVICE_DAY.isoformat()
        assert board["current_time_slot_id"] == board["slots"][0]["id"]
        assert board["slots"][0]["pending"] == 1
        assert board["orders"][0]["id"] == order_id
        assert board["orders"][0]["user_name"] == "Alice Rossi"

    def test_board_for_another_day(self, client, admin_auth):
        other = SERVICE_DAY + timedelta(days=3)

        response = client.get("/admin/work-service", params={"date": other.isoformat()}, auth=admin_auth)

        assert response.status_code == 200
        assert response.json()["working_day_id"] is None
        assert response.json()["current_time_slot_id"] is None
