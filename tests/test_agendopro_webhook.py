"""Tests for the inbound AgendoPro webhook (external appointment sync)."""

from datetime import date

import pytest

from app.api.models.appointment import Appointment
from app.api.models.webhook_log import WebhookLog
from app.api.services.agendopro_webhook_service import map_agendopro_status


def event(name, **data):
    body = {
        "id": "ext-1",
        "client_name": "João Pereira",
        "client_phone": "5511977776666",
        "appointment_date": "2026-11-05",
        "appointment_time": "10:00:00",
        "status": "agendado",
        "professional_id": "prof-9",
    }
    body.update(data)
    return {"event": name, "data": body, "timestamp": "2026-11-01T12:00:00Z"}


@pytest.fixture
def professional(make_user):
    return make_user(agendopro_id="prof-9")


@pytest.mark.parametrize(
    "external, internal",
    [
        ("agendado", "pending"),
        ("confirmado", "confirmed"),
        ("CANCELADO", "cancelled"),
        ("finalizado", "completed"),
        ("em_andamento", "in_progress"),
        ("desconhecido", "pending"),
        (None, "pending"),
    ],
)
def test_status_mapping(external, internal):
    assert map_agendopro_status(external) == internal


class TestAgendoProWebhook:

    def test_created_event_inserts_appointment(self, client, db, professional):
        r = client.post("/webhooks/agendopro", json=event("appointment.created"))

        assert r.status_code == 200
        assert r.json() == {"success": True, "message": "Event appointment.created processed successfully"}

        appt = db.query(Appointment).filter(Appointment.agendopro_id == "ext-1").one()
        assert appt.user_id == professional.id
        assert appt.status == "pending"
        assert appt.appointment_date == date(2026, 11, 5)
        assert appt.appointment_time == "10:00"

    def test_updated_event_changes_existing_row(self, client, db, professional):
        client.post("/webhooks/agendopro", json=event("appointment.created"))
        client.post(
            "/webhooks/agendopro",
            json=event("appointment.updated", status="confirmado", appointment_time="11:30"),
        )

        rows = db.query(Appointment).filter(Appointment.agendopro_id == "ext-1").all()
        assert len(rows) == 1
        db.refresh(rows[0])
        assert rows[0].status == "confirmed"
        assert rows[0].appointment_time == "11:30"

    @pytest.mark.parametrize("name, status", [("appointment.cancelled", "cancelled"), ("appointment.confirmed", "confirmed")])
    def test_status_events(self, client, db, professional, name, status):
        client.post("/webhooks/agendopro", json=event("appointment.created"))
        client.post("/webhooks/agendopro", json={"event": name, "data": {"id": "ext-1"}})

        appt = db.query(Appointment).filter(Appointment.agendopro_id == "ext-1").one()
        db.refresh(appt)
        assert appt.status == status

    def test_unknown_professional_is_skipped(self, client, db):
        r = client.post("/webhooks/agendopro", json=event("appointment.created", professional_id="nobody"))

        assert r.status_code == 200
        assert db.query(Appointment).count() == 0

    def test_unknown_event_is_acknowledged(self, client, db):
        r = client.post("/webhooks/agendopro", json={"event": "client.created", "data": {"id": 1}})
        assert r.status_code == 200
        assert db.query(WebhookLog).filter(WebhookLog.event_type == "client.created").count() == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"data": {"id": 1}},
            {"event": "appointment.created"},
            {"event": "appointment.created", "data": "nope"},
        ],
    )
    def test_missing_event_or_data_is_400(self, client, payload):
        assert client.post("/webhooks/agendopro", json=payload).status_code == 400

    def test_slot_collision_is_409_and_still_logged(self, client, db, professional, auth_headers):
        client.post(
            "/appointments",
            json={"client_name": "Ana", "appointment_date": "2026-11-05", "appointment_time": "10:00"},
            headers=auth_headers(professional),
        )

        r = client.post("/webhooks/agendopro", json=event("appointment.created"))

        assert r.status_code == 409
        assert r.json()["error"] == "SLOT_UNAVAILABLE"
        assert db.query(WebhookLog).filter(WebhookLog.provider == "agendopro").count() == 1
        assert db.query(Appointment).filter(Appointment.agendopro_id == "ext-1").count() == 0

    @pytest.mark.parametrize("name", ["appointment.created", "appointment.cancelled", "appointment.confirmed"])
    def test_missing_external_id_is_400(self, client, db, professional, name):
        payload = event(name)
        del payload["data"]["id"]

        r = client.post("/webhooks/agendopro", json=payload)

        assert r.status_code == 400
        assert r.json()["error"] == "MISSING_EXTERNAL_ID"
        assert db.query(Appointment).count() == 0

    def test_bad_date_is_500(self, client, professional):
        r = client.post("/webhooks/agendopro", json=event("appointment.created", appointment_date="amanhã"))
        assert r.status_code == 500
        assert "error" in r.json()

    def test_synced_appointment_blocks_the_slot(self, client, professional, auth_headers):
        client.post("/webhooks/agendopro", json=event("appointment.created", status="confirmado"))

        slots = client.get(
            "/appointments/available-slots?date=2026-11-05",
            headers=auth_headers(professional),
        ).json()["available_slots"]
        assert "10:00" not in slots
