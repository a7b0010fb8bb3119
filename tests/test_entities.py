"""Tests for services, calendars, medical records, settings and sessions."""

from datetime import datetime, timedelta

import pytest

from app.api.models.appointment import Appointment
from app.core.constants import MAX_FILE_SIZE


# =============================================================================
# Services
# =============================================================================

class TestServices:

    def test_crud_and_deactivate(self, client, user, auth_headers):
        headers = auth_headers(user)
        created = client.post(
            "/services",
            json={"name": "Limpeza", "duration_minutes": 45, "price": "200.00"},
            headers=headers,
        )
        assert created.status_code == 201
        service_id = created.json()["id"]

        updated = client.put(f"/services/{service_id}", json={"price": "220.50"}, headers=headers)
        assert updated.json()["name"] == "Limpeza"

        client.post(f"/services/{service_id}/deactivate", headers=headers)
        assert client.get("/services?only_active=true", headers=headers).json() == []
        assert len(client.get("/services", headers=headers).json()) == 1

        # a página pública só mostra serviços ativos
        assert client.get(f"/booking/{user.id}/services").json() == []

    def test_delete_keeps_appointments(self, client, db, user, auth_headers):
        headers = auth_headers(user)
        service_id = client.post("/services", json={"name": "Consulta"}, headers=headers).json()["id"]
        appt = client.post(
            "/appointments",
            json={
                "client_name": "Ana",
                "appointment_date": "2026-11-02",
                "appointment_time": "09:00",
                "service_id": service_id,
            },
            headers=headers,
        ).json()
        assert appt["service_name"] == "Consulta"

        assert client.delete(f"/services/{service_id}", headers=headers).status_code == 204

        row = db.get(Appointment, appt["id"])
        db.refresh(row)
        assert row.service_id is None

    def test_null_on_required_field_is_422(self, client, user, auth_headers):
        headers = auth_headers(user)
        service_id = client.post("/services", json={"name": "Consulta", "description": "Primeira"}, headers=headers).json()["id"]

        for field in ("name", "duration_minutes", "is_active"):
            r = client.put(f"/services/{service_id}", json={field: None}, headers=headers)
            assert r.status_code == 422, field

        # colunas opcionais aceitam null
        cleared = client.put(f"/services/{service_id}", json={"description": None, "price": None}, headers=headers)
        assert cleared.status_code == 200
        assert cleared.json()["description"] is None
        assert cleared.json()["name"] == "Consulta"

    def test_invalid_duration_is_422(self, client, user, auth_headers):
        r = client.post("/services", json={"name": "Rápido", "duration_minutes": 1}, headers=auth_headers(user))
        assert r.status_code == 422


# =============================================================================
# Calendars
# =============================================================================

class TestCalendars:

    def test_list_includes_appointment_count(self, client, db, user, auth_headers):
        headers = auth_headers(user)
        cal = client.post("/calendars", json={"name": "Consultório 1"}, headers=headers).json()
        assert cal["color"] == "#3b82f6"

        for time in ("09:00", "09:30"):
            client.post(
                "/appointments",
                json={
                    "client_name": "Ana",
                    "appointment_date": "2026-11-02",
                    "appointment_time": time,
                    "calendar_id": cal["id"],
                },
                headers=headers,
            )

        listed = client.get("/calendars", headers=headers).json()
        assert listed[0]["appointments_count"] == 2

    def test_schedule_validation(self, client, user, auth_headers):
        headers = auth_headers(user)
        cal_id = client.post("/calendars", json={"name": "Agenda"}, headers=headers).json()["id"]

        bad_range = {"day_of_week": 1, "start_time": "12:00", "end_time": "08:00"}
        bad_day = {"day_of_week": 7, "start_time": "08:00", "end_time": "12:00"}
        assert client.post(f"/calendars/{cal_id}/schedules", json=bad_range, headers=headers).status_code == 422
        assert client.post(f"/calendars/{cal_id}/schedules", json=bad_day, headers=headers).status_code == 422

        client.post(
            f"/calendars/{cal_id}/schedules",
            json={"day_of_week": 3, "start_time": "14:00", "end_time": "18:00"},
            headers=headers,
        )
        monday = client.post(
            f"/calendars/{cal_id}/schedules",
            json={"day_of_week": 1, "start_time": "8:00", "end_time": "12:00"},
            headers=headers,
        ).json()
        assert monday["start_time"] == "08:00"

        days = [s["day_of_week"] for s in client.get(f"/calendars/{cal_id}/schedules", headers=headers).json()]
        assert days == [1, 3]

        r = client.put(
            f"/calendars/{cal_id}/schedules/{monday['id']}",
            json={"end_time": "07:00"},
            headers=headers,
        )
        assert r.status_code == 400

    def test_null_on_required_field_is_422(self, client, user, auth_headers):
        headers = auth_headers(user)
        cal_id = client.post("/calendars", json={"name": "Agenda"}, headers=headers).json()["id"]
        schedule_id = client.post(
            f"/calendars/{cal_id}/schedules",
            json={"day_of_week": 1, "start_time": "08:00", "end_time": "12:00"},
            headers=headers,
        ).json()["id"]

        assert client.put(f"/calendars/{cal_id}", json={"name": None}, headers=headers).status_code == 422
        assert client.put(f"/calendars/{cal_id}", json={"color": None}, headers=headers).status_code == 422
        for field in ("day_of_week", "start_time", "end_time", "is_active"):
            r = client.put(f"/calendars/{cal_id}/schedules/{schedule_id}", json={field: None}, headers=headers)
            assert r.status_code == 422, field

        schedules = client.get(f"/calendars/{cal_id}/schedules", headers=headers).json()
        assert schedules[0]["start_time"] == "08:00"

    def test_permissions_grant_and_revoke(self, client, make_user, auth_headers):
        owner = make_user()
        guest = make_user()
        headers = auth_headers(owner)
        cal_id = client.post("/calendars", json={"name": "Agenda"}, headers=headers).json()["id"]

        granted = client.post(
            f"/calendars/{cal_id}/permissions",
            json={"user_id": guest.id, "permission_type": "view"},
            headers=headers,
        ).json()
        assert granted["granted_by"] == owner.id

        regrant = client.post(
            f"/calendars/{cal_id}/permissions",
            json={"user_id": guest.id, "permission_type": "edit"},
            headers=headers,
        ).json()
        assert regrant["id"] == granted["id"]
        assert regrant["permission_type"] == "edit"

        assert client.delete(f"/calendars/{cal_id}/permissions/{granted['id']}", headers=headers).status_code == 204
        assert client.get(f"/calendars/{cal_id}/permissions", headers=headers).json() == []

    def test_other_users_cannot_see_calendar(self, client, make_user, auth_headers):
        owner = make_user()
        other = make_user()
        cal_id = client.post("/calendars", json={"name": "Privada"}, headers=auth_headers(owner)).json()["id"]

        assert client.get(f"/calendars/{cal_id}/schedules", headers=auth_headers(other)).status_code == 404


# =============================================================================
# Medical records
# =============================================================================

class TestMedicalRecords:

    @pytest.fixture
    def doctor(self, make_user):
        return make_user(service_type="medicina")

    def test_non_health_services_are_forbidden(self, client, make_user, auth_headers):
        salon = make_user(service_type="estetica")
        r = client.get("/medical-records", headers=auth_headers(salon))
        assert r.status_code == 403

    def test_crud(self, client, doctor, auth_headers):
        headers = auth_headers(doctor)
        created = client.post(
            "/medical-records",
            json={"patient_name": "Carlos", "date_of_birth": "1990-05-10", "diagnosis": "Gripe"},
            headers=headers,
        )
        assert created.status_code == 201
        record_id = created.json()["id"]

        client.put(f"/medical-records/{record_id}", json={"treatment": "Repouso"}, headers=headers)
        record = client.get(f"/medical-records/{record_id}", headers=headers).json()
        assert record["treatment"] == "Repouso"
        assert record["files"] == []

        assert client.delete(f"/medical-records/{record_id}", headers=headers).status_code == 204
        assert client.get(f"/medical-records/{record_id}", headers=headers).status_code == 404

    def test_null_patient_name_is_422(self, client, doctor, auth_headers):
        headers = auth_headers(doctor)
        record_id = client.post(
            "/medical-records",
            json={"patient_name": "Carlos", "diagnosis": "Gripe"},
            headers=headers,
        ).json()["id"]

        assert client.put(f"/medical-records/{record_id}", json={"patient_name": None}, headers=headers).status_code == 422

        cleared = client.put(f"/medical-records/{record_id}", json={"diagnosis": None}, headers=headers)
        assert cleared.status_code == 200
        assert cleared.json()["diagnosis"] is None

    def test_file_metadata_rules(self, client, doctor, auth_headers):
        headers = auth_headers(doctor)
        record_id = client.post("/medical-records", json={"patient_name": "Carlos"}, headers=headers).json()["id"]
        url = f"/medical-records/{record_id}/files"

        ok = client.post(url, json=[{"file_name": "exame.pdf", "file_size": 1024, "file_type": "application/pdf"}], headers=headers)
        assert ok.status_code == 201
        assert ok.json()[0]["file_url"] == f"{doctor.id}/{record_id}/exame.pdf"

        too_big = [{"file_name": "raio-x.png", "file_size": MAX_FILE_SIZE + 1, "file_type": "image/png"}]
        assert client.post(url, json=too_big, headers=headers).status_code == 413

        wrong_type = [{"file_name": "notas.docx", "file_size": 10, "file_type": "application/msword"}]
        assert client.post(url, json=wrong_type, headers=headers).status_code == 415

        too_many = [{"file_name": f"f{i}.pdf", "file_size": 10, "file_type": "application/pdf"} for i in range(6)]
        assert client.post(url, json=too_many, headers=headers).status_code == 400

        # lote rejeitado não grava nada
        assert len(client.get(url, headers=headers).json()) == 1


# =============================================================================
# Settings and sessions
# =============================================================================

class TestSystemSettings:

    def test_admin_crud(self, client, admin_user, auth_headers):
        headers = auth_headers(admin_user)
        r = client.put(
            "/settings/system/support_email",
            json={"setting_value": "suporte@agendopro.com", "category": "email"},
            headers=headers,
        )
        assert r.status_code == 200
        assert r.json()["setting_value"] == "suporte@agendopro.com"

        listed = client.get("/settings/system?category=email", headers=headers).json()
        assert [s["setting_key"] for s in listed] == ["support_email"]

        assert client.delete("/settings/system/support_email", headers=headers).status_code == 204
        assert client.delete("/settings/system/support_email", headers=headers).status_code == 404

    def test_unknown_category_is_422(self, client, admin_user, auth_headers):
        r = client.put("/settings/system/x", json={"setting_value": 1, "category": "misc"}, headers=auth_headers(admin_user))
        assert r.status_code == 422

    def test_user_settings(self, client, user, auth_headers):
        headers = auth_headers(user)
        client.put("/settings/user/theme", json={"setting_value": {"dark": True}}, headers=headers)
        assert client.get("/settings/user", headers=headers).json() == {"theme": {"dark": True}}


class TestSessions:

    def test_create_list_revoke(self, client, user, auth_headers):
        headers = auth_headers(user)
        created = client.post("/security/sessions", json={}, headers=headers)
        assert created.status_code == 201
        session_id = created.json()["id"]

        assert [s["id"] for s in client.get("/security/sessions", headers=headers).json()] == [session_id]

        assert client.delete(f"/security/sessions/{session_id}", headers=headers).status_code == 204
        assert client.get("/security/sessions", headers=headers).json() == []

    def test_expired_session_is_rejected(self, client, user, auth_headers):
        past = (datetime.utcnow() - timedelta(hours=1)).isoformat()
        r = client.post("/security/sessions", json={"expires_at": past}, headers=auth_headers(user))
        assert r.status_code == 400

    def test_failed_attempts_listing_is_admin_only(self, client, user, admin_user, auth_headers):
        client.post("/auth/login", json={"email": user.email, "password": "errada-123"})

        assert client.get("/admin/failed-attempts", headers=auth_headers(user)).status_code == 403
        attempts = client.get("/admin/failed-attempts", headers=auth_headers(admin_user)).json()
        assert [a["email"] for a in attempts] == [user.email]
