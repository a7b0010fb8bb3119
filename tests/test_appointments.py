"""Tests for slot availability and booking conflict checks."""

import random
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from app.api.models.appointment import Appointment
from app.api.services.appointment_service import AppointmentService, filter_available_slots
from app.core.constants import BASE_AVAILABLE_SLOTS, ERROR_MESSAGES

DAY = "2026-11-02"


def booking(time="09:00", day=DAY, **extra):
    payload = {
        "client_name": "Maria Souza",
        "client_phone": "(11) 98888-7777",
        "appointment_date": day,
        "appointment_time": time,
    }
    payload.update(extra)
    return payload


def add_appointment(db, user, time, status="pending", day=date(2026, 11, 2)):
    appt = Appointment(
        user_id=user.id,
        client_name="Cliente",
        appointment_date=day,
        appointment_time=time,
        status=status,
    )
    db.add(appt)
    db.commit()
    return appt


# =============================================================================
# Slot filtering
# =============================================================================

class TestFilterAvailableSlots:

    def test_result_is_candidates_minus_booked_in_order(self):
        rng = random.Random(42)
        for _ in range(200):
            booked = rng.sample(BASE_AVAILABLE_SLOTS, rng.randint(0, len(BASE_AVAILABLE_SLOTS)))
            result = filter_available_slots(BASE_AVAILABLE_SLOTS, booked)

            assert set(result) == set(BASE_AVAILABLE_SLOTS) - set(booked)
            assert result == [s for s in BASE_AVAILABLE_SLOTS if s in result]

    def test_booked_times_outside_candidates_are_ignored(self):
        assert filter_available_slots(["09:00", "09:30"], ["18:00"]) == ["09:00", "09:30"]

    def test_everything_booked_returns_empty(self):
        assert filter_available_slots(BASE_AVAILABLE_SLOTS, BASE_AVAILABLE_SLOTS) == []


class TestAvailableSlots:

    def test_empty_day_offers_all_base_slots(self, client, user, auth_headers):
        r = client.get(f"/appointments/available-slots?date={DAY}", headers=auth_headers(user))
        assert r.status_code == 200
        assert r.json() == {"date": DAY, "available_slots": BASE_AVAILABLE_SLOTS}

    def test_only_pending_and_confirmed_block_a_slot(self, db, user):
        add_appointment(db, user, "09:00", "pending")
        add_appointment(db, user, "09:30", "confirmed")
        add_appointment(db, user, "10:00", "cancelled")
        add_appointment(db, user, "10:30", "completed")
        add_appointment(db, user, "11:00", "in_progress")

        slots = AppointmentService.available_slots(db, user.id, date(2026, 11, 2))

        assert "09:00" not in slots
        assert "09:30" not in slots
        for free in ("10:00", "10:30", "11:00"):
            assert free in slots

    def test_other_professionals_and_days_do_not_block(self, db, make_user):
        alice = make_user()
        bob = make_user()
        add_appointment(db, alice, "09:00")
        add_appointment(db, bob, "09:30", day=date(2026, 11, 3))

        assert AppointmentService.available_slots(db, bob.id, date(2026, 11, 2)) == BASE_AVAILABLE_SLOTS


# =============================================================================
# Booking
# =============================================================================

class TestCreateAppointment:

    def test_new_booking_is_pending(self, client, user, auth_headers):
        r = client.post("/appointments", json=booking("9:00"), headers=auth_headers(user))

        assert r.status_code == 201
        body = r.json()
        assert body["status"] == "pending"
        assert body["appointment_time"] == "09:00"
        assert body["client_phone"] == "11988887777"

    def test_sequential_double_booking_is_rejected(self, client, user, auth_headers):
        headers = auth_headers(user)
        first = client.post("/appointments", json=booking("14:00"), headers=headers)
        second = client.post(
            "/appointments",
            json=booking("14:00", client_name="Outro Cliente"),
            headers=headers,
        )

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json() == {
            "error": "SLOT_UNAVAILABLE",
            "message": ERROR_MESSAGES["SLOT_UNAVAILABLE"],
        }

        slots = client.get(f"/appointments/available-slots?date={DAY}", headers=headers).json()
        assert "14:00" not in slots["available_slots"]

    def test_cancelled_slot_can_be_booked_again(self, client, user, auth_headers):
        headers = auth_headers(user)
        first = client.post("/appointments", json=booking("15:00"), headers=headers).json()

        r = client.post(f"/appointments/{first['id']}/cancel", headers=headers)
        assert r.json()["status"] == "cancelled"

        again = client.post("/appointments", json=booking("15:00"), headers=headers)
        assert again.status_code == 201

    def test_database_rejects_second_active_row_for_same_slot(self, db, user):
        add_appointment(db, user, "16:00", "pending")
        with pytest.raises(IntegrityError):
            add_appointment(db, user, "16:00", "confirmed")
        db.rollback()

    def test_reactivating_cancelled_appointment_on_taken_slot_conflicts(self, client, db, user, auth_headers):
        old = add_appointment(db, user, "16:30", "cancelled")
        add_appointment(db, user, "16:30", "pending")

        r = client.patch(
            f"/appointments/{old.id}/status",
            json={"status": "confirmed"},
            headers=auth_headers(user),
        )
        assert r.status_code == 409

    def test_service_must_belong_to_the_professional(self, client, make_user, auth_headers):
        owner = make_user()
        other = make_user()
        service = client.post(
            "/services",
            json={"name": "Consulta", "duration_minutes": 30, "price": "150.00"},
            headers=auth_headers(owner),
        ).json()

        r = client.post("/appointments", json=booking(service_id=service["id"]), headers=auth_headers(other))
        assert r.status_code == 404

    def test_invalid_time_is_rejected(self, client, user, auth_headers):
        r = client.post("/appointments", json=booking("25:00"), headers=auth_headers(user))
        assert r.status_code == 422

    def test_requires_authentication(self, client):
        assert client.post("/appointments", json=booking()).status_code == 401


class TestPublicBooking:

    def test_client_books_without_login(self, client, user):
        slots = client.get(f"/booking/{user.id}/available-slots?date={DAY}")
        assert slots.status_code == 200

        r = client.post(f"/booking/{user.id}", json=booking("10:00"))
        assert r.status_code == 201
        assert r.json()["user_id"] == user.id

        again = client.post(f"/booking/{user.id}", json=booking("10:00"))
        assert again.status_code == 409

    def test_unknown_professional_is_404(self, client):
        assert client.get("/booking/999/services").status_code == 404


# =============================================================================
# Management
# =============================================================================

class TestAppointmentManagement:

    def test_list_filters_by_search_and_status(self, client, user, auth_headers):
        headers = auth_headers(user)
        client.post("/appointments", json=booking("09:00", client_name="Ana Lima"), headers=headers)
        b = client.post("/appointments", json=booking("09:30", client_name="Bruno Dias"), headers=headers).json()
        client.patch(f"/appointments/{b['id']}/status", json={"status": "confirmed"}, headers=headers)

        by_name = client.get("/appointments?search=ana", headers=headers).json()
        assert [a["client_name"] for a in by_name] == ["Ana Lima"]

        confirmed = client.get("/appointments?status=confirmed", headers=headers).json()
        assert [a["id"] for a in confirmed] == [b["id"]]

        assert len(client.get("/appointments?status=all", headers=headers).json()) == 2

    def test_search_matches_service_name(self, client, user, auth_headers):
        headers = auth_headers(user)
        service_id = client.post("/services", json={"name": "Clareamento"}, headers=headers).json()["id"]
        client.post("/appointments", json=booking("09:00", service_id=service_id), headers=headers)
        client.post("/appointments", json=booking("09:30", client_name="Bruno Dias"), headers=headers)

        found = client.get("/appointments?search=CLAREA", headers=headers).json()
        assert [a["service_name"] for a in found] == ["Clareamento"]

        # agendamentos sem serviço continuam na listagem sem filtro
        assert len(client.get("/appointments", headers=headers).json()) == 2

    def test_cannot_touch_other_professionals_appointments(self, client, make_user, auth_headers):
        owner = make_user()
        intruder = make_user()
        appt = client.post("/appointments", json=booking(), headers=auth_headers(owner)).json()

        r = client.delete(f"/appointments/{appt['id']}", headers=auth_headers(intruder))
        assert r.status_code == 404

    def test_delete_frees_the_slot(self, client, user, auth_headers):
        headers = auth_headers(user)
        appt = client.post("/appointments", json=booking("11:30"), headers=headers).json()

        assert client.delete(f"/appointments/{appt['id']}", headers=headers).status_code == 204
        slots = client.get(f"/appointments/available-slots?date={DAY}", headers=headers).json()
        assert "11:30" in slots["available_slots"]

    def test_dashboard_summary_counts_today_and_week(self, db, user):
        today = date(2026, 11, 4)  # quarta-feira
        add_appointment(db, user, "09:00", day=today)
        add_appointment(db, user, "10:00", day=date(2026, 11, 1))  # domingo, mesma semana
        add_appointment(db, user, "10:00", day=date(2026, 11, 8))  # próximo domingo
        add_appointment(db, user, "11:00", day=date(2026, 11, 9))

        summary = AppointmentService.dashboard_summary(db, user.id, today=today)

        assert summary["today_count"] == 1
        assert summary["week_count"] == 2
        assert [a["appointment_date"] for a in summary["upcoming"]] == [
            date(2026, 11, 4), date(2026, 11, 8), date(2026, 11, 9),
        ]
