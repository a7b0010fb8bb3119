# app/api/services/appointment_service.py
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager, joinedload

from app.api.models.appointment import Appointment
from app.api.models.calendar import Calendar
from app.api.models.service import Service
from app.core.constants import BASE_AVAILABLE_SLOTS, BLOCKING_STATUSES, ERROR_MESSAGES
from app.core.errors import AppError, NotFoundError, SlotUnavailableError

logger = logging.getLogger(__name__)


def filter_available_slots(candidates: Iterable[str], booked_times: Iterable[str]) -> List[str]:
    """Candidatos menos os horários ocupados, mantendo a ordem original."""
    booked = set(booked_times)
    return [slot for slot in candidates if slot not in booked]


def to_appointment_out(appointment: Appointment) -> dict:
    service = appointment.service
    return {
        "id": appointment.id,
        "user_id": appointment.user_id,
        "client_name": appointment.client_name,
        "client_phone": appointment.client_phone,
        "client_email": appointment.client_email,
        "service_id": appointment.service_id,
        "calendar_id": appointment.calendar_id,
        "appointment_date": appointment.appointment_date,
        "appointment_time": appointment.appointment_time,
        "status": appointment.status,
        "notes": appointment.notes,
        "created_at": appointment.created_at,
        "service_name": service.name if service else None,
        "service_duration_minutes": service.duration_minutes if service else None,
        "service_price": float(service.price) if service and service.price is not None else None,
    }


class AppointmentService:

    # ======================
    # Disponibilidade
    # ======================

    @staticmethod
    def get_booked_times(db: Session, user_id: int, appointment_date: date) -> List[str]:
        rows = (
            db.query(Appointment.appointment_time)
            .filter(
                Appointment.user_id == user_id,
                Appointment.appointment_date == appointment_date,
                Appointment.status.in_(BLOCKING_STATUSES),
            )
            .all()
        )
        return [r[0] for r in rows]

    @staticmethod
    def available_slots(db: Session, user_id: int, appointment_date: date) -> List[str]:
        booked = AppointmentService.get_booked_times(db, user_id, appointment_date)
        return filter_available_slots(BASE_AVAILABLE_SLOTS, booked)

    @staticmethod
    def is_slot_available(db: Session, user_id: int, appointment_date: date, appointment_time: str) -> bool:
        existing = (
            db.query(Appointment.id)
            .filter(
                Appointment.user_id == user_id,
                Appointment.appointment_date == appointment_date,
                Appointment.appointment_time == appointment_time,
                Appointment.status.in_(BLOCKING_STATUSES),
            )
            .first()
        )
        return existing is None

    # ======================
    # Criação (com checagem de conflito)
    # ======================

    @staticmethod
    def create(db: Session, user_id: int, data) -> Appointment:
        if data.service_id is not None:
            service = (
                db.query(Service)
                .filter(Service.id == data.service_id, Service.user_id == user_id)
                .first()
            )
            if not service:
                raise NotFoundError("Serviço não encontrado", "SERVICE_NOT_FOUND", "create_appointment")

        if data.calendar_id is not None:
            calendar = (
                db.query(Calendar.id)
                .filter(Calendar.id == data.calendar_id, Calendar.user_id == user_id)
                .first()
            )
            if not calendar:
                raise NotFoundError("Agenda não encontrada", "CALENDAR_NOT_FOUND", "create_appointment")

        if not AppointmentService.is_slot_available(db, user_id, data.appointment_date, data.appointment_time):
            logger.info(
                "SLOT_UNAVAILABLE user_id=%s date=%s time=%s",
                user_id, data.appointment_date, data.appointment_time,
            )
            raise SlotUnavailableError(ERROR_MESSAGES["SLOT_UNAVAILABLE"], "SLOT_UNAVAILABLE", "create_appointment")

        appointment = Appointment(
            user_id=user_id,
            client_name=data.client_name,
            client_phone=data.client_phone,
            client_email=data.client_email,
            service_id=data.service_id,
            calendar_id=data.calendar_id,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            notes=data.notes,
            status="pending",
        )
        db.add(appointment)
        try:
            db.commit()
        except IntegrityError:
            # outra sessão gravou o mesmo horário entre a checagem e o insert
            db.rollback()
            logger.warning(
                "SLOT_RACE_LOST user_id=%s date=%s time=%s",
                user_id, data.appointment_date, data.appointment_time,
            )
            raise SlotUnavailableError(ERROR_MESSAGES["SLOT_UNAVAILABLE"], "SLOT_UNAVAILABLE", "create_appointment")

        db.refresh(appointment)
        logger.info("APPOINTMENT_CREATED id=%s user_id=%s", appointment.id, user_id)
        return appointment

    # ======================
    # Gestão
    # ======================

    @staticmethod
    def list_for_user(
        db: Session,
        user_id: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Appointment]:
        q = (
            db.query(Appointment)
            .outerjoin(Appointment.service)
            .options(contains_eager(Appointment.service))
            .filter(Appointment.user_id == user_id)
        )
        term = (search or "").strip()
        if term:
            like = f"%{term}%"
            q = q.filter(or_(Appointment.client_name.ilike(like), Service.name.ilike(like)))
        if status and status != "all":
            q = q.filter(Appointment.status == status)
        return q.order_by(Appointment.appointment_date.asc(), Appointment.appointment_time.asc()).all()

    @staticmethod
    def get_owned(db: Session, user_id: int, appointment_id: int) -> Appointment:
        appointment = (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.user_id == user_id)
            .first()
        )
        if not appointment:
            raise NotFoundError("Agendamento não encontrado", "APPOINTMENT_NOT_FOUND")
        return appointment

    @staticmethod
    def update_status(db: Session, user_id: int, appointment_id: int, status: str) -> Appointment:
        appointment = AppointmentService.get_owned(db, user_id, appointment_id)
        appointment.status = status
        try:
            db.commit()
        except IntegrityError:
            # reativar um agendamento cancelado cujo horário já foi ocupado
            db.rollback()
            raise SlotUnavailableError(ERROR_MESSAGES["SLOT_UNAVAILABLE"], "SLOT_UNAVAILABLE", "update_status")
        db.refresh(appointment)
        return appointment

    @staticmethod
    def cancel(db: Session, user_id: int, appointment_id: int) -> Appointment:
        return AppointmentService.update_status(db, user_id, appointment_id, "cancelled")

    @staticmethod
    def delete(db: Session, user_id: int, appointment_id: int) -> None:
        appointment = AppointmentService.get_owned(db, user_id, appointment_id)
        db.delete(appointment)
        db.commit()

    @staticmethod
    def dashboard_summary(db: Session, user_id: int, today: date = None) -> dict:
        today = today or date.today()
        # semana de domingo a sábado
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        week_end = week_start + timedelta(days=6)

        upcoming = (
            db.query(Appointment)
            .options(joinedload(Appointment.service))
            .filter(Appointment.user_id == user_id, Appointment.appointment_date >= today)
            .order_by(Appointment.appointment_date.asc(), Appointment.appointment_time.asc())
            .limit(3)
            .all()
        )

        today_count = (
            db.query(Appointment)
            .filter(Appointment.user_id == user_id, Appointment.appointment_date == today)
            .count()
        )
        week_count = (
            db.query(Appointment)
            .filter(
                Appointment.user_id == user_id,
                Appointment.appointment_date >= week_start,
                Appointment.appointment_date <= week_end,
            )
            .count()
        )

        return {
            "upcoming": [to_appointment_out(a) for a in upcoming],
            "today_count": today_count,
            "week_count": week_count,
        }

    # ======================
    # Sincronização externa (webhook AgendoPro)
    # ======================

    @staticmethod
    def upsert_external(db: Session, user_id: int, external_id: str, values: dict) -> Appointment:
        appointment = db.query(Appointment).filter(Appointment.agendopro_id == external_id).first()

        if appointment:
            for field, value in values.items():
                setattr(appointment, field, value)
            appointment.user_id = user_id
            appointment.updated_at = datetime.utcnow()
            logger.info("EXTERNAL_APPOINTMENT_UPDATED id=%s external_id=%s", appointment.id, external_id)
        else:
            appointment = Appointment(user_id=user_id, agendopro_id=external_id, **values)
            db.add(appointment)
            logger.info("EXTERNAL_APPOINTMENT_CREATED external_id=%s", external_id)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise SlotUnavailableError(ERROR_MESSAGES["SLOT_UNAVAILABLE"], "SLOT_UNAVAILABLE", "agendopro_webhook")
        db.refresh(appointment)
        return appointment

    @staticmethod
    def set_external_status(db: Session, external_id: str, status: str) -> int:
        updated = (
            db.query(Appointment)
            .filter(Appointment.agendopro_id == external_id)
            .update({"status": status, "updated_at": datetime.utcnow()}, synchronize_session=False)
        )
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise AppError("Conflito de horário ao atualizar status", "SLOT_UNAVAILABLE", "agendopro_webhook", 409)
        return updated
