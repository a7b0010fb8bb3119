# app/api/services/calendar_service.py
from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.models.appointment import Appointment
from app.api.models.calendar import Calendar, CalendarPermission, CalendarSchedule
from app.api.models.profile import Profile
from app.core.errors import AppError, NotFoundError


class CalendarService:

    # ======================
    # Agendas
    # ======================

    @staticmethod
    def list_calendars(db: Session, user_id: int) -> List[dict]:
        """Agendas do usuário com a contagem de agendamentos de cada uma."""
        counts = dict(
            db.query(Appointment.calendar_id, func.count())
            .filter(Appointment.user_id == user_id, Appointment.calendar_id.isnot(None))
            .group_by(Appointment.calendar_id)
            .all()
        )
        calendars = (
            db.query(Calendar)
            .filter(Calendar.user_id == user_id)
            .order_by(Calendar.created_at.asc(), Calendar.id.asc())
            .all()
        )
        return [
            {
                "id": c.id,
                "user_id": c.user_id,
                "name": c.name,
                "description": c.description,
                "color": c.color,
                "is_active": c.is_active,
                "created_at": c.created_at,
                "appointments_count": counts.get(c.id, 0),
            }
            for c in calendars
        ]

    @staticmethod
    def get_owned(db: Session, user_id: int, calendar_id: int) -> Calendar:
        calendar = (
            db.query(Calendar)
            .filter(Calendar.id == calendar_id, Calendar.user_id == user_id)
            .first()
        )
        if not calendar:
            raise NotFoundError("Agenda não encontrada", "CALENDAR_NOT_FOUND")
        return calendar

    @staticmethod
    def create(db: Session, user_id: int, data) -> Calendar:
        calendar = Calendar(user_id=user_id, **data.model_dump())
        db.add(calendar)
        db.commit()
        db.refresh(calendar)
        return calendar

    @staticmethod
    def update(db: Session, user_id: int, calendar_id: int, data) -> Calendar:
        calendar = CalendarService.get_owned(db, user_id, calendar_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(calendar, field, value)
        calendar.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(calendar)
        return calendar

    @staticmethod
    def delete(db: Session, user_id: int, calendar_id: int) -> None:
        calendar = CalendarService.get_owned(db, user_id, calendar_id)

        # agendamentos ficam, só perdem o vínculo com a agenda
        db.query(Appointment).filter(Appointment.calendar_id == calendar.id).update(
            {Appointment.calendar_id: None}, synchronize_session=False
        )
        db.query(CalendarSchedule).filter(CalendarSchedule.calendar_id == calendar.id).delete(synchronize_session=False)
        db.query(CalendarPermission).filter(CalendarPermission.calendar_id == calendar.id).delete(synchronize_session=False)
        db.delete(calendar)
        db.commit()

    # ======================
    # Horários de funcionamento
    # ======================

    @staticmethod
    def list_schedules(db: Session, user_id: int, calendar_id: int) -> List[CalendarSchedule]:
        CalendarService.get_owned(db, user_id, calendar_id)
        return (
            db.query(CalendarSchedule)
            .filter(CalendarSchedule.calendar_id == calendar_id)
            .order_by(CalendarSchedule.day_of_week.asc(), CalendarSchedule.start_time.asc())
            .all()
        )

    @staticmethod
    def add_schedule(db: Session, user_id: int, calendar_id: int, data) -> CalendarSchedule:
        CalendarService.get_owned(db, user_id, calendar_id)
        schedule = CalendarSchedule(calendar_id=calendar_id, **data.model_dump())
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def _get_schedule(db: Session, user_id: int, calendar_id: int, schedule_id: int) -> CalendarSchedule:
        CalendarService.get_owned(db, user_id, calendar_id)
        schedule = (
            db.query(CalendarSchedule)
            .filter(CalendarSchedule.id == schedule_id, CalendarSchedule.calendar_id == calendar_id)
            .first()
        )
        if not schedule:
            raise NotFoundError("Horário não encontrado", "SCHEDULE_NOT_FOUND")
        return schedule

    @staticmethod
    def update_schedule(db: Session, user_id: int, calendar_id: int, schedule_id: int, data) -> CalendarSchedule:
        schedule = CalendarService._get_schedule(db, user_id, calendar_id, schedule_id)
        changes = data.model_dump(exclude_unset=True)

        start = changes.get("start_time", schedule.start_time)
        end = changes.get("end_time", schedule.end_time)
        if end <= start:
            raise AppError("end_time deve ser maior que start_time", "VALIDATION_ERROR", "update_schedule")

        for field, value in changes.items():
            setattr(schedule, field, value)
        schedule.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def delete_schedule(db: Session, user_id: int, calendar_id: int, schedule_id: int) -> None:
        schedule = CalendarService._get_schedule(db, user_id, calendar_id, schedule_id)
        db.delete(schedule)
        db.commit()

    # ======================
    # Compartilhamento
    # ======================

    @staticmethod
    def list_permissions(db: Session, user_id: int, calendar_id: int) -> List[CalendarPermission]:
        CalendarService.get_owned(db, user_id, calendar_id)
        return (
            db.query(CalendarPermission)
            .filter(CalendarPermission.calendar_id == calendar_id)
            .order_by(CalendarPermission.id.asc())
            .all()
        )

    @staticmethod
    def grant_permission(db: Session, owner_id: int, calendar_id: int, data) -> CalendarPermission:
        CalendarService.get_owned(db, owner_id, calendar_id)

        if not db.get(Profile, data.user_id):
            raise NotFoundError("Usuário não encontrado", "USER_NOT_FOUND")

        permission = (
            db.query(CalendarPermission)
            .filter(CalendarPermission.calendar_id == calendar_id, CalendarPermission.user_id == data.user_id)
            .first()
        )
        if permission:
            permission.permission_type = data.permission_type
            permission.granted_by = owner_id
        else:
            permission = CalendarPermission(
                calendar_id=calendar_id,
                user_id=data.user_id,
                permission_type=data.permission_type,
                granted_by=owner_id,
            )
            db.add(permission)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise AppError("Permissão já concedida", "PERMISSION_EXISTS", "calendar_permission", status_code=409)
        db.refresh(permission)
        return permission

    @staticmethod
    def revoke_permission(db: Session, owner_id: int, calendar_id: int, permission_id: int) -> None:
        CalendarService.get_owned(db, owner_id, calendar_id)
        permission = (
            db.query(CalendarPermission)
            .filter(CalendarPermission.id == permission_id, CalendarPermission.calendar_id == calendar_id)
            .first()
        )
        if not permission:
            raise NotFoundError("Permissão não encontrada", "PERMISSION_NOT_FOUND")
        db.delete(permission)
        db.commit()
