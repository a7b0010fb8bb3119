from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.calendar_service import CalendarService
from app.core.security import get_current_user
from app.db.session import get_db
from app.schemas.calendar import (
    CalendarCreate,
    CalendarOut,
    CalendarPermissionCreate,
    CalendarPermissionOut,
    CalendarScheduleCreate,
    CalendarScheduleOut,
    CalendarScheduleUpdate,
    CalendarUpdate,
)

router = APIRouter(prefix="/calendars", tags=["Calendars"])


@router.get("", response_model=List[CalendarOut])
def list_calendars(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CalendarService.list_calendars(db, current_user.id)


@router.post("", response_model=CalendarOut, status_code=201)
def create_calendar(
    payload: CalendarCreate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CalendarService.create(db, current_user.id, payload)


@router.put("/{calendar_id}", response_model=CalendarOut)
def update_calendar(
    calendar_id: int,
    payload: CalendarUpdate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CalendarService.update(db, current_user.id, calendar_id, payload)


@router.delete("/{calendar_id}", status_code=204)
def delete_calendar(
    calendar_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    CalendarService.delete(db, current_user.id, calendar_id)


# ---------- Horários ----------

@router.get("/{calendar_id}/schedules", response_model=List[CalendarScheduleOut])
def list_schedules(
    calendar_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CalendarService.list_schedules(db, current_user.id, calendar_id)


@router.post("/{calendar_id}/schedules", response_model=CalendarScheduleOut, status_code=201)
def add_schedule(
    calendar_id: int,
    payload: CalendarScheduleCreate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CalendarService.add_schedule(db, current_user.id, calendar_id, payload)


@router.put("/{calendar_id}/schedules/{schedule_id}", response_model=CalendarScheduleOut)
def update_schedule(
    calendar_id: int,
    schedule_id: int,
    payload: CalendarScheduleUpdate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CalendarService.update_schedule(db, current_user.id, calendar_id, schedule_id, payload)


@router.delete("/{calendar_id}/schedules/{schedule_id}", status_code=204)
def delete_schedule(
    calendar_id: int,
    schedule_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    CalendarService.delete_schedule(db, current_user.id, calendar_id, schedule_id)


# ---------- Compartilhamento ----------

@router.get("/{calendar_id}/permissions", response_model=List[CalendarPermissionOut])
def list_permissions(
    calendar_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CalendarService.list_permissions(db, current_user.id, calendar_id)


@router.post("/{calendar_id}/permissions", response_model=CalendarPermissionOut, status_code=201)
def grant_permission(
    calendar_id: int,
    payload: CalendarPermissionCreate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CalendarService.grant_permission(db, current_user.id, calendar_id, payload)


@router.delete("/{calendar_id}/permissions/{permission_id}", status_code=204)
def revoke_permission(
    calendar_id: int,
    permission_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    CalendarService.revoke_permission(db, current_user.id, calendar_id, permission_id)
