from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.appointment_service import AppointmentService, to_appointment_out
from app.core.security import get_current_user
from app.db.session import get_db
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentOut,
    AppointmentStatusUpdate,
    AvailableSlotsOut,
    DashboardSummaryOut,
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("", response_model=List[AppointmentOut])
def list_appointments(
    search: Optional[str] = None,
    status: Optional[str] = None,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    appointments = AppointmentService.list_for_user(db, current_user.id, search=search, status=status)
    return [to_appointment_out(a) for a in appointments]


@router.post("", response_model=AppointmentOut, status_code=201)
def create_appointment(
    payload: AppointmentCreate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    appointment = AppointmentService.create(db, current_user.id, payload)
    return to_appointment_out(appointment)


@router.get("/available-slots", response_model=AvailableSlotsOut)
def available_slots(
    date: date,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {
        "date": date,
        "available_slots": AppointmentService.available_slots(db, current_user.id, date),
    }


@router.get("/dashboard", response_model=DashboardSummaryOut)
def dashboard(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AppointmentService.dashboard_summary(db, current_user.id)


@router.patch("/{appointment_id}/status", response_model=AppointmentOut)
def update_status(
    appointment_id: int,
    payload: AppointmentStatusUpdate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    appointment = AppointmentService.update_status(db, current_user.id, appointment_id, payload.status)
    return to_appointment_out(appointment)


@router.post("/{appointment_id}/cancel", response_model=AppointmentOut)
def cancel_appointment(
    appointment_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    appointment = AppointmentService.cancel(db, current_user.id, appointment_id)
    return to_appointment_out(appointment)


@router.delete("/{appointment_id}", status_code=204)
def delete_appointment(
    appointment_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    AppointmentService.delete(db, current_user.id, appointment_id)
