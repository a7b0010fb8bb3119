## página pública de agendamento (cliente final, sem login)
from datetime import date
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.appointment_service import AppointmentService, to_appointment_out
from app.api.services.catalog_service import CatalogService
from app.core.errors import NotFoundError
from app.db.session import get_db
from app.schemas.appointment import AppointmentCreate, AppointmentOut, AvailableSlotsOut
from app.schemas.service import ServiceOut

router = APIRouter(prefix="/booking", tags=["Public Booking"])


def get_bookable_profile(user_id: int, db: Session) -> Profile:
    profile = db.get(Profile, user_id)
    if not profile or not profile.is_active:
        raise NotFoundError("Profissional não encontrado", "USER_NOT_FOUND", "public_booking")
    return profile


@router.get("/{user_id}/services", response_model=List[ServiceOut])
def list_services(user_id: int, db: Session = Depends(get_db)):
    get_bookable_profile(user_id, db)
    return CatalogService.list_services(db, user_id, only_active=True)


@router.get("/{user_id}/available-slots", response_model=AvailableSlotsOut)
def available_slots(user_id: int, date: date, db: Session = Depends(get_db)):
    get_bookable_profile(user_id, db)
    return {
        "date": date,
        "available_slots": AppointmentService.available_slots(db, user_id, date),
    }


@router.post("/{user_id}", response_model=AppointmentOut, status_code=201)
def book(user_id: int, payload: AppointmentCreate, db: Session = Depends(get_db)):
    get_bookable_profile(user_id, db)
    appointment = AppointmentService.create(db, user_id, payload)
    return to_appointment_out(appointment)
