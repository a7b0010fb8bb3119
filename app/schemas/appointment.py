from __future__ import annotations

import re
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])(:[0-5][0-9])?$")

AppointmentStatus = Literal["pending", "confirmed", "cancelled", "completed", "in_progress"]


def normalize_time(value: str) -> str:
    """Aceita 9:00, 09:00 ou 09:00:00 e devolve sempre HH:MM."""
    if not isinstance(value, str):
        raise ValueError("Horário deve estar no formato HH:MM")
    m = TIME_PATTERN.match(value.strip())
    if not m:
        raise ValueError("Horário deve estar no formato HH:MM")
    return f"{int(m.group(1)):02d}:{m.group(2)}"


def reject_null(value):
    """Campos opcionais em updates parciais podem ser omitidos, mas não enviados como null."""
    if value is None:
        raise ValueError("Campo não pode ser nulo")
    return value


class AppointmentCreate(BaseModel):
    client_name: str = Field(..., min_length=2, max_length=100)
    client_phone: Optional[str] = None
    client_email: Optional[EmailStr] = None
    service_id: Optional[int] = None
    calendar_id: Optional[int] = None
    appointment_date: date
    appointment_time: str
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("client_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("client_phone", mode="before")
    @classmethod
    def digits_only(cls, v):
        if v in ("", None):
            return None
        return "".join(ch for ch in str(v) if ch.isdigit()) or None

    @field_validator("client_email", "service_id", "calendar_id", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return None if v in ("", 0, "0") else v

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v):
        return normalize_time(v)


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    client_name: str
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    service_id: Optional[int] = None
    calendar_id: Optional[int] = None
    appointment_date: date
    appointment_time: str
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    service_name: Optional[str] = None
    service_duration_minutes: Optional[int] = None
    service_price: Optional[float] = None


class AvailableSlotsOut(BaseModel):
    date: date
    available_slots: List[str]


class DashboardSummaryOut(BaseModel):
    upcoming: List[AppointmentOut]
    today_count: int
    week_count: int
