from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.schemas.appointment import normalize_time, reject_null


class CalendarCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    color: str = Field("#3b82f6", pattern=r"^#[0-9a-fA-F]{6}$")
    is_active: bool = True


class CalendarUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")
    is_active: Optional[bool] = None

    @field_validator("name", "color", "is_active", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class CalendarOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    color: str
    is_active: bool
    created_at: Optional[datetime] = None
    appointments_count: int = 0


# =========================
# Horários (0 = domingo ... 6 = sábado)
# =========================
class CalendarScheduleCreate(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str
    end_time: str
    is_active: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v):
        return normalize_time(v)

    @model_validator(mode="after")
    def check_range(self):
        # HH:MM compara corretamente como texto
        if self.end_time <= self.start_time:
            raise ValueError("end_time deve ser maior que start_time")
        return self


class CalendarScheduleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    calendar_id: int
    day_of_week: int
    start_time: str
    end_time: str
    is_active: bool


# =========================
# Compartilhamento
# =========================
class CalendarPermissionCreate(BaseModel):
    user_id: int
    permission_type: Literal["view", "edit", "admin"] = "view"


class CalendarPermissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    calendar_id: int
    user_id: int
    permission_type: str
    granted_by: int
    created_at: Optional[datetime] = None


class CalendarScheduleUpdate(BaseModel):
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("day_of_week", "start_time", "end_time", "is_active", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v):
        return normalize_time(v)
