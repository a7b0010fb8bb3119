from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.appointment import reject_null


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    duration_minutes: int = Field(60, ge=5, le=1440)
    price: Optional[Decimal] = Field(None, ge=0, le=Decimal("999999.99"))


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    duration_minutes: Optional[int] = Field(None, ge=5, le=1440)
    price: Optional[Decimal] = Field(None, ge=0, le=Decimal("999999.99"))
    is_active: Optional[bool] = None

    @field_validator("name", "duration_minutes", "is_active", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class ServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    duration_minutes: int
    price: Optional[Decimal] = None
    is_active: bool
    created_at: Optional[datetime] = None
