from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.schemas.appointment import reject_null


class MedicalRecordCreate(BaseModel):
    patient_name: str = Field(..., min_length=2, max_length=200)
    patient_email: Optional[EmailStr] = None
    patient_phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("patient_email", "date_of_birth", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return None if v == "" else v

    @field_validator("patient_phone", mode="before")
    @classmethod
    def digits_only(cls, v):
        if v in ("", None):
            return None
        return "".join(ch for ch in str(v) if ch.isdigit()) or None


class MedicalRecordUpdate(BaseModel):
    patient_name: Optional[str] = Field(None, min_length=2, max_length=200)
    patient_email: Optional[EmailStr] = None
    patient_phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("patient_name", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class MedicalRecordFileIn(BaseModel):
    file_name: str = Field(..., min_length=1, max_length=255)
    file_size: int = Field(..., ge=0)
    file_type: str


class MedicalRecordFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    medical_record_id: int
    file_name: str
    file_size: int
    file_type: str
    file_url: str
    uploaded_by: int
    created_at: Optional[datetime] = None


class MedicalRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    patient_name: str
    patient_email: Optional[str] = None
    patient_phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    files: List[MedicalRecordFileOut] = []
