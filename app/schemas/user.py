from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

UserRoleType = Literal["superadmin", "admin", "staff", "client"]
UserPlanType = Literal["free", "basico", "profissional", "premium"]


# =========================
# Cadastro de usuário (profissional / clínica)
# =========================
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    name: Optional[str] = Field(None, max_length=100)
    clinic_name: Optional[str] = Field(None, max_length=200)
    service_type: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = None

    @field_validator("name", "clinic_name", "service_type", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("phone", mode="before")
    @classmethod
    def digits_only(cls, v):
        if v in ("", None):
            return None
        return "".join(ch for ch in str(v) if ch.isdigit()) or None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


# =========================
# Retorno de usuário
# =========================
class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    name: Optional[str] = None
    clinic_name: Optional[str] = None
    service_type: Optional[str] = None
    phone: Optional[str] = None
    role: str
    plan: str
    is_active: bool
    email_confirmed: bool
    plan_expires_at: Optional[datetime] = None
    organization_id: Optional[int] = None
    created_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class UserUpdate(BaseModel):
    name: Optional[str] = None
    clinic_name: Optional[str] = None
    service_type: Optional[str] = None
    phone: Optional[str] = None


# =========================
# Administração
# =========================
class UserPlanUpdate(BaseModel):
    plan: UserPlanType


class UserRoleUpdate(BaseModel):
    role: UserRoleType


class UserStatusUpdate(BaseModel):
    is_active: bool


class PasswordResetOut(BaseModel):
    ok: bool
    user_id: int
    temporary_password: str
