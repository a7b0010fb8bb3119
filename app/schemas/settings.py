from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.api.services.settings_service import decode_value
from app.core.constants import SETTING_CATEGORIES


class SystemSettingIn(BaseModel):
    setting_value: Any = None
    category: str = "general"
    description: Optional[str] = None

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        if v not in SETTING_CATEGORIES:
            raise ValueError(f"Categoria inválida: {v}")
        return v


class SystemSettingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    setting_key: str
    setting_value: Any = None
    category: str
    description: Optional[str] = None

    @field_validator("setting_value", mode="before")
    @classmethod
    def decode(cls, v):
        return decode_value(v) if isinstance(v, str) else v


class UserSettingIn(BaseModel):
    setting_value: Any = None


class WhatsAppSettingsIn(BaseModel):
    webhook_url: str = Field("", max_length=500)
    enabled: bool = False

    @field_validator("webhook_url")
    @classmethod
    def check_url(cls, v):
        v = v.replace('"', "").strip()
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("URL do webhook deve começar com http:// ou https://")
        return v


class WhatsAppSettingsOut(BaseModel):
    webhook_url: str
    enabled: bool
