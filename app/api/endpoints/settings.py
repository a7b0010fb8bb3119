## configurações globais (admin) e por usuário, incluindo o par do WhatsApp
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.permission_service import require_admin
from app.api.services.settings_service import SettingsService
from app.api.services.whatsapp_service import WhatsAppService
from app.core.security import get_current_user
from app.db.session import get_db
from app.schemas.settings import (
    SystemSettingIn,
    SystemSettingOut,
    UserSettingIn,
    WhatsAppSettingsIn,
    WhatsAppSettingsOut,
)

router = APIRouter(prefix="/settings", tags=["Settings"])


# ---------- Sistema (admin) ----------

@router.get("/system", response_model=List[SystemSettingOut])
def list_system_settings(
    category: Optional[str] = None,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return SettingsService.list_system_settings(db, category)


@router.put("/system/{setting_key}", response_model=SystemSettingOut)
def upsert_system_setting(
    setting_key: str,
    payload: SystemSettingIn,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return SettingsService.upsert_system_setting(
        db, setting_key, payload.setting_value, payload.category, payload.description
    )


@router.delete("/system/{setting_key}", status_code=204)
def delete_system_setting(
    setting_key: str,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    SettingsService.delete_system_setting(db, setting_key)


# ---------- WhatsApp ----------

@router.get("/whatsapp", response_model=WhatsAppSettingsOut)
def get_whatsapp_settings(
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return SettingsService.get_whatsapp_settings(db)


@router.put("/whatsapp", response_model=WhatsAppSettingsOut)
def save_whatsapp_settings(
    payload: WhatsAppSettingsIn,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return SettingsService.save_whatsapp_settings(db, payload.webhook_url, payload.enabled)


@router.post("/whatsapp/test")
def test_whatsapp_webhook(
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return WhatsAppService.test_webhook(db)


@router.get("/user/whatsapp", response_model=WhatsAppSettingsOut)
def get_user_whatsapp_settings(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SettingsService.get_whatsapp_settings(db, current_user.id)


@router.put("/user/whatsapp", response_model=WhatsAppSettingsOut)
def save_user_whatsapp_settings(
    payload: WhatsAppSettingsIn,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SettingsService.save_whatsapp_settings(db, payload.webhook_url, payload.enabled, current_user.id)


@router.post("/user/whatsapp/test")
def test_user_whatsapp_webhook(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return WhatsAppService.test_webhook(db, current_user.id)


# ---------- Usuário ----------

@router.get("/user")
def get_user_settings(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    return SettingsService.get_user_values(db, current_user.id)


@router.put("/user/{setting_key}")
def upsert_user_setting(
    setting_key: str,
    payload: UserSettingIn,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    SettingsService.upsert_user_setting(db, current_user.id, setting_key, payload.setting_value)
    return {setting_key: payload.setting_value}
