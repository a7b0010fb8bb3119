# app/api/services/settings_service.py
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.api.models.setting import SystemSetting, UserSetting
from app.core.constants import WHATSAPP_ENABLED_KEY, WHATSAPP_WEBHOOK_URL_KEY
from app.core.errors import NotFoundError


def encode_value(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def decode_value(raw: Optional[str]) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return raw


def clean_webhook_url(value: Any) -> str:
    # URLs antigas foram salvas com aspas extras (JSON dentro de JSON)
    if not isinstance(value, str):
        return ""
    return value.replace('"', "").strip()


class SettingsService:

    # ======================
    # Configurações globais
    # ======================

    @staticmethod
    def list_system_settings(db: Session, category: Optional[str] = None) -> List[SystemSetting]:
        q = db.query(SystemSetting)
        if category:
            q = q.filter(SystemSetting.category == category)
        return q.order_by(SystemSetting.setting_key.asc()).all()

    @staticmethod
    def get_system_values(db: Session, keys: Iterable[str]) -> Dict[str, Any]:
        rows = db.query(SystemSetting).filter(SystemSetting.setting_key.in_(list(keys))).all()
        return {r.setting_key: decode_value(r.setting_value) for r in rows}

    @staticmethod
    def upsert_system_setting(
        db: Session,
        key: str,
        value: Any,
        category: str = "general",
        description: Optional[str] = None,
    ) -> SystemSetting:
        setting = db.query(SystemSetting).filter(SystemSetting.setting_key == key).first()
        if not setting:
            setting = SystemSetting(setting_key=key)
            db.add(setting)

        setting.setting_value = encode_value(value)
        setting.category = category
        if description is not None:
            setting.description = description

        db.commit()
        db.refresh(setting)
        return setting

    @staticmethod
    def delete_system_setting(db: Session, key: str) -> None:
        setting = db.query(SystemSetting).filter(SystemSetting.setting_key == key).first()
        if not setting:
            raise NotFoundError("Configuração não encontrada", "SETTING_NOT_FOUND")
        db.delete(setting)
        db.commit()

    # ======================
    # Configurações por usuário
    # ======================

    @staticmethod
    def get_user_values(db: Session, user_id: int, keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        q = db.query(UserSetting).filter(UserSetting.user_id == user_id)
        if keys is not None:
            q = q.filter(UserSetting.setting_key.in_(list(keys)))
        return {r.setting_key: decode_value(r.setting_value) for r in q.all()}

    @staticmethod
    def upsert_user_setting(db: Session, user_id: int, key: str, value: Any) -> UserSetting:
        setting = (
            db.query(UserSetting)
            .filter(UserSetting.user_id == user_id, UserSetting.setting_key == key)
            .first()
        )
        if not setting:
            setting = UserSetting(user_id=user_id, setting_key=key)
            db.add(setting)

        setting.setting_value = encode_value(value)
        db.commit()
        db.refresh(setting)
        return setting

    # ======================
    # WhatsApp (par url + habilitado)
    # ======================

    @staticmethod
    def get_whatsapp_settings(db: Session, user_id: Optional[int] = None) -> Dict[str, Any]:
        keys = [WHATSAPP_WEBHOOK_URL_KEY, WHATSAPP_ENABLED_KEY]
        if user_id is None:
            values = SettingsService.get_system_values(db, keys)
        else:
            values = SettingsService.get_user_values(db, user_id, keys)

        return {
            "webhook_url": clean_webhook_url(values.get(WHATSAPP_WEBHOOK_URL_KEY)),
            "enabled": bool(values.get(WHATSAPP_ENABLED_KEY) or False),
        }

    @staticmethod
    def save_whatsapp_settings(db: Session, webhook_url: str, enabled: bool, user_id: Optional[int] = None) -> Dict[str, Any]:
        webhook_url = clean_webhook_url(webhook_url)
        if user_id is None:
            SettingsService.upsert_system_setting(db, WHATSAPP_WEBHOOK_URL_KEY, webhook_url, "whatsapp")
            SettingsService.upsert_system_setting(db, WHATSAPP_ENABLED_KEY, enabled, "whatsapp")
        else:
            SettingsService.upsert_user_setting(db, user_id, WHATSAPP_WEBHOOK_URL_KEY, webhook_url)
            SettingsService.upsert_user_setting(db, user_id, WHATSAPP_ENABLED_KEY, enabled)
        return {"webhook_url": webhook_url, "enabled": enabled}
