# app/api/services/permission_service.py
from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.models.security import AuthAttempt, UserRole
from app.core.constants import (
    ERROR_MESSAGES,
    LOGIN_ATTEMPT_LIMIT,
    LOGIN_LOCKOUT_SECONDS,
    MEDICAL_SERVICE_TYPES,
    ROLE_PERMISSIONS,
)
from app.core.errors import PermissionDeniedError
from app.core.security import get_current_user
from app.db.session import get_db

logger = logging.getLogger(__name__)


class PermissionManager:
    """
    Regras de papel/permissão.

    `auth_attempts` guarda as falhas de login por email apenas na memória do
    processo. Serve como freio de interface (não é controle de segurança):
    reinicia com o processo e não é compartilhado entre workers.
    """

    auth_attempts: Dict[str, List[float]] = {}

    @staticmethod
    def _extra_roles(db: Session, profile: Profile) -> List[str]:
        rows = db.query(UserRole.role).filter(UserRole.user_id == profile.id).all()
        return [r[0] for r in rows]

    @staticmethod
    def is_super_admin(db: Session, profile: Optional[Profile]) -> bool:
        if not profile:
            return False
        if profile.role == "superadmin":
            return True
        return "super_admin" in PermissionManager._extra_roles(db, profile)

    @staticmethod
    def is_admin(db: Session, profile: Optional[Profile]) -> bool:
        if not profile:
            return False
        if profile.role in ("admin", "superadmin"):
            return True
        roles = PermissionManager._extra_roles(db, profile)
        return "admin" in roles or "super_admin" in roles

    @staticmethod
    def get_user_permissions(db: Session, profile: Profile) -> List[str]:
        roles = [profile.role]
        for extra in PermissionManager._extra_roles(db, profile):
            roles.append("superadmin" if extra == "super_admin" else extra)

        permissions: List[str] = []
        for role in roles:
            for perm in ROLE_PERMISSIONS.get(role, []):
                if perm not in permissions:
                    permissions.append(perm)
        return permissions

    @staticmethod
    def has_permission(db: Session, profile: Profile, permission: str) -> bool:
        return permission in PermissionManager.get_user_permissions(db, profile)

    @staticmethod
    def can_access_medical_records(db: Session, profile: Optional[Profile]) -> bool:
        if not profile:
            return False
        if profile.service_type in MEDICAL_SERVICE_TYPES:
            return True
        return PermissionManager.is_admin(db, profile)

    # ======================
    # Rate limit de autenticação
    # ======================

    @classmethod
    def _recent_failures(cls, email: str, now: float) -> List[float]:
        key = (email or "").strip().lower()
        window_start = now - LOGIN_LOCKOUT_SECONDS
        recent = [t for t in cls.auth_attempts.get(key, []) if t > window_start]
        if recent:
            cls.auth_attempts[key] = recent
        else:
            cls.auth_attempts.pop(key, None)
        return recent

    @classmethod
    def check_rate_limit(cls, email: str, now: float = None) -> bool:
        now = time.time() if now is None else now
        return len(cls._recent_failures(email, now)) < LOGIN_ATTEMPT_LIMIT

    @classmethod
    def track_auth_attempt(
        cls,
        db: Session,
        email: str,
        attempt_type: str,
        success: bool,
        ip_address: str = None,
        now: float = None,
    ) -> None:
        now = time.time() if now is None else now
        key = (email or "").strip().lower()

        if success:
            cls.auth_attempts.pop(key, None)
        else:
            cls._recent_failures(key, now)
            cls.auth_attempts.setdefault(key, []).append(now)

        db.add(AuthAttempt(
            email=key,
            attempt_type=attempt_type,
            success=success,
            ip_address=ip_address,
        ))
        db.commit()

    @classmethod
    def reset_rate_limits(cls) -> None:
        cls.auth_attempts.clear()


# ======================
# Dependencies
# ======================

def require_admin(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Profile:
    if not PermissionManager.is_admin(db, current_user):
        raise PermissionDeniedError(ERROR_MESSAGES["UNAUTHORIZED"], "FORBIDDEN")
    return current_user


def require_super_admin(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Profile:
    if not PermissionManager.is_super_admin(db, current_user):
        raise PermissionDeniedError("Apenas super administradores podem realizar esta ação.", "FORBIDDEN")
    return current_user


def require_medical_access(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Profile:
    if not PermissionManager.can_access_medical_records(db, current_user):
        raise PermissionDeniedError("Acesso aos prontuários não disponível para o seu tipo de serviço.", "FORBIDDEN")
    return current_user
