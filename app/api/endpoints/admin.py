## painel administrativo: equivalentes das RPCs, gestão de usuários e auditoria
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.admin_service import AdminService
from app.api.services.permission_service import PermissionManager, require_admin, require_super_admin
from app.api.services.security_service import SecurityService
from app.api.services.webhook_log_service import WebhookLogService
from app.core.security import get_current_user
from app.db.session import get_db
from app.schemas.admin import PermissionCheckOut, SystemStatisticsOut, UserPermissionsOut
from app.schemas.security import AuditLogOut, AuthAttemptOut, WebhookLogOut
from app.schemas.user import (
    PasswordResetOut,
    UserOut,
    UserPlanUpdate,
    UserRoleUpdate,
    UserStatusUpdate,
)

router = APIRouter(prefix="/admin", tags=["Admin"])


# ---------- RPCs ----------

@router.get("/is-super-admin")
def is_super_admin(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"is_super_admin": PermissionManager.is_super_admin(db, current_user)}


@router.get("/statistics")
def admin_statistics(
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AdminService.admin_statistics(db)


@router.get("/system-statistics", response_model=SystemStatisticsOut)
def system_statistics(
    admin: Profile = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    return AdminService.system_statistics(db)


@router.get("/permissions/check", response_model=PermissionCheckOut)
def check_permission(
    permission: str,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {
        "permission": permission,
        "allowed": PermissionManager.has_permission(db, current_user, permission),
    }


@router.get("/permissions/{user_id}", response_model=UserPermissionsOut)
def user_permissions(
    user_id: int,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    profile = AdminService.get_user(db, user_id)
    return {
        "user_id": profile.id,
        "role": profile.role,
        "permissions": PermissionManager.get_user_permissions(db, profile),
        "is_admin": PermissionManager.is_admin(db, profile),
        "is_super_admin": PermissionManager.is_super_admin(db, profile),
    }


@router.post("/users/{user_id}/reset-password", response_model=PasswordResetOut)
def reset_password(
    user_id: int,
    admin: Profile = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    temporary = AdminService.reset_password(db, admin, user_id)
    return {"ok": True, "user_id": user_id, "temporary_password": temporary}


# ---------- Usuários ----------

@router.get("/users", response_model=List[UserOut])
def list_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    plan: Optional[str] = None,
    is_active: Optional[bool] = None,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AdminService.search_users(db, search=search, role=role, plan=plan, is_active=is_active)


@router.patch("/users/{user_id}/plan", response_model=UserOut)
def update_plan(
    user_id: int,
    payload: UserPlanUpdate,
    admin: Profile = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    return AdminService.update_plan(db, admin, user_id, payload.plan)


@router.patch("/users/{user_id}/role", response_model=UserOut)
def update_role(
    user_id: int,
    payload: UserRoleUpdate,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AdminService.update_role(db, admin, user_id, payload.role)


@router.patch("/users/{user_id}/status", response_model=UserOut)
def update_status(
    user_id: int,
    payload: UserStatusUpdate,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AdminService.set_active(db, admin, user_id, payload.is_active)


@router.delete("/users/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    admin: Profile = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    AdminService.delete_user(db, admin, user_id)


# ---------- Auditoria ----------

@router.get("/audit-logs", response_model=List[AuditLogOut])
def audit_logs(
    limit: int = 100,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return SecurityService.list_audit_logs(db, limit)


@router.get("/failed-attempts", response_model=List[AuthAttemptOut])
def failed_attempts(
    email: Optional[str] = None,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return SecurityService.get_failed_attempts(db, email=email)


@router.get("/webhook-logs", response_model=List[WebhookLogOut])
def webhook_logs(
    provider: Optional[str] = None,
    limit: int = 100,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return WebhookLogService.list_events(db, provider, limit)


@router.post("/security-events", status_code=201)
def log_security_event(
    payload: dict,
    request: Request,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    SecurityService.log_event(
        db,
        admin.id,
        str(payload.get("action") or "security_event"),
        str(payload.get("table_name") or "security"),
        payload.get("record_id"),
        new_values=payload.get("details"),
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return {"ok": True}
