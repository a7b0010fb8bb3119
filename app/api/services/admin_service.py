## lógica do painel administrativo (usuários, estatísticas, reset de senha)
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.api.models.appointment import Appointment
from app.api.models.calendar import Calendar, CalendarPermission, CalendarSchedule
from app.api.models.medical_record import MedicalRecord, MedicalRecordFile
from app.api.models.profile import Profile
from app.api.models.security import AuditLog, UserRole, UserSession
from app.api.models.service import Service
from app.api.models.setting import UserSetting
from app.api.services.permission_service import PermissionManager
from app.api.services.security_service import SecurityService
from app.core.constants import PLAN_PRICES, TEMPORARY_PASSWORD, USER_ROLES
from app.core.errors import AppError, NotFoundError, PermissionDeniedError
from app.core.security import get_password_hash

logger = logging.getLogger(__name__)


def profile_snapshot(profile: Profile) -> dict:
    return {
        "email": profile.email,
        "name": profile.name,
        "role": profile.role,
        "plan": profile.plan,
        "is_active": profile.is_active,
    }


class AdminService:

    # ======================
    # Usuários
    # ======================

    @staticmethod
    def get_user(db: Session, user_id: int) -> Profile:
        profile = db.get(Profile, user_id)
        if not profile:
            raise NotFoundError("Usuário não encontrado", "USER_NOT_FOUND")
        return profile

    @staticmethod
    def search_users(
        db: Session,
        search: Optional[str] = None,
        role: Optional[str] = None,
        plan: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> List[Profile]:
        q = db.query(Profile)

        if search:
            like = f"%{search.strip()}%"
            q = q.filter(or_(Profile.name.ilike(like), Profile.email.ilike(like)))
        if role and role != "all":
            q = q.filter(Profile.role == role)
        if plan and plan != "all":
            q = q.filter(Profile.plan == plan)
        if is_active is not None:
            q = q.filter(Profile.is_active == is_active)

        return q.order_by(Profile.created_at.desc(), Profile.id.desc()).all()

    @staticmethod
    def _update_field(db: Session, actor: Profile, user_id: int, field: str, value, action: str) -> Profile:
        profile = AdminService.get_user(db, user_id)
        old_value = getattr(profile, field)

        setattr(profile, field, value)
        profile.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(profile)

        SecurityService.log_event(
            db, actor.id, action, "profiles", profile.id,
            old_values={field: old_value},
            new_values={field: value},
        )
        logger.info("ADMIN_%s actor=%s user_id=%s %s=%s", action.upper(), actor.id, user_id, field, value)
        return profile

    @staticmethod
    def update_plan(db: Session, actor: Profile, user_id: int, plan: str) -> Profile:
        return AdminService._update_field(db, actor, user_id, "plan", plan, "plan_change")

    @staticmethod
    def update_role(db: Session, actor: Profile, user_id: int, role: str) -> Profile:
        if role == "superadmin" and not PermissionManager.is_super_admin(db, actor):
            raise PermissionDeniedError("Apenas super administradores podem conceder este papel.", "FORBIDDEN")
        return AdminService._update_field(db, actor, user_id, "role", role, "role_change")

    @staticmethod
    def set_active(db: Session, actor: Profile, user_id: int, is_active: bool) -> Profile:
        return AdminService._update_field(db, actor, user_id, "is_active", is_active, "status_change")

    @staticmethod
    def delete_user(db: Session, actor: Profile, user_id: int) -> None:
        if actor.id == user_id:
            raise AppError("Não é possível excluir a própria conta", "VALIDATION_ERROR", "delete_user")
        profile = AdminService.get_user(db, user_id)
        snapshot = profile_snapshot(profile)

        # dados do próprio profissional
        record_ids = [r[0] for r in db.query(MedicalRecord.id).filter(MedicalRecord.user_id == user_id).all()]
        if record_ids:
            db.query(MedicalRecordFile).filter(MedicalRecordFile.medical_record_id.in_(record_ids)).delete(synchronize_session=False)
            db.query(MedicalRecord).filter(MedicalRecord.id.in_(record_ids)).delete(synchronize_session=False)

        calendar_ids = [r[0] for r in db.query(Calendar.id).filter(Calendar.user_id == user_id).all()]
        if calendar_ids:
            db.query(CalendarSchedule).filter(CalendarSchedule.calendar_id.in_(calendar_ids)).delete(synchronize_session=False)
            db.query(CalendarPermission).filter(CalendarPermission.calendar_id.in_(calendar_ids)).delete(synchronize_session=False)

        db.query(Appointment).filter(Appointment.user_id == user_id).delete(synchronize_session=False)
        if calendar_ids:
            db.query(Appointment).filter(Appointment.calendar_id.in_(calendar_ids)).update(
                {Appointment.calendar_id: None}, synchronize_session=False
            )
            db.query(Calendar).filter(Calendar.id.in_(calendar_ids)).delete(synchronize_session=False)
        db.query(Service).filter(Service.user_id == user_id).delete(synchronize_session=False)

        # vínculos do perfil
        db.query(AuditLog).filter(AuditLog.user_id == user_id).update({AuditLog.user_id: None}, synchronize_session=False)
        db.query(UserRole).filter(UserRole.user_id == user_id).delete(synchronize_session=False)
        db.query(UserSession).filter(UserSession.user_id == user_id).delete(synchronize_session=False)
        db.query(UserSetting).filter(UserSetting.user_id == user_id).delete(synchronize_session=False)
        db.query(CalendarPermission).filter(CalendarPermission.user_id == user_id).delete(synchronize_session=False)
        db.delete(profile)
        db.commit()

        SecurityService.log_event(db, actor.id, "user_delete", "profiles", user_id, old_values=snapshot)
        logger.info("ADMIN_USER_DELETE actor=%s user_id=%s", actor.id, user_id)

    @staticmethod
    def reset_password(db: Session, actor: Profile, user_id: int) -> str:
        profile = AdminService.get_user(db, user_id)
        profile.password_hash = get_password_hash(TEMPORARY_PASSWORD)
        profile.updated_at = datetime.utcnow()
        db.commit()

        SecurityService.log_event(
            db, actor.id, "password_reset", "profiles", user_id,
            new_values={"action": "password_reset_requested"},
        )
        return TEMPORARY_PASSWORD

    # ======================
    # Estatísticas
    # ======================

    @staticmethod
    def _counts_by(db: Session, column) -> Dict[str, int]:
        return {key: count for key, count in db.query(column, func.count()).group_by(column).all()}

    @staticmethod
    def admin_statistics(db: Session) -> dict:
        total = db.query(Profile).count()
        active = db.query(Profile).filter(Profile.is_active == True).count()

        by_role = {role: 0 for role in USER_ROLES}
        by_role.update(AdminService._counts_by(db, Profile.role))

        active_by_plan = dict(
            db.query(Profile.plan, func.count())
            .filter(Profile.is_active == True)
            .group_by(Profile.plan)
            .all()
        )
        revenue_by_plan = {
            plan: round(price * active_by_plan.get(plan, 0), 2)
            for plan, price in PLAN_PRICES.items()
        }

        return {
            "users": {
                "total": total,
                "active": active,
                "inactive": total - active,
                "by_role": by_role,
            },
            "appointments": {
                "total": db.query(Appointment).count(),
                "by_status": AdminService._counts_by(db, Appointment.status),
            },
            "calendars": {
                "total": db.query(Calendar).count(),
            },
            "revenue": {
                "total": round(sum(revenue_by_plan.values()), 2),
                "by_plan": revenue_by_plan,
            },
        }

    @staticmethod
    def system_statistics(db: Session, today: date = None) -> dict:
        today = today or date.today()
        month_start = today.replace(day=1)

        total = db.query(Profile).count()
        active = db.query(Profile).filter(Profile.is_active == True).count()

        plan_distribution = {plan: 0 for plan in PLAN_PRICES}
        plan_distribution.update(AdminService._counts_by(db, Profile.plan))

        revenue = sum(PLAN_PRICES.get(plan, 0.0) * count for plan, count in dict(
            db.query(Profile.plan, func.count())
            .filter(Profile.is_active == True)
            .group_by(Profile.plan)
            .all()
        ).items())

        return {
            "total_users": total,
            "active_users": active,
            "inactive_users": total - active,
            "new_users_this_month": (
                db.query(Profile)
                .filter(Profile.created_at >= datetime.combine(month_start, datetime.min.time()))
                .count()
            ),
            "total_revenue_estimate": round(revenue, 2),
            "plan_distribution": plan_distribution,
            "total_appointments": db.query(Appointment).count(),
            "appointments_this_month": (
                db.query(Appointment)
                .filter(Appointment.appointment_date >= month_start)
                .count()
            ),
        }
