"""
Limites por plano (usuários, agendas, agendamentos/mês, armazenamento).

Apenas informativo: nenhuma operação é bloqueada aqui, o resultado alimenta o
cartão de limite do plano no painel.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from app.api.models.calendar import Calendar
from app.api.models.profile import Profile
from app.core.constants import NEAR_LIMIT_RATIO, PLAN_LIMITS, PLAN_NAMES, UNLIMITED


def resolve_plan(plan: Optional[str]) -> str:
    """Plano desconhecido cai no plano de teste."""
    plan = (plan or "").lower()
    return plan if plan in PLAN_LIMITS else "free"


def get_plan_limit(plan: Optional[str], resource: str) -> int:
    limits = PLAN_LIMITS[resolve_plan(plan)]
    if resource not in limits:
        raise KeyError(f"Recurso sem limite definido: {resource}")
    return limits[resource]


def evaluate_limit(plan: Optional[str], resource: str, current_count: int) -> dict:
    plan_key = resolve_plan(plan)
    limit = get_plan_limit(plan_key, resource)
    unlimited = limit == UNLIMITED

    at_limit = not unlimited and current_count >= limit
    near_limit = not unlimited and not at_limit and current_count >= limit * NEAR_LIMIT_RATIO

    if unlimited or limit <= 0:
        percent = 0.0
    else:
        percent = min(100.0, (current_count / limit) * 100)

    if at_limit:
        message = "Limite atingido. Faça upgrade para adicionar mais."
    elif near_limit:
        message = "Próximo do limite. Considere fazer upgrade."
    elif unlimited:
        message = f"Ilimitado no plano {PLAN_NAMES[plan_key]}."
    else:
        message = None

    return {
        "plan": plan_key,
        "plan_name": PLAN_NAMES[plan_key],
        "resource": resource,
        "current": current_count,
        "limit": None if unlimited else limit,
        "unlimited": unlimited,
        "percent": round(percent, 1),
        "near_limit": near_limit,
        "at_limit": at_limit,
        "message": message,
    }


class PlanLimitService:

    @staticmethod
    def count_users(db: Session, profile: Profile) -> int:
        if profile.organization_id is None:
            return 1
        return (
            db.query(Profile)
            .filter(Profile.organization_id == profile.organization_id, Profile.is_active == True)
            .count()
        )

    @staticmethod
    def count_calendars(db: Session, profile: Profile) -> int:
        return db.query(Calendar).filter(Calendar.user_id == profile.id).count()

    @staticmethod
    def limits_card(db: Session, profile: Profile) -> dict:
        return {
            "plan": resolve_plan(profile.plan),
            "plan_name": PLAN_NAMES[resolve_plan(profile.plan)],
            "users": evaluate_limit(profile.plan, "users", PlanLimitService.count_users(db, profile)),
            "calendars": evaluate_limit(profile.plan, "calendars", PlanLimitService.count_calendars(db, profile)),
        }
