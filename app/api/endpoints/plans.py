from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.plan_limit_service import PlanLimitService
from app.core.constants import PLAN_LIMITS, PLAN_NAMES, PLAN_PRICES
from app.core.security import get_current_user
from app.db.session import get_db
from app.schemas.plan import PlanLimitsCardOut

router = APIRouter(prefix="/plans", tags=["Plans"])


@router.get("")
def list_plans():
    return [
        {
            "plan": plan,
            "name": PLAN_NAMES[plan],
            "price": PLAN_PRICES[plan],
            "limits": limits,
        }
        for plan, limits in PLAN_LIMITS.items()
    ]


@router.get("/limits", response_model=PlanLimitsCardOut)
def my_limits(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return PlanLimitService.limits_card(db, current_user)
