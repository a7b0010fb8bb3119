from typing import Optional

from pydantic import BaseModel


class LimitStatusOut(BaseModel):
    plan: str
    plan_name: str
    resource: str
    current: int
    limit: Optional[int] = None
    unlimited: bool
    percent: float
    near_limit: bool
    at_limit: bool
    message: Optional[str] = None


class PlanLimitsCardOut(BaseModel):
    plan: str
    plan_name: str
    users: LimitStatusOut
    calendars: LimitStatusOut
