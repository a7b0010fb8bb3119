from typing import Dict, List

from pydantic import BaseModel


class PermissionCheckOut(BaseModel):
    permission: str
    allowed: bool


class UserPermissionsOut(BaseModel):
    user_id: int
    role: str
    permissions: List[str]
    is_admin: bool
    is_super_admin: bool


class SystemStatisticsOut(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    new_users_this_month: int
    total_revenue_estimate: float
    plan_distribution: Dict[str, int]
    total_appointments: int
    appointments_this_month: int
