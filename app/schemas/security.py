from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    action: str
    table_name: str
    record_id: Optional[str] = None
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    timestamp: Optional[datetime] = None


class UserSessionCreate(BaseModel):
    expires_at: Optional[datetime] = None


class UserSessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    session_token: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    expires_at: datetime
    created_at: Optional[datetime] = None


class AuthAttemptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    attempt_type: str
    success: bool
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None


class WebhookLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    provider: str
    event_type: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    processed_at: Optional[datetime] = None
