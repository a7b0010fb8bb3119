## sessões do usuário logado
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.security_service import SecurityService
from app.core.security import get_current_user
from app.db.session import get_db
from app.schemas.security import UserSessionCreate, UserSessionOut

router = APIRouter(prefix="/security", tags=["Security"])


@router.get("/sessions", response_model=List[UserSessionOut])
def list_sessions(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SecurityService.get_active_sessions(db, current_user.id)


@router.post("/sessions", response_model=UserSessionOut, status_code=201)
def create_session(
    payload: UserSessionCreate,
    request: Request,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SecurityService.create_session(
        db,
        current_user.id,
        expires_at=payload.expires_at,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


@router.delete("/sessions/{session_id}", status_code=204)
def revoke_session(
    session_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    SecurityService.revoke_session(db, current_user.id, session_id)
