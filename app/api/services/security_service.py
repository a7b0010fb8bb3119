# app/api/services/security_service.py
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.models.security import AuditLog, AuthAttempt, UserSession
from app.core.errors import AppError, NotFoundError

logger = logging.getLogger(__name__)


class SecurityService:

    # ======================
    # Auditoria
    # ======================

    @staticmethod
    def log_event(
        db: Session,
        user_id: Optional[int],
        action: str,
        table_name: str,
        record_id: Any = None,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        """Grava um evento de auditoria. Falha aqui só gera warning."""
        try:
            db.add(AuditLog(
                user_id=user_id,
                action=action,
                table_name=table_name,
                record_id=str(record_id) if record_id is not None else None,
                old_values=old_values,
                new_values=new_values,
                ip_address=ip_address,
                user_agent=user_agent,
            ))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("AUDIT_LOG_FAILED action=%s table=%s err=%r", action, table_name, e)

    @staticmethod
    def list_audit_logs(db: Session, limit: int = 100) -> List[AuditLog]:
        return (
            db.query(AuditLog)
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
            .limit(limit)
            .all()
        )

    # ======================
    # Sessões
    # ======================

    @staticmethod
    def create_session(
        db: Session,
        user_id: int,
        expires_at: datetime = None,
        session_token: str = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> UserSession:
        session_token = session_token or secrets.token_urlsafe(32)
        expires_at = expires_at or datetime.utcnow() + timedelta(hours=24)
        if expires_at.tzinfo is not None:
            expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)

        if expires_at <= datetime.utcnow():
            raise AppError("Data de expiração da sessão já passou", "VALIDATION_ERROR", "create_session")

        user_session = UserSession(
            user_id=user_id,
            session_token=session_token,
            ip_address=ip_address,
            user_agent=user_agent,
            expires_at=expires_at,
        )
        db.add(user_session)
        db.commit()
        db.refresh(user_session)
        return user_session

    @staticmethod
    def get_active_sessions(db: Session, user_id: int) -> List[UserSession]:
        return (
            db.query(UserSession)
            .filter(UserSession.user_id == user_id, UserSession.expires_at >= datetime.utcnow())
            .order_by(UserSession.created_at.desc(), UserSession.id.desc())
            .all()
        )

    @staticmethod
    def revoke_session(db: Session, user_id: int, session_id: int) -> None:
        user_session = (
            db.query(UserSession)
            .filter(UserSession.id == session_id, UserSession.user_id == user_id)
            .first()
        )
        if not user_session:
            raise NotFoundError("Sessão não encontrada", "SESSION_NOT_FOUND")
        db.delete(user_session)
        db.commit()

    # ======================
    # Tentativas de autenticação
    # ======================

    @staticmethod
    def get_failed_attempts(db: Session, email: Optional[str] = None, since_seconds: Optional[int] = None) -> List[AuthAttempt]:
        q = db.query(AuthAttempt).filter(AuthAttempt.success == False)
        if email:
            q = q.filter(AuthAttempt.email == email.strip().lower())
        if since_seconds:
            q = q.filter(AuthAttempt.created_at >= datetime.utcnow() - timedelta(seconds=since_seconds))
        return q.order_by(AuthAttempt.id.desc()).limit(100).all()
