import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.models.webhook_log import WebhookLog

logger = logging.getLogger(__name__)


class WebhookLogService:

    @staticmethod
    def log_event(db: Session, provider: str, event_type: Optional[str], payload: Dict[str, Any]) -> None:
        # log é best effort: falha aqui não muda a resposta do webhook
        try:
            db.add(WebhookLog(provider=provider, event_type=event_type, payload=payload))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("WEBHOOK_LOG_FAILED provider=%s err=%r", provider, e)

    @staticmethod
    def list_events(db: Session, provider: Optional[str] = None, limit: int = 100):
        q = db.query(WebhookLog)
        if provider:
            q = q.filter(WebhookLog.provider == provider)
        return q.order_by(WebhookLog.id.desc()).limit(limit).all()
