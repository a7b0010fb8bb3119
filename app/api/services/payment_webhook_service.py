# app/api/services/payment_webhook_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.webhook_log_service import WebhookLogService
from app.core.constants import PAYMENT_APPROVED_EVENTS, PRODUCT_PLAN_MAP

logger = logging.getLogger(__name__)


# ---------- Extractors (tolerantes) ----------

def extract_customer_email(payload: Dict[str, Any]) -> Optional[str]:
    email = payload.get("customer_email")
    if not email:
        customer = payload.get("Customer")
        if isinstance(customer, dict):
            email = customer.get("email")
    if isinstance(email, str) and email.strip():
        return email.strip().lower()
    return None


def resolve_plan_from_product(payload: Dict[str, Any]) -> str:
    """
    Produto -> plano.
    Primeiro pela tabela fixa de product_id, depois pelo nome do produto.
    Sem correspondência vira "free".
    """
    product_id = payload.get("product_id")
    if product_id is not None and str(product_id) in PRODUCT_PLAN_MAP:
        return PRODUCT_PLAN_MAP[str(product_id)]

    product_name = str(payload.get("product_name") or "").lower()
    if "básico" in product_name or "basico" in product_name:
        return "basico"
    if "profissional" in product_name:
        return "profissional"
    if "premium" in product_name:
        return "premium"
    return "free"


@dataclass
class PaymentWebhookResult:
    status_code: int
    body: Dict[str, Any]


class PaymentWebhookService:

    @staticmethod
    def handle_event(db: Session, payload: Dict[str, Any]) -> PaymentWebhookResult:
        event_type = payload.get("event_type")
        logger.info(
            "PAYMENT_WEBHOOK event=%s transaction_id=%s amount=%s",
            event_type, payload.get("transaction_id"), payload.get("amount"),
        )

        if event_type not in PAYMENT_APPROVED_EVENTS:
            return PaymentWebhookResult(200, {"message": "Event not processed"})

        WebhookLogService.log_event(db, "payment", event_type, payload)

        email = extract_customer_email(payload)
        if not email:
            return PaymentWebhookResult(400, {"error": "Customer email is required"})

        profile = db.query(Profile).filter(Profile.email == email).first()
        if not profile:
            logger.warning("PAYMENT_WEBHOOK_USER_NOT_FOUND email=%s", email)
            return PaymentWebhookResult(404, {"error": "User not found"})

        new_plan = resolve_plan_from_product(payload)

        try:
            profile.plan = new_plan
            profile.updated_at = datetime.utcnow()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("PAYMENT_WEBHOOK_UPDATE_FAILED email=%s err=%r", email, e)
            return PaymentWebhookResult(500, {"error": "Failed to update plan"})

        logger.info("PAYMENT_WEBHOOK_OK user=%s plan=%s", email, new_plan)
        return PaymentWebhookResult(200, {"success": True, "plan": new_plan, "user_email": email})
