from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.services.payment_webhook_service import PaymentWebhookService
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks/payment", tags=["Payment Webhooks"])


@router.post("")
async def payment_webhook(request: Request, db: Session = Depends(get_db)):
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(status_code=400, content={"error": "Invalid JSON"})

    if not isinstance(payload, dict):
        return JSONResponse(status_code=400, content={"error": "Invalid JSON"})

    result = PaymentWebhookService.handle_event(db, payload)
    return JSONResponse(status_code=result.status_code, content=result.body)
