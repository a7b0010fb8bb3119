from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.services.agendopro_webhook_service import AgendoProWebhookService
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks/agendopro", tags=["AgendoPro Webhooks"])


@router.post("")
async def agendopro_webhook(request: Request, db: Session = Depends(get_db)):
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(status_code=400, content={"error": "Invalid JSON"})

    if not isinstance(payload, dict) or not payload.get("event") or not isinstance(payload.get("data"), dict):
        return JSONResponse(status_code=400, content={"error": "Invalid payload: event and data are required"})

    logger.info("AGENDOPRO_WEBHOOK event=%s", payload["event"])

    try:
        message = AgendoProWebhookService.handle_event(db, payload)
    except (SQLAlchemyError, ValueError, TypeError, OverflowError) as e:
        db.rollback()
        logger.exception("AGENDOPRO_WEBHOOK_ERROR event=%s", payload["event"])
        return JSONResponse(status_code=500, content={"error": str(e)})

    return {"success": True, "message": message}
