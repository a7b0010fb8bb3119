from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from dateutil import parser as dateparser
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.schemas.appointment import normalize_time
from app.api.services.appointment_service import AppointmentService
from app.api.services.webhook_log_service import WebhookLogService
from app.core.errors import AppError

logger = logging.getLogger(__name__)

STATUS_MAP = {
    "agendado": "pending",
    "confirmado": "confirmed",
    "cancelado": "cancelled",
    "finalizado": "completed",
    "em_andamento": "in_progress",
}


def map_agendopro_status(status: Optional[str]) -> str:
    return STATUS_MAP.get((status or "").lower(), "pending")


def external_appointment_id(data: Dict[str, Any]) -> str:
    external_id = data.get("id")
    if external_id is None or str(external_id).strip() == "":
        raise AppError("data.id é obrigatório", "MISSING_EXTERNAL_ID", "agendopro_webhook")
    return str(external_id).strip()


class AgendoProWebhookService:

    @staticmethod
    def handle_event(db: Session, payload: Dict[str, Any]) -> str:
        """Processa um evento e devolve a mensagem de retorno."""
        event = payload["event"]
        data = payload["data"]

        # registra antes de processar: entregas com erro também ficam no log
        WebhookLogService.log_event(db, "agendopro", event, payload)

        match event:
            case "appointment.created" | "appointment.updated":
                AgendoProWebhookService._handle_upsert(db, data)
            case "appointment.cancelled":
                external_id = external_appointment_id(data)
                AppointmentService.set_external_status(db, external_id, "cancelled")
                logger.info("AGENDOPRO_CANCELLED external_id=%s", external_id)
            case "appointment.confirmed":
                external_id = external_appointment_id(data)
                AppointmentService.set_external_status(db, external_id, "confirmed")
                logger.info("AGENDOPRO_CONFIRMED external_id=%s", external_id)
            case _:
                logger.info("AGENDOPRO_EVENT_IGNORED event=%s", event)

        return f"Event {event} processed successfully"

    @staticmethod
    def _handle_upsert(db: Session, data: Dict[str, Any]) -> None:
        external_id = external_appointment_id(data)
        professional_id = data.get("professional_id")
        profile = None
        if professional_id:
            profile = db.query(Profile).filter(Profile.agendopro_id == str(professional_id)).first()

        if not profile:
            logger.warning("AGENDOPRO_USER_NOT_FOUND professional_id=%s", professional_id)
            return

        values = {
            "client_name": data.get("client_name") or "",
            "client_email": data.get("client_email") or None,
            "client_phone": data.get("client_phone") or None,
            "appointment_date": dateparser.isoparse(str(data.get("appointment_date"))).date(),
            "appointment_time": normalize_time(str(data.get("appointment_time"))),
            "status": map_agendopro_status(data.get("status")),
            "notes": data.get("notes") or None,
        }
        AppointmentService.upsert_external(db, profile.id, external_id, values)
