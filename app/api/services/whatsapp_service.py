# app/api/services/whatsapp_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from dateutil import parser as dateparser
from sqlalchemy.orm import Session

from app.api.services.settings_service import SettingsService
from app.core.config import settings

logger = logging.getLogger(__name__)

TEST_PHONE = "5511999999999"
TEST_MESSAGE = (
    "🧪 *Teste de Configuração*\n\n"
    "Seu webhook N8N está funcionando corretamente!\n\n"
    "_AgendoPro_"
)


def format_date_br(value: str) -> str:
    try:
        return dateparser.isoparse(value).strftime("%d/%m/%Y")
    except (ValueError, TypeError):
        return value


def format_confirmation_message(
    client_name: str,
    appointment_date: str,
    appointment_time: str,
    service_name: Optional[str] = None,
) -> str:
    service_line = f"🔧 Serviço: {service_name}" if service_name else ""
    return (
        "🗓️ *Confirmação de Agendamento*\n"
        "\n"
        f"Olá {client_name}!\n"
        "\n"
        "Seu agendamento foi confirmado com sucesso:\n"
        "\n"
        f"📅 Data: {format_date_br(appointment_date)}\n"
        f"🕐 Horário: {appointment_time}\n"
        f"{service_line}\n"
        "\n"
        "Aguardamos você!\n"
        "\n"
        "_AgendoPro_"
    )


class WhatsAppService:
    """Cliente do webhook (N8N) que entrega as mensagens no WhatsApp."""

    def __init__(self, webhook_url: str, timeout: int = None):
        self.webhook_url = webhook_url
        self.timeout = timeout or settings.WHATSAPP_REQUEST_TIMEOUT

    def _post(self, payload: Dict[str, Any]) -> None:
        try:
            r = requests.post(
                self.webhook_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RuntimeError(f"Erro de conexão com o webhook: {e}")

        if r.status_code >= 400:
            raise RuntimeError(f"Erro no webhook: {r.status_code}")

    def send_message(self, phone: str, message: str, appointment_id: Any = None) -> None:
        self._post({
            "phone": phone,
            "message": message,
            "appointmentId": appointment_id,
        })

    def send_test(self) -> None:
        self._post({"phone": TEST_PHONE, "message": TEST_MESSAGE, "test": True})

    # ======================
    # Fluxos
    # ======================

    @staticmethod
    def notify_appointment(db: Session, payload) -> tuple:
        """
        Envia a confirmação do agendamento.
        Retorna (status_code, body) no formato devolvido pela rota.
        """
        config = SettingsService.get_whatsapp_settings(db)

        if not config["enabled"] or not config["webhook_url"]:
            logger.info("WHATSAPP_DISABLED appointment_id=%s", payload.appointmentId)
            return 200, {"success": False, "message": "WhatsApp não configurado"}

        message = format_confirmation_message(
            client_name=payload.clientName,
            appointment_date=payload.appointmentDate,
            appointment_time=payload.appointmentTime,
            service_name=payload.serviceName,
        )

        try:
            WhatsAppService(config["webhook_url"]).send_message(
                phone=payload.clientPhone,
                message=message,
                appointment_id=payload.appointmentId,
            )
        except RuntimeError as e:
            logger.error("WHATSAPP_SEND_FAILED appointment_id=%s err=%s", payload.appointmentId, e)
            return 500, {"success": False, "error": str(e)}

        logger.info("WHATSAPP_SENT appointment_id=%s", payload.appointmentId)
        return 200, {"success": True, "message": "Notificação WhatsApp enviada com sucesso"}

    @staticmethod
    def test_webhook(db: Session, user_id: Optional[int] = None) -> Dict[str, Any]:
        config = SettingsService.get_whatsapp_settings(db, user_id)
        if not config["enabled"] or not config["webhook_url"]:
            return {"success": False, "message": "Configure e habilite o WhatsApp antes de testar"}

        try:
            WhatsAppService(config["webhook_url"]).send_test()
        except RuntimeError as e:
            logger.warning("WHATSAPP_TEST_FAILED user_id=%s err=%s", user_id, e)
            return {"success": False, "message": "Não foi possível conectar com o webhook. Verifique a URL."}

        return {"success": True, "message": "Requisição enviada para o webhook."}
