from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.services.whatsapp_service import WhatsAppService
from app.db.session import get_db
from app.schemas.webhook import WhatsAppNotificationIn

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("/whatsapp")
def send_whatsapp_notification(payload: WhatsAppNotificationIn, db: Session = Depends(get_db)):
    status_code, body = WhatsAppService.notify_appointment(db, payload)
    return JSONResponse(status_code=status_code, content=body)
