from typing import Optional, Union

from pydantic import BaseModel


class WhatsAppNotificationIn(BaseModel):
    appointmentId: Union[int, str]
    clientName: str
    clientPhone: str
    appointmentDate: str
    appointmentTime: str
    serviceName: Optional[str] = None
