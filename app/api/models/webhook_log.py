from sqlalchemy import Column, Integer, String, DateTime, JSON, func
from app.db.base_class import Base


class WebhookLog(Base):
    __tablename__ = "webhook_logs"

    id = Column(Integer, primary_key=True, index=True)
    provider = Column(String(40), index=True, nullable=False)  # payment | agendopro
    event_type = Column(String(80), nullable=True)
    payload = Column(JSON, nullable=True)
    processed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
