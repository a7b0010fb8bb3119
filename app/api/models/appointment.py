from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base

# um horário só pode ter um agendamento ativo por profissional
ACTIVE_SLOT_CONDITION = text("status IN ('pending', 'confirmed')")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            "uq_appointments_active_slot",
            "user_id",
            "appointment_date",
            "appointment_time",
            unique=True,
            postgresql_where=ACTIVE_SLOT_CONDITION,
            sqlite_where=ACTIVE_SLOT_CONDITION,
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # profissional dono da agenda
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id"), index=True, nullable=False)

    client_name: Mapped[str] = mapped_column(String(200), nullable=False)
    client_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    client_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)

    service_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("services.id"), nullable=True)
    calendar_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("calendars.id"), nullable=True)

    appointment_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    appointment_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM

    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # id do agendamento no AgendoPro externo
    agendopro_id: Mapped[Optional[str]] = mapped_column(String(128), index=True, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    service = relationship("Service")
