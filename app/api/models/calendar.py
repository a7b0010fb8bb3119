from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, UniqueConstraint, func
from sqlalchemy.types import SmallInteger
from app.db.base_class import Base


class Calendar(Base):
    __tablename__ = "calendars"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), index=True, nullable=False)

    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(20), nullable=False, default="#3b82f6")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class CalendarSchedule(Base):
    __tablename__ = "calendar_schedules"

    id = Column(Integer, primary_key=True)
    calendar_id = Column(Integer, ForeignKey("calendars.id"), index=True, nullable=False)
    day_of_week = Column(SmallInteger, nullable=False)  # 0 = domingo
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class CalendarPermission(Base):
    __tablename__ = "calendar_permissions"
    __table_args__ = (
        UniqueConstraint("calendar_id", "user_id", name="uq_calendar_permissions_calendar_user"),
    )

    id = Column(Integer, primary_key=True)
    calendar_id = Column(Integer, ForeignKey("calendars.id"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("profiles.id"), index=True, nullable=False)
    permission_type = Column(String(10), nullable=False, default="view")  # view | edit | admin
    granted_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
