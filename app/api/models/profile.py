from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from app.db.base_class import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)

    # Auth
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    # Identidade do profissional / clínica
    name = Column(String, nullable=True)
    clinic_name = Column(String, nullable=True)
    service_type = Column(String, nullable=True)  # ex: medicina, odontologia, estetica
    phone = Column(String, nullable=True)

    role = Column(String(20), nullable=False, default="client")
    plan = Column(String(20), nullable=False, default="free")
    plan_expires_at = Column(DateTime(timezone=True), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    email_confirmed = Column(Boolean, nullable=False, default=False)

    organization_id = Column(Integer, nullable=True, index=True)

    # id do profissional no AgendoPro externo (webhook de integração)
    agendopro_id = Column(String, unique=True, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
