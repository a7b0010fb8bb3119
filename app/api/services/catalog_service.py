## serviços oferecidos pelo profissional (consulta, limpeza, etc)
from typing import List

from sqlalchemy.orm import Session

from app.api.models.appointment import Appointment
from app.api.models.service import Service
from app.core.errors import NotFoundError


class CatalogService:

    @staticmethod
    def list_services(db: Session, user_id: int, only_active: bool = True) -> List[Service]:
        q = db.query(Service).filter(Service.user_id == user_id)
        if only_active:
            q = q.filter(Service.is_active == True)
        return q.order_by(Service.name.asc()).all()

    @staticmethod
    def get_owned(db: Session, user_id: int, service_id: int) -> Service:
        service = (
            db.query(Service)
            .filter(Service.id == service_id, Service.user_id == user_id)
            .first()
        )
        if not service:
            raise NotFoundError("Serviço não encontrado", "SERVICE_NOT_FOUND")
        return service

    @staticmethod
    def create(db: Session, user_id: int, data) -> Service:
        service = Service(user_id=user_id, **data.model_dump())
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update(db: Session, user_id: int, service_id: int, data) -> Service:
        service = CatalogService.get_owned(db, user_id, service_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(service, field, value)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def deactivate(db: Session, user_id: int, service_id: int) -> Service:
        service = CatalogService.get_owned(db, user_id, service_id)
        service.is_active = False
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete(db: Session, user_id: int, service_id: int) -> None:
        service = CatalogService.get_owned(db, user_id, service_id)
        # agendamentos antigos continuam, só perdem o vínculo
        db.query(Appointment).filter(Appointment.service_id == service.id).update(
            {"service_id": None}, synchronize_session=False
        )
        db.delete(service)
        db.commit()
