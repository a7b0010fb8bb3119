from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.catalog_service import CatalogService
from app.core.security import get_current_user
from app.db.session import get_db
from app.schemas.service import ServiceCreate, ServiceOut, ServiceUpdate

router = APIRouter(prefix="/services", tags=["Services"])


@router.get("", response_model=List[ServiceOut])
def list_services(
    only_active: bool = False,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CatalogService.list_services(db, current_user.id, only_active=only_active)


@router.post("", response_model=ServiceOut, status_code=201)
def create_service(
    payload: ServiceCreate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CatalogService.create(db, current_user.id, payload)


@router.put("/{service_id}", response_model=ServiceOut)
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CatalogService.update(db, current_user.id, service_id, payload)


@router.post("/{service_id}/deactivate", response_model=ServiceOut)
def deactivate_service(
    service_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CatalogService.deactivate(db, current_user.id, service_id)


@router.delete("/{service_id}", status_code=204)
def delete_service(
    service_id: int,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    CatalogService.delete(db, current_user.id, service_id)
