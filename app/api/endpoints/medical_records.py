## prontuários (apenas serviços de saúde ou admin)
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.models.profile import Profile
from app.api.services.medical_record_service import MedicalRecordService
from app.api.services.permission_service import require_medical_access
from app.db.session import get_db
from app.schemas.medical_record import (
    MedicalRecordCreate,
    MedicalRecordFileIn,
    MedicalRecordFileOut,
    MedicalRecordOut,
    MedicalRecordUpdate,
)

router = APIRouter(prefix="/medical-records", tags=["Medical Records"])


@router.get("", response_model=List[MedicalRecordOut])
def list_records(
    search: Optional[str] = None,
    current_user: Profile = Depends(require_medical_access),
    db: Session = Depends(get_db),
):
    return MedicalRecordService.list_records(db, current_user.id, search=search)


@router.post("", response_model=MedicalRecordOut, status_code=201)
def create_record(
    payload: MedicalRecordCreate,
    current_user: Profile = Depends(require_medical_access),
    db: Session = Depends(get_db),
):
    return MedicalRecordService.create(db, current_user.id, payload)


@router.get("/{record_id}", response_model=MedicalRecordOut)
def get_record(
    record_id: int,
    current_user: Profile = Depends(require_medical_access),
    db: Session = Depends(get_db),
):
    return MedicalRecordService.get_owned(db, current_user.id, record_id)


@router.put("/{record_id}", response_model=MedicalRecordOut)
def update_record(
    record_id: int,
    payload: MedicalRecordUpdate,
    current_user: Profile = Depends(require_medical_access),
    db: Session = Depends(get_db),
):
    return MedicalRecordService.update(db, current_user.id, record_id, payload)


@router.delete("/{record_id}", status_code=204)
def delete_record(
    record_id: int,
    current_user: Profile = Depends(require_medical_access),
    db: Session = Depends(get_db),
):
    MedicalRecordService.delete(db, current_user.id, record_id)


@router.get("/{record_id}/files", response_model=List[MedicalRecordFileOut])
def list_files(
    record_id: int,
    current_user: Profile = Depends(require_medical_access),
    db: Session = Depends(get_db),
):
    return MedicalRecordService.get_owned(db, current_user.id, record_id).files


@router.post("/{record_id}/files",response_model=List[MedicalRecordFileOut], status_code=201)
def add_files(
    record_id: int,
    payload: List[MedicalRecordFileIn],
    current_user: Profile = Depends(require_medical_access),
    db: Session = Depends(get_db),
):
    return MedicalRecordService.add_files(db, current_user.id, record_id, payload)


@router.delete("/{record_id}/files/{file_id}", status_code=204)
def delete_file(
    record_id: int,
    file_id: int,
    current_user: Profile = Depends(require_medical_access),
    db: Session = Depends(get_db),
):
    MedicalRecordService.delete_file(db, current_user.id, record_id, file_id)
