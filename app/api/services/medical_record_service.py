# app/api/services/medical_record_service.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.api.models.medical_record import MedicalRecord, MedicalRecordFile
from app.core.constants import ALLOWED_FILE_TYPES, MAX_FILE_SIZE, MAX_FILES_PER_UPLOAD
from app.core.errors import AppError, NotFoundError

logger = logging.getLogger(__name__)


def validate_file(file_name: str, file_size: int, file_type: str) -> None:
    if file_size > MAX_FILE_SIZE:
        raise AppError(
            f"Arquivo {file_name} excede o tamanho máximo de 2MB",
            "FILE_TOO_LARGE",
            "medical_record_upload",
            status_code=413,
        )
    if file_type not in ALLOWED_FILE_TYPES:
        raise AppError(
            f"Tipo de arquivo não permitido: {file_type}",
            "FILE_TYPE_NOT_ALLOWED",
            "medical_record_upload",
            status_code=415,
        )


def build_file_path(user_id: int, record_id: int, file_name: str) -> str:
    return f"{user_id}/{record_id}/{file_name}"


class MedicalRecordService:

    @staticmethod
    def list_records(db: Session, user_id: int, search: Optional[str] = None) -> List[MedicalRecord]:
        q = (
            db.query(MedicalRecord)
            .options(selectinload(MedicalRecord.files))
            .filter(MedicalRecord.user_id == user_id)
        )
        if search:
            like = f"%{search.strip()}%"
            q = q.filter(or_(MedicalRecord.patient_name.ilike(like), MedicalRecord.patient_email.ilike(like)))
        return q.order_by(MedicalRecord.created_at.desc(), MedicalRecord.id.desc()).all()

    @staticmethod
    def get_owned(db: Session, user_id: int, record_id: int) -> MedicalRecord:
        record = (
            db.query(MedicalRecord)
            .filter(MedicalRecord.id == record_id, MedicalRecord.user_id == user_id)
            .first()
        )
        if not record:
            raise NotFoundError("Prontuário não encontrado", "MEDICAL_RECORD_NOT_FOUND")
        return record

    @staticmethod
    def create(db: Session, user_id: int, data) -> MedicalRecord:
        record = MedicalRecord(user_id=user_id, **data.model_dump())
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.info("MEDICAL_RECORD_CREATED user_id=%s record_id=%s", user_id, record.id)
        return record

    @staticmethod
    def update(db: Session, user_id: int, record_id: int, data) -> MedicalRecord:
        record = MedicalRecordService.get_owned(db, user_id, record_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(record, field, value)
        record.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def delete(db: Session, user_id: int, record_id: int) -> None:
        record = MedicalRecordService.get_owned(db, user_id, record_id)
        db.delete(record)
        db.commit()
        logger.info("MEDICAL_RECORD_DELETED user_id=%s record_id=%s", user_id, record_id)

    # ======================
    # Arquivos (metadados)
    # ======================

    @staticmethod
    def add_files(db: Session, user_id: int, record_id: int, files) -> List[MedicalRecordFile]:
        """
        Registra os metadados dos arquivos enviados ao bucket.
        Valida tudo antes de gravar: um arquivo inválido rejeita o lote inteiro.
        """
        record = MedicalRecordService.get_owned(db, user_id, record_id)

        if len(files) > MAX_FILES_PER_UPLOAD:
            raise AppError(
                f"Máximo de {MAX_FILES_PER_UPLOAD} arquivos por envio",
                "TOO_MANY_FILES",
                "medical_record_upload",
            )
        for f in files:
            validate_file(f.file_name, f.file_size, f.file_type)

        created = []
        for f in files:
            row = MedicalRecordFile(
                medical_record_id=record.id,
                file_name=f.file_name,
                file_size=f.file_size,
                file_type=f.file_type,
                file_url=build_file_path(user_id, record.id, f.file_name),
                uploaded_by=user_id,
            )
            db.add(row)
            created.append(row)

        db.commit()
        for row in created:
            db.refresh(row)
        return created

    @staticmethod
    def delete_file(db: Session, user_id: int, record_id: int, file_id: int) -> None:
        record = MedicalRecordService.get_owned(db, user_id, record_id)
        row = (
            db.query(MedicalRecordFile)
            .filter(MedicalRecordFile.id == file_id, MedicalRecordFile.medical_record_id == record.id)
            .first()
        )
        if not row:
            raise NotFoundError("Arquivo não encontrado", "FILE_NOT_FOUND")
        db.delete(row)
        db.commit()
