from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text, func
from sqlalchemy.orm import relationship
from app.db.base_class import Base


class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), index=True, nullable=False)

    patient_name = Column(String(200), nullable=False)
    patient_email = Column(String(320), nullable=True)
    patient_phone = Column(String(32), nullable=True)
    date_of_birth = Column(Date, nullable=True)

    diagnosis = Column(Text, nullable=True)
    treatment = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    files = relationship("MedicalRecordFile", cascade="all, delete-orphan", back_populates="medical_record")


class MedicalRecordFile(Base):
    __tablename__ = "medical_record_files"

    id = Column(Integer, primary_key=True, index=True)
    medical_record_id = Column(Integer, ForeignKey("medical_records.id"), index=True, nullable=False)

    file_name = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    file_type = Column(String(100), nullable=False)
    # caminho no bucket de arquivos: {user_id}/{record_id}/{arquivo}
    file_url = Column(String, nullable=False)
    uploaded_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    medical_record = relationship("MedicalRecord", back_populates="files")
