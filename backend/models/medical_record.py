from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import relationship

from models import Base

RECORD_DATA_MAX_LENGTH = 256


class MedicalRecord(Base):
    __tablename__ = "medical_records"

    patient_id = Column(Integer, primary_key=True, autoincrement=False)
    record_id = Column(Integer, primary_key=True, autoincrement=False)
    data = Column(Text, nullable=False)
    created_at = Column(Integer, nullable=False)  # ledger sequence

    access_log = relationship(
        "AccessLogEntry",
        order_by="AccessLogEntry.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def to_dict(self):
        return {
            "patient_id": self.patient_id,
            "record_id": self.record_id,
            "data": self.data,
            "created_at": self.created_at,
            "access_log_size": len(self.access_log),
        }
