from sqlalchemy import Column, Integer, ForeignKeyConstraint, UniqueConstraint

from models import Base


class AccessLogEntry(Base):
    __tablename__ = "access_log_entries"
    __table_args__ = (
        ForeignKeyConstraint(
            ["patient_id", "record_id"],
            ["medical_records.patient_id", "medical_records.record_id"],
        ),
        UniqueConstraint("patient_id", "record_id", "position"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    patient_id = Column(Integer, nullable=False)
    record_id = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False)  # 0-based append order
    provider_id = Column(Integer, nullable=False)
    logged_at = Column(Integer, nullable=False)  # ledger sequence
    action = Column(Integer, nullable=False)  # permission value, 0 = revoked
