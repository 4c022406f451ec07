from sqlalchemy import func
from werkzeug.security import generate_password_hash

from access_control.errors import RecordExists
from models.medical_record import MedicalRecord
from models.patient import PatientProfile


class PatientRegistry:
    """Patient profile lookup and registration."""

    def __init__(self, db):
        self.db = db

    def get(self, patient_id):
        return self.db.get(PatientProfile, patient_id)

    def exists(self, patient_id) -> bool:
        return self.get(patient_id) is not None

    def register(self, public_key, password, sequence=0):
        patient = PatientProfile(
            public_key=public_key,
            hashed_password=generate_password_hash(password),
            is_active=True,
            created_seq=sequence,
        )
        self.db.add(patient)
        self.db.flush()
        return patient


class MedicalRecordStore:
    """Medical records keyed by (patient_id, record_id)."""

    def __init__(self, db):
        self.db = db

    def get(self, patient_id, record_id):
        return self.db.get(MedicalRecord, (patient_id, record_id))

    def set(self, record):
        self.db.merge(record)
        self.db.flush()

    def next_record_id(self, patient_id):
        current = self.db.query(func.max(MedicalRecord.record_id)).filter(
            MedicalRecord.patient_id == patient_id
        ).scalar()
        return (current or 0) + 1

    def create(self, patient_id, data, record_id=None, sequence=0):
        if record_id is None:
            record_id = self.next_record_id(patient_id)
        elif self.get(patient_id, record_id) is not None:
            raise RecordExists(patient_id, record_id)

        record = MedicalRecord(
            patient_id=patient_id,
            record_id=record_id,
            data=data,
            created_at=sequence,
        )
        self.db.add(record)
        self.db.flush()
        return record
