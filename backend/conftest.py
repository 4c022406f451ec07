import os

# Point the engine at a throwaway in-memory database before anything imports it
os.environ["DATABASE_URL"] = "sqlite://"

import pytest

from database.config import Base, SessionLocal, engine
from database.ledger import Ledger
from database.stores import MedicalRecordStore, PatientRegistry
from access_control.controller import AccessController


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def controller(db):
    return AccessController(db)


@pytest.fixture
def make_patient(db):
    """Register a patient in its own ledger transaction and return its id"""
    def _make_patient(public_key="02abc", password="Secret123!"):
        with Ledger(db).transaction() as sequence:
            patient = PatientRegistry(db).register(public_key, password, sequence=sequence)
            patient_id = patient.id
        return patient_id
    return _make_patient


@pytest.fixture
def make_record(db):
    def _make_record(patient_id, data="blood panel", record_id=None):
        with Ledger(db).transaction() as sequence:
            record = MedicalRecordStore(db).create(
                patient_id, data, record_id=record_id, sequence=sequence
            )
            record_id = record.record_id
        return record_id
    return _make_record


@pytest.fixture
def patient_record(make_patient, make_record):
    """Patient 1 with record 1"""
    patient_id = make_patient()
    record_id = make_record(patient_id)
    return patient_id, record_id


@pytest.fixture
def client():
    from app import app
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
