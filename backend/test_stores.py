import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from werkzeug.security import check_password_hash

from access_control.errors import RecordExists
from database.config import Base
from database.ledger import Ledger
from database.stores import MedicalRecordStore, PatientRegistry


def test_register_patient(db, make_patient):
    patient_id = make_patient("02feed", "hunter22")
    patient = PatientRegistry(db).get(patient_id)

    assert PatientRegistry(db).exists(patient_id)
    assert not PatientRegistry(db).exists(patient_id + 1)
    assert patient.is_active
    assert patient.created_seq == 1
    assert check_password_hash(patient.hashed_password, "hunter22")


def test_record_ids_are_assigned_per_patient(db, make_patient, make_record):
    first, second = make_patient(), make_patient()

    assert make_record(first) == 1
    assert make_record(first) == 2
    assert make_record(second) == 1
    assert make_record(second, record_id=10) == 10
    assert make_record(second) == 11

    record = MedicalRecordStore(db).get(first, 2)
    assert record.data == "blood panel"
    assert record.access_log == []


def test_duplicate_record_rolls_back(db, patient_record, make_record):
    patient_id, record_id = patient_record
    sequence = Ledger(db).current_sequence()

    with pytest.raises(RecordExists):
        make_record(patient_id, "x-ray", record_id=record_id)

    assert MedicalRecordStore(db).get(patient_id, record_id).data == "blood panel"
    assert Ledger(db).current_sequence() == sequence


def test_ledger_sequence_advances_per_transaction(db):
    ledger = Ledger(db)
    assert ledger.current_sequence() == 0

    with ledger.transaction() as first:
        pass
    with ledger.transaction() as second:
        pass

    assert (first, second) == (1, 2)
    assert ledger.current_sequence() == 2


def test_ledger_rolls_back_on_error(db):
    ledger = Ledger(db)

    with pytest.raises(RuntimeError):
        with ledger.transaction():
            PatientRegistry(db).register("02abc", "pw")
            raise RuntimeError("boom")

    assert ledger.current_sequence() == 0
    assert not PatientRegistry(db).exists(1)


def test_create_tables():
    from init_db import create_tables

    assert set(create_tables()) >= {
        "patients", "medical_records", "access_log_entries", "active_grant", "ledger_sequence",
    }


def test_concurrent_transactions_get_distinct_sequences(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ledger.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False)

    workers, per_worker = 4, 5
    start = threading.Barrier(workers)
    sequences, errors = [], []
    lock = threading.Lock()

    def worker():
        session = Session()
        try:
            start.wait()
            for _ in range(per_worker):
                with Ledger(session).transaction() as sequence:
                    with lock:
                        sequences.append(sequence)
        except Exception as e:  # noqa: BLE001
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    total = workers * per_worker
    assert errors == []
    assert sorted(sequences) == list(range(1, total + 1))

    session = Session()
    try:
        assert Ledger(session).current_sequence() == total
    finally:
        session.close()
        engine.dispose()
