import logging
from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from database.config import SessionLocal
from database.stores import PatientRegistry

logger = logging.getLogger(__name__)


def _current_patient_id():
    try:
        return int(get_jwt_identity())
    except (TypeError, ValueError):
        return None


def require_patient(f):
    """Decorator to require a JWT belonging to a registered, active patient.

    Passes the caller's patient id to the view as ``current_patient_id``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        verify_jwt_in_request()
        patient_id = _current_patient_id()
        if patient_id is None:
            return jsonify({"msg": "Malformed token identity: expected a patient id"}), 401

        db = SessionLocal()
        try:
            patient = PatientRegistry(db).get(patient_id)
            if not patient:
                return jsonify({"msg": "Patient not found"}), 404
            if not patient.is_active:
                logger.warning("[DENIED] Inactive patient %s", patient_id)
                return jsonify({"msg": "Patient account is inactive"}), 403
        finally:
            db.close()

        return f(*args, current_patient_id=patient_id, **kwargs)
    return decorated_function


def require_record_owner(f):
    """Decorator to restrict a record route to the patient who owns it"""
    @wraps(f)
    @require_patient
    def decorated_function(patient_id, record_id, *args, current_patient_id, **kwargs):
        if patient_id != current_patient_id:
            logger.warning(
                "[DENIED] Patient %s tried to read record %s of patient %s",
                current_patient_id, record_id, patient_id,
            )
            return jsonify({"msg": "Access denied: not the record owner"}), 403
        return f(patient_id, record_id, *args, **kwargs)
    return decorated_function
