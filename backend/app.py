import logging
import os

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager, create_access_token
from werkzeug.security import check_password_hash

from database.config import SessionLocal, engine, Base
from database.ledger import Ledger
from database.stores import MedicalRecordStore, PatientRegistry
from models.medical_record import RECORD_DATA_MAX_LENGTH
from models.patient import PUBLIC_KEY_MAX_LENGTH
from access_control.controller import AccessController
from access_control.decorators import require_patient, require_record_owner
from access_control.errors import AccessControlError

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Configuration
app.config["JWT_SECRET_KEY"] = os.environ.get(
    "JWT_SECRET_KEY", "medledger-dev-secret-key-change-in-production"
)
app.config["JWT_ACCESS_TOKEN_EXPIRES"] = False  # For development

CORS(app)
jwt = JWTManager(app)


# Initialize database on app startup
@app.before_request
def init_db():
    """Create all tables if they don't exist"""
    if not hasattr(app, '_db_initialized'):
        Base.metadata.create_all(bind=engine)
        app._db_initialized = True


def error_response(error):
    return jsonify(error.to_dict()), error.status_code


# Largest value an INTEGER column can hold
MAX_UINT = 2 ** 63 - 1


def require_uints(data, *names):
    """Pull non-negative integer fields out of a request payload.

    Strings must be ASCII digits; values above MAX_UINT are rejected.

    Returns (values, None) or (None, error message).
    """
    values = []
    for name in names:
        value = data.get(name)
        if isinstance(value, str) and value.isascii() and value.isdigit():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_UINT:
            return None, f"'{name}' must be a non-negative integer"
        values.append(value)
    return values, None


# ==================== HEALTH ====================

@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint"""
    return jsonify({"status": "ok", "message": "Server is running"}), 200


# ==================== AUTH ROUTES ====================

@app.route("/auth/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}
    public_key = str(data.get("public_key", "")).strip()
    password = str(data.get("password", ""))

    if not public_key or not password:
        return jsonify({"msg": "Public key and password are required"}), 400
    if len(public_key) > PUBLIC_KEY_MAX_LENGTH:
        return jsonify({"msg": f"Public key must be at most {PUBLIC_KEY_MAX_LENGTH} characters"}), 400

    db = SessionLocal()
    try:
        ledger = Ledger(db)
        with ledger.transaction() as sequence:
            patient = PatientRegistry(db).register(public_key, password, sequence=sequence)
            profile = patient.to_dict()

        logger.info("[OK] Patient registered: %s", profile["id"])
        return jsonify({"msg": "Patient registered successfully", "patient": profile}), 201
    finally:
        db.close()


@app.route("/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    values, error = require_uints(data, "patient_id")
    if error:
        return jsonify({"msg": error}), 400
    patient_id, = values
    password = str(data.get("password", ""))

    db = SessionLocal()
    try:
        patient = PatientRegistry(db).get(patient_id)
        if not patient or not check_password_hash(patient.hashed_password or "", password):
            logger.warning("[DENIED] Login failed for patient %s", patient_id)
            return jsonify({"msg": "Invalid credentials"}), 401

        token = create_access_token(identity=str(patient.id))
        return jsonify({"access_token": token, "patient": patient.to_dict()}), 200
    finally:
        db.close()


# ==================== PATIENT ROUTES ====================

@app.route("/patients/<int:patient_id>", methods=["GET"])
def get_patient(patient_id):
    db = SessionLocal()
    try:
        patient = PatientRegistry(db).get(patient_id)
        if not patient:
            return jsonify({"msg": "Patient not found"}), 404
        return jsonify(patient.to_dict()), 200
    finally:
        db.close()


# ==================== RECORDS ROUTES ====================

@app.route("/records", methods=["POST"])
@require_patient
def create_record(current_patient_id):
    data = request.get_json(silent=True) or {}
    text = data.get("data")
    if not isinstance(text, str) or not text:
        return jsonify({"msg": "Record data is required"}), 400
    if len(text) > RECORD_DATA_MAX_LENGTH:
        return jsonify({"msg": f"Record data must be at most {RECORD_DATA_MAX_LENGTH} characters"}), 400

    record_id = None
    if data.get("record_id") is not None:
        values, error = require_uints(data, "record_id")
        if error:
            return jsonify({"msg": error}), 400
        record_id, = values

    db = SessionLocal()
    try:
        ledger = Ledger(db)
        with ledger.transaction() as sequence:
            record = MedicalRecordStore(db).create(
                current_patient_id, text, record_id=record_id, sequence=sequence
            )
            result = record.to_dict()

        logger.info("[OK] Record %s created for patient %s", result["record_id"], current_patient_id)
        return jsonify({"msg": "Record created successfully", "record": result}), 201
    except AccessControlError as e:
        return error_response(e)
    finally:
        db.close()


@app.route("/records/<int:patient_id>/<int:record_id>", methods=["GET"])
@require_record_owner
def get_record(patient_id, record_id):
    db = SessionLocal()
    try:
        record = MedicalRecordStore(db).get(patient_id, record_id)
        if not record:
            return jsonify({"msg": "Record not found"}), 404
        return jsonify(record.to_dict()), 200
    finally:
        db.close()


@app.route("/records/<int:patient_id>/<int:record_id>/access-log", methods=["GET"])
def get_access_log(patient_id, record_id):
    db = SessionLocal()
    try:
        entries = AccessController(db).get_access_log(patient_id, record_id)
        return jsonify([entry.to_dict() for entry in entries]), 200
    except AccessControlError as e:
        return error_response(e)
    finally:
        db.close()


# ==================== ACCESS ROUTES ====================
# grant and revoke take no credentials.

@app.route("/access/grant", methods=["POST"])
def grant_access():
    data = request.get_json(silent=True) or {}
    values, error = require_uints(data, "patient_id", "provider_id", "record_id", "permissions")
    if error:
        return jsonify({"msg": error}), 400

    db = SessionLocal()
    try:
        grant = AccessController(db).grant(*values)
        return jsonify({"msg": "Access granted successfully", "grant": grant.to_dict()}), 201
    except AccessControlError as e:
        return error_response(e)
    finally:
        db.close()


@app.route("/access/revoke", methods=["POST"])
def revoke_access():
    data = request.get_json(silent=True) or {}
    values, error = require_uints(data, "patient_id", "provider_id", "record_id")
    if error:
        return jsonify({"msg": error}), 400

    db = SessionLocal()
    try:
        revoked = AccessController(db).revoke(*values)
        return jsonify({"msg": "Access revoked successfully", "revoked": revoked}), 200
    except AccessControlError as e:
        return error_response(e)
    finally:
        db.close()


@app.route("/access/check", methods=["GET"])
def check_access():
    values, error = require_uints(
        request.args, "patient_id", "provider_id", "record_id", "permission"
    )
    if error:
        return jsonify({"msg": error}), 400

    db = SessionLocal()
    try:
        has_access = AccessController(db).has_access(*values)
        return jsonify({"has_access": has_access}), 200
    finally:
        db.close()


@app.route("/access/active", methods=["GET"])
def active_grant():
    db = SessionLocal()
    try:
        grant = AccessController(db).active_grant()
        return jsonify({"active": not grant.is_empty, "grant": grant.to_dict()}), 200
    finally:
        db.close()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=False, use_reloader=False)
