class AccessControlError(Exception):
    """Base class for failures surfaced by access-control operations."""

    code = "ACCESS_CONTROL_ERROR"
    status_code = 400
    # Fatal errors abort the whole enclosing ledger transaction
    fatal = False

    def __init__(self, message=None):
        super().__init__(message or self.__doc__)
        self.message = message or self.__doc__

    def to_dict(self):
        return {"msg": self.message, "error": self.code}


class PatientNotFound(AccessControlError):
    """Patient not found"""

    code = "PATIENT_NOT_FOUND"
    status_code = 404

    def __init__(self, patient_id):
        super().__init__(f"Patient {patient_id} not found")
        self.patient_id = patient_id


class RecordNotFound(AccessControlError):
    """Record not found"""

    code = "RECORD_NOT_FOUND"
    status_code = 404

    def __init__(self, patient_id, record_id):
        super().__init__(f"Record {record_id} not found for patient {patient_id}")
        self.patient_id = patient_id
        self.record_id = record_id


class AccessNotFound(AccessControlError):
    """No matching active grant"""

    code = "ACCESS_NOT_FOUND"
    status_code = 404


class InvalidPermission(AccessControlError):
    """Invalid permission value"""

    code = "INVALID_PERMISSION"
    status_code = 400

    def __init__(self, permissions):
        super().__init__(f"Invalid permission value: {permissions!r}")
        self.permissions = permissions


class LogOverflowFatal(AccessControlError):
    """Access log is full"""

    code = "LOG_OVERFLOW"
    status_code = 409
    fatal = True


class RecordExists(AccessControlError):
    """Record already exists"""

    code = "RECORD_EXISTS"
    status_code = 409

    def __init__(self, patient_id, record_id):
        super().__init__(f"Record {record_id} already exists for patient {patient_id}")
        self.patient_id = patient_id
        self.record_id = record_id
