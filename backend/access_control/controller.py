"""
Access controller: grant, revoke and check access to medical records.

The controller drives a two-state machine over the GrantRegister:

    NoActiveGrant --grant(any triple)--> ActiveGrant(triple)
    ActiveGrant   --grant(any triple)--> ActiveGrant(new triple)
    ActiveGrant   --revoke(same triple)--> NoActiveGrant

grant and revoke each run as one ledger transaction, so a failed
precondition or a full access log leaves records and register untouched.

Neither grant nor revoke checks who is calling: any caller may grant or
revoke access for any triple. Callers that need this must enforce it in
an outer layer.
"""

import logging
from dataclasses import dataclass

from database.ledger import Ledger
from database.stores import MedicalRecordStore, PatientRegistry
from .access_log import AccessLogAppender
from .errors import AccessNotFound, InvalidPermission, PatientNotFound, RecordNotFound
from .grant_register import Grant, GrantRegister
from .permissions import REVOKED, is_valid, sufficient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
    provider_id: int
    logged_at: int
    action: int

    def to_dict(self):
        return {
            "provider_id": self.provider_id,
            "logged_at": self.logged_at,
            "action": self.action,
        }


class AccessController:
    def __init__(self, db, ledger=None, register=None, patients=None, records=None):
        self.db = db
        self.ledger = ledger or Ledger(db)
        self.register = register or GrantRegister(db)
        self.patients = patients or PatientRegistry(db)
        self.records = records or MedicalRecordStore(db)
        self.access_log = AccessLogAppender(self.records, self.ledger)

    def _get_record(self, patient_id, record_id):
        record = self.records.get(patient_id, record_id)
        if record is None:
            logger.warning("[DENIED] Record %s not found for patient %s", record_id, patient_id)
            raise RecordNotFound(patient_id, record_id)
        return record

    def grant(self, patient_id, provider_id, record_id, permissions):
        """Grant a provider access to a patient's record.

        Replaces the active grant, whatever triple it belonged to.
        """
        logger.info(
            "Granting access - Patient: %s, Provider: %s, Record: %s, Permissions: %s",
            patient_id, provider_id, record_id, permissions,
        )
        with self.ledger.transaction():
            if not self.patients.exists(patient_id):
                logger.warning("[DENIED] Patient %s not found", patient_id)
                raise PatientNotFound(patient_id)

            record = self._get_record(patient_id, record_id)

            if not is_valid(permissions):
                logger.warning("[DENIED] Invalid permission value %r", permissions)
                raise InvalidPermission(permissions)

            self.access_log.append(record, provider_id, permissions)
            previous = self.register.read()
            grant = self.register.write(Grant(patient_id, provider_id, record_id, permissions))

        if not previous.is_empty and previous.triple != grant.triple:
            logger.info("[OK] Grant %s replaced previous grant %s", grant.triple, previous.triple)
        else:
            logger.info("[OK] Access granted: %s", grant.triple)
        return grant

    def revoke(self, patient_id, provider_id, record_id):
        """Revoke the active grant; the triple must match it exactly."""
        logger.info(
            "Revoking access - Patient: %s, Provider: %s, Record: %s",
            patient_id, provider_id, record_id,
        )
        with self.ledger.transaction():
            record = self._get_record(patient_id, record_id)

            current = self.register.read()
            if current.is_empty or not current.matches(patient_id, provider_id, record_id):
                logger.warning(
                    "[DENIED] No active grant for %s", (patient_id, provider_id, record_id)
                )
                raise AccessNotFound(
                    f"No active grant for patient {patient_id}, provider "
                    f"{provider_id}, record {record_id}"
                )

            self.access_log.append(record, provider_id, REVOKED)
            self.register.clear()

        logger.info("[OK] Access revoked: %s", (patient_id, provider_id, record_id))
        return True

    def has_access(self, patient_id, provider_id, record_id, required_permission):
        """Check the active grant only; patients and records are not consulted."""
        grant = self.register.read()
        if grant.is_empty:
            return False
        return (
            grant.matches(patient_id, provider_id, record_id)
            and sufficient(grant.permissions, required_permission)
        )

    def get_access_log(self, patient_id, record_id):
        record = self._get_record(patient_id, record_id)
        return [
            LogEntry(entry.provider_id, entry.logged_at, entry.action)
            for entry in record.access_log
        ]

    def active_grant(self):
        return self.register.read()
