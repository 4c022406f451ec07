import logging

from models.access_log import AccessLogEntry
from .errors import LogOverflowFatal

logger = logging.getLogger(__name__)

MAX_ACCESS_LOG_ENTRIES = 10


class AccessLogAppender:
    """Appends grant/revoke events to a record's bounded access log.

    A full log is never truncated or rotated: the append raises
    LogOverflowFatal and the enclosing ledger transaction rolls back. Once a
    record holds MAX_ACCESS_LOG_ENTRIES entries, no grant or revoke on it can
    succeed again.
    """

    def __init__(self, records, ledger):
        self.records = records
        self.ledger = ledger

    def append(self, record, provider_id, action):
        size = len(record.access_log)
        if size >= MAX_ACCESS_LOG_ENTRIES:
            logger.error(
                "[ERROR] Access log full for patient %s record %s (%s entries)",
                record.patient_id, record.record_id, size,
            )
            raise LogOverflowFatal(
                f"Access log for record {record.record_id} of patient "
                f"{record.patient_id} is full ({MAX_ACCESS_LOG_ENTRIES} entries)"
            )

        record.access_log.append(AccessLogEntry(
            position=size,
            provider_id=provider_id,
            logged_at=self.ledger.current_sequence(),
            action=action,
        ))
        self.records.set(record)
        return record
