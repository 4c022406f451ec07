from dataclasses import dataclass

from models.active_grant import ActiveGrant, ACTIVE_GRANT_SLOT


@dataclass(frozen=True)
class Grant:
    patient_id: int = 0
    provider_id: int = 0
    record_id: int = 0
    permissions: int = 0

    @property
    def triple(self):
        return (self.patient_id, self.provider_id, self.record_id)

    @property
    def is_empty(self):
        return self == NO_GRANT

    def matches(self, patient_id, provider_id, record_id):
        return self.triple == (patient_id, provider_id, record_id)

    def to_dict(self):
        return {
            "patient_id": self.patient_id,
            "provider_id": self.provider_id,
            "record_id": self.record_id,
            "permissions": self.permissions,
        }


# All-zero sentinel meaning "no active grant"
NO_GRANT = Grant()


class GrantRegister:
    """The single active-grant slot shared by the whole system.

    There is exactly one slot, not one per (patient, provider, record):
    writing a grant for any triple replaces whatever grant was active
    before, for every other triple.
    """

    def __init__(self, db):
        self.db = db

    def _row(self):
        row = self.db.get(ActiveGrant, ACTIVE_GRANT_SLOT)
        if row is None:
            row = ActiveGrant(id=ACTIVE_GRANT_SLOT, patient_id=0, provider_id=0, record_id=0, permissions=0)
            self.db.add(row)
            self.db.flush()
        return row

    def read(self):
        row = self.db.get(ActiveGrant, ACTIVE_GRANT_SLOT)
        if row is None:
            return NO_GRANT
        return Grant(row.patient_id, row.provider_id, row.record_id, row.permissions)

    def write(self, grant):
        row = self._row()
        row.patient_id = grant.patient_id
        row.provider_id = grant.provider_id
        row.record_id = grant.record_id
        row.permissions = grant.permissions
        self.db.flush()
        return grant

    def clear(self):
        return self.write(NO_GRANT)
