# models/__init__.py
# Import Base from database config (shared instance)
from database.config import Base

# Import all models here to register them with Base
from .patient import PatientProfile
from .medical_record import MedicalRecord
from .access_log import AccessLogEntry
from .active_grant import ActiveGrant
from .ledger import LedgerSequence

__all__ = ['Base', 'PatientProfile', 'MedicalRecord', 'AccessLogEntry', 'ActiveGrant', 'LedgerSequence']
