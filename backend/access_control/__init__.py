# This file makes the access_control directory a Python package
from .permissions import Permission, is_valid, sufficient
from .errors import (
    AccessControlError, PatientNotFound, RecordNotFound, AccessNotFound,
    InvalidPermission, LogOverflowFatal, RecordExists,
)
from .grant_register import Grant, GrantRegister, NO_GRANT
