from enum import IntEnum


class Permission(IntEnum):
    READ = 1
    WRITE = 2
    DELETE = 4
    FULL = 7  # READ + WRITE + DELETE


# Only these exact values are accepted, not arbitrary flag combinations
VALID_PERMISSIONS = frozenset(p.value for p in Permission)

# Audit log action recorded for a revocation
REVOKED = 0


def is_valid(permissions):
    """Check if a value is one of the canonical permission values"""
    if isinstance(permissions, bool) or not isinstance(permissions, int):
        return False
    return permissions in VALID_PERMISSIONS


def sufficient(granted, required):
    """Check if a granted permission satisfies a required one.

    This is a plain integer comparison, not bitmask containment: a granted
    DELETE (4) satisfies a required WRITE (2).
    """
    return granted >= required
