import pytest

from access_control.permissions import Permission, REVOKED, VALID_PERMISSIONS, is_valid, sufficient


def test_canonical_values():
    assert VALID_PERMISSIONS == {1, 2, 4, 7}
    assert Permission.FULL == Permission.READ | Permission.WRITE | Permission.DELETE
    assert REVOKED == 0


@pytest.mark.parametrize("value", [1, 2, 4, 7, Permission.WRITE])
def test_is_valid_accepts_canonical_values(value):
    assert is_valid(value)


@pytest.mark.parametrize("value", [0, 3, 5, 6, 8, -1, 15, True, "1", 1.0, None])
def test_is_valid_rejects_everything_else(value):
    assert not is_valid(value)


def test_sufficient_is_numeric_comparison():
    assert sufficient(Permission.FULL, Permission.DELETE)
    assert sufficient(Permission.WRITE, Permission.WRITE)
    assert not sufficient(Permission.READ, Permission.WRITE)


def test_delete_satisfies_write():
    # 4 >= 2 even though DELETE carries no WRITE bit
    assert not Permission.DELETE & Permission.WRITE
    assert sufficient(Permission.DELETE, Permission.WRITE)
    assert sufficient(Permission.DELETE, Permission.READ)
