import pytest
from fastapi import HTTPException

from store_rating.core.enums import UserRole
from store_rating.core.security import allowed, require_roles


@pytest.mark.unit
class TestAllowed:

    @pytest.mark.parametrize("role,required,expected", [
        (UserRole.ADMIN, {UserRole.ADMIN}, True),
        ("admin", {UserRole.ADMIN}, True),
        (UserRole.USER, {UserRole.ADMIN}, False),
        (UserRole.STORE, {UserRole.USER, UserRole.STORE}, True),
        ("store", ["user"], False),
        (UserRole.USER, set(), False),
        ("root", {UserRole.ADMIN}, False),
    ])
    def test_allowed(self, role, required, expected):
        assert allowed(role, required) is expected


class _Identity:
    def __init__(self, role):
        self.role = role


@pytest.mark.unit
class TestRequireRoles:

    def test_passes_identity_through(self):
        checker = require_roles(UserRole.USER, UserRole.STORE)
        identity = _Identity(UserRole.STORE)
        assert checker(identity) is identity

    def test_rejects_with_forbidden(self):
        checker = require_roles(UserRole.ADMIN)
        with pytest.raises(HTTPException) as exc_info:
            checker(_Identity(UserRole.USER))
        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Access denied. Admin role required"
