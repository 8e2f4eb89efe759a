"""
Unit tests for the permission gate.
"""

from types import SimpleNamespace

import pytest

from src.exceptions import InsufficientPermissionsError
from src.models.enums import PERMISSION_KEYS, Permission
from src.services.permission_service import PermissionService


def grant(status: str = "accepted", **flags: bool) -> SimpleNamespace:
    return SimpleNamespace(status=status, permissions=dict(flags))


class TestEffectivePermissions:
    def test_owner_has_every_permission(self):
        permissions = PermissionService.effective_permissions(None)

        assert set(permissions) == set(PERMISSION_KEYS)
        assert all(permissions.values())

    def test_accepted_grant_uses_its_flags(self):
        permissions = PermissionService.effective_permissions(
            grant(viewExpenses=True, editExpenses=False)
        )

        assert permissions["viewExpenses"] is True
        assert permissions["editExpenses"] is False

    def test_missing_flag_is_false(self):
        permissions = PermissionService.effective_permissions(grant(viewNotes=True))

        assert permissions["viewNotes"] is True
        assert permissions["manageUsers"] is False
        assert len(permissions) == len(PERMISSION_KEYS)

    @pytest.mark.parametrize("status", ["pending", "rejected"])
    def test_grant_not_accepted_confers_nothing(self, status):
        everything = {key: True for key in PERMISSION_KEYS}
        permissions = PermissionService.effective_permissions(grant(status, **everything))

        assert not any(permissions.values())

    def test_truthy_non_boolean_flag_is_not_a_grant(self):
        permissions = PermissionService.effective_permissions(
            SimpleNamespace(status="accepted", permissions={"viewGoals": "yes"})
        )

        assert permissions["viewGoals"] is False

    def test_null_permissions(self):
        permissions = PermissionService.effective_permissions(
            SimpleNamespace(status="accepted", permissions=None)
        )

        assert not any(permissions.values())


class TestRequire:
    def test_ungated_operation_always_passes(self):
        PermissionService.require(grant("pending"), None)

    def test_owner_passes(self):
        PermissionService.require(None, Permission.manage_users)

    def test_granted_permission_passes(self):
        PermissionService.require(grant(editBudgets=True), Permission.edit_budgets)

    def test_missing_permission_raises_403(self):
        with pytest.raises(InsufficientPermissionsError) as exc_info:
            PermissionService.require(grant(viewBudgets=True), Permission.edit_budgets)

        assert exc_info.value.status_code == 403
        assert exc_info.value.details == {"required_permission": "editBudgets"}

    def test_accepts_string_keys(self):
        assert PermissionService.has_permission(grant(viewPortfolio=True), "viewPortfolio")
        assert not PermissionService.has_permission(grant(), "viewPortfolio")
