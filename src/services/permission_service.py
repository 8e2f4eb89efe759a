"""
Permission gate for feature-level access control.

A caller acting on someone else's data does so through a *grant*: either
their member row in the selected workspace or a legacy SharedUser record.
The grant decides which feature areas they may view or edit.

Rules:
    - No grant: the caller acts on their own data and has every permission.
    - Grant whose status is not ``accepted``: no permission at all,
      whatever its flags say.
    - Otherwise: the grant's flags; a missing flag is False.

Usage:
    permissions = PermissionService.effective_permissions(context.grant)
    PermissionService.require(context.grant, Permission.edit_expenses)
"""

import logging
from typing import Any, Protocol

from src.exceptions import InsufficientPermissionsError
from src.models.enums import PERMISSION_KEYS, MemberStatus, Permission

logger = logging.getLogger(__name__)


class Grant(Protocol):
    """Anything carrying a status and a permission map (member or sharing record)."""

    status: str
    permissions: dict[str, Any]


class PermissionService:
    """
    Stateless permission checks over a grant.

    The same taxonomy is returned to the client by ``GET /auth/permissions``
    so that UI and API agree on what a member may do.
    """

    @staticmethod
    def effective_permissions(grant: Grant | None) -> dict[str, bool]:
        """
        Compute the full permission map for a grant.

        Args:
            grant: Member row, sharing record, or None for the owner

        Returns:
            Dictionary with all twelve feature keys

        Example:
            >>> PermissionService.effective_permissions(None)["manageUsers"]
            True
        """
        if grant is None:
            return {key: True for key in PERMISSION_KEYS}

        if grant.status != MemberStatus.accepted.value:
            return {key: False for key in PERMISSION_KEYS}

        flags = grant.permissions or {}
        return {key: flags.get(key) is True for key in PERMISSION_KEYS}

    @classmethod
    def has_permission(cls, grant: Grant | None, permission: Permission | str) -> bool:
        """
        Check one feature permission.

        Args:
            grant: Member row, sharing record, or None
            permission: Feature key

        Returns:
            True if the grant allows it
        """
        key = permission.value if isinstance(permission, Permission) else permission
        return cls.effective_permissions(grant).get(key, False)

    @classmethod
    def require(cls, grant: Grant | None, permission: Permission | str | None) -> None:
        """
        Require a feature permission, raise if missing.

        A ``None`` permission means the operation is not gated.

        Args:
            grant: Member row, sharing record, or None
            permission: Feature key, or None

        Raises:
            InsufficientPermissionsError: If the grant does not allow it
        """
        if permission is None:
            return
        if not cls.has_permission(grant, permission):
            key = permission.value if isinstance(permission, Permission) else permission
            logger.warning(f"Permission denied: {key} not granted")
            raise InsufficientPermissionsError(
                message="You do not have permission to perform this action",
                details={"required_permission": key},
            )
