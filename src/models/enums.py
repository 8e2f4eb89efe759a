"""
Enums for users, workspaces and permissions.

This module defines:
- AuthProvider: How a user signed up (local password or Google)
- MemberRole: Role of a workspace member (owner, admin, editor, viewer)
- MemberStatus: Lifecycle of a membership / invitation (pending, accepted, rejected)
- Permission: The fixed feature-permission taxonomy shared by API and client

Enum values are stored as plain strings so SQLite and PostgreSQL behave the same.
"""

import enum


class AuthProvider(str, enum.Enum):
    """Sign-up method of a user."""

    local = "local"
    google = "google"


class MemberRole(str, enum.Enum):
    """
    Role of a workspace member.

    Attributes:
        owner: Creator of the workspace. Exactly one per workspace; role and
            permissions cannot be changed and the member cannot be removed.
        admin: Can invite, update and remove members.
        editor: Regular member; rights come from permission flags only.
        viewer: Regular member; the default role for invitations.
    """

    owner = "owner"
    admin = "admin"
    editor = "editor"
    viewer = "viewer"


# Roles allowed to manage the member list
MANAGER_ROLES = frozenset({MemberRole.owner, MemberRole.admin})


class MemberStatus(str, enum.Enum):
    """
    Status of a membership or legacy sharing record.

    Transitions: pending -> accepted | rejected. Both targets are terminal.
    Only accepted grants confer permissions.
    """

    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class Permission(str, enum.Enum):
    """
    Feature permission keys.

    The same twelve keys appear in membership grants, in the entity
    permission map and in the map returned by ``GET /auth/permissions``.
    """

    view_portfolio = "viewPortfolio"
    edit_portfolio = "editPortfolio"
    view_expenses = "viewExpenses"
    edit_expenses = "editExpenses"
    view_notes = "viewNotes"
    edit_notes = "editNotes"
    view_goals = "viewGoals"
    edit_goals = "editGoals"
    view_budgets = "viewBudgets"
    edit_budgets = "editBudgets"
    view_settings = "viewSettings"
    manage_users = "manageUsers"


PERMISSION_KEYS: tuple[str, ...] = tuple(p.value for p in Permission)


def full_permissions() -> dict[str, bool]:
    """Every flag set; used for the owner membership."""
    return {key: True for key in PERMISSION_KEYS}


def default_invite_permissions() -> dict[str, bool]:
    """Flags for a new invitation when the inviter supplies none."""
    flags = {key: False for key in PERMISSION_KEYS}
    flags[Permission.view_portfolio.value] = True
    flags[Permission.view_expenses.value] = True
    return flags
