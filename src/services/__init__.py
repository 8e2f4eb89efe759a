"""
Service layer for business logic.

This package provides service classes that implement business logic,
coordinate between repositories, and handle transaction management.
"""

from src.services.auth_service import AuthService
from src.services.calendar_service import CalendarService
from src.services.email_service import EmailService
from src.services.entity_service import EntityService
from src.services.invitation_service import InvitationService
from src.services.ownership_service import OwnerContext, OwnershipService
from src.services.permission_service import PermissionService
from src.services.quote_service import QuoteService
from src.services.user_service import UserService
from src.services.workspace_service import WorkspaceService

__all__ = [
    "AuthService",
    "CalendarService",
    "EmailService",
    "EntityService",
    "InvitationService",
    "OwnerContext",
    "OwnershipService",
    "PermissionService",
    "QuoteService",
    "UserService",
    "WorkspaceService",
]
