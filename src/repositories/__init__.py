"""
Repository layer for database operations.
"""

from src.repositories.base import BaseRepository
from src.repositories.shared_user_repository import SharedUserRepository
from src.repositories.user_repository import UserRepository
from src.repositories.workspace_repository import (
    WorkspaceMemberRepository,
    WorkspaceRepository,
)

__all__ = [
    "BaseRepository",
    "SharedUserRepository",
    "UserRepository",
    "WorkspaceMemberRepository",
    "WorkspaceRepository",
]
