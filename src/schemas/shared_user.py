"""
Legacy sharing schemas.

``status`` is read-only: a share starts ``pending`` and only the invitee's
Google sign-in accepts it.
"""

from pydantic import EmailStr, Field, field_validator

from src.models.enums import PERMISSION_KEYS, MemberStatus, default_invite_permissions
from src.schemas.common import CamelModel
from src.schemas.entity import EntityRead


class SharedUserCreate(CamelModel):
    """
    Sharing record written by an owner.

    Attributes:
        invited_email: E-mail being granted access
        display_name: Optional label
        permissions: Feature flags; missing keys take the invitation defaults
    """

    invited_email: EmailStr
    display_name: str = ""
    permissions: dict[str, bool] = Field(default_factory=default_invite_permissions)

    @field_validator("permissions")
    @classmethod
    def complete_permissions(cls, value: dict[str, bool]) -> dict[str, bool]:
        """Keep only known keys and fill the rest with defaults."""
        merged = default_invite_permissions()
        merged.update({k: bool(v) for k, v in value.items() if k in PERMISSION_KEYS})
        return merged


class SharedUserRead(SharedUserCreate, EntityRead):
    status: str = MemberStatus.pending.value
