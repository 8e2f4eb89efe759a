"""
Public invitation routes (no authentication).
"""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_invitation_service
from src.schemas.common import ApiResponse
from src.schemas.workspace import InvitationResponse
from src.services.invitation_service import InvitationService

router = APIRouter(prefix="/invitations", tags=["Invitations"])


@router.get(
    "/{token}",
    response_model=ApiResponse[InvitationResponse],
    summary="Look up a pending invitation",
    description="""
    Resolve an invitation token (the pending member id) to the workspace and
    invited e-mail. Accepted or rejected invitations return 400.
    """,
)
async def get_invitation(
    token: str,
    service: InvitationService = Depends(get_invitation_service),
) -> ApiResponse[InvitationResponse]:
    return ApiResponse(data=await service.get_invitation(token))


@router.get(
    "",
    response_model=ApiResponse[InvitationResponse],
    summary="Look up a pending invitation by query parameter",
)
async def get_invitation_by_query(
    token: str | None = Query(default=None),
    service: InvitationService = Depends(get_invitation_service),
) -> ApiResponse[InvitationResponse]:
    """Same as ``GET /invitations/{token}``; a missing token is a 400."""
    return ApiResponse(data=await service.get_invitation(token))
