"""Child profile endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends

from kidtube.services import ChildProfileService

from ..dependencies import get_profile_service, require_owner
from ..schemas.common import AUTH_ERROR_RESPONSES, COMMON_ERROR_RESPONSES, PUBLIC_ERROR_RESPONSES
from ..schemas.profile import (
    ChildProfileResponse,
    ChildProfileSave,
    PublicChildProfileResponse,
)

router = APIRouter(prefix="/api/child-profile", tags=["Child Profiles"])


@router.get(
    "",
    response_model=Optional[ChildProfileResponse],
    summary="Get own child profile",
    description="The caller's child profile, or null if none was saved.",
    responses={**AUTH_ERROR_RESPONSES, 503: COMMON_ERROR_RESPONSES[503]},
)
async def get_own_profile(
    owner_id: Optional[str] = Depends(require_owner),
    profile_service: ChildProfileService = Depends(get_profile_service),
) -> Optional[ChildProfileResponse]:
    profile = await profile_service.get(owner_id)
    return ChildProfileResponse.from_profile(profile) if profile else None


@router.get(
    "/{user_id}",
    response_model=Optional[PublicChildProfileResponse],
    summary="Get public child name",
    description="Only the child's name, for the shared player page. Null if no profile exists.",
    responses=PUBLIC_ERROR_RESPONSES,
)
async def get_public_profile(
    user_id: str,
    profile_service: ChildProfileService = Depends(get_profile_service),
) -> Optional[PublicChildProfileResponse]:
    child_name = await profile_service.get_public_name(user_id)
    return PublicChildProfileResponse(child_name=child_name) if child_name else None


@router.post(
    "",
    response_model=ChildProfileResponse,
    summary="Save child profile",
    description="Create the caller's child profile or update the existing one.",
    responses={**COMMON_ERROR_RESPONSES},
)
async def save_profile(
    request: ChildProfileSave,
    owner_id: Optional[str] = Depends(require_owner),
    profile_service: ChildProfileService = Depends(get_profile_service),
) -> ChildProfileResponse:
    profile = await profile_service.save(owner_id, request.child_name, request.date_of_birth)
    return ChildProfileResponse.from_profile(profile)
