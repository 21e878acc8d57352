"""Video collection endpoints: list, add, rename, remove and popular."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.security import HTTPAuthorizationCredentials

from kidtube.auth import IdentityVerifier
from kidtube.services import PopularityService, ValidationError, VideoService

from ..dependencies import (
    authenticate,
    get_api_settings,
    get_identity_verifier,
    get_popularity_service,
    get_video_service,
    optional_bearer,
    require_owner,
)
from ..schemas.common import AUTH_ERROR_RESPONSES, COMMON_ERROR_RESPONSES, PUBLIC_ERROR_RESPONSES
from ..schemas.video import (
    MessageResponse,
    PopularVideoResponse,
    VideoCreate,
    VideoResponse,
    VideoUpdate,
)
from ..settings import APISettings

router = APIRouter(prefix="/api/videos", tags=["Videos"])


@router.get(
    "",
    response_model=List[VideoResponse],
    summary="List videos",
    description=(
        "List an owner's videos, newest first. The owner comes from the ownerId "
        "(or user_id) query parameter, falling back to the caller's bearer token. "
        "The token is only checked when no owner is named."
    ),
    responses={**PUBLIC_ERROR_RESPONSES, **AUTH_ERROR_RESPONSES},
)
async def list_videos(
    owner_id_param: Optional[str] = Query(
        default=None, alias="ownerId", description="Owner whose videos to list"
    ),
    user_id: Optional[str] = Query(default=None, description="Alias of ownerId"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer),
    verifier: Optional[IdentityVerifier] = Depends(get_identity_verifier),
    settings: APISettings = Depends(get_api_settings),
    video_service: VideoService = Depends(get_video_service),
) -> List[VideoResponse]:
    owner_id: Optional[str] = None
    if settings.multi_tenant:
        owner_id = owner_id_param or user_id
        if not owner_id:
            caller = await authenticate(credentials, verifier)
            owner_id = caller.owner_id if caller else None
        if not owner_id:
            raise ValidationError("ownerId query parameter is required", field="ownerId")

    records = await video_service.list(owner_id)
    return [VideoResponse.from_record(record) for record in records]


@router.get(
    "/popular",
    response_model=List[PopularVideoResponse],
    summary="Popular videos",
    description="Videos bookmarked by the most owners, most popular first.",
    responses=PUBLIC_ERROR_RESPONSES,
)
async def popular_videos(
    limit: Optional[int] = Query(default=None, description="Maximum number of videos"),
    popularity_service: PopularityService = Depends(get_popularity_service),
) -> List[PopularVideoResponse]:
    popular = await popularity_service.top_popular(limit)
    return [PopularVideoResponse.from_popular(video) for video in popular]


@router.post(
    "",
    response_model=VideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add video",
    description="Bookmark a YouTube video by URL or ID. The title is looked up when not given.",
    responses={**COMMON_ERROR_RESPONSES},
)
async def add_video(
    request: VideoCreate,
    owner_id: Optional[str] = Depends(require_owner),
    video_service: VideoService = Depends(get_video_service),
) -> VideoResponse:
    record = await video_service.add(owner_id, request.url or "", request.title)
    return VideoResponse.from_record(record)


@router.put(
    "/{video_id}",
    response_model=VideoResponse,
    summary="Rename video",
    responses={**COMMON_ERROR_RESPONSES},
)
async def rename_video(
    video_id: str,
    request: VideoUpdate,
    owner_id: Optional[str] = Depends(require_owner),
    video_service: VideoService = Depends(get_video_service),
) -> VideoResponse:
    record = await video_service.rename(owner_id, video_id, request.title)
    return VideoResponse.from_record(record)


@router.delete(
    "/{video_id}",
    response_model=MessageResponse,
    summary="Remove video",
    responses={**COMMON_ERROR_RESPONSES},
)
async def remove_video(
    video_id: str,
    owner_id: Optional[str] = Depends(require_owner),
    video_service: VideoService = Depends(get_video_service),
) -> MessageResponse:
    await video_service.remove(owner_id, video_id)
    return MessageResponse(message="Video deleted successfully")
