from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from book_likes_api.api.routes._batch import ensure_batch_size
from book_likes_api.dependencies.likes import get_likes_service
from book_likes_api.domain import MAX_ID
from book_likes_api.schemas.like import (
    LikeChapterRequest,
    LikeStatus,
    LikeToggleResponse,
    MultipleChapterLikesCountRequest,
    MultipleChapterLikeStatusRequest,
)
from book_likes_api.services.likes_service import LikesService

router = APIRouter(prefix="/likes/chapters", tags=["likes"])


@router.post(
    "/toggle",
    response_model=LikeToggleResponse,
    summary="Toggle Chapter Like",
    description="Likes the chapter if the user has not liked it yet, otherwise removes the like.",
    responses={404: {"description": "User or chapter not found"}},
)
async def toggle_chapter_like(
    payload: LikeChapterRequest,
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> LikeToggleResponse:
    return await svc.toggle_chapter_like(user_id=payload.user_id, chapter_id=payload.chapter_id)


@router.get(
    "/{chapter_id}/status", response_model=LikeStatus, summary="Get Chapter Like Status"
)
async def get_chapter_like_status(
    chapter_id: Annotated[int, Path(ge=1, le=MAX_ID, description="ID of the chapter")],
    user_id: Annotated[int, Query(ge=1, le=MAX_ID, description="ID of the user")],
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> LikeStatus:
    """Whether the user likes the chapter, and the chapter's total like count."""
    return await svc.get_chapter_like_status(user_id=user_id, chapter_id=chapter_id)


@router.post(
    "/status/multiple",
    response_model=dict[int, LikeStatus],
    summary="Get Like Status For Several Chapters",
)
async def get_multiple_chapter_like_status(
    payload: MultipleChapterLikeStatusRequest,
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> dict[int, LikeStatus]:
    ensure_batch_size(payload.chapter_ids, "chapter_ids")
    return await svc.get_multiple_chapter_like_status(
        user_id=payload.user_id, chapter_ids=payload.chapter_ids
    )


@router.post(
    "/count/multiple",
    response_model=dict[int, int],
    summary="Get Like Counts For Several Chapters",
)
async def get_multiple_chapter_likes_count(
    payload: MultipleChapterLikesCountRequest,
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> dict[int, int]:
    ensure_batch_size(payload.chapter_ids, "chapter_ids")
    return await svc.get_multiple_chapter_likes_count(chapter_ids=payload.chapter_ids)
