from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from book_likes_api.api.routes._batch import ensure_batch_size
from book_likes_api.dependencies.likes import get_likes_service
from book_likes_api.domain import MAX_ID
from book_likes_api.schemas.like import (
    LikeBookRequest,
    LikeStatus,
    LikeToggleResponse,
    MultipleBookLikesCountRequest,
    MultipleBookLikeStatusRequest,
)
from book_likes_api.services.likes_service import LikesService

router = APIRouter(prefix="/likes/books", tags=["likes"])


@router.post(
    "/toggle",
    response_model=LikeToggleResponse,
    summary="Toggle Book Like",
    description="Likes the book if the user has not liked it yet, otherwise removes the like.",
    responses={404: {"description": "User or book not found"}},
)
async def toggle_book_like(
    payload: LikeBookRequest,
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> LikeToggleResponse:
    return await svc.toggle_book_like(user_id=payload.user_id, book_id=payload.book_id)


@router.get("/{book_id}/status", response_model=LikeStatus, summary="Get Book Like Status")
async def get_book_like_status(
    book_id: Annotated[int, Path(ge=1, le=MAX_ID, description="ID of the book")],
    user_id: Annotated[int, Query(ge=1, le=MAX_ID, description="ID of the user")],
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> LikeStatus:
    """Whether the user likes the book, and the book's total like count."""
    return await svc.get_book_like_status(user_id=user_id, book_id=book_id)


@router.post(
    "/status/multiple",
    response_model=dict[int, LikeStatus],
    summary="Get Like Status For Several Books",
)
async def get_multiple_book_like_status(
    payload: MultipleBookLikeStatusRequest,
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> dict[int, LikeStatus]:
    ensure_batch_size(payload.book_ids, "book_ids")
    return await svc.get_multiple_book_like_status(
        user_id=payload.user_id, book_ids=payload.book_ids
    )


@router.post(
    "/count/multiple",
    response_model=dict[int, int],
    summary="Get Like Counts For Several Books",
)
async def get_multiple_book_likes_count(
    payload: MultipleBookLikesCountRequest,
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> dict[int, int]:
    ensure_batch_size(payload.book_ids, "book_ids")
    return await svc.get_multiple_book_likes_count(book_ids=payload.book_ids)
