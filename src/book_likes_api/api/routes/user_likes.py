from typing import Annotated

from fastapi import APIRouter, Depends, Path

from book_likes_api.dependencies.likes import get_likes_service
from book_likes_api.domain import MAX_ID
from book_likes_api.schemas.like import BookLikeRead, ChapterLikeRead, UserLikesRead
from book_likes_api.services.likes_service import LikesService

router = APIRouter(prefix="/likes/user", tags=["likes"])

UserIdPath = Annotated[int, Path(ge=1, le=MAX_ID, description="ID of the user")]


@router.get(
    "/{user_id}",
    response_model=UserLikesRead,
    summary="Get All Likes Of A User",
    description="Lists every book and chapter the user has liked, newest first.",
    responses={404: {"description": "User not found"}},
)
async def get_user_likes(
    user_id: UserIdPath,
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> UserLikesRead:
    return await svc.get_user_likes(user_id=user_id)


@router.get(
    "/{user_id}/books",
    response_model=list[BookLikeRead],
    summary="Get Books Liked By A User",
    responses={404: {"description": "User not found"}},
)
async def get_user_liked_books(
    user_id: UserIdPath,
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> list[BookLikeRead]:
    return await svc.get_user_liked_books(user_id=user_id)


@router.get(
    "/{user_id}/chapters",
    response_model=list[ChapterLikeRead],
    summary="Get Chapters Liked By A User",
    responses={404: {"description": "User not found"}},
)
async def get_user_liked_chapters(
    user_id: UserIdPath,
    svc: Annotated[LikesService, Depends(get_likes_service)],
) -> list[ChapterLikeRead]:
    return await svc.get_user_liked_chapters(user_id=user_id)
