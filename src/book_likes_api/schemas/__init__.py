from book_likes_api.schemas.like import (
    BookLikeRead,
    ChapterLikeRead,
    LikeBookRequest,
    LikeChapterRequest,
    LikeStatus,
    LikeToggleResponse,
    UserLikesRead,
)

__all__ = [
    "BookLikeRead",
    "ChapterLikeRead",
    "LikeBookRequest",
    "LikeChapterRequest",
    "LikeStatus",
    "LikeToggleResponse",
    "UserLikesRead",
]
