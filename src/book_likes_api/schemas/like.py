from datetime import datetime

from pydantic import BaseModel, Field

from book_likes_api.domain import BookId, ChapterId, UserId


class LikeBookRequest(BaseModel):
    user_id: UserId = Field(description="ID of the user toggling the like", examples=[1])
    book_id: BookId = Field(description="ID of the book to like or unlike", examples=[5])


class LikeChapterRequest(BaseModel):
    user_id: UserId = Field(description="ID of the user toggling the like", examples=[1])
    chapter_id: ChapterId = Field(description="ID of the chapter to like or unlike", examples=[12])


class MultipleBookLikeStatusRequest(BaseModel):
    user_id: UserId = Field(description="ID of the user", examples=[1])
    book_ids: list[BookId] = Field(description="Books to check", examples=[[1, 2, 3]])


class MultipleChapterLikeStatusRequest(BaseModel):
    user_id: UserId = Field(description="ID of the user", examples=[1])
    chapter_ids: list[ChapterId] = Field(description="Chapters to check", examples=[[4, 5]])


class MultipleBookLikesCountRequest(BaseModel):
    book_ids: list[BookId] = Field(description="Books to count likes for", examples=[[1, 2, 3]])


class MultipleChapterLikesCountRequest(BaseModel):
    chapter_ids: list[ChapterId] = Field(
        description="Chapters to count likes for", examples=[[4, 5]]
    )


class LikeStatus(BaseModel):
    is_liked: bool = Field(description="Whether the user currently likes the entity")
    likes_count: int = Field(description="Total number of likes for the entity", ge=0)


class LikeToggleResponse(LikeStatus):
    message: str = Field(
        description="Human readable outcome", examples=["Book liked successfully"]
    )


class AuthorSummary(BaseModel):
    username: str = Field(description="Author handle", examples=["jdoe"])
    profile_picture: str | None = Field(default=None, description="Author avatar URL")


class LikedBook(BaseModel):
    id: int
    title: str
    cover_image: str | None = None
    description: str | None = None
    genres: list[str] = Field(default_factory=list)
    author: AuthorSummary


class ChapterBook(BaseModel):
    id: int
    title: str
    cover_image: str | None = None
    author: AuthorSummary


class LikedChapter(BaseModel):
    id: int
    title: str
    book: ChapterBook


class BookLikeRead(BaseModel):
    id: str = Field(description="Composite like identifier", examples=["1_5"])
    user_id: int
    book_id: int
    created_at: datetime
    book: LikedBook


class ChapterLikeRead(BaseModel):
    id: str = Field(description="Composite like identifier", examples=["1_12"])
    user_id: int
    chapter_id: int
    created_at: datetime
    chapter: LikedChapter


class UserLikesRead(BaseModel):
    liked_books: list[BookLikeRead] = Field(description="Books liked by the user, newest first")
    liked_chapters: list[ChapterLikeRead] = Field(
        description="Chapters liked by the user, newest first"
    )
    total_likes: int = Field(description="Number of liked books plus liked chapters", ge=0)
