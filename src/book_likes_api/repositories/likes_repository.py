import asyncio
import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import joinedload, selectinload

from book_likes_api.domain import LikeTarget, Lookup
from book_likes_api.exceptions import DuplicateLikeError, ReferenceNotFoundError, StoreError
from book_likes_api.models import Book, BookLike, Chapter, ChapterLike, User
from book_likes_api.schemas.like import (
    AuthorSummary,
    BookLikeRead,
    ChapterBook,
    ChapterLikeRead,
    LikedBook,
    LikedChapter,
    LikeStatus,
    UserLikesRead,
)

logger = logging.getLogger(__name__)

_ENTITY_MODELS: dict[LikeTarget, type[Book] | type[Chapter]] = {
    LikeTarget.BOOK: Book,
    LikeTarget.CHAPTER: Chapter,
}
_LIKE_MODELS: dict[LikeTarget, type[BookLike] | type[ChapterLike]] = {
    LikeTarget.BOOK: BookLike,
    LikeTarget.CHAPTER: ChapterLike,
}


def _entity_column(target: LikeTarget) -> Any:
    if target is LikeTarget.BOOK:
        return BookLike.book_id
    return ChapterLike.chapter_id


def _like_load_options(target: LikeTarget) -> tuple[Any, ...]:
    if target is LikeTarget.BOOK:
        return (
            joinedload(BookLike.book).joinedload(Book.author),
            joinedload(BookLike.book).selectinload(Book.genres),
        )
    return (joinedload(ChapterLike.chapter).joinedload(Chapter.book).joinedload(Book.author),)


def _author(user: User | None) -> AuthorSummary:
    if user is None:
        return AuthorSummary(username="")
    return AuthorSummary(username=user.username, profile_picture=user.profile_picture)


def _to_book_like_read(like: BookLike) -> BookLikeRead:
    book = like.book
    return BookLikeRead(
        id=f"{like.user_id}_{like.book_id}",
        user_id=like.user_id,
        book_id=like.book_id,
        created_at=like.created_at,
        book=LikedBook(
            id=book.id,
            title=book.title,
            cover_image=book.cover_image,
            description=book.description,
            genres=[genre.name for genre in book.genres],
            author=_author(book.author),
        ),
    )


def _to_chapter_like_read(like: ChapterLike) -> ChapterLikeRead:
    chapter = like.chapter
    book = chapter.book
    return ChapterLikeRead(
        id=f"{like.user_id}_{like.chapter_id}",
        user_id=like.user_id,
        chapter_id=like.chapter_id,
        created_at=like.created_at,
        chapter=LikedChapter(
            id=chapter.id,
            title=chapter.title,
            book=ChapterBook(
                id=book.id,
                title=book.title,
                cover_image=book.cover_image,
                author=_author(book.author),
            ),
        ),
    )


class LikesRepository:
    """Data access for book and chapter likes.

    Every operation runs in its own short-lived session, so independent calls
    may be awaited concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _lookup(self, model: type, ident: Any) -> Lookup:
        try:
            async with self._session_factory() as session:
                row = await session.get(model, ident)
        except SQLAlchemyError:
            logger.warning(
                "Lookup failed model=%s ident=%s", model.__tablename__, ident, exc_info=True
            )
            return Lookup.FAILED
        return Lookup.FOUND if row is not None else Lookup.NOT_FOUND

    async def lookup_user(self, user_id: int) -> Lookup:
        return await self._lookup(User, user_id)

    async def lookup_entity(self, target: LikeTarget, entity_id: int) -> Lookup:
        return await self._lookup(_ENTITY_MODELS[target], entity_id)

    async def lookup_like(self, target: LikeTarget, user_id: int, entity_id: int) -> Lookup:
        return await self._lookup(_LIKE_MODELS[target], (user_id, entity_id))

    async def user_exists(self, user_id: int) -> bool:
        return await self.lookup_user(user_id) is Lookup.FOUND

    async def entity_exists(self, target: LikeTarget, entity_id: int) -> bool:
        return await self.lookup_entity(target, entity_id) is Lookup.FOUND

    async def is_liked_by_user(self, target: LikeTarget, user_id: int, entity_id: int) -> bool:
        """A failed lookup reads as "not liked"."""
        return await self.lookup_like(target, user_id, entity_id) is Lookup.FOUND

    async def like(
        self, target: LikeTarget, user_id: int, entity_id: int
    ) -> BookLikeRead | ChapterLikeRead:
        """
        Inserts the (user, entity) like and returns it with display data.

        Raises DuplicateLikeError when the pair already exists and
        ReferenceNotFoundError when the user or entity is missing.
        """
        like_model = _LIKE_MODELS[target]
        entity_column = _entity_column(target)
        try:
            async with self._session_factory() as session:
                session.add(like_model(user_id=user_id, **{entity_column.key: entity_id}))
                try:
                    await session.commit()
                except IntegrityError as exc:
                    await session.rollback()
                    if await session.get(like_model, (user_id, entity_id)) is not None:
                        raise DuplicateLikeError(target.value, user_id, entity_id) from exc
                    if await session.get(User, user_id) is None:
                        raise ReferenceNotFoundError("user", user_id) from exc
                    raise ReferenceNotFoundError(target.value, entity_id) from exc

            async with self._session_factory() as session:
                stmt = (
                    select(like_model)
                    .where(like_model.user_id == user_id, entity_column == entity_id)
                    .options(*_like_load_options(target))
                )
                row = (await session.scalars(stmt)).first()
        except SQLAlchemyError as exc:
            logger.exception(
                "Like insert failed target=%s user_id=%s entity_id=%s",
                target.value,
                user_id,
                entity_id,
            )
            raise StoreError(f"Could not like {target.value} {entity_id}") from exc

        if row is None:
            raise ReferenceNotFoundError(target.value, entity_id)
        if target is LikeTarget.BOOK:
            return _to_book_like_read(row)
        return _to_chapter_like_read(row)

    async def unlike(self, target: LikeTarget, user_id: int, entity_id: int) -> bool:
        """Deletes the pair. Returns False when there was nothing to delete."""
        like_model = _LIKE_MODELS[target]
        stmt = delete(like_model).where(
            like_model.user_id == user_id, _entity_column(target) == entity_id
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.exception(
                "Like delete failed target=%s user_id=%s entity_id=%s",
                target.value,
                user_id,
                entity_id,
            )
            raise StoreError(f"Could not unlike {target.value} {entity_id}") from exc
        return result.rowcount > 0

    async def like_count(self, target: LikeTarget, entity_id: int) -> int:
        like_model = _LIKE_MODELS[target]
        stmt = (
            select(func.count())
            .select_from(like_model)
            .where(_entity_column(target) == entity_id)
        )
        try:
            async with self._session_factory() as session:
                return (await session.execute(stmt)).scalar_one()
        except SQLAlchemyError as exc:
            logger.exception("Like count failed target=%s entity_id=%s", target.value, entity_id)
            raise StoreError(f"Could not count likes for {target.value} {entity_id}") from exc

    async def like_status(self, target: LikeTarget, user_id: int, entity_id: int) -> LikeStatus:
        # two independent reads, no shared snapshot
        is_liked, likes_count = await asyncio.gather(
            self.is_liked_by_user(target, user_id, entity_id),
            self.like_count(target, entity_id),
        )
        return LikeStatus(is_liked=is_liked, likes_count=likes_count)

    async def _list_likes(self, target: LikeTarget, user_id: int) -> list[Any]:
        like_model = _LIKE_MODELS[target]
        stmt = (
            select(like_model)
            .where(like_model.user_id == user_id)
            .options(*_like_load_options(target))
            .order_by(like_model.created_at.desc())
        )
        async with self._session_factory() as session:
            return list((await session.scalars(stmt)).all())

    async def get_user_likes(self, user_id: int) -> UserLikesRead:
        # both listings run to completion before any failure is raised
        results = await asyncio.gather(
            self._list_likes(LikeTarget.BOOK, user_id),
            self._list_likes(LikeTarget.CHAPTER, user_id),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, SQLAlchemyError):
                logger.error(
                    "User likes retrieval failed user_id=%s", user_id, exc_info=result
                )
                raise StoreError(f"Could not load likes for user {user_id}") from result
            if isinstance(result, BaseException):
                raise result
        book_likes, chapter_likes = results

        liked_books = [_to_book_like_read(like) for like in book_likes]
        liked_chapters = [_to_chapter_like_read(like) for like in chapter_likes]
        return UserLikesRead(
            liked_books=liked_books,
            liked_chapters=liked_chapters,
            total_likes=len(liked_books) + len(liked_chapters),
        )
