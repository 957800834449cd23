import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from pydantic import validate_call

from book_likes_api.domain import BookId, ChapterId, LikeTarget, Lookup, UserId
from book_likes_api.exceptions import DuplicateLikeError, ReferenceNotFoundError, StoreError
from book_likes_api.repositories.likes_repository import LikesRepository
from book_likes_api.schemas.like import (
    BookLikeRead,
    ChapterLikeRead,
    LikeStatus,
    LikeToggleResponse,
    UserLikesRead,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LIKED_MESSAGES = {
    LikeTarget.BOOK: "Book liked successfully",
    LikeTarget.CHAPTER: "Chapter liked successfully",
}
_UNLIKED_MESSAGES = {
    LikeTarget.BOOK: "Book like removed successfully",
    LikeTarget.CHAPTER: "Chapter like removed successfully",
}


class LikesService:
    def __init__(self, repo: LikesRepository) -> None:
        self.repo = repo

    @staticmethod
    def _require(lookup: Lookup, kind: str, entity_id: int) -> None:
        if lookup is Lookup.FAILED:
            raise StoreError(f"Could not verify {kind} {entity_id}")
        if lookup is Lookup.NOT_FOUND:
            raise ReferenceNotFoundError(kind, entity_id)

    async def _toggle(self, target: LikeTarget, user_id: int, entity_id: int) -> LikeToggleResponse:
        """
        Flips the like for (user, entity) and returns the new state with a fresh count.

        The reported state follows the outcome of the mutation: a duplicate
        conflict on insert means another request liked first, so the entity is
        reported as liked.
        """
        self._require(await self.repo.lookup_user(user_id), "user", user_id)
        self._require(
            await self.repo.lookup_entity(target, entity_id), target.value, entity_id
        )

        current = await self.repo.lookup_like(target, user_id, entity_id)
        if current is Lookup.FAILED:
            raise StoreError(f"Could not read like state for {target.value} {entity_id}")

        if current is Lookup.FOUND:
            deleted = await self.repo.unlike(target, user_id, entity_id)
            if not deleted:
                logger.info(
                    "Like already absent target=%s user_id=%s entity_id=%s",
                    target.value,
                    user_id,
                    entity_id,
                )
            is_liked = False
            message = _UNLIKED_MESSAGES[target]
        else:
            try:
                await self.repo.like(target, user_id, entity_id)
            except DuplicateLikeError:
                logger.info(
                    "Concurrent like detected target=%s user_id=%s entity_id=%s",
                    target.value,
                    user_id,
                    entity_id,
                )
            is_liked = True
            message = _LIKED_MESSAGES[target]

        likes_count = await self.repo.like_count(target, entity_id)
        logger.info(
            "Like toggled target=%s user_id=%s entity_id=%s is_liked=%s likes_count=%s",
            target.value,
            user_id,
            entity_id,
            is_liked,
            likes_count,
        )
        return LikeToggleResponse(is_liked=is_liked, likes_count=likes_count, message=message)

    async def _fan_out(
        self,
        target: LikeTarget,
        entity_ids: Sequence[int],
        fetch: Callable[[int], Awaitable[T]],
    ) -> dict[int, T]:
        """
        Runs one fetch per distinct id concurrently and waits for all of them.

        All-or-nothing: if any fetch failed, the batch raises StoreError once
        every task has finished.
        """
        unique_ids = list(dict.fromkeys(entity_ids))
        results = await asyncio.gather(*(fetch(eid) for eid in unique_ids), return_exceptions=True)

        collected: dict[int, T] = {}
        failed: list[int] = []
        for entity_id, result in zip(unique_ids, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(
                    "Batch lookup failed target=%s entity_id=%s",
                    target.value,
                    entity_id,
                    exc_info=result,
                )
                failed.append(entity_id)
            else:
                collected[entity_id] = result

        if failed:
            raise StoreError(f"Batch lookup failed for {target.value} ids {failed}")
        return collected

    async def _status(self, target: LikeTarget, user_id: int, entity_id: int) -> LikeStatus:
        """
        Reads the like state and the count as two independent round-trips.

        There is no shared snapshot, so a concurrent toggle landing between the
        reads can make is_liked and likes_count disagree briefly. A like state
        the store could not read is reported as not liked; a failed count raises.
        """
        liked, likes_count = await asyncio.gather(
            self.repo.lookup_like(target, user_id, entity_id),
            self.repo.like_count(target, entity_id),
            return_exceptions=True,
        )
        for result in (liked, likes_count):
            if isinstance(result, BaseException):
                raise result
        if liked is Lookup.FAILED:
            logger.warning(
                "Like state unavailable, reporting not liked target=%s user_id=%s entity_id=%s",
                target.value,
                user_id,
                entity_id,
            )
        return LikeStatus(is_liked=liked is Lookup.FOUND, likes_count=likes_count)

    async def _user_likes(self, user_id: int) -> UserLikesRead:
        self._require(await self.repo.lookup_user(user_id), "user", user_id)
        return await self.repo.get_user_likes(user_id)

    # ===== books =====

    @validate_call
    async def toggle_book_like(self, user_id: UserId, book_id: BookId) -> LikeToggleResponse:
        return await self._toggle(LikeTarget.BOOK, user_id, book_id)

    @validate_call
    async def get_book_like_status(self, user_id: UserId, book_id: BookId) -> LikeStatus:
        return await self._status(LikeTarget.BOOK, user_id, book_id)

    @validate_call
    async def get_multiple_book_like_status(
        self, user_id: UserId, book_ids: list[BookId]
    ) -> dict[int, LikeStatus]:
        return await self._fan_out(
            LikeTarget.BOOK,
            book_ids,
            lambda book_id: self._status(LikeTarget.BOOK, user_id, book_id),
        )

    @validate_call
    async def get_multiple_book_likes_count(self, book_ids: list[BookId]) -> dict[int, int]:
        return await self._fan_out(
            LikeTarget.BOOK,
            book_ids,
            lambda book_id: self.repo.like_count(LikeTarget.BOOK, book_id),
        )

    # ===== chapters =====

    @validate_call
    async def toggle_chapter_like(
        self, user_id: UserId, chapter_id: ChapterId
    ) -> LikeToggleResponse:
        return await self._toggle(LikeTarget.CHAPTER, user_id, chapter_id)

    @validate_call
    async def get_chapter_like_status(self, user_id: UserId, chapter_id: ChapterId) -> LikeStatus:
        return await self._status(LikeTarget.CHAPTER, user_id, chapter_id)

    @validate_call
    async def get_multiple_chapter_like_status(
        self, user_id: UserId, chapter_ids: list[ChapterId]
    ) -> dict[int, LikeStatus]:
        return await self._fan_out(
            LikeTarget.CHAPTER,
            chapter_ids,
            lambda chapter_id: self._status(LikeTarget.CHAPTER, user_id, chapter_id),
        )

    @validate_call
    async def get_multiple_chapter_likes_count(
        self, chapter_ids: list[ChapterId]
    ) -> dict[int, int]:
        return await self._fan_out(
            LikeTarget.CHAPTER,
            chapter_ids,
            lambda chapter_id: self.repo.like_count(LikeTarget.CHAPTER, chapter_id),
        )

    # ===== users =====

    @validate_call
    async def get_user_likes(self, user_id: UserId) -> UserLikesRead:
        return await self._user_likes(user_id)

    @validate_call
    async def get_user_liked_books(self, user_id: UserId) -> list[BookLikeRead]:
        return (await self._user_likes(user_id)).liked_books

    @validate_call
    async def get_user_liked_chapters(self, user_id: UserId) -> list[ChapterLikeRead]:
        return (await self._user_likes(user_id)).liked_chapters
