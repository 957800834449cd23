from collections.abc import AsyncIterator, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from book_likes_api.database import Base
from book_likes_api.dependencies.likes import get_session_factory
from book_likes_api.main import app
from book_likes_api.models import Book, BookLike, Chapter, ChapterLike, Genre, User
from book_likes_api.repositories.likes_repository import LikesRepository
from book_likes_api.services.likes_service import LikesService


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(autouse=True)
def clear_dependency_overrides() -> Iterator[None]:
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def db_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'likes.db'}")
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def likes_repo(session_factory: async_sessionmaker[AsyncSession]) -> LikesRepository:
    return LikesRepository(session_factory=session_factory)


@pytest.fixture
def likes_service(likes_repo: LikesRepository) -> LikesService:
    return LikesService(repo=likes_repo)


class DataFactory:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _add(self, *rows: Any) -> None:
        async with self.session_factory() as session:
            session.add_all(rows)
            await session.commit()

    async def create_user(self, id: int, username: str | None = None, **kwargs) -> User:
        user = User(id=id, username=username or f"user{id}", **kwargs)
        await self._add(user)
        return user

    async def create_genre(self, id: int, name: str) -> Genre:
        genre = Genre(id=id, name=name)
        await self._add(genre)
        return genre

    async def create_book(
        self,
        id: int,
        author_id: int,
        title: str = "Test Book",
        genres: list[Genre] | None = None,
        **kwargs,
    ) -> Book:
        async with self.session_factory() as session:
            book = Book(id=id, author_id=author_id, title=title, **kwargs)
            for genre in genres or []:
                book.genres.append(await session.merge(genre))
            session.add(book)
            await session.commit()
        return book

    async def create_chapter(self, id: int, book_id: int, title: str = "Chapter") -> Chapter:
        chapter = Chapter(id=id, book_id=book_id, title=title)
        await self._add(chapter)
        return chapter

    async def create_book_like(
        self, user_id: int, book_id: int, created_at: datetime | None = None
    ) -> BookLike:
        like = BookLike(user_id=user_id, book_id=book_id)
        if created_at is not None:
            like.created_at = created_at
        await self._add(like)
        return like

    async def create_chapter_like(
        self, user_id: int, chapter_id: int, created_at: datetime | None = None
    ) -> ChapterLike:
        like = ChapterLike(user_id=user_id, chapter_id=chapter_id)
        if created_at is not None:
            like.created_at = created_at
        await self._add(like)
        return like


@pytest.fixture
def test_data(session_factory: async_sessionmaker[AsyncSession]) -> DataFactory:
    return DataFactory(session_factory)


@pytest_asyncio.fixture
async def catalog(test_data: DataFactory) -> DataFactory:
    """Users 1-3, book 5 by user 3 with two genres, book 7, chapters 11 and 12 of book 5."""
    for user_id in (1, 2, 3):
        await test_data.create_user(user_id)
    fantasy = await test_data.create_genre(1, "Fantasy")
    classic = await test_data.create_genre(2, "Classic")
    await test_data.create_book(
        5,
        author_id=3,
        title="The Hobbit",
        cover_image="https://example.com/hobbit.jpg",
        description="There and back again.",
        genres=[fantasy, classic],
    )
    await test_data.create_book(7, author_id=3, title="Silmarillion")
    await test_data.create_chapter(11, book_id=5, title="An Unexpected Party")
    await test_data.create_chapter(12, book_id=5, title="Roast Mutton")
    return test_data


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[httpx.AsyncClient]:
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
