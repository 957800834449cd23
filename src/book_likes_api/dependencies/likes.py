from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from book_likes_api.database import SessionLocal
from book_likes_api.repositories.likes_repository import LikesRepository
from book_likes_api.services.likes_service import LikesService


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return SessionLocal


def get_likes_repository(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> LikesRepository:
    return LikesRepository(session_factory=session_factory)


def get_likes_service(
    repo: Annotated[LikesRepository, Depends(get_likes_repository)],
) -> LikesService:
    """Dependency to provide the LikesService instance."""
    return LikesService(repo=repo)
