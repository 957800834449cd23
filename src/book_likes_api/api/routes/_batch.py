from collections.abc import Sequence

from fastapi import HTTPException, status

from book_likes_api.config import settings


def ensure_batch_size(ids: Sequence[int], field: str) -> None:
    if len(ids) > settings.batch_max_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"'{field}' must contain at most {settings.batch_max_ids} ids",
        )
