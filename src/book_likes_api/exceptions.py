"""Error hierarchy for the likes service.

Each error carries the HTTP status it maps to; ``main`` renders any
``LikesError`` as ``{"detail": message}`` with that status.
"""

from starlette import status


class LikesError(Exception):
    """Base exception for all likes service errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ReferenceNotFoundError(LikesError):
    """A user, book or chapter referenced by an operation does not exist."""

    def __init__(self, kind: str, entity_id: int) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(
            f"{kind.capitalize()} with id {entity_id} not found",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class DuplicateLikeError(LikesError):
    """The (user, entity) like row already exists."""

    def __init__(self, kind: str, user_id: int, entity_id: int) -> None:
        self.kind = kind
        self.user_id = user_id
        self.entity_id = entity_id
        super().__init__(
            f"User {user_id} already liked {kind} {entity_id}",
            status_code=status.HTTP_409_CONFLICT,
        )


class StoreError(LikesError):
    """The persistence layer failed to complete an operation."""

    def __init__(self, message: str = "Storage backend unavailable") -> None:
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
