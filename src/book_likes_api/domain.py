import enum
import typing
from typing import Annotated

from pydantic import Field

# ids are stored as signed 64-bit integers
MAX_ID = 2**63 - 1

if typing.TYPE_CHECKING:
    UserId = typing.NewType("UserId", int)
    BookId = typing.NewType("BookId", int)
    ChapterId = typing.NewType("ChapterId", int)
else:
    _PositiveInt = Annotated[int, Field(gt=0, le=MAX_ID)]
    UserId = typing.NewType("UserId", _PositiveInt)
    BookId = typing.NewType("BookId", _PositiveInt)
    ChapterId = typing.NewType("ChapterId", _PositiveInt)


class LikeTarget(enum.StrEnum):
    """The two likeable entity kinds."""

    BOOK = "book"
    CHAPTER = "chapter"


class Lookup(enum.Enum):
    """Outcome of a point lookup against the store.

    FAILED means the store could not answer, which is not the same as the row
    being absent. Callers decide whether FAILED propagates or degrades.
    """

    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"
