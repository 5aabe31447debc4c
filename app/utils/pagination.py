"""
Offset pagination helpers shared by the discovery and match listings.

Offsets count items that survived filtering, not raw rows, so the same
offset keeps pointing at the same logical position when the underlying
rows are filtered in Python.
"""

from pydantic import BaseModel
from typing import List, Sequence, TypeVar

T = TypeVar("T")


def paginate(items: Sequence[T], offset: int, limit: int) -> List[T]:
    """
    Slice an already-filtered sequence.

    Args:
        items: Items in their final order
        offset: Number of items to skip (0-indexed)
        limit: Maximum number of items to return

    Returns:
        The requested window; empty when ``offset`` is past the end

    Example:
        >>> paginate([1, 2, 3, 4, 5], 1, 2)
        [2, 3]
        >>> paginate([1, 2], 5, 10)
        []
    """
    if offset < 0:
        raise ValueError("Offset must be >= 0")
    if limit < 1:
        raise ValueError("Limit must be >= 1")

    return list(items[offset:offset + limit])


class OffsetPage(BaseModel):
    """
    Metadata for offset-paginated responses.

    Attributes:
        limit: Items per page
        offset: Items skipped
        total: Total number of items
        has_more: Whether another page exists after this one
    """
    limit: int
    offset: int
    total: int
    has_more: bool

    @classmethod
    def build(cls, limit: int, offset: int, total: int) -> "OffsetPage":
        return cls(
            limit=limit,
            offset=offset,
            total=total,
            has_more=offset + limit < total
        )
