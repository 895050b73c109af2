"""
Ordering engine for sibling collections.

Steps of one form and fields of one step each carry an ``order_index``. After
every insert, move or removal the collection is rewritten so the indexes are
exactly ``0..N-1`` in display order. The functions here work on any objects
with ``order_index``, ``created_at`` and ``id`` attributes and never touch the
database; callers flush the rewritten items in a single commit.
"""

from datetime import datetime
from typing import List, Optional, Sequence, TypeVar

from formbuilder.errors import ValidationFailed


T = TypeVar("T")


def sort_key(item):
    """Display order: rank, then creation time, then id."""
    created_at = getattr(item, "created_at", None) or datetime.min
    return (item.order_index if item.order_index is not None else 0, created_at, str(item.id or ""))


def ordered(items: Sequence[T]) -> List[T]:
    """Siblings in display order, with deterministic tie-breaking."""
    return sorted(items, key=sort_key)


def reindex(items: Sequence[T]) -> List[T]:
    """Assign ``order_index`` 0..N-1 following the given list order."""
    result = list(items)
    for position, item in enumerate(result):
        if item.order_index != position:
            item.order_index = position
    return result


def insert(items: Sequence[T], new_item: T, index: Optional[int] = None) -> List[T]:
    """
    Place ``new_item`` among its siblings.

    Without an index the item is appended. With one, siblings at or after the
    index shift down by one; an index past the end appends.
    """
    siblings = ordered(items)
    if index is None or index > len(siblings):
        index = len(siblings)
    if index < 0:
        raise ValidationFailed("INVALID_ORDER_INDEX", "order_index must be a non-negative integer")
    siblings.insert(index, new_item)
    return reindex(siblings)


def move(items: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """Extract the item at ``old_index`` and reinsert it at ``new_index``."""
    siblings = ordered(items)
    for position in (old_index, new_index):
        if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position < len(siblings):
            raise ValidationFailed(
                "INVALID_ORDER_INDEX",
                f"order_index must be between 0 and {max(len(siblings) - 1, 0)}"
            )
    moved = siblings.pop(old_index)
    siblings.insert(new_index, moved)
    return reindex(siblings)


def move_item(items: Sequence[T], item: T, new_index: int) -> List[T]:
    """Move a known sibling to ``new_index``, clamped to the last position."""
    siblings = ordered(items)
    old_index = siblings.index(item)
    return move(siblings, old_index, min(new_index, len(siblings) - 1))


def remove(items: Sequence[T], item: T) -> List[T]:
    """Drop ``item`` and compact the remaining siblings."""
    siblings = [sibling for sibling in ordered(items) if sibling is not item]
    return reindex(siblings)


def is_dense(items: Sequence[T]) -> bool:
    """True when the indexes are exactly 0..N-1."""
    return sorted(item.order_index for item in items) == list(range(len(items)))
