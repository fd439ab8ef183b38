"""Ordering engine for sibling groups (levels in a program, moves in a level).

These are pure functions: they take the current siblings and return new
copies numbered 1..N. Nothing here touches storage.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from operator import attrgetter
from typing import Protocol, TypeVar

logger = logging.getLogger(__name__)


class Ordered(Protocol):
    id: str
    order: int


T = TypeVar("T", bound=Ordered)


def clamp_insertion_order(order: int | None, count: int) -> int:
    """Clamp a requested 1-based position to [1, count + 1].

    Args:
        order: Requested position, or None to append
        count: Number of siblings that already exist

    Returns:
        The position to insert at
    """
    if order is None:
        return count + 1
    return min(max(1, int(order)), count + 1)


def sort_by_order(siblings: Iterable[T]) -> list[T]:
    """Sort siblings by order. Ties keep their incoming sequence."""
    return sorted(siblings, key=attrgetter("order"))


def reorder(siblings: Iterable[T], target_id: str, desired_order: int) -> list[T]:
    """Move one sibling to a position and renumber the whole group.

    The target is taken out, the rest are sorted by current order, the
    target is spliced in at desired_order (clamped to the group), and
    every element gets order = index + 1.

    Args:
        siblings: The full sibling group, including the target
        target_id: ID of the entity being placed
        desired_order: 1-based position for the target

    Returns:
        The group in its new order, with contiguous order values

    Raises:
        ValueError: If the target is not among the siblings
    """
    siblings = list(siblings)
    target = next((s for s in siblings if s.id == target_id), None)
    if target is None:
        raise ValueError(f"{target_id} is not in the sibling group")

    remaining = sort_by_order(s for s in siblings if s.id != target_id)
    index = max(0, min(desired_order - 1, len(remaining)))
    remaining.insert(index, target)

    logger.debug("Placed %s at position %d of %d", target_id, index + 1, len(remaining))
    return renumber(remaining, presorted=True)


def renumber(siblings: Iterable[T], presorted: bool = False) -> list[T]:
    """Renumber siblings 1..N, closing any gaps.

    Args:
        siblings: The sibling group
        presorted: Keep the given sequence instead of sorting by order
    """
    ordered = list(siblings) if presorted else sort_by_order(siblings)
    return [
        s if s.order == position else replace(s, order=position)
        for position, s in enumerate(ordered, start=1)
    ]


def is_contiguous(siblings: Iterable[Ordered]) -> bool:
    """Check that the group's orders are exactly 1..N."""
    orders = sorted(s.order for s in siblings)
    return orders == list(range(1, len(orders) + 1))
