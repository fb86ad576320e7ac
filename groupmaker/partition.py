from __future__ import annotations

import math
from typing import Iterator, List


def _validate(num_participants: int, group_size: int) -> None:
    if group_size < 1:
        raise ValueError(f"Group size must be at least 1, got {group_size}.")
    if num_participants < 0:
        raise ValueError(f"Participant count cannot be negative, got {num_participants}.")


def iter_slot_sizes(num_participants: int, group_size: int) -> Iterator[int]:
    """Yield the effective size of each group slot, in order.

    A shrink budget of `group_size - num_participants % group_size` is spent one
    unit per slot on the leading slots, each of which is one smaller than the
    target. Slots are produced until every participant is covered; the last
    slot takes whatever is left. Note that the budget equals `group_size` when
    the roster divides evenly, so those rosters still get shrunken slots.

    Args:
        num_participants: Roster size N.
        group_size: Target group size S (>= 1).

    Yields:
        Effective slot sizes; their sum is exactly N.
    """
    _validate(num_participants, group_size)

    shrink_budget = group_size - num_participants % group_size
    placed = 0
    while placed < num_participants:
        size = group_size
        if shrink_budget > 0:
            size -= 1
            shrink_budget -= 1
        size = min(size, group_size)
        # size-1 groups would otherwise shrink to empty slots and never finish
        size = max(size, 1)
        size = min(size, num_participants - placed)
        placed += size
        yield size


def plan_slot_sizes(num_participants: int, group_size: int) -> List[int]:
    """List form of `iter_slot_sizes`."""
    return list(iter_slot_sizes(num_participants, group_size))


def number_of_groups(num_participants: int, group_size: int) -> int:
    """Advisory group count used when checking guide clusters and themes before a run."""
    _validate(num_participants, group_size)
    return math.ceil(num_participants / group_size)
