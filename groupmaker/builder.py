"""
Greedy group construction.

A group slot is filled one participant at a time:

- Score every still-unassigned participant against the members already in the slot
- Commit the highest scoring one (earliest in roster order on exact ties)
- Repeat until the slot reaches its effective size or nobody is left

The unassigned pool is shared by all slots of a run, so a participant placed in
group 3 is never considered for group 4 onwards.
"""
from __future__ import annotations

import logging
import math
from concurrent.futures import Executor
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .data_models import Participant
from .roster import Roster
from .scoring import ScoreWeights, base_compatibility, draw_jitter


logger = logging.getLogger(__name__)

# (participant index, jitter drawn for this scan)
Candidate = Tuple[int, int]


def _split_contiguous(items: List[Candidate], parts: int) -> List[List[Candidate]]:
    if parts <= 1 or len(items) <= 1:
        return [items]
    chunk = math.ceil(len(items) / parts)
    return [items[i:i + chunk] for i in range(0, len(items), chunk)]


class GreedyGroupBuilder:
    """Fills group slots from a shared Roster.

    Args:
        roster: Assignment arena shared across all slots of a run.
        weights: Compatibility weights (and jitter range).
        rng: Generator for the tie-breaking jitter. Pass a seeded one for
            reproducible runs.
        executor: Optional executor used to score pool partitions concurrently.
        partitions: Number of pool partitions per scan when an executor is given.
    """

    def __init__(
        self,
        roster: Roster,
        weights: Optional[ScoreWeights] = None,
        rng: Optional[np.random.Generator] = None,
        executor: Optional[Executor] = None,
        partitions: int = 1,
    ):
        self.roster = roster
        self.weights = weights or ScoreWeights()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.executor = executor
        self.partitions = max(1, partitions)

    def _local_best(
        self, chunk: List[Candidate], members: Sequence[Participant]
    ) -> Optional[Tuple[int, float]]:
        best: Optional[Tuple[int, float]] = None
        for index, jitter in chunk:
            score = base_compatibility(self.roster.participant(index), members, self.weights) + jitter
            if best is None or score > best[1]:
                best = (index, score)
        return best

    def best_candidate(self, members: Sequence[Participant]) -> Optional[int]:
        """Index of the best unassigned participant for `members`, or None if the pool is empty.

        Jitter is drawn here, once per candidate and in roster order, before any
        fan-out, so a seeded generator yields the same pick with or without an
        executor. Partition winners are reduced in partition order.
        """
        pool = self.roster.unassigned
        if not pool:
            return None

        candidates: List[Candidate] = [(i, draw_jitter(self.rng, self.weights)) for i in pool]
        chunks = _split_contiguous(candidates, self.partitions if self.executor else 1)

        if self.executor is not None and len(chunks) > 1:
            results = list(self.executor.map(lambda c: self._local_best(c, members), chunks))
        else:
            results = [self._local_best(c, members) for c in chunks]

        best: Optional[Tuple[int, float]] = None
        for result in results:
            if result is None:
                continue
            if best is None or result[1] > best[1]:
                best = result
        return best[0] if best is not None else None

    def build_group(self, group_number: int, size: int) -> List[Participant]:
        """Fill one slot of at most `size` participants and commit them to `group_number`."""
        members: List[Participant] = []
        while len(members) < size and not self.roster.exhausted:
            index = self.best_candidate(members)
            if index is None:
                break
            self.roster.assign(index, group_number)
            members.append(self.roster.participant(index))

        logger.debug(
            "Group %d filled with %d/%d participants (%d left in pool)",
            group_number,
            len(members),
            size,
            self.roster.remaining,
        )
        return members
