"""
Group formation entry point.

form_groups runs the whole pipeline synchronously:

1. Plan slot sizes from the roster size and target group size
2. Fill each slot greedily from the shared unassigned pool
3. Attach a guide cluster and a theme to each finished group
4. Check the finished groups against the warning thresholds
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, Field

from .builder import GreedyGroupBuilder
from .data_models import Group, GuideCluster, Participant, Settings
from .diagnostics import GroupWarning, WarningReport, analyze_groups
from .guides import match_guide_cluster
from .partition import iter_slot_sizes
from .roster import Roster
from .scoring import ScoreWeights
from .themes import assign_theme


logger = logging.getLogger(__name__)


class GroupingResult(BaseModel):
    """Outcome of one grouping run.

    `assignments` maps each participant's index in the input roster to its
    group number.
    """

    groups: List[Group] = Field(default_factory=list)
    guide_clusters: List[GuideCluster] = Field(default_factory=list)
    assignments: Dict[int, int] = Field(default_factory=dict)
    warnings: List[GroupWarning] = Field(default_factory=list)
    solved: bool = False

    def group_number_of(self, index: int) -> Optional[int]:
        return self.assignments.get(index)

    @property
    def unassigned_guide_clusters(self) -> List[GuideCluster]:
        return [c for c in self.guide_clusters if not c.assigned]

    @property
    def report(self) -> WarningReport:
        return WarningReport(warnings=self.warnings)


def _validate_inputs(participants: Sequence[Participant], settings: Settings) -> None:
    if not participants:
        raise ValueError("Cannot form groups: no participants were provided.")
    if settings.group_size < 1:
        raise ValueError(f"Cannot form groups: group size must be at least 1, got {settings.group_size}.")


def form_groups(
    participants: Sequence[Participant],
    settings: Optional[Settings] = None,
    guide_clusters: Optional[List[GuideCluster]] = None,
    themes: Optional[Sequence[str]] = None,
    *,
    weights: Optional[ScoreWeights] = None,
    rng: Optional[np.random.Generator] = None,
    workers: int = 1,
) -> GroupingResult:
    """Partition participants into groups and attach guide clusters and themes.

    Args:
        participants: Roster in import order. Order matters for tie-breaking.
        settings: Group size and warning thresholds; defaults to Settings().
        guide_clusters: Clusters to hand out; they are marked in place as they
            are assigned. None or empty means groups get no guides.
        themes: Theme labels; group i gets themes[i-1] when present.
        weights: Compatibility weights; pass ScoreWeights(jitter_high=0) to
            remove randomness.
        rng: Generator for tie-breaking jitter. Seed it for reproducible runs.
        workers: Threads used to score candidate partitions. 1 scores inline.

    Returns:
        GroupingResult with solved=True.

    Raises:
        ValueError: If there are no participants or the group size is below 1.
    """
    if settings is None:
        settings = Settings()
    _validate_inputs(participants, settings)

    clusters = guide_clusters if guide_clusters is not None else []
    roster = Roster(participants)
    groups: List[Group] = []

    logger.info(
        "Forming groups for %d participants (target size %d, %d guide clusters, %d themes)",
        len(roster),
        settings.group_size,
        len(clusters),
        len(themes or []),
    )

    executor = ThreadPoolExecutor(max_workers=workers) if workers > 1 else None
    try:
        builder = GreedyGroupBuilder(
            roster,
            weights=weights,
            rng=rng,
            executor=executor,
            partitions=workers,
        )
        for group_number, size in enumerate(iter_slot_sizes(len(roster), settings.group_size), start=1):
            members = builder.build_group(group_number, size)
            group = Group(group_number=group_number, participants=members)
            if clusters:
                match_guide_cluster(group, clusters)
            assign_theme(group, themes)
            groups.append(group)
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    warnings = analyze_groups(groups, settings)
    logger.info("Formed %d groups, %d warning(s)", len(groups), len(warnings))

    return GroupingResult(
        groups=groups,
        guide_clusters=clusters,
        assignments=roster.snapshot(),
        warnings=warnings,
        solved=True,
    )
