from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .data_models import Participant


@dataclass(frozen=True)
class ScoreWeights:
    w_university: float = 300.0
    w_university_other: float = 2.0
    w_alcohol: float = 200.0
    w_study_duration: float = 100.0
    w_study_duration_other: float = 1.0
    w_nationality: float = 1.0
    w_both_restricted_diet: float = -3.0
    w_both_unrestricted_diet: float = -1.0
    # jitter is drawn from [0, jitter_high); 0 disables it
    jitter_high: int = 3


def _university_similarity(a: Participant, b: Participant, weights: ScoreWeights) -> float:
    if a.university == b.university:
        return weights.w_university
    if a.university == "Other" or b.university == "Other":
        return weights.w_university_other
    return 0.0


def _alcohol_similarity(a: Participant, b: Participant, weights: ScoreWeights) -> float:
    return weights.w_alcohol if a.alcohol_free == b.alcohol_free else 0.0


def _study_duration_similarity(a: Participant, b: Participant, weights: ScoreWeights) -> float:
    if a.study_duration == b.study_duration:
        return weights.w_study_duration
    if a.study_duration == "Other" or b.study_duration == "Other":
        return weights.w_study_duration_other
    return 0.0


def _nationality_dissimilarity(a: Participant, b: Participant, weights: ScoreWeights) -> float:
    # only fires when both nationalities are missing
    if a.nationality == b.nationality and a.nationality is None and b.nationality is None:
        return weights.w_nationality
    return 0.0


def _diet_dissimilarity(a: Participant, b: Participant, weights: ScoreWeights) -> float:
    if a.diet != "None" and b.diet != "None":
        return weights.w_both_restricted_diet
    if a.diet == "None" and b.diet == "None":
        return weights.w_both_unrestricted_diet
    return 0.0


def similarity(a: Participant, b: Participant, weights: Optional[ScoreWeights] = None) -> float:
    """Cohesion score: shared university, alcohol preference and study duration."""
    if weights is None:
        weights = ScoreWeights()
    return (
        _university_similarity(a, b, weights)
        + _alcohol_similarity(a, b, weights)
        + _study_duration_similarity(a, b, weights)
    )


def dissimilarity(a: Participant, b: Participant, weights: Optional[ScoreWeights] = None) -> float:
    """Diversity score: nationality and diet terms (usually zero or negative)."""
    if weights is None:
        weights = ScoreWeights()
    return _nationality_dissimilarity(a, b, weights) + _diet_dissimilarity(a, b, weights)


def base_compatibility(
    candidate: Participant,
    group_so_far: Sequence[Participant],
    weights: Optional[ScoreWeights] = None,
) -> float:
    """Deterministic part of the compatibility score, summed over current members."""
    if weights is None:
        weights = ScoreWeights()
    total = 0.0
    for member in group_so_far:
        total += similarity(member, candidate, weights) + dissimilarity(member, candidate, weights)
    return total


def draw_jitter(rng: Optional[np.random.Generator], weights: ScoreWeights) -> int:
    """One tie-breaking draw from [0, jitter_high). Returns 0 when jitter is disabled."""
    if weights.jitter_high <= 0:
        return 0
    if rng is None:
        rng = np.random.default_rng()
    return int(rng.integers(0, weights.jitter_high))


def compatibility(
    candidate: Participant,
    group_so_far: Sequence[Participant],
    weights: Optional[ScoreWeights] = None,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """Score a candidate against the members already placed in a group.

    A fresh jitter value is drawn on every call, so scoring the same candidate
    twice may give different results unless jitter is disabled.

    Args:
        candidate: Unassigned participant being considered.
        group_so_far: Members already committed to the group under construction.
        weights: Score weights; defaults to ScoreWeights().
        rng: Random generator for the jitter; a fresh unseeded one if None.

    Returns:
        Similarity plus dissimilarity over all members, plus jitter.
    """
    if weights is None:
        weights = ScoreWeights()
    return base_compatibility(candidate, group_so_far, weights) + draw_jitter(rng, weights)
