from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from .data_models import MIXED, Group, Guide, GuideCluster


logger = logging.getLogger(__name__)


def separate_into_clusters(guides: Iterable[Guide]) -> List[GuideCluster]:
    """Bundle guides by cluster id, keeping first-seen cluster order."""
    clusters: Dict[int, GuideCluster] = {}
    for guide in guides:
        if guide.cluster_id not in clusters:
            clusters[guide.cluster_id] = GuideCluster(cluster_id=guide.cluster_id)
        clusters[guide.cluster_id].guides.append(guide)
    return list(clusters.values())


def _first_unassigned(clusters: Iterable[GuideCluster], alcohol_type: Optional[str] = None) -> Optional[GuideCluster]:
    for cluster in clusters:
        if cluster.assigned:
            continue
        if alcohol_type is None or cluster.alcohol_type == alcohol_type:
            return cluster
    return None


def match_guide_cluster(group: Group, clusters: List[GuideCluster]) -> Optional[GuideCluster]:
    """Commit the best available guide cluster to `group`.

    Priority, stopping at the first hit among unassigned clusters:
    1. a cluster with the same alcohol type as the group (skipped for Mixed groups)
    2. a Mixed cluster
    3. any cluster

    The chosen cluster is marked with the group's number and attached to the
    group. Returns None (and leaves the group without guides) when every
    cluster is taken.
    """
    group_type = group.alcohol_type

    chosen: Optional[GuideCluster] = None
    if group_type is not None and group_type != MIXED:
        chosen = _first_unassigned(clusters, group_type)
    if chosen is None:
        chosen = _first_unassigned(clusters, MIXED)
    if chosen is None:
        chosen = _first_unassigned(clusters)

    if chosen is None:
        logger.debug("No guide cluster left for group %d", group.group_number)
        return None

    chosen.assign_to(group.group_number)
    group.guide_cluster = chosen
    logger.debug(
        "Guide cluster %d (%s) -> group %d (%s)",
        chosen.cluster_id,
        chosen.alcohol_type,
        group.group_number,
        group_type,
    )
    return chosen
