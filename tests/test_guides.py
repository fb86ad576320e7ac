import pytest

from groupmaker.data_models import Group, Guide, GuideCluster, Participant
from groupmaker.guides import match_guide_cluster, separate_into_clusters


def _group(number, *alcohol_free):
    return Group(group_number=number, participants=[Participant(alcohol_free=a) for a in alcohol_free])


def _cluster(cluster_id, *alcohol_free):
    return GuideCluster(
        cluster_id=cluster_id,
        guides=[Guide(cluster_id=cluster_id, alcohol_free=a) for a in alcohol_free],
    )


def test_separate_into_clusters_keeps_first_seen_order():
    guides = [
        Guide(cluster_id=7, first_name="a"),
        Guide(cluster_id=2, first_name="b"),
        Guide(cluster_id=7, first_name="c"),
    ]
    clusters = separate_into_clusters(guides)
    assert [c.cluster_id for c in clusters] == [7, 2]
    assert [g.first_name for g in clusters[0].guides] == ["a", "c"]
    assert all(c.group_number is None for c in clusters)


def test_mixed_group_skips_exact_match_and_takes_mixed_cluster():
    group = _group(1, True, True, False)
    assert group.alcohol_type == "Mixed"
    clusters = [_cluster(1, False), _cluster(2, True, False)]

    chosen = match_guide_cluster(group, clusters)

    assert chosen is clusters[1]
    assert group.guide_cluster is clusters[1]
    assert clusters[1].group_number == 1
    assert clusters[0].group_number is None


def test_exact_alcohol_match_first():
    group = _group(3, True, True)
    assert group.alcohol_type == "Yes"
    clusters = [_cluster(1, True, False), _cluster(2, True)]
    assert match_guide_cluster(group, clusters) is clusters[1]


def test_falls_back_to_any_cluster():
    group = _group(1, True)
    clusters = [_cluster(1, False)]
    assert match_guide_cluster(group, clusters) is clusters[0]


def test_assigned_clusters_are_skipped():
    clusters = [_cluster(1, False), _cluster(2, False)]
    assert match_guide_cluster(_group(1, False), clusters) is clusters[0]
    assert match_guide_cluster(_group(2, False), clusters) is clusters[1]
    third = _group(3, False)
    assert match_guide_cluster(third, clusters) is None
    assert third.guide_cluster is None
    assert [c.group_number for c in clusters] == [1, 2]


def test_cluster_group_number_never_changes():
    cluster = _cluster(1, True)
    cluster.assign_to(4)
    with pytest.raises(ValueError):
        cluster.assign_to(5)
    assert cluster.group_number == 4


def test_empty_cluster_only_matches_as_last_resort():
    empty = GuideCluster(cluster_id=9)
    assert empty.alcohol_type is None
    clusters = [empty, _cluster(2, True, False)]
    assert match_guide_cluster(_group(1, False), clusters) is clusters[1]
    assert match_guide_cluster(_group(2, False), clusters) is empty
