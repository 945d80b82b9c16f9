"""
Unit tests for linkage strategies.

Merge heights are checked against scipy's reference implementation on
random Euclidean data, where no two candidate merges tie.
"""

import numpy as np
import pandas as pd
import pytest
from scipy.cluster import hierarchy
from scipy.spatial.distance import pdist, squareform

from sotu_cluster.services.hierarchical_clustering_service import HierarchicalClusteringService
from sotu_cluster.services.linkage import (
    LINKAGE_STRATEGIES,
    AverageLinkage,
    McQuittyLinkage,
    WardD2Linkage,
    get_linkage_strategy,
)


@pytest.fixture
def points():
    rng = np.random.default_rng(42)
    return rng.normal(size=(9, 3))


@pytest.fixture
def distance(points):
    names = [f"doc_{i}.txt" for i in range(len(points))]
    return pd.DataFrame(squareform(pdist(points)), index=names, columns=names)


def partition(labels, cluster_ids):
    """Helper to compare clusterings independent of numbering."""
    groups = {}
    for label, cid in zip(labels, cluster_ids):
        groups.setdefault(cid, set()).add(label)
    return {frozenset(members) for members in groups.values()}


class TestAgainstScipy:
    """Merge heights and cuts agree with scipy.cluster.hierarchy."""

    @pytest.mark.parametrize("ours,theirs", [
        ("single", "single"),
        ("complete", "complete"),
        ("average", "average"),
        ("mcquitty", "weighted"),
        ("ward.D2", "ward"),
    ])
    def test_merge_heights(self, config, points, distance, ours, theirs):
        tree = HierarchicalClusteringService(config).agglomerate(distance, ours)
        reference = hierarchy.linkage(pdist(points), method=theirs)

        assert np.sort(tree.merge_heights) == pytest.approx(np.sort(reference[:, 2]))

    @pytest.mark.parametrize("ours,theirs", [
        ("average", "average"),
        ("ward.D2", "ward"),
    ])
    def test_cut_partitions(self, config, points, distance, ours, theirs):
        service = HierarchicalClusteringService(config)
        tree = service.agglomerate(distance, ours)
        reference = hierarchy.linkage(pdist(points), method=theirs)

        for k in (2, 3, 4):
            assignment = service.cut_tree(tree, k)
            expected = hierarchy.fcluster(reference, t=k, criterion="maxclust")
            assert partition(assignment.labels, assignment.cluster_ids) == \
                partition(assignment.labels, expected)


class TestUpdateRules:
    """Tests for the Lance-Williams update formulas."""

    def test_average_weights_by_size(self):
        strategy = AverageLinkage()

        updated = strategy.update(np.array([1.0]), np.array([4.0]), 0.5, 3, 1, np.array([1]))

        assert updated[0] == pytest.approx((3 * 1.0 + 1 * 4.0) / 4)

    def test_mcquitty_ignores_size(self):
        strategy = McQuittyLinkage()

        updated = strategy.update(np.array([1.0]), np.array([4.0]), 0.5, 3, 1, np.array([1]))

        assert updated[0] == pytest.approx(2.5)

    def test_ward_d2_works_on_squares(self):
        strategy = WardD2Linkage()

        assert strategy.prepare(np.array([[0.0, 3.0]])).tolist() == [[0.0, 9.0]]
        assert strategy.height(9.0) == pytest.approx(3.0)

    def test_ward_d2_merge_heights_never_decrease(self, config, distance):
        tree = HierarchicalClusteringService(config).agglomerate(distance, "ward.D2")

        assert tree.is_monotonic()


class TestLookup:
    """Tests for get_linkage_strategy()."""

    @pytest.mark.parametrize("name", sorted(LINKAGE_STRATEGIES))
    def test_canonical_names(self, name):
        assert get_linkage_strategy(name).name == name

    @pytest.mark.parametrize("alias,canonical", [
        ("ward", "ward.D2"),
        ("weighted", "mcquitty"),
        ("UPGMA", "average"),
        ("Ward.d2", "ward.D2"),
        ("AVERAGE", "average"),
    ])
    def test_aliases_and_case(self, alias, canonical):
        assert get_linkage_strategy(alias).name == canonical

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown linkage"):
            get_linkage_strategy("centroid")
