"""
Unit tests for ReportingService.

Tests dendrogram leaf order, scatter tables and word-cloud term tables.
"""

import numpy as np
import pandas as pd
import pytest

from sotu_cluster.domain.cluster import ClusterAssignment, ClusterTree, PCAProjection
from sotu_cluster.services.reporting_service import ReportingService


@pytest.fixture
def reporting(config):
    return ReportingService(config)


@pytest.fixture
def counts():
    """'also' is an extended stop word and 'applause' is excluded by default."""
    return pd.DataFrame(
        {
            "also": [3, 1, 0],
            "applause": [5, 2, 1],
            "economy": [2, 1, 0],
            "jobs": [1, 1, 0],
            "troops": [0, 0, 4],
        },
        index=pd.Index(["a.txt", "b.txt", "c.txt"], name="file_name"),
    )


@pytest.fixture
def assignment():
    return ClusterAssignment(("a.txt", "b.txt", "c.txt"), (1, 1, 2), method="kmeans")


def as_pairs(table):
    return list(zip(table["term"], table["frequency"]))


class TestTermTables:
    """Tests for per-cluster term frequencies."""

    def test_cluster_frequencies(self, reporting, counts, assignment):
        table = reporting.cluster_term_frequencies(counts, assignment, 1)

        assert as_pairs(table) == [("economy", 3), ("jobs", 2)]
        assert list(table.columns) == ["term", "frequency"]

    def test_inverted_selection(self, reporting, counts, assignment):
        table = reporting.cluster_term_frequencies(counts, assignment, 1, invert=True)

        assert as_pairs(table) == [("troops", 4)]

    def test_whole_corpus_without_assignment(self, reporting, counts):
        table = reporting.cluster_term_frequencies(counts)

        assert as_pairs(table) == [("troops", 4), ("economy", 3), ("jobs", 2)]

    def test_max_words(self, reporting, counts):
        table = reporting.cluster_term_frequencies(counts, max_words=1)

        assert as_pairs(table) == [("troops", 4)]

    def test_explicit_exclusions_replace_default(self, reporting, counts):
        table = reporting.cluster_term_frequencies(counts, exclude=[])

        assert table["term"].iloc[0] == "applause"
        assert "also" not in set(table["term"])

    def test_commonality_uses_smallest_count(self, reporting, counts, assignment):
        """Ties are ordered alphabetically."""
        table = reporting.commonality_terms(counts, assignment, 1)

        assert as_pairs(table) == [("economy", 1), ("jobs", 1)]

    def test_commonality_drops_terms_missing_from_any_document(self, reporting, counts):
        table = reporting.commonality_terms(counts)

        assert table.empty


class TestLayoutTables:
    """Tests for dendrogram order and scatter tables."""

    def test_dendrogram_order_is_permutation(self, reporting):
        merges = [[0, 1, 0.2, 2], [2, 3, 0.2, 2], [4, 5, 1.0, 4]]
        tree = ClusterTree(("A", "B", "C", "D"), np.array(merges), "average")

        order = reporting.dendrogram_order(tree)

        assert sorted(order) == ["A", "B", "C", "D"]
        assert abs(order.index("A") - order.index("B")) == 1
        assert abs(order.index("C") - order.index("D")) == 1

    def test_dendrogram_order_single_leaf(self, reporting):
        tree = ClusterTree(("only.txt",), np.zeros((0, 4)), "average")

        assert reporting.dendrogram_order(tree) == ["only.txt"]

    def test_pca_frame(self, reporting, assignment):
        projection = PCAProjection(
            labels=("a.txt", "b.txt", "c.txt"),
            scores=np.array([[0.1, 0.2], [0.3, 0.4], [-0.5, 0.0]]),
        )

        frame = reporting.pca_frame(projection, assignment)

        assert list(frame.columns) == ["file_name", "pc1", "pc2", "clust_id"]
        assert frame["clust_id"].tolist() == [1, 1, 2]
        assert frame.loc[2, "pc1"] == pytest.approx(-0.5)

    def test_assignments_frame(self, reporting, assignment):
        other = ClusterAssignment(("a.txt", "b.txt", "c.txt"), (1, 2, 2), method="hclust_average")

        frame = reporting.assignments_frame(other, assignment)

        assert list(frame.columns) == ["cluster_hclust_average", "cluster_kmeans"]
        assert frame.loc["b.txt"].tolist() == [2, 1]
