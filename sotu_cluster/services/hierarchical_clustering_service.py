# sotu_cluster/services/hierarchical_clustering_service.py
"""
Agglomerative clustering over a distance matrix, tree cuts, and the
cohesion of every possible cut.
"""
from typing import Dict, Iterable, Iterator, List, Optional, Set, Union
import heapq

import numpy as np
import pandas as pd

from ..config import AppConfig
from ..domain.cluster import ClusterAssignment, ClusterTree, CutQuality
from ..exceptions import InvalidClusterCount
from ..logging_config import get_logger
from ..utils.timing import timed
from .linkage import LinkageStrategy, get_linkage_strategy

logger = get_logger('hierarchical_clustering_service')


class HierarchicalClusteringService:
    """
    Builds and cuts agglomerative cluster trees.

    The agglomeration is the textbook O(n^3) algorithm: start with every
    document as a singleton, repeatedly merge the closest pair of clusters
    under the chosen linkage, and update distances with the strategy's
    Lance-Williams rule. Corpora here have tens of documents, so the
    simple form is preferred over nearest-neighbour-chain variants.
    scipy's linkage() serves only as the reference in tests: it takes no
    pluggable update strategy and has no ward.D on raw distances.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the hierarchical clustering service.

        Args:
            config: Application configuration
        """
        self.config = config

    def _resolve(self, linkage: Union[str, LinkageStrategy, None]) -> LinkageStrategy:
        if linkage is None:
            linkage = self.config.hierarchical.linkage
        if isinstance(linkage, str):
            return get_linkage_strategy(linkage)
        return linkage

    @staticmethod
    def _check_distance_matrix(distance: pd.DataFrame) -> np.ndarray:
        values = distance.to_numpy(dtype=float)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise ValueError(f"Distance matrix must be square, got shape {values.shape}")
        if list(distance.index) != list(distance.columns):
            raise ValueError("Distance matrix rows and columns must have the same labels")
        if not np.allclose(values, values.T):
            raise ValueError("Distance matrix must be symmetric")
        if np.isnan(values).any():
            raise ValueError("Distance matrix contains NaN")
        return values

    @timed("Agglomerate")
    def agglomerate(
        self,
        distance: pd.DataFrame,
        linkage: Union[str, LinkageStrategy, None] = None
    ) -> ClusterTree:
        """
        Build the merge tree for a distance matrix.

        Ties for the closest pair are broken by the lowest (row, column)
        position in corpus order.

        Args:
            distance: Symmetric document x document distances
            linkage: Strategy or strategy name; defaults to config

        Returns:
            ClusterTree with exactly n - 1 merges
        """
        strategy = self._resolve(linkage)
        values = self._check_distance_matrix(distance)
        labels = tuple(str(label) for label in distance.index)
        n = len(labels)

        merges = np.zeros((max(n - 1, 0), 4), dtype=float)
        if n < 2:
            return ClusterTree(labels=labels, merges=merges, linkage=strategy.name)

        work = strategy.prepare(values)
        active = np.ones(n, dtype=bool)
        node_id = np.arange(n)
        size = np.ones(n, dtype=float)
        upper = np.triu(np.ones((n, n), dtype=bool), k=1)

        for step in range(n - 1):
            candidates = upper & active[:, None] & active[None, :]
            masked = np.where(candidates, work, np.inf)
            i, j = divmod(int(np.argmin(masked)), n)
            d_ij = work[i, j]

            others = active.copy()
            others[[i, j]] = False
            ks = np.flatnonzero(others)
            if ks.size:
                updated = strategy.update(work[ks, i], work[ks, j], d_ij, size[i], size[j], size[ks])
                work[ks, i] = updated
                work[i, ks] = updated

            left, right = sorted((int(node_id[i]), int(node_id[j])))
            merges[step] = (left, right, strategy.height(d_ij), size[i] + size[j])

            # The merged cluster lives on in slot i
            size[i] += size[j]
            node_id[i] = n + step
            active[j] = False

        tree = ClusterTree(labels=labels, merges=merges, linkage=strategy.name)
        if not tree.is_monotonic():
            logger.warning(f"Linkage {strategy.name} produced decreasing merge heights")
        logger.info(f"Agglomerated {n} documents with {strategy.name} linkage")
        return tree

    def linkage_comparison(
        self,
        distance: pd.DataFrame,
        linkages: Optional[Iterable[str]] = None
    ) -> Dict[str, ClusterTree]:
        """Build one tree per linkage name, for side-by-side dendrograms."""
        if linkages is None:
            linkages = self.config.hierarchical.compared_linkages
        return {name: self.agglomerate(distance, name) for name in linkages}

    @staticmethod
    def _undone_merges(tree: ClusterTree, count: int) -> Set[int]:
        """
        Pick the merge steps to undo for a cut, top of the tree first.

        A merge becomes available once its parent has been undone. The
        highest available merge goes next; among equal heights the one
        formed first is undone first.
        """
        n = tree.n_leaves
        undone: Set[int] = set()
        if count <= 0:
            return undone

        root = n - 2
        available = [(-tree.merges[root, 2], root)]
        while available and len(undone) < count:
            _, step = heapq.heappop(available)
            undone.add(step)
            for child in tree.merges[step, :2]:
                child = int(child)
                if child >= n:
                    heapq.heappush(available, (-tree.merges[child - n, 2], child - n))
        return undone

    def _cut_raw(self, tree: ClusterTree, k: int) -> List[int]:
        """Root node of every leaf once n - k merges have been undone."""
        n = tree.n_leaves
        undone = self._undone_merges(tree, k - 1)
        members: Dict[int, List[int]] = {leaf: [leaf] for leaf in range(n)}
        for step in range(n - 1):
            if step in undone:
                continue
            left, right = int(tree.merges[step, 0]), int(tree.merges[step, 1])
            members[n + step] = members.pop(left) + members.pop(right)

        root_of = [0] * n
        for root, leaves in members.items():
            for leaf in leaves:
                root_of[leaf] = root
        return root_of

    def cut_tree(self, tree: ClusterTree, k: int) -> ClusterAssignment:
        """
        Cut a tree into exactly k clusters.

        The k - 1 highest merges are undone, a parent always before its
        children. Among merges at equal height the first formed is the
        first separated.

        Args:
            tree: Tree from agglomerate()
            k: Number of clusters, 1 <= k <= n - 1

        Returns:
            ClusterAssignment with ids 1..k numbered by first appearance

        Raises:
            InvalidClusterCount: If k is out of range
        """
        n = tree.n_leaves
        if k < 1 or k >= n:
            raise InvalidClusterCount(k, n)
        return ClusterAssignment.from_raw(
            tree.labels,
            self._cut_raw(tree, k),
            method=f"hclust_{tree.linkage}",
        )

    @staticmethod
    def _mean_intra_distance(values: np.ndarray, raw_ids: List[int]) -> float:
        groups: Dict[int, List[int]] = {}
        for position, raw in enumerate(raw_ids):
            groups.setdefault(raw, []).append(position)

        cluster_means = []
        for positions in groups.values():
            m = len(positions)
            if m < 2:
                continue
            block = values[np.ix_(positions, positions)]
            # diagonal is zero, so the block sum covers distinct pairs only
            cluster_means.append(block.sum() / (m * (m - 1)))

        return float(np.mean(cluster_means)) if cluster_means else float('nan')

    def evaluate_cuts(self, tree: ClusterTree, distance: pd.DataFrame) -> Iterator[CutQuality]:
        """
        Lazily evaluate cohesion at every cut level.

        Yields levels 1..n-1 (each via cut_tree) and then level n, where
        every document is its own cluster. For each level:
        mean_cluster_size = n / clusters, and mean_intra_distance is the
        mean, over clusters with at least two members, of the mean
        distance between distinct members (NaN if no such cluster).

        Cost is O(n) levels x O(n^2) pairs; suited to small corpora only.
        """
        n = tree.n_leaves
        if n > self.config.hierarchical.max_documents:
            logger.warning(
                f"Evaluating {n} cut levels scans O(n^3) pairs; "
                f"expected at most {self.config.hierarchical.max_documents} documents"
            )

        labels = list(tree.labels)
        values = distance.loc[labels, labels].to_numpy(dtype=float)

        for level in range(1, n):
            assignment = self.cut_tree(tree, level)
            yield CutQuality(
                cut_level=level,
                n_clusters=assignment.n_clusters,
                mean_cluster_size=n / assignment.n_clusters,
                mean_intra_distance=self._mean_intra_distance(values, list(assignment.cluster_ids)),
            )

        if n >= 1:
            yield CutQuality(
                cut_level=n,
                n_clusters=n,
                mean_cluster_size=1.0,
                mean_intra_distance=float('nan'),
            )

    def cut_quality_table(self, tree: ClusterTree, distance: pd.DataFrame) -> pd.DataFrame:
        """Materialize evaluate_cuts() as a DataFrame, one row per level."""
        rows = [
            {
                'cut_level': q.cut_level,
                'n_clusters': q.n_clusters,
                'mean_cluster_size': q.mean_cluster_size,
                'mean_intra_distance': q.mean_intra_distance,
            }
            for q in self.evaluate_cuts(tree, distance)
        ]
        return pd.DataFrame(
            rows,
            columns=['cut_level', 'n_clusters', 'mean_cluster_size', 'mean_intra_distance'],
        )

    @staticmethod
    def elbow_cut_level(table: pd.DataFrame) -> Optional[int]:
        """
        Pick the knee of the cohesion curve.

        Uses the level whose point lies furthest from the straight line
        between the first and last defined points of
        (cut_level, mean_intra_distance).

        Returns:
            Cut level, or None when fewer than three levels are defined
        """
        defined = table.dropna(subset=['mean_intra_distance'])
        if len(defined) < 3:
            return None

        x = defined['cut_level'].to_numpy(dtype=float)
        y = defined['mean_intra_distance'].to_numpy(dtype=float)
        x_span = x[-1] - x[0]
        y_span = y[-1] - y[0]
        if x_span == 0 or y_span == 0:
            return None

        xn = (x - x[0]) / x_span
        yn = (y - y[0]) / y_span
        gap = np.abs(yn - xn)
        return int(x[int(np.argmax(gap))])
