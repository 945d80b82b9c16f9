# sotu_cluster/domain/cluster.py
"""
Domain models for clustering results: merge trees, assignments and the
per-level cut quality rows.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True, eq=False)
class ClusterTree:
    """
    Binary merge history produced by agglomerative clustering.

    The merge matrix uses scipy's linkage layout: row i is
    [left, right, height, size] and creates node n + i, where leaves are
    numbered 0..n-1 in corpus order.

    Attributes:
        labels: File names of the leaves
        merges: (n - 1) x 4 float array
        linkage: Name of the linkage strategy that built the tree
    """
    labels: Tuple[str, ...]
    merges: np.ndarray
    linkage: str

    def __post_init__(self):
        merges = np.array(self.merges, dtype=float, copy=True).reshape(-1, 4)
        if len(self.labels) > 0 and merges.shape[0] != len(self.labels) - 1:
            raise ValueError(
                f"Tree over {len(self.labels)} leaves needs {len(self.labels) - 1} "
                f"merges, got {merges.shape[0]}"
            )
        merges.setflags(write=False)
        object.__setattr__(self, 'merges', merges)

    @property
    def n_leaves(self) -> int:
        return len(self.labels)

    @property
    def merge_heights(self) -> np.ndarray:
        return self.merges[:, 2]

    def is_monotonic(self) -> bool:
        """True when merge heights never decrease bottom-up."""
        heights = self.merge_heights
        return bool(np.all(np.diff(heights) >= -1e-12))

    def to_frame(self) -> pd.DataFrame:
        """Merge history as a table, one row per merge step."""
        return pd.DataFrame({
            'step': np.arange(1, len(self.merges) + 1),
            'left': self.merges[:, 0].astype(int),
            'right': self.merges[:, 1].astype(int),
            'height': self.merges[:, 2],
            'size': self.merges[:, 3].astype(int),
        })


@dataclass(frozen=True)
class ClusterAssignment:
    """
    One cluster id per document.

    Ids are contiguous and start at 1, numbered by the first document (in
    corpus order) that belongs to each cluster.
    """
    labels: Tuple[str, ...]
    cluster_ids: Tuple[int, ...]
    method: str = ""

    def __post_init__(self):
        if len(self.labels) != len(self.cluster_ids):
            raise ValueError("labels and cluster_ids lengths differ")
        distinct = set(self.cluster_ids)
        if distinct and distinct != set(range(1, len(distinct) + 1)):
            raise ValueError("cluster ids must be contiguous starting at 1")

    @classmethod
    def from_raw(
        cls,
        labels: Sequence[str],
        raw_ids: Sequence,
        method: str = ""
    ) -> 'ClusterAssignment':
        """Renumber arbitrary group keys to 1..k by first appearance."""
        mapping: Dict[object, int] = {}
        ids = []
        for raw in raw_ids:
            key = raw.item() if hasattr(raw, 'item') else raw
            if key not in mapping:
                mapping[key] = len(mapping) + 1
            ids.append(mapping[key])
        return cls(tuple(labels), tuple(ids), method)

    @property
    def n_clusters(self) -> int:
        return len(set(self.cluster_ids))

    def __getitem__(self, file_name: str) -> int:
        return self.cluster_ids[self.labels.index(file_name)]

    def members(self, cluster_id: int) -> List[str]:
        return [
            label for label, cid in zip(self.labels, self.cluster_ids)
            if cid == cluster_id
        ]

    def sizes(self) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        for cid in self.cluster_ids:
            counts[cid] = counts.get(cid, 0) + 1
        return dict(sorted(counts.items()))

    def to_series(self) -> pd.Series:
        name = f"cluster_{self.method}" if self.method else "cluster"
        return pd.Series(
            self.cluster_ids,
            index=pd.Index(self.labels, name='file_name'),
            name=name,
        )


@dataclass(frozen=True)
class CutQuality:
    """
    Cohesion of one tree cut.

    mean_intra_distance is NaN when no cluster at this level has two or
    more members.
    """
    cut_level: int
    n_clusters: int
    mean_cluster_size: float
    mean_intra_distance: float


@dataclass(frozen=True, eq=False)
class KMeansResult:
    """Outcome of one k-means run."""
    assignment: ClusterAssignment
    centroids: np.ndarray
    iterations: int
    converged: bool
    within_ss: float
    seed: Optional[int] = None


@dataclass(frozen=True, eq=False)
class PCAProjection:
    """First two principal component scores per document."""
    labels: Tuple[str, ...]
    scores: np.ndarray
    explained_variance_ratio: Tuple[float, ...] = field(default=(0.0, 0.0))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {'pc1': self.scores[:, 0], 'pc2': self.scores[:, 1]},
            index=pd.Index(self.labels, name='file_name'),
        )
