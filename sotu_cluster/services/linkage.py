# sotu_cluster/services/linkage.py
"""
Linkage strategies for agglomerative clustering.
Each strategy is a Lance-Williams update rule plus optional input/height
transforms, so the clusterer never hardcodes a criterion.
"""
from typing import Dict, Protocol, Type

import numpy as np


class LinkageStrategy(Protocol):
    """
    Protocol defining a linkage criterion.

    update() returns the distance from cluster k to the union of clusters
    i and j, given the pre-merge distances and cluster sizes.
    """

    name: str

    def prepare(self, distances: np.ndarray) -> np.ndarray:
        """Map input dissimilarities to the space the update rule works in."""
        ...

    def update(
        self,
        d_ki: np.ndarray,
        d_kj: np.ndarray,
        d_ij: float,
        n_i: int,
        n_j: int,
        n_k: np.ndarray
    ) -> np.ndarray:
        ...

    def height(self, value: float) -> float:
        """Map an internal merge distance back to a reported height."""
        ...


class _BaseLinkage:
    """Identity transforms shared by most strategies."""

    name = ""

    def prepare(self, distances: np.ndarray) -> np.ndarray:
        return distances.copy()

    def height(self, value: float) -> float:
        return float(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class SingleLinkage(_BaseLinkage):
    """Nearest neighbour: minimum distance between members."""

    name = "single"

    def update(self, d_ki, d_kj, d_ij, n_i, n_j, n_k):
        return np.minimum(d_ki, d_kj)


class CompleteLinkage(_BaseLinkage):
    """Furthest neighbour: maximum distance between members."""

    name = "complete"

    def update(self, d_ki, d_kj, d_ij, n_i, n_j, n_k):
        return np.maximum(d_ki, d_kj)


class AverageLinkage(_BaseLinkage):
    """UPGMA: size-weighted mean of member distances."""

    name = "average"

    def update(self, d_ki, d_kj, d_ij, n_i, n_j, n_k):
        return (n_i * d_ki + n_j * d_kj) / (n_i + n_j)


class McQuittyLinkage(_BaseLinkage):
    """WPGMA: unweighted mean of the two merged clusters' distances."""

    name = "mcquitty"

    def update(self, d_ki, d_kj, d_ij, n_i, n_j, n_k):
        return (d_ki + d_kj) / 2.0


class WardLinkage(_BaseLinkage):
    """
    Minimum-variance criterion applied to the input dissimilarities as given.
    """

    name = "ward.D"

    def update(self, d_ki, d_kj, d_ij, n_i, n_j, n_k):
        total = n_i + n_j + n_k
        return ((n_i + n_k) * d_ki + (n_j + n_k) * d_kj - n_k * d_ij) / total


class WardD2Linkage(WardLinkage):
    """
    Minimum-variance criterion on squared dissimilarities.

    Merge heights are reported on the original scale (square root), and
    are non-decreasing for any input.
    """

    name = "ward.D2"

    def prepare(self, distances: np.ndarray) -> np.ndarray:
        return np.square(distances)

    def height(self, value: float) -> float:
        return float(np.sqrt(max(value, 0.0)))


LINKAGE_STRATEGIES: Dict[str, Type[_BaseLinkage]] = {
    cls.name: cls
    for cls in (
        SingleLinkage,
        CompleteLinkage,
        AverageLinkage,
        McQuittyLinkage,
        WardLinkage,
        WardD2Linkage,
    )
}

# Alternative names used by other clustering libraries
LINKAGE_ALIASES = {
    'ward': 'ward.D2',
    'weighted': 'mcquitty',
    'wpgma': 'mcquitty',
    'upgma': 'average',
}


def get_linkage_strategy(name: str) -> LinkageStrategy:
    """
    Look up a linkage strategy by name.

    Args:
        name: Strategy name (e.g. 'ward.D2', 'average', 'mcquitty') or alias

    Returns:
        A new strategy instance

    Raises:
        ValueError: If the name is unknown
    """
    key = LINKAGE_ALIASES.get(name.lower(), name)
    if key not in LINKAGE_STRATEGIES:
        # ward.D / ward.D2 are case sensitive in their canonical names
        for canonical in LINKAGE_STRATEGIES:
            if canonical.lower() == key.lower():
                key = canonical
                break
        else:
            raise ValueError(
                f"Unknown linkage {name!r}; expected one of "
                f"{sorted(LINKAGE_STRATEGIES)}"
            )
    return LINKAGE_STRATEGIES[key]()
