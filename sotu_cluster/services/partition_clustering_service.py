# sotu_cluster/services/partition_clustering_service.py
"""
Partition clustering (k-means) over unit-length document vectors, plus a
two-component PCA projection for scatterplots.
"""
from typing import Optional

import numpy as np
import pandas as pd
from sklearn.cluster import KMeans
from sklearn.decomposition import PCA

from ..config import AppConfig
from ..domain.cluster import ClusterAssignment, KMeansResult, PCAProjection
from ..exceptions import InvalidClusterCount
from ..logging_config import get_logger
from .distance_service import check_vocabulary

logger = get_logger('partition_clustering_service')

UNIT_NORM_TOLERANCE = 1e-6


class PartitionClusteringService:
    """
    Lloyd's k-means with an explicit seed.

    The seed is passed to scikit-learn as random_state on every call, so
    two runs with the same input, k, seed and iteration cap return the
    same assignment regardless of any global random state.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the partition clustering service.

        Args:
            config: Application configuration
        """
        self.config = config

    @staticmethod
    def _check_unit_rows(values: np.ndarray) -> None:
        norms = np.linalg.norm(values, axis=1)
        nonzero = norms > 0
        if not np.allclose(norms[nonzero], 1.0, atol=UNIT_NORM_TOLERANCE):
            raise ValueError(
                "k-means expects L2-normalized rows; normalize the TF-IDF matrix first"
            )

    def k_means(
        self,
        normalized: pd.DataFrame,
        k: Optional[int] = None,
        max_iterations: Optional[int] = None,
        seed: Optional[int] = None
    ) -> KMeansResult:
        """
        Cluster unit-length document vectors into k groups.

        A single Lloyd run from k distinct documents drawn at random
        (init='random', n_init=1). A run that stops by reaching
        max_iterations is reported with converged=False; that is not an
        error.

        Args:
            normalized: L2-normalized document vectors, rows keyed by file name
            k: Number of clusters, 1 <= k <= n - 1 (default from config)
            max_iterations: Iteration cap (default from config)
            seed: Random seed (default from config)

        Returns:
            KMeansResult with the final assignment reached

        Raises:
            InvalidClusterCount: If k is out of range
            EmptyVocabulary: If the vectors carry no terms
            ValueError: If rows are not unit length
        """
        k = self.config.kmeans.k if k is None else k
        max_iterations = self.config.kmeans.max_iterations if max_iterations is None else max_iterations
        seed = self.config.kmeans.seed if seed is None else seed

        n = len(normalized)
        if k < 1 or k >= n:
            raise InvalidClusterCount(k, n)
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        check_vocabulary(normalized)
        values = normalized.to_numpy(dtype=float)
        self._check_unit_rows(values)

        model = KMeans(
            n_clusters=k,
            init='random',
            n_init=1,
            max_iter=max_iterations,
            tol=0.0,
            random_state=seed,
            algorithm='lloyd',
        )
        labels = model.fit_predict(values)

        iterations = int(model.n_iter_)
        converged = iterations < max_iterations
        if not converged:
            logger.warning(
                f"k-means reached the {max_iterations}-iteration cap; "
                "returning the last assignment"
            )

        assignment = ClusterAssignment.from_raw(normalized.index, labels, method="kmeans")
        # Reorder centroids to follow the renumbered cluster ids
        order = list(dict.fromkeys(int(label) for label in labels))
        if len(order) < k:
            logger.warning(f"k-means left {k - len(order)} of {k} clusters empty")

        within_ss = float(model.inertia_)
        logger.info(
            f"k-means (k={k}, seed={seed}) finished after {iterations} iterations, "
            f"within-cluster SS {within_ss:.4f}"
        )
        return KMeansResult(
            assignment=assignment,
            centroids=model.cluster_centers_[order],
            iterations=iterations,
            converged=converged,
            within_ss=within_ss,
            seed=seed,
        )

    def project_pca(self, normalized: pd.DataFrame) -> PCAProjection:
        """
        Project documents onto their first two principal components.

        Data are centered (not scaled) before the decomposition. When fewer
        than two components exist the missing ones are reported as zero.

        Args:
            normalized: Document vectors, rows keyed by file name

        Returns:
            PCAProjection with one (pc1, pc2) pair per document
        """
        values = normalized.to_numpy(dtype=float)
        n, d = values.shape
        labels = tuple(str(label) for label in normalized.index)
        scores = np.zeros((n, 2), dtype=float)
        ratios = [0.0, 0.0]

        n_components = min(2, n - 1, d)
        if n_components >= 1:
            pca = PCA(n_components=n_components, svd_solver='full')
            scores[:, :n_components] = pca.fit_transform(values)
            ratios[:n_components] = [float(r) for r in pca.explained_variance_ratio_]
        else:
            logger.warning(f"PCA needs at least two documents and one term, got {n} x {d}")

        return PCAProjection(labels=labels, scores=scores, explained_variance_ratio=tuple(ratios))
