# sotu_cluster/services/reporting_service.py
"""
Tables behind the visual reports: dendrogram leaf order, PCA scatter
coordinates and per-cluster word-cloud term frequencies.
Rendering itself happens elsewhere.
"""
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd
from scipy.cluster import hierarchy

from ..config import AppConfig
from ..domain.cluster import ClusterAssignment, ClusterTree, PCAProjection
from ..utils.stopwords import get_stop_words
from ..logging_config import get_logger

logger = get_logger('reporting_service')


class ReportingService:
    """
    Derives report-ready tables from clustering results.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the reporting service.

        Args:
            config: Application configuration
        """
        self.config = config
        self.word_cloud_stop_words = get_stop_words(
            config.text.word_cloud_stop_words,
            config.text.extra_stop_words,
        )

    def dendrogram_order(self, tree: ClusterTree) -> List[str]:
        """
        Leaf labels in the left-to-right order of the tree's dendrogram.

        Uses scipy's dendrogram layout without plotting.
        """
        if tree.n_leaves < 2:
            return list(tree.labels)
        layout = hierarchy.dendrogram(
            np.asarray(tree.merges),
            labels=list(tree.labels),
            no_plot=True,
        )
        return list(layout['ivl'])

    def assignments_frame(self, *assignments: ClusterAssignment) -> pd.DataFrame:
        """Side-by-side cluster ids, one column per assignment."""
        if not assignments:
            return pd.DataFrame()
        return pd.concat([a.to_series() for a in assignments], axis=1)

    def pca_frame(self, projection: PCAProjection, assignment: ClusterAssignment) -> pd.DataFrame:
        """Scatterplot table: file_name, pc1, pc2, clust_id."""
        df = projection.to_frame()
        df['clust_id'] = assignment.to_series().reindex(df.index).to_numpy()
        return df.reset_index()

    def _select(
        self,
        counts: pd.DataFrame,
        assignment: Optional[ClusterAssignment],
        cluster_id: Optional[int],
        invert: bool
    ) -> pd.DataFrame:
        if assignment is None or cluster_id is None:
            return counts
        in_cluster = assignment.to_series().reindex(counts.index) == cluster_id
        mask = ~in_cluster if invert else in_cluster
        return counts.loc[mask.to_numpy()]

    def _filter_terms(self, counts: pd.DataFrame, exclude: Optional[Iterable[str]]) -> pd.DataFrame:
        if exclude is None:
            exclude = self.config.word_cloud.excluded_terms
        dropped = self.word_cloud_stop_words | {term.lower() for term in exclude}
        keep = [term for term in counts.columns if term not in dropped]
        return counts[keep]

    @staticmethod
    def _rank(frequencies: pd.Series, max_words: int) -> pd.DataFrame:
        frequencies = frequencies[frequencies > 0]
        ranked = (
            frequencies.rename('frequency')
            .rename_axis('term')
            .reset_index()
            .sort_values(by=['frequency', 'term'], ascending=[False, True], kind='mergesort')
        )
        return ranked.head(max_words).reset_index(drop=True)

    def cluster_term_frequencies(
        self,
        counts: pd.DataFrame,
        assignment: Optional[ClusterAssignment] = None,
        cluster_id: Optional[int] = None,
        invert: bool = False,
        max_words: Optional[int] = None,
        exclude: Optional[Iterable[str]] = None
    ) -> pd.DataFrame:
        """
        Most frequent terms across a cluster's documents.

        Args:
            counts: Document-term count matrix
            assignment: Cluster assignment; all documents when omitted
            cluster_id: Cluster to select
            invert: Select every document outside the cluster instead
            max_words: Number of terms to keep (default from config)
            exclude: Extra terms to drop (default config excluded_terms)

        Returns:
            DataFrame of term, frequency (summed counts), most frequent first
        """
        max_words = self.config.word_cloud.max_words if max_words is None else max_words
        selected = self._filter_terms(self._select(counts, assignment, cluster_id, invert), exclude)
        return self._rank(selected.sum(axis=0), max_words)

    def commonality_terms(
        self,
        counts: pd.DataFrame,
        assignment: Optional[ClusterAssignment] = None,
        cluster_id: Optional[int] = None,
        invert: bool = False,
        max_words: Optional[int] = None,
        exclude: Optional[Iterable[str]] = None
    ) -> pd.DataFrame:
        """
        Terms shared by every selected document.

        A term's weight is its smallest count over the selected documents,
        so only terms used in all of them are kept.
        """
        max_words = self.config.word_cloud.max_words if max_words is None else max_words
        selected = self._filter_terms(self._select(counts, assignment, cluster_id, invert), exclude)
        if selected.empty:
            return self._rank(pd.Series(dtype='int64'), max_words)
        return self._rank(selected.min(axis=0), max_words)
