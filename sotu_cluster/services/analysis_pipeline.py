# sotu_cluster/services/analysis_pipeline.py
"""
Analysis pipeline coordinator.

Runs the fixed sequence of stages over a loaded corpus:
normalize -> count -> weight -> distance -> hierarchical trees -> cut
evaluation -> k-means -> PCA -> word-cloud term tables.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

import pandas as pd

from ..config import AppConfig
from ..domain.cluster import ClusterAssignment, ClusterTree, KMeansResult, PCAProjection
from ..domain.document import Corpus
from ..domain.vectorizer import FittedVectorizer
from ..logging_config import get_logger, log_section
from ..utils.timing import PhaseTimer
from .distance_service import DistanceService, l2_normalize
from .hierarchical_clustering_service import HierarchicalClusteringService
from .partition_clustering_service import PartitionClusteringService
from .preprocessing_service import PreprocessingService
from .reporting_service import ReportingService
from .vectorizer_service import VectorizerService

logger = get_logger('analysis_pipeline')


@dataclass
class AnalysisResult:
    """Every intermediate and final artifact of one pipeline run."""
    corpus: Corpus
    normalized_text: pd.Series
    term_counts: pd.DataFrame
    vectorizer: FittedVectorizer
    tf_idf: pd.DataFrame
    distance: pd.DataFrame
    trees: Dict[str, ClusterTree]
    tree: ClusterTree
    hierarchical_assignment: ClusterAssignment
    cut_quality: pd.DataFrame
    elbow_cut_level: Optional[int]
    kmeans: KMeansResult
    pca: PCAProjection
    dendrogram_orders: Dict[str, list] = field(default_factory=dict)
    term_tables: Dict[int, pd.DataFrame] = field(default_factory=dict)
    timing: Dict[str, float] = field(default_factory=dict)


class AnalysisPipeline:
    """
    Coordinates the clustering services for one corpus.

    Example usage:
        pipeline = AnalysisPipeline(load_config())
        result = pipeline.run(corpus)
        ExportService(config).export(result, "output/")
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the pipeline and its services.

        Args:
            config: Application configuration
        """
        self.config = config
        self.preprocessing = PreprocessingService(config)
        self.vectorizer = VectorizerService(config, self.preprocessing)
        self.distance = DistanceService()
        self.hierarchical = HierarchicalClusteringService(config)
        self.partition = PartitionClusteringService(config)
        self.reporting = ReportingService(config)

    def run(self, corpus: Corpus) -> AnalysisResult:
        """
        Run every stage over the corpus.

        Args:
            corpus: Loaded corpus

        Returns:
            AnalysisResult with all matrices, trees and assignments

        Raises:
            EmptyVocabulary: If normalization leaves nothing to compare
            InvalidClusterCount: If a configured k does not fit the corpus
        """
        log_section(logger, f"Clustering {len(corpus)} documents")
        timer = PhaseTimer("Analysis pipeline")

        normalized_text = self.preprocessing.normalize_corpus(corpus)
        term_counts = self.vectorizer.build_term_counts(corpus)
        fitted = self.vectorizer.fit(term_counts)
        tf_idf = self.vectorizer.weight_tf_idf(term_counts, fitted=fitted)
        timer.checkpoint("Vectorize")

        distance = self.distance.cosine_distance(tf_idf)
        timer.checkpoint("Cosine distance")

        hconf = self.config.hierarchical
        trees = self.hierarchical.linkage_comparison(distance)
        tree = trees.get(hconf.linkage) or self.hierarchical.agglomerate(distance, hconf.linkage)
        trees[tree.linkage] = tree
        hierarchical_assignment = self.hierarchical.cut_tree(tree, hconf.cut_k)
        cut_quality = self.hierarchical.cut_quality_table(tree, distance)
        elbow = self.hierarchical.elbow_cut_level(cut_quality)
        dendrogram_orders = {
            name: self.reporting.dendrogram_order(t) for name, t in trees.items()
        }
        timer.checkpoint("Hierarchical clustering")

        unit_vectors = l2_normalize(tf_idf)
        kmeans = self.partition.k_means(unit_vectors)
        pca = self.partition.project_pca(unit_vectors)
        timer.checkpoint("k-means and PCA")

        term_tables = {
            cluster_id: self.reporting.commonality_terms(
                term_counts, kmeans.assignment, cluster_id
            )
            for cluster_id in sorted(kmeans.assignment.sizes())
        }
        timer.checkpoint("Term tables")

        logger.info(
            f"Hierarchical ({tree.linkage}, k={hconf.cut_k}) sizes: "
            f"{hierarchical_assignment.sizes()}; k-means sizes: {kmeans.assignment.sizes()}"
        )
        if elbow is not None:
            logger.info(f"Elbow of the cut-quality curve at level {elbow}")

        return AnalysisResult(
            corpus=corpus,
            normalized_text=normalized_text,
            term_counts=term_counts,
            vectorizer=fitted,
            tf_idf=tf_idf,
            distance=distance,
            trees=trees,
            tree=tree,
            hierarchical_assignment=hierarchical_assignment,
            cut_quality=cut_quality,
            elbow_cut_level=elbow,
            kmeans=kmeans,
            pca=pca,
            dendrogram_orders=dendrogram_orders,
            term_tables=term_tables,
            timing=timer.finish(),
        )
