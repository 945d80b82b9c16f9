# Services module for SOTU Cluster
from .corpus_loader_service import CorpusLoaderService, LoadReport
from .preprocessing_service import PreprocessingService
from .vectorizer_service import VectorizerService
from .distance_service import DistanceService, l2_normalize
from .linkage import LinkageStrategy, get_linkage_strategy
from .hierarchical_clustering_service import HierarchicalClusteringService
from .partition_clustering_service import PartitionClusteringService
from .reporting_service import ReportingService
from .analysis_pipeline import AnalysisPipeline, AnalysisResult
from .export_service import ExportService

__all__ = [
    'CorpusLoaderService',
    'LoadReport',
    'PreprocessingService',
    'VectorizerService',
    'DistanceService',
    'l2_normalize',
    'LinkageStrategy',
    'get_linkage_strategy',
    'HierarchicalClusteringService',
    'PartitionClusteringService',
    'ReportingService',
    'AnalysisPipeline',
    'AnalysisResult',
    'ExportService',
]
