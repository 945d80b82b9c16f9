"""SOTU Cluster - exploratory clustering of State of the Union addresses."""

from sotu_cluster.config import AppConfig, load_config
from sotu_cluster.exceptions import (
    SotuClusterError,
    MalformedDocument,
    EmptyCorpus,
    EmptyVocabulary,
    InvalidClusterCount,
)
from sotu_cluster.domain import Document, Corpus, ClusterTree, ClusterAssignment

__version__ = "1.0.0"

__all__ = [
    "AppConfig",
    "load_config",
    "SotuClusterError",
    "MalformedDocument",
    "EmptyCorpus",
    "EmptyVocabulary",
    "InvalidClusterCount",
    "Document",
    "Corpus",
    "ClusterTree",
    "ClusterAssignment",
]
