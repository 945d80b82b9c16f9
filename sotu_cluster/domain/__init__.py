# Domain models for SOTU Cluster
from .document import Document, Corpus
from .vectorizer import FittedVectorizer
from .cluster import (
    ClusterTree,
    ClusterAssignment,
    CutQuality,
    KMeansResult,
    PCAProjection,
)

__all__ = [
    'Document',
    'Corpus',
    'FittedVectorizer',
    'ClusterTree',
    'ClusterAssignment',
    'CutQuality',
    'KMeansResult',
    'PCAProjection',
]
