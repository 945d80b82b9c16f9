# sotu_cluster/config.py
"""
Central configuration for SOTU Cluster.
Uses dataclasses for type-safe configuration management.
"""
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional
import json


@dataclass
class CorpusConfig:
    """Configuration for reading transcript files."""
    header_line_count: int = 2
    min_line_length: int = 2  # lines of 0 or 1 characters are dropped
    year_pattern: str = r'[0-9]{4}'
    default_encoding: str = 'utf-8-sig'
    fallback_encoding: str = 'latin1'

    # Skip malformed files and report them, instead of failing the whole load
    skip_malformed: bool = True


@dataclass
class TextConfig:
    """Configuration for text normalization and tokenization."""
    vectorizer_stop_words: str = 'english'
    word_cloud_stop_words: str = 'extended'
    extra_stop_words: List[str] = field(default_factory=list)
    min_word_length: int = 3


@dataclass
class VectorizerConfig:
    """Configuration for TF-IDF weighting."""
    normalize: bool = True
    idf_log_base: float = 2.0


@dataclass
class HierarchicalConfig:
    """Configuration for agglomerative clustering."""
    linkage: str = 'ward.D2'
    compared_linkages: List[str] = field(default_factory=lambda: [
        'average', 'ward.D2', 'mcquitty'
    ])
    cut_k: int = 5

    # Cut evaluation scans all pairs at every level
    max_documents: int = 500


@dataclass
class KMeansConfig:
    """Configuration for the partition clusterer."""
    k: int = 5
    max_iterations: int = 25
    seed: int = 1300


@dataclass
class WordCloudConfig:
    """Configuration for per-cluster term frequency tables."""
    max_words: int = 50
    excluded_terms: List[str] = field(default_factory=lambda: ['applause'])


@dataclass
class ExportConfig:
    """Configuration for export settings."""
    corpus_summary_file: str = "corpus_summary.csv"
    term_counts_file: str = "document_term_matrix.csv"
    tf_idf_file: str = "tf_idf_matrix.csv"
    distance_file: str = "cosine_distance.csv"
    cut_quality_file: str = "cut_quality.csv"
    hierarchical_file: str = "hierarchical_assignments.csv"
    kmeans_file: str = "kmeans_pca.csv"
    term_table_pattern: str = "cluster_{cluster_id}_terms.csv"
    float_format: str = "%.6f"


@dataclass
class AppConfig:
    """Main application configuration combining all sub-configs."""
    corpus: CorpusConfig = field(default_factory=CorpusConfig)
    text: TextConfig = field(default_factory=TextConfig)
    vectorizer: VectorizerConfig = field(default_factory=VectorizerConfig)
    hierarchical: HierarchicalConfig = field(default_factory=HierarchicalConfig)
    kmeans: KMeansConfig = field(default_factory=KMeansConfig)
    word_cloud: WordCloudConfig = field(default_factory=WordCloudConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


def _apply_overrides(config: AppConfig, overrides: Dict[str, Any]) -> AppConfig:
    """Return a copy of config with per-section values replaced."""
    sections = {f.name for f in fields(AppConfig)}
    updates = {}
    for section, values in overrides.items():
        if section not in sections:
            raise ValueError(f"Unknown config section: {section}")
        current = getattr(config, section)
        if isinstance(values, dict):
            updates[section] = replace(current, **values)
        else:
            updates[section] = values
    return replace(config, **updates)


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Optional path to a JSON file with per-section overrides,
            e.g. {"kmeans": {"k": 4}, "hierarchical": {"linkage": "average"}}

    Returns:
        AppConfig instance with loaded or default values
    """
    config = AppConfig()
    if not config_path:
        return config

    with open(config_path, encoding='utf-8') as handle:
        overrides = json.load(handle)
    return _apply_overrides(config, overrides)
