# sotu_cluster/services/export_service.py
"""
Service for exporting analysis results as CSV tables keyed by file name.
"""
from pathlib import Path
from typing import Dict, Union

import pandas as pd

from ..config import AppConfig
from ..logging_config import get_logger
from .analysis_pipeline import AnalysisResult
from .corpus_loader_service import CorpusLoaderService
from .reporting_service import ReportingService

logger = get_logger('export_service')


class ExportService:
    """
    Writes pipeline outputs for the external plotting step.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the export service.

        Args:
            config: Application configuration
        """
        self.config = config
        self.reporting = ReportingService(config)

    def build_tables(self, result: AnalysisResult) -> Dict[str, pd.DataFrame]:
        """
        Assemble every output table.

        Returns:
            Mapping of output file name to DataFrame
        """
        export = self.config.export
        loader = CorpusLoaderService(self.config)

        hierarchical = self.reporting.assignments_frame(
            result.hierarchical_assignment,
            result.kmeans.assignment,
        )
        order = result.dendrogram_orders.get(result.tree.linkage, list(result.tree.labels))
        hierarchical['dendrogram_position'] = pd.Series(
            range(1, len(order) + 1), index=order
        ).reindex(hierarchical.index).to_numpy()

        tables = {
            export.corpus_summary_file: loader.content_length_summary(result.corpus),
            export.term_counts_file: result.term_counts,
            export.tf_idf_file: result.tf_idf,
            export.distance_file: result.distance,
            export.cut_quality_file: result.cut_quality,
            export.hierarchical_file: hierarchical,
            export.kmeans_file: self.reporting.pca_frame(result.pca, result.kmeans.assignment),
        }
        for cluster_id, table in result.term_tables.items():
            tables[export.term_table_pattern.format(cluster_id=cluster_id)] = table
        return tables

    def export(self, result: AnalysisResult, output_dir: Union[str, Path]) -> Dict[str, Path]:
        """
        Write all tables as CSV files.

        Matrices keep their file-name index; summary tables are written
        without an index.

        Args:
            result: Pipeline output
            output_dir: Target directory (created if missing)

        Returns:
            Mapping of output file name to written path
        """
        target = Path(output_dir)
        target.mkdir(parents=True, exist_ok=True)

        written: Dict[str, Path] = {}
        for file_name, table in self.build_tables(result).items():
            path = target / file_name
            keep_index = table.index.name == 'file_name'
            table.to_csv(path, index=keep_index, float_format=self.config.export.float_format)
            written[file_name] = path
            logger.debug(f"Wrote {path} ({len(table)} rows)")

        logger.info(f"Exported {len(written)} tables to {target}")
        return written
