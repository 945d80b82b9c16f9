"""
SOTU Cluster - batch entry point.

Loads the transcripts (reusing the corpus snapshot when present), runs the
clustering pipeline and writes the result tables. Paths and logging come
from SOTU_* environment variables; analysis parameters from the optional
JSON config named by SOTU_CONFIG_PATH.

Usage:
    python -m sotu_cluster
"""
import logging
import sys

from sotu_cluster.config import load_config
from sotu_cluster.exceptions import SotuClusterError
from sotu_cluster.logging_config import setup_logging
from sotu_cluster.services import AnalysisPipeline, CorpusLoaderService, ExportService
from sotu_cluster.settings import get_settings
from sotu_cluster.utils.timing import Timer


def main() -> int:
    """Run the full analysis once."""
    settings = get_settings()
    logger = setup_logging(
        level=logging.getLevelName(settings.log_level),
        log_file=settings.log_file,
    )
    config = load_config(str(settings.config_path) if settings.config_path else None)

    try:
        loader = CorpusLoaderService(config)
        with Timer("Load corpus"):
            corpus = loader.load_or_build(settings.data_dir, settings.snapshot_path)
        result = AnalysisPipeline(config).run(corpus)
        ExportService(config).export(result, settings.output_dir)
    except (SotuClusterError, FileNotFoundError) as e:
        logger.error(f"FAILED: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
