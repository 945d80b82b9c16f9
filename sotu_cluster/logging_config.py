# sotu_cluster/logging_config.py
"""
Logging setup for the sotu_cluster package.

Console output colours the level name when stdout is a terminal; the
optional log file is always plain text.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Colours the level name of each console record."""

    RESET = "\033[0m"
    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }

    def __init__(self, *args, use_colors: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if not self.use_colors or color is None:
            return super().format(record)

        # other handlers share the record, so colour a copy
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    use_colors: bool = True
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level for every handler
        log_file: Optional path that also receives the log
        use_colors: Colour level names on a terminal

    Returns:
        The 'sotu_cluster' logger
    """
    logger = logging.getLogger('sotu_cluster')
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        ColoredFormatter(LOG_FORMAT, datefmt='%H:%M:%S', use_colors=use_colors)
    )
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for one module, under the sotu_cluster namespace."""
    return logging.getLogger(f'sotu_cluster.{name}')


def log_section(logger: logging.Logger, title: str, width: int = 72) -> None:
    """Log a title between two separator lines."""
    separator = "=" * width
    logger.info(separator)
    logger.info(f"  {title}")
    logger.info(separator)
