# sotu_cluster/utils/timing.py
"""
Stage timing for the analysis run.

Timer wraps a single block, timed() wraps a function, and PhaseTimer
records the split between consecutive pipeline stages.
"""
import functools
import logging
import time
from typing import Dict, Optional

from ..logging_config import get_logger

logger = get_logger('timing')


class Timer:
    """
    Logs how long a block took, or that it failed.

    Usage:
        with Timer("Load corpus"):
            corpus = loader.load_or_build(data_dir)
    """

    def __init__(self, name: str, level: int = logging.INFO):
        self.name = name
        self.level = level
        self._start: Optional[float] = None

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        seconds = time.perf_counter() - self._start
        if exc_type is not None:
            logger.error(f"{self.name} failed after {seconds:.3f}s: {exc_type.__name__}: {exc_val}")
        else:
            logger.log(self.level, f"{self.name} took {seconds:.3f}s")
        return False


def timed(name: Optional[str] = None, level: int = logging.DEBUG):
    """Decorator form of Timer, logging at DEBUG by default."""
    def decorator(func):
        label = name or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with Timer(label, level):
                return func(*args, **kwargs)

        return wrapper
    return decorator


class PhaseTimer:
    """
    Splits one run into named stages.

    Each checkpoint() closes the stage that ended just now; finish()
    logs the total and returns seconds per stage.
    """

    def __init__(self, run_name: str):
        self.run_name = run_name
        self._start = time.perf_counter()
        self._last = self._start
        self.stages: Dict[str, float] = {}

    def checkpoint(self, stage: str) -> float:
        now = time.perf_counter()
        seconds = now - self._last
        self.stages[stage] = seconds
        self._last = now
        logger.debug(f"{self.run_name}: {stage} in {seconds:.3f}s")
        return seconds

    def finish(self) -> Dict[str, float]:
        """
        Log the total run time.

        Returns:
            Mapping of stage name to seconds, plus a 'total' entry
        """
        total = time.perf_counter() - self._start
        logger.info(f"{self.run_name} finished in {total:.3f}s")
        return {**self.stages, 'total': total}
