# sotu_cluster/exceptions.py
"""
Error conditions raised by the clustering pipeline.
"""


class SotuClusterError(Exception):
    """Base class for all pipeline errors."""
    pass


class MalformedDocument(SotuClusterError):
    """Raised when a transcript file lacks its two header lines or a body."""

    def __init__(self, file_name: str, reason: str):
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"Malformed document {file_name!r}: {reason}")


class EmptyCorpus(SotuClusterError):
    """Raised when no document could be loaded from the input directory."""
    pass


class EmptyVocabulary(SotuClusterError):
    """Raised when normalization leaves no usable terms to compare documents on."""
    pass


class InvalidClusterCount(SotuClusterError, ValueError):
    """Raised when a requested cluster count is outside [1, n - 1]."""

    def __init__(self, k: int, n: int):
        self.k = k
        self.n = n
        super().__init__(
            f"Cluster count k={k} is invalid for {n} documents "
            f"(expected 1 <= k <= {n - 1})"
        )
