# sotu_cluster/domain/vectorizer.py
"""
Fitted TF-IDF state: the frozen vocabulary and its document frequencies.
"""
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class FittedVectorizer:
    """
    Vocabulary and inverse document frequencies learned from one corpus.

    Produced once by VectorizerService.fit() and never mutated, so the same
    weights are re-applied to every matrix built in a run.

    Attributes:
        vocabulary: Terms in column order (alphabetical)
        document_frequency: Number of documents containing each term
        n_documents: Size of the corpus the weights were fitted on
        idf_log_base: Base of the logarithm in idf(t) = log(N / df(t))
    """
    vocabulary: Tuple[str, ...]
    document_frequency: Tuple[int, ...]
    n_documents: int
    idf_log_base: float = 2.0

    def __post_init__(self):
        if len(self.vocabulary) != len(self.document_frequency):
            raise ValueError("vocabulary and document_frequency lengths differ")
        if any(df < 1 or df > self.n_documents for df in self.document_frequency):
            raise ValueError("document frequencies must lie in [1, n_documents]")

    @property
    def idf(self) -> np.ndarray:
        """Unsmoothed inverse document frequency per vocabulary term."""
        df = np.asarray(self.document_frequency, dtype=float)
        if df.size == 0:
            return df
        return np.log(self.n_documents / df) / np.log(self.idf_log_base)

    def idf_series(self) -> pd.Series:
        return pd.Series(self.idf, index=list(self.vocabulary), name='idf')

    def transform(self, counts: pd.DataFrame, normalize: bool = True) -> pd.DataFrame:
        """
        Weight a document-term count matrix with the fitted idf.

        Columns outside the vocabulary are dropped and missing vocabulary
        columns are filled with zero counts.

        Args:
            counts: Raw counts, rows keyed by file name
            normalize: Scale each row to unit L2 length (zero rows stay zero)

        Returns:
            TF-IDF matrix with the fitted vocabulary as columns
        """
        aligned = counts.reindex(columns=list(self.vocabulary), fill_value=0)
        weights = aligned.to_numpy(dtype=float) * self.idf

        if normalize:
            norms = np.linalg.norm(weights, axis=1, keepdims=True)
            weights = np.divide(
                weights, norms,
                out=np.zeros_like(weights),
                where=norms > 0,
            )

        return pd.DataFrame(weights, index=aligned.index, columns=aligned.columns)
