# sotu_cluster/services/vectorizer_service.py
"""
Document-term counting and TF-IDF weighting.

IDF is unsmoothed: idf(t) = log2(N / df(t)). A term present in every
document therefore gets weight 0 everywhere. Rows are L2-normalized after
weighting when normalization is enabled.
"""
from collections import Counter
from typing import Optional

import numpy as np
import pandas as pd

from ..config import AppConfig
from ..domain.document import Corpus
from ..domain.vectorizer import FittedVectorizer
from ..logging_config import get_logger
from .preprocessing_service import PreprocessingService

logger = get_logger('vectorizer_service')


class VectorizerService:
    """
    Builds the document-term count matrix and its TF-IDF weighting.

    Fitted state (vocabulary, document frequencies) is returned as an
    immutable FittedVectorizer rather than kept on the service.
    """

    def __init__(
        self,
        config: AppConfig,
        preprocessing_service: Optional[PreprocessingService] = None
    ):
        """
        Initialize the vectorizer service.

        Args:
            config: Application configuration
            preprocessing_service: Normalizer used for tokenizing documents
        """
        self.config = config
        self.preprocessing = preprocessing_service or PreprocessingService(config)

    def build_term_counts(self, corpus: Corpus) -> pd.DataFrame:
        """
        Count term occurrences per document.

        Args:
            corpus: Loaded corpus

        Returns:
            DataFrame of int64 counts, rows keyed by file name, columns are
            the alphabetically sorted vocabulary
        """
        counters = [Counter(self.preprocessing.tokenize(doc.content)) for doc in corpus]
        vocabulary = sorted(set().union(*counters)) if counters else []

        index = pd.Index(corpus.file_names, name='file_name')
        counts = np.zeros((len(counters), len(vocabulary)), dtype=np.int64)
        column_of = {term: j for j, term in enumerate(vocabulary)}
        for i, counter in enumerate(counters):
            for term, count in counter.items():
                counts[i, column_of[term]] = count

        matrix = pd.DataFrame(counts, index=index, columns=pd.Index(vocabulary, name='term'))

        logger.info(
            f"Built document-term matrix: {matrix.shape[0]} documents x "
            f"{matrix.shape[1]} terms"
        )
        if matrix.shape[1] == 0:
            logger.warning("Vocabulary is empty after normalization")
        return matrix

    def fit(self, counts: pd.DataFrame) -> FittedVectorizer:
        """
        Freeze vocabulary and document frequencies from a count matrix.

        Terms with no occurrence in any document are dropped.
        """
        presence = (counts.to_numpy() > 0).sum(axis=0)
        keep = presence > 0
        vocabulary = tuple(str(t) for t, k in zip(counts.columns, keep) if k)
        document_frequency = tuple(int(df) for df in presence[keep])

        fitted = FittedVectorizer(
            vocabulary=vocabulary,
            document_frequency=document_frequency,
            n_documents=int(counts.shape[0]),
            idf_log_base=self.config.vectorizer.idf_log_base,
        )

        ubiquitous = sum(1 for df in document_frequency if df == fitted.n_documents)
        logger.debug(
            f"Fitted vectorizer: {len(vocabulary)} terms, "
            f"{ubiquitous} present in every document (idf 0)"
        )
        return fitted

    def weight_tf_idf(
        self,
        counts: pd.DataFrame,
        normalize: Optional[bool] = None,
        fitted: Optional[FittedVectorizer] = None
    ) -> pd.DataFrame:
        """
        Weight raw counts by inverse document frequency.

        weight(d, t) = count(d, t) * log2(N / df(t))

        Args:
            counts: Document-term count matrix
            normalize: Scale rows to unit L2 length; defaults to config
            fitted: Previously fitted state; fitted on counts when omitted

        Returns:
            TF-IDF matrix with the same row keys
        """
        if normalize is None:
            normalize = self.config.vectorizer.normalize
        if fitted is None:
            fitted = self.fit(counts)
        return fitted.transform(counts, normalize=normalize)
