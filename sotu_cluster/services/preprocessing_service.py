# sotu_cluster/services/preprocessing_service.py
"""
Service for normalizing document text before term counting.
"""
from typing import Iterable, List, Optional

import pandas as pd

from ..config import AppConfig
from ..domain.document import Corpus
from ..utils.stopwords import get_stop_words
from ..utils.text_normalization import normalize_document, tokenize
from ..logging_config import get_logger

logger = get_logger('preprocessing_service')


class PreprocessingService:
    """
    Turns raw document content into normalized token streams.

    Responsibilities:
    - Lowercase, strip punctuation and digits, drop stop words
    - Tokenize normalized text with a minimum word length
    """

    def __init__(self, config: AppConfig, stop_words: Optional[Iterable[str]] = None):
        """
        Initialize the preprocessing service.

        Args:
            config: Application configuration
            stop_words: Explicit stop-word list; defaults to the configured
                vectorizer list plus config.text.extra_stop_words
        """
        self.config = config
        if stop_words is None:
            stop_words = get_stop_words(
                config.text.vectorizer_stop_words,
                config.text.extra_stop_words,
            )
        self.stop_words = frozenset(stop_words)

    def normalize(self, text: str) -> str:
        """
        Normalize a single document body.

        Args:
            text: Raw content

        Returns:
            Normalized, whitespace-collapsed text
        """
        return normalize_document(text, self.stop_words)

    def tokenize(self, text: str) -> List[str]:
        """Normalize then split into tokens of at least min_word_length characters."""
        return tokenize(self.normalize(text), self.config.text.min_word_length)

    def normalize_corpus(self, corpus: Corpus) -> pd.Series:
        """
        Normalize every document of a corpus.

        Returns:
            Series of normalized text indexed by file name, in corpus order
        """
        normalized = pd.Series(
            [self.normalize(doc.content) for doc in corpus],
            index=pd.Index(corpus.file_names, name='file_name'),
            name='normalized',
            dtype=object,
        )

        empty = [name for name, text in normalized.items() if not text]
        if empty:
            logger.warning(f"{len(empty)} documents are empty after normalization: {empty}")

        return normalized
