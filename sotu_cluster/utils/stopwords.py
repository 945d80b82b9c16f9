# sotu_cluster/utils/stopwords.py
"""
Named stop-word lists.

'english' is NLTK's English list, used when vectorizing. 'extended' adds
scikit-learn's English stop words and filters the term tables behind word
clouds, where filler words crowd out content.
"""
from functools import lru_cache
from typing import FrozenSet, Iterable

import nltk
from nltk.corpus import stopwords
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from ..logging_config import get_logger

logger = get_logger('stopwords')


def _ensure_nltk_stopwords() -> None:
    """Download the NLTK stop-word corpus on first use if it is missing."""
    try:
        nltk.data.find('corpora/stopwords')
    except LookupError:
        logger.info("Downloading NLTK stopwords corpus")
        nltk.download('stopwords', quiet=True, raise_on_error=True)


@lru_cache(maxsize=None)
def english_stop_words() -> FrozenSet[str]:
    _ensure_nltk_stopwords()
    return frozenset(stopwords.words('english'))


@lru_cache(maxsize=None)
def extended_stop_words() -> FrozenSet[str]:
    return english_stop_words() | frozenset(ENGLISH_STOP_WORDS)


STOP_WORD_LISTS = {
    'none': frozenset,
    'english': english_stop_words,
    'extended': extended_stop_words,
}


def get_stop_words(name: str, extra: Iterable[str] = ()) -> FrozenSet[str]:
    """
    Resolve a named stop-word list, optionally adding extra words.

    Args:
        name: One of 'none', 'english', 'extended'
        extra: Additional words (lowercased before adding)

    Returns:
        Frozen set of stop words

    Raises:
        ValueError: If the name is unknown
    """
    try:
        loader = STOP_WORD_LISTS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown stop-word list {name!r}; "
            f"expected one of {sorted(STOP_WORD_LISTS)}"
        ) from None
    base = loader()
    extra_words = {word.lower() for word in extra if word}
    return base | extra_words if extra_words else base
