# Utils module for SOTU Cluster
from .text_normalization import (
    normalize_whitespace,
    remove_punctuation,
    remove_digits,
    remove_stop_words,
    normalize_document,
    tokenize,
)
from .stopwords import get_stop_words, english_stop_words, extended_stop_words
from .timing import Timer, PhaseTimer, timed

__all__ = [
    'normalize_whitespace',
    'remove_punctuation',
    'remove_digits',
    'remove_stop_words',
    'normalize_document',
    'tokenize',
    'get_stop_words',
    'english_stop_words',
    'extended_stop_words',
    'Timer',
    'PhaseTimer',
    'timed',
]
