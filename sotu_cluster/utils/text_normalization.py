# sotu_cluster/utils/text_normalization.py
"""
Text normalization utilities for building comparable term streams.
"""
import re
from typing import Iterable, List, Optional


_PUNCTUATION = re.compile(r'[^\w\s]|_')
_DIGITS = re.compile(r'\d')


def normalize_whitespace(text: str) -> str:
    """
    Normalize all whitespace to single spaces.

    Args:
        text: Input text

    Returns:
        Text with normalized whitespace
    """
    if not text:
        return ""
    return " ".join(text.split())


def remove_punctuation(text: str) -> str:
    """
    Delete punctuation characters (they are not replaced by spaces).

    "don't" becomes "dont" and "well-being" becomes "wellbeing".

    Args:
        text: Input text

    Returns:
        Text without punctuation
    """
    if not text:
        return ""
    return _PUNCTUATION.sub('', text)


def remove_digits(text: str) -> str:
    """Delete every digit character."""
    if not text:
        return ""
    return _DIGITS.sub('', text)


def remove_stop_words(text: str, stop_words: Optional[Iterable[str]]) -> str:
    """
    Drop whitespace-separated tokens found in stop_words, keeping order.

    Args:
        text: Lowercased input text
        stop_words: Words to drop (compared exactly)

    Returns:
        Remaining tokens joined by single spaces
    """
    if not text:
        return ""
    if not stop_words:
        return normalize_whitespace(text)
    stop_set = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    return " ".join(token for token in text.split() if token not in stop_set)


def normalize_document(text: str, stop_words: Optional[Iterable[str]] = None) -> str:
    """
    Normalize a document body for term counting.

    Steps, in order: lowercase, remove punctuation, remove digits, remove
    stop words, collapse whitespace. The same input and stop-word list
    always give the same output.

    Args:
        text: Raw document content
        stop_words: Optional stop-word list

    Returns:
        Normalized text with tokens in their original relative order
    """
    if not text:
        return ""

    text = text.lower()
    text = remove_punctuation(text)
    text = remove_digits(text)
    text = remove_stop_words(text, stop_words)
    return normalize_whitespace(text)


def tokenize(text: str, min_word_length: int = 1) -> List[str]:
    """
    Split normalized text into tokens of at least min_word_length characters.

    Args:
        text: Normalized text
        min_word_length: Shortest token kept

    Returns:
        List of tokens
    """
    if not text:
        return []
    return [token for token in text.split() if len(token) >= min_word_length]
