"""
Text processing for the Bag-of-Words ticket analysis.

Pipeline: normalize -> tokenize -> filter stopwords -> term frequency.
Every function here is pure and accepts None, degrading to an empty result
instead of raising.
"""

import logging
import re
import unicodedata
from typing import Iterable, Mapping, Optional

from .stopwords import filter_stopwords


logger = logging.getLogger(__name__)


_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_accents(text: str) -> str:
    """Decompose text (NFD) and drop combining marks: 'impresión' -> 'impresion'."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(
        ch for ch in decomposed
        if not unicodedata.category(ch).startswith("M")
    )


def normalize(text: Optional[str]) -> str:
    """
    Normalize free text for analysis.

    Steps:
    1. Lower-case
    2. Strip diacritics
    3. Replace anything that is not [a-z0-9] or whitespace with a space
    4. Collapse whitespace and trim

    Args:
        text: Raw text (may be None).

    Returns:
        Normalized text, or an empty string for None/empty input.
    """
    if not text:
        return ""

    s = strip_accents(text.lower())
    s = _NON_ALNUM_RE.sub(" ", s)
    return _WHITESPACE_RE.sub(" ", s).strip()


def tokenize(normalized_text: Optional[str]) -> list[str]:
    """Split normalized text on runs of whitespace, keeping token order."""
    if not normalized_text:
        return []
    return normalized_text.split()


def build_term_frequency(text: Optional[str]) -> dict[str, int]:
    """
    Build the term-frequency table (bag of words) for a text.

    Keys keep the order in which each term first appears in the text.

    Args:
        text: Raw text to analyze.

    Returns:
        Mapping of term -> number of occurrences.
    """
    tf: dict[str, int] = {}

    for token in filter_stopwords(tokenize(normalize(text))):
        tf[token] = tf.get(token, 0) + 1

    logger.debug(f"Built term frequency table with {len(tf)} distinct terms")
    return tf


def render_term_frequency(tf: Optional[Mapping[str, int]]) -> str:
    """Render a term-frequency table as 'term:count, term:count'."""
    if not tf:
        return ""
    return ", ".join(f"{term}:{count}" for term, count in tf.items())


def join_terms(terms: Optional[Iterable[str]]) -> str:
    """Join terms with ', ' for display."""
    if not terms:
        return ""
    return ", ".join(terms)
