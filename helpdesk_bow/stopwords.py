"""
Spanish stopword set used by the Bag-of-Words analysis.

Entries are already lower-cased and accent-free, so they can be compared
verbatim against normalized tokens.
"""

from typing import Iterable, Optional


STOPWORDS: frozenset[str] = frozenset({
    "a", "al", "algo", "algunas", "algunos", "ante", "antes", "como", "con", "contra",
    "cual", "cuando", "de", "del", "desde", "donde", "el", "ella", "ellas", "ellos",
    "en", "entre", "era", "es", "esta", "estaba", "estan", "estoy", "etc", "ha", "han",
    "hasta", "la", "las", "le", "les", "lo", "los", "me", "mi", "mis", "muy", "no",
    "nos", "o", "os", "para", "pero", "por", "que", "si", "sin", "sobre", "su", "sus",
    "te", "tu", "tus", "un", "una", "unas", "unos", "y", "ya",
})


def is_stopword(token: Optional[str]) -> bool:
    """Check if a normalized token is a stopword (empty tokens never are)."""
    if not token:
        return False
    return token in STOPWORDS


def filter_stopwords(tokens: Optional[Iterable[str]]) -> list[str]:
    """
    Remove stopwords from a token sequence.

    Relative order and duplicates are preserved, so repeated meaningful
    words still count multiple times.

    Args:
        tokens: Normalized tokens (None is treated as empty).

    Returns:
        List of tokens that are not stopwords.
    """
    if tokens is None:
        return []
    return [token for token in tokens if not is_stopword(token)]
