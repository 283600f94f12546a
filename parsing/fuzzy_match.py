# parsing/fuzzy_match.py
"""
MealPlan Extractor — Fuzzy Text Matching
=========================================
Accent folding and 1-substitution keyword matching used by the
structural tokenizer and the extractors.

Pure functions, no state.
"""

import re
import unicodedata
from typing import Iterable, Optional, Tuple, TypeVar

T = TypeVar("T")

# Letters NFKD does not decompose
_EXTRA_FOLDS = str.maketrans({
    "ß": "ss", "ø": "o", "Ø": "O", "đ": "d", "Đ": "D", "ł": "l", "Ł": "L",
    "ı": "i",
})


def strip_accents(text: str) -> str:
    """Remove diacritics: 'Görög' -> 'Gorog', 'Săptămâna' -> 'Saptamana'."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text.translate(_EXTRA_FOLDS))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_for_matching(text: str) -> str:
    """Lowercase, accent-free, single-spaced form used by every detector."""
    return re.sub(r"\s+", " ", strip_accents(text).lower()).strip()


def fold_aligned(text: str) -> str:
    """
    Lowercase accent-free copy with exactly one output character per
    input character, so match offsets can be used to cut the original.
    """
    folded = []
    for ch in text:
        plain = strip_accents(ch).lower()
        folded.append(plain if len(plain) == 1 else ch.lower()[:1] or ch)
    return "".join(folded)


def compact(text: str) -> str:
    """Normalized text with all whitespace removed."""
    return re.sub(r"\s+", "", normalize_for_matching(text))


def hamming_distance(a: str, b: str) -> int:
    """Count of differing positions; strings must be the same length."""
    if len(a) != len(b):
        raise ValueError("hamming_distance needs equal-length strings")
    return sum(1 for x, y in zip(a, b) if x != y)


def fuzzy_contains(
    haystack: str,
    keyword: str,
    max_mismatches: int = 1,
    min_keyword_length: int = 5,
) -> bool:
    """
    Sliding-window search tolerant of character substitutions.

    Both arguments are expected in normalized form. Keywords shorter than
    min_keyword_length only match exactly.

    Example:
        >>> fuzzy_contains("reggeIi:", "reggeli")
        True
    """
    if not keyword or not haystack:
        return False
    if keyword in haystack:
        return True
    if len(keyword) < min_keyword_length or len(haystack) < len(keyword):
        return False

    width = len(keyword)
    for start in range(len(haystack) - width + 1):
        window = haystack[start:start + width]
        if hamming_distance(window, keyword) <= max_mismatches:
            return True
    return False


def best_fuzzy_tag(
    haystack: str,
    table: Iterable[Tuple[str, T]],
    max_mismatches: int = 1,
    min_keyword_length: int = 5,
) -> Optional[T]:
    """First tag of a (keyword, tag) table whose keyword fuzzily occurs in haystack."""
    for keyword, tag in table:
        if len(keyword) < min_keyword_length:
            continue
        if fuzzy_contains(haystack, keyword, max_mismatches, min_keyword_length):
            return tag
    return None


__all__ = [
    "strip_accents",
    "normalize_for_matching",
    "fold_aligned",
    "compact",
    "hamming_distance",
    "fuzzy_contains",
    "best_fuzzy_tag",
]
