# parsing/food_name_gate.py
"""
MealPlan Extractor — Clean Food Name Gate
==========================================
The predicate every food name must pass before it may enter a parsed
plan or the structured JSON output, plus the display cleaner applied
right before the check.

A rejected name is never repaired. explain_rejection() returns the
first failing rule so a rejection can always be reproduced.
"""

import re
from typing import Optional

from parsing.fuzzy_match import strip_accents

# =============================================================================
# RULE TABLES
# =============================================================================
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 120
MIN_LETTER_RATIO = 0.5

# 4+ consonant runs are OCR garbage unless they hold one of these clusters
VALID_CONSONANT_CLUSTERS = re.compile(
    r"str|scr|spr|spl|chr|thr|sch|nts|ncs|dzs|gy|ly|ny|ty|sz|zs|cs|dz"
)
CONSONANT_RUN = re.compile(r"[bcdfghjklmnpqrstvwxyz]{4,}")

# Unit words that may legitimately follow a digit inside a name
GLUED_UNIT_WORDS = frozenset({
    "g", "kg", "dkg", "ml", "l", "dl", "db", "buc", "ek", "tk", "szelet",
    "szem", "gerezd", "csomag", "fej", "adag", "x", "cal", "kcal",
})

BARE_QUANTITY = re.compile(r"^\d+(?:[.,]\d+)?\s*(?:g|kg|ml|dl|db|ek|tk)$", re.IGNORECASE)
BARE_NUMBER = re.compile(r"^\d+(?:[.,]\d+)?$")


def _letter_count(text: str) -> int:
    return sum(1 for ch in text if ch.isalpha())


# =============================================================================
# PREDICATE
# =============================================================================
def explain_rejection(name: Optional[str]) -> Optional[str]:
    """
    Reason a candidate fails the clean-name gate, or None when it passes.

    Example:
        >>> explain_rejection("Görög joghurt") is None
        True
        >>> explain_rejection("3kj garbage")
        "digits glued to non-unit letters: '3kj'"
    """
    if not name or len(name) < MIN_NAME_LENGTH:
        return "too short"
    if len(name) > MAX_NAME_LENGTH:
        return "too long"

    letters = _letter_count(name)
    if letters == 0:
        return "no letters"
    if letters / len(name) < MIN_LETTER_RATIO:
        return f"letter ratio {letters / len(name):.2f} below {MIN_LETTER_RATIO}"

    folded = strip_accents(name).lower()
    for run in CONSONANT_RUN.findall(folded):
        if not VALID_CONSONANT_CLUSTERS.search(run):
            return f"invalid consonant cluster '{run}'"

    if BARE_QUANTITY.match(name.strip()):
        return "bare quantity"
    if BARE_NUMBER.match(name.strip()):
        return "bare number"

    first = name[0]
    if not (first.isalpha() or first.isdigit() or first == "("):
        return f"starts with symbol '{first}'"

    for match in re.finditer(r"\d+([a-z]+)", folded):
        if match.group(1) not in GLUED_UNIT_WORDS:
            return f"digits glued to non-unit letters: '{match.group(0)}'"

    return None


def is_clean_food_name(name: Optional[str]) -> bool:
    return explain_rejection(name) is None


# =============================================================================
# DISPLAY CLEANER
# =============================================================================
def clean_food_name(raw: str) -> str:
    """
    Display form of a candidate name: edge punctuation trimmed, empty or
    fully-wrapping parentheses removed, glued calorie number dropped,
    whitespace collapsed, first letter capitalized.

    Example:
        >>> clean_food_name("- csirkemell 520")
        'Csirkemell'
    """
    name = (raw or "").strip()
    name = re.sub(r"^[-•–—:.,;]+\s*", "", name)
    name = re.sub(r"\s*[-•–—:.,;]+$", "", name)
    name = re.sub(r"\(\s*\)", "", name).strip()

    wrapped = re.match(r"^\(([^)]+)\)$", name)
    if wrapped:
        name = wrapped.group(1).strip()

    name = re.sub(r"\s+\d{2,4}$", "", name)
    name = re.sub(r"\s+", " ", name).strip()

    if name:
        name = name[0].upper() + name[1:]
    return name


__all__ = [
    "explain_rejection",
    "is_clean_food_name",
    "clean_food_name",
    "MIN_LETTER_RATIO",
]
