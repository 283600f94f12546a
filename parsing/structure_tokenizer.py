# parsing/structure_tokenizer.py
"""
MealPlan Extractor — Structural Tokenizer
==========================================
Trilingual (HU / RO / EN) detection of week, day and meal-type markers,
line classification, and the pre-split transform that restores line
breaks lost by PDF extraction.

All keyword tables are immutable (keyword, tag) tuples. Adding a language
means adding rows, not branches.
"""

import re
from typing import List, Optional, Tuple

from parsing.fuzzy_match import (
    best_fuzzy_tag,
    compact,
    fold_aligned,
    normalize_for_matching,
)
from parsing.schemas import LineClassification, LineTag, MealType

# =============================================================================
# KEYWORD TABLES (accent-free, lowercase)
# =============================================================================
MAX_WEEK = 12

WEEK_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\bsapt(?:amana|\.)?\s*(\d{1,3})\b"),   # RO: saptamana 1, sapt. 2
    re.compile(r"\b(\d{1,3})\s*\.?\s*sapt(?:amana)?\b"),  # RO: 1 saptamana
    re.compile(r"\b(\d{1,3})\s*\.\s*het\b"),             # HU: 2. het
    re.compile(r"\bhet\s*(\d{1,3})\b"),                  # HU: het 2
    re.compile(r"\bweek\s*(\d{1,3})\b"),                 # EN: week 3
)

DAY_NAMES: Tuple[Tuple[str, int], ...] = (
    # HU
    ("hetfo", 1), ("kedd", 2), ("szerda", 3), ("csutortok", 4),
    ("pentek", 5), ("szombat", 6), ("vasarnap", 7),
    # RO
    ("luni", 1), ("marti", 2), ("miercuri", 3), ("joi", 4),
    ("vineri", 5), ("sambata", 6), ("duminica", 7),
    # EN
    ("monday", 1), ("tuesday", 2), ("wednesday", 3), ("thursday", 4),
    ("friday", 5), ("saturday", 6), ("sunday", 7),
)

NUMBERED_DAY = re.compile(
    r"\b(\d{1,2})\s*\.\s*(?:nap|ziua|zi)\b|\b(?:nap|ziua|zi|day)\s*(\d{1,2})\b"
)

# post_workout rows come first: "post-workout snack" is a post-workout meal
MEAL_KEYWORDS: Tuple[Tuple[str, MealType], ...] = (
    ("edzes utani", "post_workout"), ("edzes utan", "post_workout"),
    ("post workout", "post_workout"), ("post-workout", "post_workout"),
    ("dupa antrenament", "post_workout"),
    ("micul dejun", "breakfast"), ("mic dejun", "breakfast"),
    ("reggeli", "breakfast"), ("breakfast", "breakfast"),
    ("pranz", "lunch"), ("ebed", "lunch"), ("lunch", "lunch"),
    ("deli etkez", "lunch"),
    ("cina", "dinner"), ("vacsora", "dinner"), ("dinner", "dinner"),
    ("esti etkez", "dinner"),
    ("gustare", "snack"), ("gustari", "snack"), ("snack", "snack"),
    ("tizorai", "snack"), ("tizora", "snack"), ("uzsonna", "snack"),
    ("nasolas", "snack"), ("nasi", "snack"),
)

TRAINING_PATTERN = re.compile(r"\b(?:edzes(?:nap)?|sport\w*|training|antrenament\w*)")
REST_PATTERN = re.compile(r"\b(?:piheno\w*|rest(?:\s*day)?\b|szunet\w*|odihna)")
CALORIE_PATTERN = re.compile(r"(\d+)\s*(?:kcal|kaloria|calorii|cal)\b")

FUZZY_MIN_LENGTH = 5


def _word_pattern(keyword: str) -> re.Pattern:
    body = r"[\s\-]*".join(re.escape(part) for part in re.split(r"[\s\-]+", keyword))
    return re.compile(rf"(?:^|(?<=[\s:\-–,;(]))({body})(?=$|[\s:\-–,;.)!])")


DAY_WORD_PATTERNS = tuple((_word_pattern(name), day) for name, day in DAY_NAMES)
MEAL_PREFIX_PATTERNS = tuple(
    (re.compile(rf"(?<![a-z]){re.escape(kw)}"), meal) for kw, meal in MEAL_KEYWORDS
)
MEAL_KEYWORDS_COMPACT = tuple((compact(kw), meal) for kw, meal in MEAL_KEYWORDS)


# =============================================================================
# DETECTORS
# =============================================================================
def detect_week(line: str) -> Optional[int]:
    """
    Week number of a week-marker line, or None.

    Example:
        >>> detect_week("2. hét")
        2
        >>> detect_week("SĂPTĂMÂNA 3")
        3
    """
    text = normalize_for_matching(line)
    if not text:
        return None
    for pattern in WEEK_PATTERNS:
        match = pattern.search(text)
        if match:
            number = int(match.group(1))
            if 1 <= number <= MAX_WEEK:
                return number
    return None


def detect_day(line: str) -> Optional[int]:
    """
    Day of week (1 = Monday .. 7 = Sunday) of a day-marker line, or None.

    Exact word match first, then a 1-substitution fuzzy pass for names of
    5+ letters, then numbered forms ("1. nap", "Ziua 1", "Day 1").
    """
    text = normalize_for_matching(line)
    if not text:
        return None

    for pattern, day in DAY_WORD_PATTERNS:
        if pattern.search(text):
            return day

    fuzzy = best_fuzzy_tag(text, DAY_NAMES, min_keyword_length=FUZZY_MIN_LENGTH)
    if fuzzy is not None:
        return fuzzy

    match = NUMBERED_DAY.search(text)
    if match:
        number = int(match.group(1) or match.group(2))
        if 1 <= number <= 7:
            return number
    return None


def detect_meal_type(line: str) -> Optional[MealType]:
    """
    Meal type named by a line, or None.

    Direct match at a word start, then the 1-substitution fuzzy pass for
    keywords of 5+ letters. Lines without digits also get the fuzzy pass
    on their whitespace-free form, which catches headers broken by stray
    spaces ("re gg eli").
    """
    text = normalize_for_matching(line)
    if not text:
        return None

    for pattern, meal in MEAL_PREFIX_PATTERNS:
        if pattern.search(text):
            return meal

    fuzzy = best_fuzzy_tag(text, MEAL_KEYWORDS, min_keyword_length=FUZZY_MIN_LENGTH)
    if fuzzy is not None:
        return fuzzy

    if not any(ch.isdigit() for ch in text):
        return best_fuzzy_tag(
            compact(line), MEAL_KEYWORDS_COMPACT, min_keyword_length=FUZZY_MIN_LENGTH
        )
    return None


def classify_line(line: str) -> LineClassification:
    """Week, then day, then meal type; the first hit classifies the line."""
    week = detect_week(line)
    if week is not None:
        return LineClassification(tag=LineTag.WEEK, raw=line, week=week)

    day = detect_day(line)
    if day is not None:
        return LineClassification(tag=LineTag.DAY, raw=line, day=day)

    meal = detect_meal_type(line)
    if meal is not None:
        return LineClassification(tag=LineTag.MEAL, raw=line, meal_type=meal)

    return LineClassification(tag=LineTag.CONTENT, raw=line)


def is_structural_marker(line: str) -> bool:
    return classify_line(line).is_marker


def detect_training_flag(line: str) -> Optional[bool]:
    """True for training-day keywords, False for rest-day keywords, else None."""
    text = normalize_for_matching(line)
    flag = None
    if TRAINING_PATTERN.search(text):
        flag = True
    if REST_PATTERN.search(text):
        flag = False
    return flag


def detect_calories(line: str) -> Optional[int]:
    """First "<N> kcal" style figure in a line."""
    match = CALORIE_PATTERN.search(normalize_for_matching(line))
    return int(match.group(1)) if match else None


# =============================================================================
# PRE-SPLIT
# =============================================================================
_UNIT_ALTERNATION = (
    r"kg|dkg|g|ml|dl|l|db|buc|ek|tk|szelet|szem|lingurita|lingura|felii|felie"
)
_QUANTITY = rf"\d+(?:[.,]\d+)?\s*(?:{_UNIT_ALTERNATION})\b\)?"

_DAY_ALTERNATION = "|".join(name for name, _ in DAY_NAMES)
_MEAL_ALTERNATION = "|".join(
    r"[\s\-]?".join(re.escape(part) for part in re.split(r"[\s\-]+", kw))
    for kw, _ in sorted(MEAL_KEYWORDS, key=lambda row: -len(row[0]))
)

SPLIT_BEFORE: Tuple[re.Pattern, ...] = (
    re.compile(r"(?<![a-z0-9])(?:saptamana|sapt\.?)\s*\d{1,2}\b"),
    re.compile(r"(?<![\d.])\d{1,2}\s*\.\s*het\b"),
    re.compile(r"(?<![a-z0-9])week\s*\d{1,2}\b"),
    re.compile(rf"(?<![a-z0-9])(?:{_DAY_ALTERNATION})\b"),
    re.compile(r"(?<![\d.])\d\s*\.\s*(?:nap|ziua|zi)\b"),
    re.compile(r"(?<![a-z0-9])(?:ziua|day)\s*\d\b"),
    re.compile(rf"(?<![a-z0-9])(?:{_MEAL_ALTERNATION})\b"),
)
HEADER_COLON = re.compile(
    rf"(?<![a-z0-9])(?:{_DAY_ALTERNATION}|{_MEAL_ALTERNATION})\s*:[ \t]*(?=\S)"
)
BULLET = re.compile(r"(?<=\s)[-–](?=[ \t]+\S)")
QUANTITY_BOUNDARY = re.compile(
    rf"{_QUANTITY}[ \t]*[,;]?[ \t]+(?=[^\W\d_][^+\d\n]*?{_QUANTITY})"
)


def _split_points(line: str) -> List[int]:
    folded = fold_aligned(line)
    points = set()

    for pattern in SPLIT_BEFORE:
        for match in pattern.finditer(folded):
            points.add(match.start())
    for match in HEADER_COLON.finditer(folded):
        points.add(match.end())
    for match in QUANTITY_BOUNDARY.finditer(folded):
        points.add(match.end())

    # A dash starts a list item only after a finished ingredient or header
    for match in BULLET.finditer(folded):
        previous = max((p for p in points if p < match.start()), default=0)
        segment = line[previous:match.start()].rstrip()
        if segment and (any(ch.isdigit() for ch in segment) or segment.endswith(":")):
            points.add(match.start())

    return sorted(p for p in points if line[:p].strip())


def presplit_structure(text: str) -> str:
    """
    Re-insert the line breaks PDF extraction removed.

    Breaks go before literal week/day/meal markers, after "Header:" labels,
    before dash list items that follow a finished ingredient, and between
    "name quantity" groups run together on one line. A "+" joined group
    is never split.

    Example:
        >>> presplit_structure("1. hét Hétfő Reggeli: Zab 50g Tej 200ml")
        '1. hét\\nHétfő\\nReggeli:\\nZab 50g\\nTej 200ml'
    """
    output: List[str] = []
    for line in (text or "").split("\n"):
        start = 0
        for point in _split_points(line):
            piece = line[start:point].strip()
            if piece:
                output.append(piece)
            start = point
        output.append(line[start:].strip())
    return "\n".join(output)


__all__ = [
    "DAY_NAMES",
    "MEAL_KEYWORDS",
    "WEEK_PATTERNS",
    "detect_week",
    "detect_day",
    "detect_meal_type",
    "classify_line",
    "is_structural_marker",
    "detect_training_flag",
    "detect_calories",
    "presplit_structure",
]
