# parsing/measurement_extractor.py
"""
MealPlan Extractor — Body Measurement Extractor
================================================
Finds body measurements (weight, body fat, circumferences) in document
text and returns at most one dated record.
"""

import re
from typing import Dict, List, Optional, Tuple

from parsing.profile_extractor import normalize_lines
from parsing.schemas import Measurement

_NUMBER = r"(\d+(?:[.,]\d+)?)"
_SEP = r"\s*[:=\-–]?\s*"

# field -> patterns on accent-free lowercase text
MEASUREMENT_PATTERNS: Dict[str, Tuple[re.Pattern, ...]] = {
    "weight": (
        re.compile(rf"\b(?:test)?suly{_SEP}{_NUMBER}\s*(?:kg)?"),
        re.compile(rf"\b(?:weight|greutate){_SEP}{_NUMBER}\s*(?:kg)?"),
        re.compile(rf"{_NUMBER}\s*kg\s*(?:testsuly|suly|greutate)"),
    ),
    "body_fat": (
        re.compile(rf"(?:testzsir|zsir\s*(?:szazalek|%)|body\s*fat|grasime(?:\s*corporala)?){_SEP}{_NUMBER}\s*%?"),
        re.compile(rf"zsir(?:arany|tartalom){_SEP}{_NUMBER}"),
    ),
    "waist": (
        re.compile(rf"\b(?:derek(?:boseg)?|has(?:korfogat)?|waist|talie|talia){_SEP}{_NUMBER}\s*(?:cm)?"),
    ),
    "chest": (
        re.compile(rf"\b(?:mellkas(?:boseg)?|chest|piept|torace){_SEP}{_NUMBER}\s*(?:cm)?"),
    ),
    "arm": (
        re.compile(rf"\b(?:kar(?:merete?)?|felkar|bicepsz|biceps|arm|brat){_SEP}{_NUMBER}\s*(?:cm)?"),
    ),
    "hip": (
        re.compile(rf"\b(?:csipo(?:boseg)?|hip|hips|fenekkerulet|sold|solduri){_SEP}{_NUMBER}\s*(?:cm)?"),
    ),
    "thigh": (
        re.compile(rf"\b(?:comb(?:merete?)?|thigh|coapsa|coapse){_SEP}{_NUMBER}\s*(?:cm)?"),
    ),
    "neck": (
        re.compile(rf"\b(?:nyak(?:merete?)?|neck|gat){_SEP}{_NUMBER}\s*(?:cm)?"),
    ),
}

SANITY_RANGES: Dict[str, Tuple[float, float]] = {
    "weight": (20, 300),
    "body_fat": (1, 60),
    "waist": (30, 200),
    "chest": (30, 200),
    "hip": (30, 200),
    "arm": (10, 100),
    "thigh": (10, 100),
    "neck": (10, 100),
}

DEFAULT_NOTES = "Extracted from document"


def _find_value(text: str, field: str) -> Optional[float]:
    low, high = SANITY_RANGES[field]
    for pattern in MEASUREMENT_PATTERNS[field]:
        for match in pattern.finditer(text):
            value = float(match.group(1).replace(",", "."))
            if low <= value <= high:
                return value
    return None


def extract_measurements(raw_text: str) -> List[Measurement]:
    """
    Body measurements found in the text.

    Returns:
        A single-element list with today's dated record, or an empty list
        when no value passes its sanity range.

    Example:
        >>> extract_measurements("Derékbőség: 82 cm, Testzsír: 21%")[0].waist
        82.0
    """
    text = normalize_lines(raw_text)
    values = {field: _find_value(text, field) for field in MEASUREMENT_PATTERNS}
    found = {k: v for k, v in values.items() if v is not None}
    if not found:
        return []
    return [Measurement(notes=DEFAULT_NOTES, **found)]


__all__ = ["extract_measurements", "MEASUREMENT_PATTERNS", "SANITY_RANGES"]
