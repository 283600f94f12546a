# parsing/food_item_parser.py
"""
MealPlan Extractor — Food Item Parser
======================================
Turns one content line into validated food candidates:

    "Görög joghurt 250g + Dió 40g"
        -> [Görög joghurt / 250 g, Dió / 40 g]

Each "+" segment is handled on its own: bullets and glued calorie
numbers are stripped, the first quantity token is converted to grams /
millilitres / count, and the remaining text must pass the clean-name
gate. Failed segments produce no candidate; the detailed variant returns
the reason.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from parsing.food_name_gate import clean_food_name, explain_rejection
from parsing.fuzzy_match import fold_aligned
from parsing.schemas import NormalizedUnit, ParsedFoodCandidate

# =============================================================================
# UNIT CONVERSION TABLE
# =============================================================================
# folded unit word -> (grams or ml per unit, normalized unit)
UNIT_FACTORS: Dict[str, Tuple[float, NormalizedUnit]] = {
    # mass
    "g": (1, "g"),
    "kg": (1000, "g"),
    "dkg": (10, "g"),
    # volume
    "ml": (1, "ml"),
    "dl": (100, "ml"),
    "l": (1000, "ml"),
    "pohar": (200, "ml"),
    # counted items, average 50 g each
    "db": (50, "count"),
    "buc": (50, "count"),
    "bucata": (50, "count"),
    "bucati": (50, "count"),
    "pcs": (50, "count"),
    "piece": (50, "count"),
    "pieces": (50, "count"),
    "szem": (40, "count"),
    # spoons and cups
    "ek": (15, "g"),
    "evokanal": (15, "g"),
    "kanal": (15, "g"),
    "lingura": (15, "g"),
    "tbsp": (15, "g"),
    "tk": (5, "g"),
    "teaskanal": (5, "g"),
    "lingurita": (5, "g"),
    "tsp": (5, "g"),
    "csesze": (240, "g"),
    "cana": (240, "g"),
    "cup": (240, "g"),
    # household measures
    "szelet": (30, "g"),
    "felie": (30, "g"),
    "felii": (30, "g"),
    "slice": (30, "g"),
    "slices": (30, "g"),
    "gerezd": (5, "g"),
    "csomag": (200, "g"),
    "pachet": (200, "g"),
    "fej": (150, "g"),
    "adag": (100, "g"),
}

# Units written directly after the number ("250g", "1.5l")
SYMBOL_UNITS = frozenset({"g", "kg", "dkg", "ml", "dl", "l"})

_UNIT_ALTERNATION = "|".join(sorted(UNIT_FACTORS, key=len, reverse=True))
QUANTITY_PATTERN = re.compile(
    rf"(?<![\d.,])(\d+(?:[.,]\d+)?)\s*({_UNIT_ALTERNATION})\b"
)

PLUS_DELIMITER = re.compile(r"\s*\+\s*")
LEADING_BULLET = re.compile(r"^[-•–—*]\s*")

# Calorie numbers glued to a segment, recovered as meal-level data
KCAL_FIGURE = re.compile(r"\(?\s*(\d+)\s*(?:kcal|kaloria|calorii|cal)\b\s*\)?")
PAREN_QUANTITY_CALORIES = re.compile(
    r"\((\d+(?:[.,]\d+)?\s*(?:g|kg|ml|dl|db|dkg))\)(\d{2,4})\b"
)
PAREN_TRAILING_CALORIES = re.compile(r"\)\s*(\d{2,4})\s*$")
TRAILING_CALORIES = re.compile(r"\s+(\d{3,4})\s*$")


def convert_quantity(amount: float, unit: str) -> Tuple[float, NormalizedUnit]:
    """
    Normalize an amount to grams / millilitres.

    Example:
        >>> convert_quantity(2, "ek")
        (30, 'g')
    """
    factor, normalized = UNIT_FACTORS[fold_aligned(unit)]
    return amount * factor, normalized


def _format_amount(amount: float) -> str:
    return f"{amount:g}"


def split_food_segments(line: str) -> List[str]:
    """Split a content line on "+" delimiters."""
    return [part.strip() for part in PLUS_DELIMITER.split(line or "") if part.strip()]


def _strip_glued_calories(text: str) -> Tuple[str, Optional[int]]:
    calories = None

    match = KCAL_FIGURE.search(fold_aligned(text))
    if match:
        calories = int(match.group(1))
        text = (text[:match.start()] + " " + text[match.end():]).strip()

    match = PAREN_QUANTITY_CALORIES.search(fold_aligned(text))
    if match:
        calories = calories or int(match.group(2))
        text = text[:match.start()] + f"({text[match.start(1):match.end(1)]})" + text[match.end():]

    for pattern in (PAREN_TRAILING_CALORIES, TRAILING_CALORIES):
        match = pattern.search(text)
        if match:
            calories = calories or int(match.group(1))
            keep = ")" if pattern is PAREN_TRAILING_CALORIES else ""
            text = text[:match.start()] + keep

    return text.strip(), calories


def extract_quantity(text: str) -> Dict[str, Any]:
    """
    Find the first <number><unit> token and convert it.

    Returns:
        Dictionary with amount, unit_raw, unit, quantity_grams,
        quantity_text and the text left once the token is removed.
        Every quantity key is None / "" when no unit is recognized.
    """
    result: Dict[str, Any] = {
        "amount": None,
        "unit_raw": None,
        "unit": None,
        "quantity_grams": None,
        "quantity_text": "",
        "remaining": text,
    }

    match = QUANTITY_PATTERN.search(fold_aligned(text))
    if not match:
        return result

    amount = float(match.group(1).replace(",", "."))
    unit_folded = match.group(2)
    unit_raw = text[match.start(2):match.end(2)].lower()
    remaining = (text[:match.start()] + " " + text[match.end():]).strip()
    result["remaining"] = remaining
    if amount <= 0:
        return result

    grams, normalized = convert_quantity(amount, unit_folded)
    grams = round(grams, 2)
    if grams <= 0:
        return result

    result.update({
        "amount": amount,
        "unit_raw": unit_raw,
        "unit": normalized,
        "quantity_grams": grams,
        "quantity_text": (
            f"{_format_amount(amount)}{unit_raw}"
            if unit_folded in SYMBOL_UNITS
            else f"{_format_amount(amount)} {unit_raw}"
        ),
    })
    return result


# =============================================================================
# SEGMENT / LINE PARSING
# =============================================================================
def parse_food_segment(segment: str) -> Tuple[Optional[ParsedFoodCandidate], Optional[str], str]:
    """
    Parse one "+" segment.

    Returns:
        (candidate, rejection_reason, cleaned_name). Exactly one of the
        first two is None.
    """
    text = LEADING_BULLET.sub("", (segment or "").strip())
    text, glued_calories = _strip_glued_calories(text)
    quantity = extract_quantity(text)
    name = clean_food_name(quantity["remaining"])

    reason = explain_rejection(name)
    if reason:
        return None, reason, name

    candidate = ParsedFoodCandidate(
        name=name,
        amount=quantity["amount"],
        unit_raw=quantity["unit_raw"],
        unit=quantity["unit"],
        quantity_grams=quantity["quantity_grams"],
        quantity_text=quantity["quantity_text"],
        glued_calories=glued_calories,
    )
    return candidate, None, name


def parse_food_line_detailed(line: str) -> Dict[str, Any]:
    """
    Parse a content line, keeping rejected segments.

    Returns:
        Dictionary with:
        - status: "success" if at least one candidate, else "rejected"
        - candidates: list of ParsedFoodCandidate
        - rejected: list of {"segment", "name", "reason"}
    """
    candidates: List[ParsedFoodCandidate] = []
    rejected: List[Dict[str, str]] = []

    for segment in split_food_segments(line):
        candidate, reason, name = parse_food_segment(segment)
        if candidate is not None:
            candidates.append(candidate)
        else:
            rejected.append({"segment": segment, "name": name, "reason": reason})

    return {
        "status": "success" if candidates else "rejected",
        "candidates": candidates,
        "rejected": rejected,
    }


def parse_food_line(line: str) -> List[ParsedFoodCandidate]:
    """
    Validated food candidates of one content line.

    Example:
        >>> [c.name for c in parse_food_line("Görög joghurt 250g + Dió 40g")]
        ['Görög joghurt', 'Dió']
    """
    return parse_food_line_detailed(line)["candidates"]


__all__ = [
    "UNIT_FACTORS",
    "convert_quantity",
    "split_food_segments",
    "extract_quantity",
    "parse_food_segment",
    "parse_food_line",
    "parse_food_line_detailed",
]
