# parsing/line_healer.py
"""
MealPlan Extractor — Line Healer
=================================
Rejoins ingredient lines that PDF extraction broke in two.

Structural markers are anchors: they flush the buffer and are always
emitted on their own line. Blank lines are paragraph breaks and flush
the buffer too.
"""

import re
from typing import Iterable, List

from parsing.fuzzy_match import normalize_for_matching
from parsing.structure_tokenizer import is_structural_marker

SHORT_FRAGMENT_LENGTH = 25
QUANTITY_TOKEN = re.compile(
    r"\d+\s*(?:dkg|kg|g|ml|dl|db|ek|tk|buc|lingurita|lingura|cana|felii|felie)\b"
)
CALORIE_TOKEN = re.compile(r"\d+\s*kcal")


def is_short_fragment(line: str) -> bool:
    """Under 25 chars, no quantity token, no calorie figure."""
    text = normalize_for_matching(line)
    return (
        len(line) < SHORT_FRAGMENT_LENGTH
        and not QUANTITY_TOKEN.search(text)
        and not CALORIE_TOKEN.search(text)
    )


def is_continuation(buffer: str, line: str) -> bool:
    if not buffer:
        return False
    if buffer.endswith("-"):
        return True
    return line[:1].islower() and is_short_fragment(line)


def heal_lines(lines: Iterable[str]) -> List[str]:
    """
    Merge continuation fragments into the line they belong to.

    A line continues the buffer when the buffer ends with a hyphen (the
    hyphen is dropped and the halves glued), or when it is a short
    lowercase-initial fragment without quantity or calories (joined with
    a space).

    Example:
        >>> heal_lines(["Csirke-", "mell 150g", "Rizs 100g", "párolva"])
        ['Csirkemell 150g', 'Rizs 100g párolva']
    """
    healed: List[str] = []
    buffer = ""

    def flush():
        nonlocal buffer
        if buffer:
            healed.append(buffer)
        buffer = ""

    for raw in lines:
        line = (raw or "").strip()
        if not line:
            flush()
            continue

        if is_structural_marker(line):
            flush()
            healed.append(line)
            continue

        if is_continuation(buffer, line):
            if buffer.endswith("-"):
                buffer = buffer[:-1] + line
            else:
                buffer = f"{buffer} {line}"
            continue

        flush()
        buffer = line

    flush()
    return healed


__all__ = ["heal_lines", "is_continuation", "is_short_fragment"]
