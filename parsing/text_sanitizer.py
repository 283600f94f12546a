# parsing/text_sanitizer.py
"""
MealPlan Extractor — Text Sanitizer
====================================
Repairs text coming out of PDF/Word extraction before any structure is
detected: invisible characters, UTF-8 read as cp1252 (mojibake),
ligatures, random symbol runs and unreadable lines.

This is a pure text-processing step (no AI required). It never raises,
and sanitizing its own output changes nothing.
"""

import re
from datetime import datetime
from typing import Any, Dict, List

# =============================================================================
# CHARACTER MAPS
# =============================================================================

def _chars(*codepoints: int) -> str:
    return "".join(chr(cp) for cp in codepoints)


# BOM, zero-width space/joiners, word joiner; C0 controls except \t \n; DEL
INVISIBLE_CHARS = re.compile(
    "[" + _chars(0xFEFF, 0x200B, 0x200C, 0x200D, 0x2060)
    + "\\x00-\\x08\\x0b\\x0c\\x0e-\\x1f\\x7f]"
)
# Soft hyphen, replacement char and C1 controls are only removed after
# mojibake repair: they are part of some broken sequences ("Ã" + 0xAD for "í")
LATE_INVISIBLE_CHARS = re.compile(
    "[\\x80-\\x9f" + _chars(0x00AD, 0xFFFD) + "]"
)

# Characters whose UTF-8 bytes commonly come back decoded as cp1252/latin-1
MOJIBAKE_TARGETS = (
    "áéíóöőúüűÁÉÍÓÖŐÚÜŰ"      # Hungarian
    "ăâîșțşţĂÂÎȘȚŞŢ"          # Romanian (comma and cedilla forms)
    "–—‘’‚“”„…•€°"            # typography
)


def _build_mojibake_table() -> Dict[str, str]:
    table: Dict[str, str] = {}
    for char in MOJIBAKE_TARGETS:
        encoded = char.encode("utf-8")
        for codec in ("cp1252", "latin-1"):
            try:
                broken = encoded.decode(codec)
            except UnicodeDecodeError:
                continue
            if broken != char:
                table.setdefault(broken, char)
    return table


MOJIBAKE_TABLE = _build_mojibake_table()
# Longest sequences first so a prefix never shadows a full match
MOJIBAKE_PATTERN = re.compile(
    "|".join(re.escape(k) for k in sorted(MOJIBAKE_TABLE, key=len, reverse=True))
)

TYPOGRAPHY_MAP = {
    _chars(0xFB01): "fi", _chars(0xFB02): "fl", _chars(0xFB00): "ff",
    _chars(0xFB03): "ffi", _chars(0xFB04): "ffl",
    _chars(0x2026): "...",
    # bullets, including the Symbol-font bullet Word exports as U+F0B7
    _chars(0x2022): "-", _chars(0x25CF): "-", _chars(0x25AA): "-",
    _chars(0x25E6): "-", _chars(0x00B7): "-", _chars(0xF0B7): "-",
    # curly quotes
    _chars(0x2018): "'", _chars(0x2019): "'", _chars(0x201A): "'",
    _chars(0x201C): '"', _chars(0x201D): '"', _chars(0x201E): '"',
    # no-break and thin spaces
    _chars(0x00A0): " ", _chars(0x2009): " ", _chars(0x202F): " ",
}

# Punctuation that survives the garbage-run and isolated-character passes
ALLOWED_PUNCTUATION = r".,;:!?()%+\-–—/\\'\"#@"
GARBAGE_RUN = re.compile(rf"[^\w\s{ALLOWED_PUNCTUATION}]{{3,}}")
ISOLATED_GARBAGE = re.compile(rf"(?<=[ \t])[^\w\s{ALLOWED_PUNCTUATION}](?=[ \t])")

MIN_LINE_LENGTH = 3
MIN_LETTER_RATIO = 0.4


def letter_ratio(line: str) -> float:
    if not line:
        return 0.0
    return sum(1 for ch in line if ch.isalpha()) / len(line)


# =============================================================================
# MAIN: sanitize_document
# =============================================================================
def sanitize_document(raw: str) -> Dict[str, Any]:
    """
    Clean raw extracted text and report what was changed.

    Steps, in order:
    1. Strip BOM, zero-width and control characters
    2. Repair mojibake (UTF-8 read as cp1252 / latin-1)
    3. Normalize ligatures, ellipses, bullets and curly quotes
    4. Collapse runs of 3+ garbage symbols into one space
    5. Remove single garbage symbols standing between spaces
    6. Collapse horizontal whitespace, trim lines
    7. Drop unreadable lines (letter ratio < 0.4), keep one blank line
       between paragraphs

    Args:
        raw: Text as produced by the extraction collaborator. None and
             non-string values are treated as empty text.

    Returns:
        Dictionary with:
        - status: always "success"
        - cleaned_text: sanitized text
        - original_length / cleaned_length
        - changes_made: names of the steps that changed something
        - dropped_lines: lines removed by step 7

    Example:
        >>> sanitize_document("GÃ¶rÃ¶g joghurt 250g")["cleaned_text"]
        'Görög joghurt 250g'
    """
    text = raw if isinstance(raw, str) else ""
    original_length = len(text)
    changes_made: List[str] = []
    dropped: List[str] = []

    def apply(step: str, before: str, after: str) -> str:
        if after != before and step not in changes_made:
            changes_made.append(step)
        return after

    def clean_pass(text: str) -> str:
        # ---------------------------------------------------------------------
        # Step 1: invisible characters
        # ---------------------------------------------------------------------
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = apply("stripped_control_characters", text, INVISIBLE_CHARS.sub("", text))

        # ---------------------------------------------------------------------
        # Step 2: mojibake
        # ---------------------------------------------------------------------
        repaired = MOJIBAKE_PATTERN.sub(lambda m: MOJIBAKE_TABLE[m.group(0)], text)
        repaired = LATE_INVISIBLE_CHARS.sub("", repaired)
        text = apply("repaired_mojibake", text, repaired)

        # ---------------------------------------------------------------------
        # Step 3: typography
        # ---------------------------------------------------------------------
        normalized = text
        for src, dst in TYPOGRAPHY_MAP.items():
            normalized = normalized.replace(src, dst)
        text = apply("normalized_typography", text, normalized)

        # ---------------------------------------------------------------------
        # Step 4-5: garbage symbols
        # ---------------------------------------------------------------------
        text = apply("collapsed_garbage_runs", text, GARBAGE_RUN.sub(" ", text))
        text = apply("removed_isolated_garbage", text, ISOLATED_GARBAGE.sub("", text))

        # ---------------------------------------------------------------------
        # Step 6: whitespace
        # ---------------------------------------------------------------------
        collapsed = "\n".join(
            re.sub(r"[^\S\n]+", " ", line).strip() for line in text.split("\n")
        )
        text = apply("normalized_whitespace", text, collapsed)

        # ---------------------------------------------------------------------
        # Step 7: unreadable lines
        # ---------------------------------------------------------------------
        kept: List[str] = []
        for line in text.split("\n"):
            if not line:
                if kept and kept[-1] != "":
                    kept.append("")
                continue
            if len(line) < MIN_LINE_LENGTH or letter_ratio(line) < MIN_LETTER_RATIO:
                dropped.append(line)
                continue
            kept.append(line)

        while kept and kept[-1] == "":
            kept.pop()
        return apply("dropped_unreadable_lines", text, "\n".join(kept))

    # Removing a character can join the halves of a new mojibake sequence,
    # so passes repeat until the text is stable
    cleaned = clean_pass(text)
    while cleaned != text:
        text = cleaned
        cleaned = clean_pass(text)

    return {
        "status": "success",
        "cleaned_text": cleaned,
        "original_length": original_length,
        "cleaned_length": len(cleaned),
        "changes_made": changes_made,
        "dropped_lines": dropped,
        "cleaned_at": datetime.now().isoformat(),
    }


def sanitize(raw: str) -> str:
    """Sanitized text only. See sanitize_document() for the steps."""
    return sanitize_document(raw)["cleaned_text"]


__all__ = [
    "sanitize",
    "sanitize_document",
    "letter_ratio",
    "MOJIBAKE_TABLE",
    "MIN_LETTER_RATIO",
]
