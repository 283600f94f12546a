# unit_tests/test_tool_text_sanitizer.py
"""
Unit Tests for the Text Sanitizer
=================================
Run with: python -m pytest unit_tests/test_tool_text_sanitizer.py -v
"""

import random

from parsing.text_sanitizer import MOJIBAKE_TABLE, letter_ratio, sanitize, sanitize_document


def test_repairs_hungarian_mojibake():
    assert sanitize("GÃ¶rÃ¶g joghurt 250g") == "Görög joghurt 250g"


def test_repairs_romanian_mojibake():
    assert sanitize("SÄƒptÄƒmÃ¢na 1") == "Săptămâna 1"


def test_strips_invisible_characters():
    raw = chr(0xFEFF) + "Regg" + chr(0x200B) + "eli"
    result = sanitize_document(raw)

    assert result["status"] == "success"
    assert result["cleaned_text"] == "Reggeli"
    assert "stripped_control_characters" in result["changes_made"]


def test_normalizes_ligatures_and_bullets():
    assert sanitize(chr(0xFB01) + "lé") == "filé"
    assert sanitize(chr(0x2022) + " Dió 40g") == "- Dió 40g"


def test_collapses_garbage_runs():
    assert sanitize("Tej 200ml ¤¤¤") == "Tej 200ml"


def test_drops_unreadable_lines():
    result = sanitize_document("12345 678\nReggeli")

    assert result["cleaned_text"] == "Reggeli"
    assert result["dropped_lines"] == ["12345 678"]


def test_keeps_single_blank_line_between_paragraphs():
    assert sanitize("Hétfő\n\n\n\nReggeli\n\n") == "Hétfő\n\nReggeli"


def test_sanitize_is_idempotent(hu_plan_text):
    once = sanitize(hu_plan_text)
    assert sanitize(once) == once


def test_removed_control_character_exposing_mojibake_is_repaired():
    once = sanitize(" l\u00a9i\u00b6\u00c3\x85\u00b6R-\u00a9$$$")

    assert "\u00f6" in once
    assert sanitize(once) == once


def test_sanitize_is_idempotent_on_broken_input():
    alphabet = sorted(set("".join(MOJIBAKE_TABLE))) + list("aeR-$ \n\x85\x9f\u00ad\ufffd")
    rng = random.Random(1234)
    for _ in range(2000):
        raw = "".join(rng.choice(alphabet) for _ in range(rng.randint(1, 24)))
        once = sanitize(raw)
        assert sanitize(once) == once, repr(raw)


def test_non_string_input_is_empty():
    assert sanitize(None) == ""
    assert sanitize_document(None)["original_length"] == 0


def test_letter_ratio():
    assert letter_ratio("") == 0.0
    assert letter_ratio("ab12") == 0.5
