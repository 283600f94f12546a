# unit_tests/test_tool_line_healer.py
"""
Unit Tests for the Line Healer
==============================
Run with: python -m pytest unit_tests/test_tool_line_healer.py -v
"""

from parsing.line_healer import heal_lines, is_continuation, is_short_fragment


def test_hyphen_break_is_glued():
    assert heal_lines(["Csirke-", "mell 150g"]) == ["Csirkemell 150g"]


def test_short_lowercase_fragment_is_joined():
    assert heal_lines(["Csirke-", "mell 150g", "Rizs 100g", "párolva"]) == [
        "Csirkemell 150g",
        "Rizs 100g párolva",
    ]


def test_markers_are_never_merged():
    assert heal_lines(["Csirkemell 150g", "Vacsora", "rizs"]) == [
        "Csirkemell 150g",
        "Vacsora",
        "rizs",
    ]


def test_blank_line_flushes_buffer():
    assert heal_lines(["Tojás 2 db", "", "főtt"]) == ["Tojás 2 db", "főtt"]


def test_quantity_lines_stand_alone():
    assert heal_lines(["Zabpehely 60g", "tej 200ml"]) == ["Zabpehely 60g", "tej 200ml"]


def test_fragment_rules():
    assert is_short_fragment("párolva")
    assert not is_short_fragment("rizs 100g")
    assert not is_short_fragment("kb. 450 kcal")
    assert not is_continuation("", "párolva")
    assert is_continuation("Csirke-", "Mell 150g")
