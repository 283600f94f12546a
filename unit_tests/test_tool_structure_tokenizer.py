import pytest

from parsing.fuzzy_match import fuzzy_contains, hamming_distance, strip_accents
from parsing.schemas import LineTag
from parsing.structure_tokenizer import (
    classify_line,
    detect_calories,
    detect_day,
    detect_meal_type,
    detect_training_flag,
    detect_week,
    presplit_structure,
)


def test_strip_accents():
    assert strip_accents("Görög") == "Gorog"
    assert strip_accents("Săptămâna") == "Saptamana"


def test_fuzzy_contains_allows_one_substitution():
    assert fuzzy_contains("reggeIi:", "reggeli")
    assert not fuzzy_contains("rxggxli", "reggeli")
    # short keywords only match exactly
    assert not fuzzy_contains("keda", "kedd")


def test_hamming_distance_needs_equal_lengths():
    assert hamming_distance("kedd", "kede") == 1
    with pytest.raises(ValueError):
        hamming_distance("kedd", "ked")


@pytest.mark.parametrize("line,expected", [
    ("2. hét", 2),
    ("SĂPTĂMÂNA 3", 3),
    ("Sapt. 2", 2),
    ("Week 4", 4),
    ("Săptămâna 13", None),
    ("Reggeli", None),
])
def test_detect_week(line, expected):
    assert detect_week(line) == expected


@pytest.mark.parametrize("line,expected", [
    ("Hétfő", 1),
    ("Kedd", 2),
    ("Miercuri", 3),
    ("Sunday", 7),
    ("3. nap", 3),
    ("Ziua 5", 5),
    ("Szombst", 6),
    ("Rizs 100g", None),
])
def test_detect_day(line, expected):
    assert detect_day(line) == expected


@pytest.mark.parametrize("line,expected", [
    ("Reggeli:", "breakfast"),
    ("Mic dejun", "breakfast"),
    ("Prânz", "lunch"),
    ("Cina", "dinner"),
    ("Vacsora (600 kcal)", "dinner"),
    ("Gustare", "snack"),
    ("Edzés utáni shake", "post_workout"),
    ("re gg eli", "breakfast"),
    ("KaveÌ re gg eli", "breakfast"),
    ("Csirkemell 150g", None),
])
def test_detect_meal_type(line, expected):
    assert detect_meal_type(line) == expected


def test_classify_line_order():
    assert classify_line("1. hét").tag is LineTag.WEEK
    day = classify_line("Kedd")
    assert day.tag is LineTag.DAY and day.day == 2
    meal = classify_line("Vacsora")
    assert meal.tag is LineTag.MEAL and meal.meal_type == "dinner"
    assert classify_line("Rizs 100g").tag is LineTag.CONTENT
    assert not classify_line("Rizs 100g").is_marker


def test_detect_training_flag():
    assert detect_training_flag("Edzésnap") is True
    assert detect_training_flag("Pihenőnap") is False
    assert detect_training_flag("Reggeli") is None


def test_detect_calories():
    assert detect_calories("Ebéd (650 kcal)") == 650
    assert detect_calories("Rizs 100g") is None


def test_presplit_restores_line_breaks():
    text = "1. hét Hétfő Reggeli: Zab 50g Tej 200ml"
    assert presplit_structure(text) == "1. hét\nHétfő\nReggeli:\nZab 50g\nTej 200ml"


def test_presplit_keeps_plus_groups_together():
    text = "Görög joghurt 250g + Dió 40g"
    assert presplit_structure(text) == text
