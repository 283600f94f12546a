# unit_tests/test_tool_plan_assembler.py
"""
Unit Tests for the Plan Assembler
=================================
End-to-end runs of sanitize -> pre-split -> heal -> assemble -> validate,
plus the state machine transitions on pre-healed lines.

Run with: python -m pytest unit_tests/test_tool_plan_assembler.py -v
"""

import asyncio

from parsing.plan_assembler import ParseState, assemble_plan, parse_meal_plan_text
from parsing.plan_validator import NO_FOOD_ERROR, NO_STRUCTURE_ERROR


def run_pipeline(text, catalog=None):
    return asyncio.run(parse_meal_plan_text(text, catalog))


def run_assembler(lines, catalog=None):
    return asyncio.run(assemble_plan(lines, catalog))


# =============================================================================
# SCENARIOS
# =============================================================================
def test_scenario_a_single_breakfast(scenarios):
    outcome = run_pipeline(scenarios["A"])

    assert not outcome.is_hard_failure
    plan = outcome.plan
    assert plan.detected_weeks == 1
    assert len(plan.weeks[0]) == 1

    day = plan.weeks[0][0]
    assert day.week == 2
    assert day.day == 2
    assert [meal.meal_type for meal in day.meals] == ["breakfast"]

    ingredients = day.meals[0].ingredients
    assert [(i.name, i.quantity_grams) for i in ingredients] == [
        ("Görög joghurt", 250),
        ("Dió", 40),
    ]
    assert outcome.markers_found == 3


def test_scenario_b_no_structure(scenarios):
    outcome = run_pipeline(scenarios["B"])

    assert outcome.is_hard_failure
    assert outcome.plan is None
    assert outcome.confidence == 0
    assert outcome.errors == [NO_STRUCTURE_ERROR]


def test_scenario_c_structure_without_food(scenarios):
    outcome = run_pipeline(scenarios["C"])

    assert outcome.plan is None
    assert outcome.errors == [NO_FOOD_ERROR]
    assert outcome.markers_found == 3
    assert any(w.startswith("Unmatched ingredient:") for w in outcome.warnings)


def test_glued_calorie_number_is_not_part_of_name():
    outcome = run_pipeline("Hétfő\nEbéd\ncsirkemell 520")

    ingredient = outcome.plan.weeks[0][0].meals[0].ingredients[0]
    assert ingredient.name == "Csirkemell"
    assert ingredient.quantity_grams is None
    assert ingredient.glued_calories == 520


def test_corrupted_meal_header_still_opens_breakfast():
    outcome = run_pipeline("Hétfő\nre gg eli\nZabpehely 60g")

    meals = outcome.plan.weeks[0][0].meals
    assert [meal.meal_type for meal in meals] == ["breakfast"]
    assert meals[0].name == "re gg eli"


# =============================================================================
# DEFAULT BREAKFAST SLOT
# =============================================================================
def test_day_line_opens_default_breakfast():
    report = run_assembler(["Hétfő", "Zabpehely 60g"])

    meal = report["plan"].weeks[0][0].meals[0]
    assert meal.meal_type == "breakfast"
    assert meal.name == "Hétfő"
    assert meal.ingredients[0].name == "Zabpehely"


def test_explicit_meal_replaces_untouched_default_slot():
    report = run_assembler(["Hétfő", "Ebéd", "Rizs 100g"])

    meals = report["plan"].weeks[0][0].meals
    assert [meal.meal_type for meal in meals] == ["lunch"]


def test_empty_default_slot_closed_by_next_day_is_kept():
    report = run_assembler(["Hétfő", "Kedd", "Reggeli", "Rizs 100g"])

    monday, tuesday = report["plan"].weeks[0]
    assert len(monday.meals) == 1
    assert monday.meals[0].ingredients == []
    assert tuesday.meals[0].ingredients[0].name == "Rizs"


def test_day_line_naming_a_meal_counts_two_markers():
    report = run_assembler(["Hétfő - Reggeli", "Zabpehely 60g"])

    meal = report["plan"].weeks[0][0].meals[0]
    assert meal.meal_type == "breakfast"
    assert report["markers_found"] == 2


# =============================================================================
# STATE
# =============================================================================
def test_training_flag_applies_to_days_opened_after_it():
    report = run_assembler([
        "Hétfő - Edzésnap", "Reggeli", "Rizs 100g",
        "Kedd - Pihenőnap", "Reggeli", "Rizs 100g",
    ])

    monday, tuesday = report["plan"].weeks[0]
    assert monday.is_training_day is True
    assert monday.label == "Edzesnap"
    assert tuesday.is_training_day is False


def test_days_stay_in_the_week_they_were_opened_in():
    outcome = run_pipeline(
        "1. hét\nHétfő\nReggeli\nRizs 100g\n2. hét\nHétfő\nReggeli\nTej 200ml"
    )

    assert outcome.plan.detected_weeks == 2
    assert [week[0].week for week in outcome.plan.weeks] == [1, 2]


def test_declared_calories_from_content_line():
    report = run_assembler(["Hétfő", "Ebéd", "Rizs 100g - 130 kcal"])

    meal = report["plan"].weeks[0][0].meals[0]
    assert meal.declared_calories == 130
    assert meal.ingredients[0].name == "Rizs"


def test_metadata_lines_are_skipped():
    report = run_assembler(["Hétfő", "Ebéd", "Rizs 100g", "Összesen: 1800 kcal"])

    meal = report["plan"].weeks[0][0].meals[0]
    assert [i.name for i in meal.ingredients] == ["Rizs"]
    assert meal.declared_calories is None


def test_tiny_quantity_keeps_the_document_parsing():
    outcome = run_pipeline("Hétfő\nReggeli\nSáfrány 0.001g\nRizs 100g")

    ingredients = outcome.plan.weeks[0][0].meals[0].ingredients
    assert [(i.name, i.quantity_grams) for i in ingredients] == [
        ("Sáfrány", None),
        ("Rizs", 100),
    ]


def test_content_before_any_meal_is_ignored():
    report = run_assembler(["Bevásárlólista", "Rizs 100g"])

    assert report["plan"].weeks == []
    assert report["markers_found"] == 0


def test_parse_states_are_independent():
    first, second = ParseState(), ParseState()
    first.warnings.append("x")
    first.weeks[0].append("day")

    assert second.warnings == []
    assert second.weeks == [[]]


# =============================================================================
# CATALOG
# =============================================================================
def test_catalog_ids_are_attached(scenarios, food_catalog):
    outcome = run_pipeline(scenarios["A"], food_catalog)

    ingredients = outcome.plan.weeks[0][0].meals[0].ingredients
    assert [i.matched_food_id for i in ingredients] == ["food_004", "food_005"]
    assert outcome.warnings == []


def test_unmatched_catalog_lookup_warns(food_catalog):
    outcome = run_pipeline("Hétfő\nVacsora\nTúró 200g", food_catalog)

    assert outcome.plan.weeks[0][0].meals[0].ingredients[0].matched_food_id is None
    assert outcome.warnings == ['No catalog match for ingredient: "Túró"']
