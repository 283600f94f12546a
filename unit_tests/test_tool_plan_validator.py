# unit_tests/test_tool_plan_validator.py
"""
Unit Tests for the Plan Validator
=================================
Run with: python -m pytest unit_tests/test_tool_plan_validator.py -v
"""

from parsing.nutrition_estimator import estimate_nutrition
from parsing.plan_validator import (
    NO_FOOD_ERROR,
    NO_STRUCTURE_ERROR,
    calculate_confidence,
    count_food,
    validate_plan,
)
from parsing.schemas import ParsedDay, ParsedIngredient, ParsedMeal, ParsedPlan


def rice():
    return ParsedIngredient(
        name="Rizs", quantity_grams=100, unit="g", quantity_text="100g",
        nutrition=estimate_nutrition("Rizs"),
    )


def full_plan(extra_empty_meal=False):
    weeks = []
    for week in range(1, 5):
        days = []
        for day in range(1, 8):
            meals = [ParsedMeal(meal_type="lunch", name="Ebéd", ingredients=[rice()])]
            if extra_empty_meal and week == 1 and day == 1:
                meals.append(ParsedMeal(meal_type="dinner", name="Vacsora"))
            days.append(ParsedDay(week=week, day=day, meals=meals))
        weeks.append(days)
    return ParsedPlan(weeks=weeks, detected_weeks=4, detected_days_per_week=7)


def test_no_markers_is_hard_failure():
    outcome = validate_plan(None, 0)

    assert outcome.is_hard_failure
    assert outcome.errors == [NO_STRUCTURE_ERROR]
    assert outcome.confidence == 0


def test_markers_without_food_is_hard_failure():
    empty_meal = ParsedMeal(meal_type="breakfast", name="Reggeli")
    plan = ParsedPlan(
        weeks=[[ParsedDay(week=1, day=1, meals=[empty_meal])]],
        detected_weeks=1,
        detected_days_per_week=1,
    )
    outcome = validate_plan(plan, 3, ["Unmatched ingredient: \"3kj\" (bad)"])

    assert outcome.plan is None
    assert outcome.errors == [NO_FOOD_ERROR]
    assert outcome.warnings == ["Unmatched ingredient: \"3kj\" (bad)"]


def test_complete_plan_scores_full_confidence():
    outcome = validate_plan(full_plan(), 60)

    assert outcome.plan is not None
    assert outcome.confidence == 1.0
    assert outcome.meals_with_food == 28
    assert outcome.total_ingredients == 28


def test_warning_penalty_is_capped():
    plan = full_plan()

    assert calculate_confidence(plan, 5) == 0.9
    assert calculate_confidence(plan, 40) == 0.7


def test_empty_meal_penalty():
    plan = full_plan(extra_empty_meal=True)

    assert count_food(plan)["empty_meals"] == 1
    assert calculate_confidence(plan, 0) == 0.95


def test_missing_weeks_and_days_lower_confidence():
    day = ParsedDay(week=1, day=1, meals=[ParsedMeal(meal_type="lunch", name="Ebéd", ingredients=[rice()])])
    plan = ParsedPlan(weeks=[[day]], detected_weeks=1, detected_days_per_week=1)

    # 1.0 - 3 weeks * 0.1 - 27 days * 0.02
    assert calculate_confidence(plan, 0) == 0.16
