# parsing/plan_validator.py
"""
MealPlan Extractor — Plan Validator & Confidence Scorer
========================================================
Strict binary outcome for an assembled plan:

- no structural markers at all          -> PARSE_ERROR, plan=None
- markers but no meal with ingredients  -> PARSE_ERROR, plan=None
- otherwise                             -> plan kept, confidence scored

A hard failure is never replaced by a default plan.
"""

from typing import List, Optional

from parsing.parser_config import log
from parsing.schemas import ParsedPlan, ValidationOutcome

# =============================================================================
# MESSAGES & PENALTIES
# =============================================================================
NO_STRUCTURE_ERROR = (
    "PARSE_ERROR: No structured meal plan data detected. The document does not "
    "contain recognizable week/day/meal markers in HU, RO, or EN."
)
NO_FOOD_ERROR = (
    "PARSE_ERROR: Structural markers (week/day/meal headers) were detected, but "
    "no food items could be extracted from the document. The content between "
    "meal headers may be empty or unrecognizable."
)

EXPECTED_WEEKS = 4
EXPECTED_DAYS = 28
MISSING_WEEK_PENALTY = 0.1
MISSING_DAY_PENALTY = 0.02
WARNING_PENALTY = 0.02
MAX_WARNING_PENALTY = 0.3
EMPTY_MEAL_PENALTY = 0.05


def count_food(plan: Optional[ParsedPlan]) -> dict:
    """Meals with at least one ingredient, total ingredients, empty meals."""
    meals_with_food = 0
    total_ingredients = 0
    empty_meals = 0
    for meal in (plan.iter_meals() if plan else []):
        if meal.ingredients:
            meals_with_food += 1
            total_ingredients += len(meal.ingredients)
        else:
            empty_meals += 1
    return {
        "meals_with_food": meals_with_food,
        "total_ingredients": total_ingredients,
        "empty_meals": empty_meals,
    }


def calculate_confidence(plan: ParsedPlan, warning_count: int) -> float:
    """
    Score a non-failing plan between 0 and 1.

    Starts at 1.0; -0.1 per week below 4, -0.02 per day below 28,
    -0.02 per warning (at most -0.3), -0.05 per empty meal.
    """
    total_days = sum(len(week) for week in plan.weeks)
    empty_meals = count_food(plan)["empty_meals"]

    confidence = 1.0
    confidence -= MISSING_WEEK_PENALTY * max(0, EXPECTED_WEEKS - plan.detected_weeks)
    confidence -= MISSING_DAY_PENALTY * max(0, EXPECTED_DAYS - total_days)
    confidence -= min(MAX_WARNING_PENALTY, WARNING_PENALTY * warning_count)
    confidence -= EMPTY_MEAL_PENALTY * empty_meals

    return round(max(0.0, min(1.0, confidence)), 2)


def validate_plan(
    plan: Optional[ParsedPlan],
    markers_found: int,
    warnings: Optional[List[str]] = None,
) -> ValidationOutcome:
    """
    Classify an assembled plan as a hard failure or a scored result.

    Args:
        plan: Tree built by the assembler (may be None)
        markers_found: Week/day/meal markers seen during the whole parse
        warnings: Warnings accumulated so far; they lower the confidence

    Returns:
        ValidationOutcome. On hard failure plan is None, confidence is 0
        and errors holds the PARSE_ERROR message.
    """
    warnings = list(warnings or [])
    counts = count_food(plan)

    error = None
    if markers_found == 0:
        error = NO_STRUCTURE_ERROR
    elif counts["meals_with_food"] == 0 or counts["total_ingredients"] == 0:
        error = NO_FOOD_ERROR

    if error:
        log(f"❌ {error}")
        return ValidationOutcome(
            plan=None,
            confidence=0.0,
            errors=[error],
            warnings=warnings,
            markers_found=markers_found,
        )

    confidence = calculate_confidence(plan, len(warnings))
    log(
        f"✅ Plan validated: {plan.detected_weeks} week(s), "
        f"{counts['total_ingredients']} ingredient(s), confidence {confidence}"
    )
    return ValidationOutcome(
        plan=plan,
        confidence=confidence,
        warnings=warnings,
        markers_found=markers_found,
        meals_with_food=counts["meals_with_food"],
        total_ingredients=counts["total_ingredients"],
    )


__all__ = [
    "validate_plan",
    "calculate_confidence",
    "count_food",
    "NO_STRUCTURE_ERROR",
    "NO_FOOD_ERROR",
]
