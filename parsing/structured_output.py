# parsing/structured_output.py
"""
MealPlan Extractor — Structured Meal Plan JSON
===============================================
Machine-readable view of a validated plan:

    {"week1": {"monday": {"breakfast": [{"name", "quantity", "calories"}],
                          "lunch": [...], "dinner": [...],
                          "snack": [...]?, "post_workout": [...]?}}}

Produced only for plans without a hard failure. Every name goes through
the clean-name gate once more; if nothing survives, the caller gets an
explicit error instead of an empty success.
"""

from typing import Any, Dict, List, Optional

from parsing.food_name_gate import clean_food_name, is_clean_food_name
from parsing.parser_config import log
from parsing.schemas import ParsedIngredient, ParsedPlan

DAY_NUM_TO_KEY = {
    1: "monday",
    2: "tuesday",
    3: "wednesday",
    4: "thursday",
    5: "friday",
    6: "saturday",
    7: "sunday",
}

REQUIRED_MEALS = ("breakfast", "lunch", "dinner")
OPTIONAL_MEALS = ("snack", "post_workout")

NO_STRUCTURE_MESSAGE = (
    "Food extraction failed. The document does not contain recognizable "
    "week/day/meal structure."
)
NO_CLEAN_FOOD_MESSAGE = (
    "Food extraction failed. Meal plan structure was recognized but no clean "
    "food items could be extracted. All extracted names were corrupted or "
    "unrecognizable."
)


def ingredient_to_item(ingredient: ParsedIngredient) -> Optional[Dict[str, Any]]:
    """Output item for one ingredient, or None when the name fails the gate."""
    name = clean_food_name(ingredient.name)
    if not is_clean_food_name(name):
        return None
    return {
        "name": name,
        "quantity": ingredient.quantity_text or None,
        "calories": ingredient.estimated_calories,
    }


def _empty_day() -> Dict[str, List[Dict[str, Any]]]:
    return {meal: [] for meal in REQUIRED_MEALS}


def to_structured_meal_plan(plan: Optional[ParsedPlan]) -> Dict[str, Any]:
    """
    Convert a validated plan into the week/day/meal JSON shape.

    Args:
        plan: Plan from validate_plan(); None means a hard failure

    Returns:
        Dictionary with:
        - status: "success" or "error"
        - data: the nested structure (success only)
        - error: human-readable message (error only)
        - item_count / dropped_count
    """
    if plan is None or not plan.weeks:
        return {"status": "error", "error": NO_STRUCTURE_MESSAGE}

    data: Dict[str, Dict[str, Any]] = {}
    item_count = 0
    dropped_count = 0

    for index, week in enumerate(plan.weeks):
        week_data: Dict[str, Any] = {}
        for day in week:
            day_key = DAY_NUM_TO_KEY[day.day]
            day_data = week_data.setdefault(day_key, _empty_day())

            for meal in day.meals:
                items = day_data.setdefault(meal.meal_type, [])
                for ingredient in meal.ingredients:
                    item = ingredient_to_item(ingredient)
                    if item is None:
                        dropped_count += 1
                        continue
                    items.append(item)
                    item_count += 1

            # Optional meal keys only when they hold food
            for optional in OPTIONAL_MEALS:
                if optional in day_data and not day_data[optional]:
                    del day_data[optional]

        data[f"week{index + 1}"] = week_data

    if item_count == 0:
        log("❌ Output gate removed every food item")
        return {"status": "error", "error": NO_CLEAN_FOOD_MESSAGE}

    return {
        "status": "success",
        "data": data,
        "item_count": item_count,
        "dropped_count": dropped_count,
    }


__all__ = [
    "DAY_NUM_TO_KEY",
    "to_structured_meal_plan",
    "ingredient_to_item",
    "NO_STRUCTURE_MESSAGE",
    "NO_CLEAN_FOOD_MESSAGE",
]
