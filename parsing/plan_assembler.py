# parsing/plan_assembler.py
"""
MealPlan Extractor — Plan Assembler
====================================
State machine that walks healed, classified lines and builds the
week -> day -> meal -> ingredient tree.

All running state (current week/day, open day, open meal, training flag,
marker count, warnings) lives in one ParseState object per parse, so
concurrent parses never share anything.

The only suspension point is the optional catalog lookup per ingredient.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from parsing.food_item_parser import parse_food_line_detailed
from parsing.fuzzy_match import normalize_for_matching
from parsing.line_healer import heal_lines
from parsing.nutrition_estimator import estimate_nutrition
from parsing.parser_config import log
from parsing.plan_validator import validate_plan
from parsing.schemas import (
    LineTag,
    MealType,
    ParsedDay,
    ParsedFoodCandidate,
    ParsedIngredient,
    ParsedMeal,
    ParsedPlan,
    ValidationOutcome,
)
from parsing.structure_tokenizer import (
    classify_line,
    detect_calories,
    detect_meal_type,
    detect_training_flag,
    presplit_structure,
)
from parsing.text_sanitizer import sanitize

# Stray header / summary fragments that escaped classification
METADATA_LINE = re.compile(
    r"^(?:\d+\.\s*het|het\s*\d|week\s*\d|sapt|ossz|total|megjegyzes|note|observat)"
)
MIN_CONTENT_LENGTH = 3
DEFAULT_MEAL: MealType = "breakfast"


# =============================================================================
# PARSE STATE
# =============================================================================
@dataclass
class MealAccumulator:
    meal_type: MealType
    name: str
    is_default_slot: bool = False
    ingredients: List[ParsedIngredient] = field(default_factory=list)
    declared_calories: Optional[int] = None
    rejected: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class DayAccumulator:
    week: int
    day: int
    is_training_day: bool
    meals: List[ParsedMeal] = field(default_factory=list)


@dataclass
class ParseState:
    current_week: int = 1
    current_day: int = 1
    is_training_day: bool = False
    day: Optional[DayAccumulator] = None
    meal: Optional[MealAccumulator] = None
    weeks: List[List[ParsedDay]] = field(default_factory=lambda: [[]])
    markers_found: int = 0
    warnings: List[str] = field(default_factory=list)

    def grow_weeks(self, week: int) -> None:
        while len(self.weeks) < week:
            self.weeks.append([])

    def open_day(self, day: int) -> None:
        self.current_day = day
        self.day = DayAccumulator(
            week=self.current_week,
            day=day,
            is_training_day=self.is_training_day,
        )

    def open_meal(self, meal_type: MealType, name: str, is_default_slot: bool = False) -> None:
        if self.day is None:
            self.open_day(self.current_day)
        self.meal = MealAccumulator(
            meal_type=meal_type,
            name=name,
            is_default_slot=is_default_slot,
        )

    def close_meal(self, superseded: bool = False) -> None:
        """
        Freeze the open meal into the open day.

        An untouched default slot is dropped when an explicit meal header
        replaces it.
        """
        meal, self.meal = self.meal, None
        if meal is None or self.day is None:
            return
        if superseded and meal.is_default_slot and not meal.ingredients and not meal.rejected:
            return

        if not meal.ingredients:
            for item in meal.rejected:
                self.warnings.append(
                    f'Unmatched ingredient: "{item["name"] or item["segment"]}" ({item["reason"]})'
                )

        self.day.meals.append(ParsedMeal(
            meal_type=meal.meal_type,
            name=meal.name,
            ingredients=meal.ingredients,
            declared_calories=meal.declared_calories,
        ))

    def close_day(self) -> None:
        day, self.day = self.day, None
        if day is None:
            return
        self.grow_weeks(day.week)
        self.weeks[day.week - 1].append(ParsedDay(
            week=day.week,
            day=day.day,
            is_training_day=day.is_training_day,
            meals=day.meals,
        ))

    def finish(self) -> ParsedPlan:
        self.close_meal()
        self.close_day()
        weeks = [week for week in self.weeks if week]
        return ParsedPlan(
            weeks=weeks,
            detected_weeks=len(weeks),
            detected_days_per_week=max((len(week) for week in weeks), default=0),
        )


# =============================================================================
# INGREDIENTS
# =============================================================================
async def build_ingredient(
    candidate: ParsedFoodCandidate,
    catalog: Any = None,
    warnings: Optional[List[str]] = None,
) -> ParsedIngredient:
    """Attach macros and (optionally) a catalog id to a parsed candidate."""
    matched_food_id = None
    if catalog is not None:
        matches = await catalog.search_foods(candidate.name)
        if matches:
            matched_food_id = matches[0].id
        elif warnings is not None:
            warnings.append(f'No catalog match for ingredient: "{candidate.name}"')

    return ParsedIngredient(
        name=candidate.name,
        quantity_grams=candidate.quantity_grams,
        unit=candidate.unit,
        quantity_text=candidate.quantity_text,
        matched_food_id=matched_food_id,
        glued_calories=candidate.glued_calories,
        nutrition=estimate_nutrition(candidate.name),
    )


async def _handle_content(state: ParseState, line: str, catalog: Any) -> None:
    meal = state.meal
    if meal is None or len(line) < MIN_CONTENT_LENGTH:
        return
    if METADATA_LINE.match(normalize_for_matching(line)):
        return

    parsed = parse_food_line_detailed(line)
    for candidate in parsed["candidates"]:
        meal.ingredients.append(await build_ingredient(candidate, catalog, state.warnings))
    meal.rejected.extend(parsed["rejected"])

    calories = detect_calories(line)
    if calories is not None:
        meal.declared_calories = calories


# =============================================================================
# MAIN: assemble_plan
# =============================================================================
async def assemble_plan(lines: Sequence[str], catalog: Any = None) -> Dict[str, Any]:
    """
    Build the plan tree from healed lines.

    Transitions:
    - week marker: set current week, grow the week list, nothing else
    - day marker: close meal and day, open a new day with the running
      training flag, open the meal the line names (breakfast by default)
    - meal marker: close the open meal, open a day if none, open the meal
    - training/rest keyword: update the running training flag
    - content: parse ingredients into the open meal; a kcal figure becomes
      the meal's declared calories

    Args:
        lines: Healed lines (see heal_lines)
        catalog: Optional FoodCatalog; awaited once per ingredient

    Returns:
        Dictionary with:
        - status: "success"
        - plan: ParsedPlan (may be empty, validate with validate_plan)
        - markers_found: structural markers seen
        - warnings: per-item warnings
    """
    state = ParseState()

    for raw in lines:
        line = (raw or "").strip()
        if not line:
            continue

        classification = classify_line(line)

        if classification.tag is LineTag.WEEK:
            state.current_week = classification.week
            state.grow_weeks(classification.week)
            state.markers_found += 1
            continue

        flag = detect_training_flag(line)
        if flag is not None:
            state.is_training_day = flag

        if classification.tag is LineTag.DAY:
            named_meal = detect_meal_type(line)
            state.markers_found += 2 if named_meal else 1
            state.close_meal()
            state.close_day()
            state.open_day(classification.day)
            state.open_meal(named_meal or DEFAULT_MEAL, line, is_default_slot=named_meal is None)
            continue

        if classification.tag is LineTag.MEAL:
            state.markers_found += 1
            state.close_meal(superseded=True)
            state.open_meal(classification.meal_type, line)
            continue

        await _handle_content(state, line, catalog)

    plan = state.finish()
    return {
        "status": "success",
        "plan": plan,
        "markers_found": state.markers_found,
        "warnings": state.warnings,
    }


async def parse_meal_plan_text(raw_text: str, catalog: Any = None) -> ValidationOutcome:
    """
    Full plan pipeline: sanitize -> pre-split -> heal -> assemble -> validate.

    Example:
        >>> outcome = asyncio.run(parse_meal_plan_text(
        ...     "2. hét\\nKedd\\nReggeli\\nGörög joghurt 250g + Dió 40g"))
        >>> [i.name for i in outcome.plan.weeks[0][0].meals[0].ingredients]
        ['Görög joghurt', 'Dió']
    """
    cleaned = sanitize(raw_text)
    lines = heal_lines(presplit_structure(cleaned).split("\n"))
    log(f"🧹 Sanitized {len(raw_text or '')} -> {len(cleaned)} chars, {len(lines)} lines")

    report = await assemble_plan(lines, catalog)
    return validate_plan(report["plan"], report["markers_found"], report["warnings"])


__all__ = [
    "ParseState",
    "assemble_plan",
    "build_ingredient",
    "parse_meal_plan_text",
]
