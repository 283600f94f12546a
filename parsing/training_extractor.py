# parsing/training_extractor.py
"""
MealPlan Extractor — Training Schedule Extractor
=================================================
Turns activity lines of a document into training-day records, tracking
the week and day markers the same way the plan assembler does.
"""

import re
from typing import List

from parsing.food_item_parser import extract_quantity
from parsing.fuzzy_match import normalize_for_matching
from parsing.schemas import LineTag, TrainingDay
from parsing.structure_tokenizer import classify_line

DEFAULT_DURATION = 45
DEFAULT_CALORIES = 300
MAX_DURATION = 600
MAX_CALORIES = 5000

DURATION_PATTERN = re.compile(r"(\d+)\s*(?:perc|min(?:ute|utes|s)?|minute)\b")
CALORIE_PATTERN = re.compile(r"(\d+)\s*(?:kcal|kaloria|calorii|cal)\b")
ACTIVITY_PATTERN = re.compile(
    r"edzes|sport|futa|usza|kereklaz|yoga|joga|pila|antrenament|alergare|inot|ciclism|"
    r"workout|running|cycling|swimming"
)
INTENSE_PATTERN = re.compile(r"intenziv|hiit|sprint|crossfit|intens")
LIGHT_PATTERN = re.compile(r"konnyu|nyujt|yoga|joga|seta|pila|usor|plimbare|stretching|walk")


def detect_intensity(text: str) -> str:
    """'intense', 'light' or 'moderate' for a normalized activity line."""
    if INTENSE_PATTERN.search(text):
        return "intense"
    if LIGHT_PATTERN.search(text):
        return "light"
    return "moderate"


def extract_training_days(raw_text: str) -> List[TrainingDay]:
    """
    Training-day records from document text.

    A line becomes a record when it carries a duration or an activity
    keyword; a calorie figure alone (meal or daily totals) is not enough.
    Meal headers and ingredient lines are never activities.

    Example:
        >>> extract_training_days("Hétfő\\nFutás 30 perc")[0].duration_minutes
        30
    """
    records: List[TrainingDay] = []
    current_week = 1
    current_day = 1

    for raw in (raw_text or "").split("\n"):
        line = raw.strip()
        if not line:
            continue

        classification = classify_line(line)
        if classification.tag is LineTag.WEEK:
            current_week = classification.week
            continue
        if classification.tag is LineTag.DAY:
            current_day = classification.day
        if classification.tag is LineTag.MEAL:
            continue

        text = normalize_for_matching(line)
        duration = DURATION_PATTERN.search(text)
        calories = CALORIE_PATTERN.search(text)
        is_activity = ACTIVITY_PATTERN.search(text) is not None
        if not (duration or is_activity):
            continue
        # ingredient lines with a quantity are food, not training
        if not is_activity and extract_quantity(line)["quantity_grams"]:
            continue

        minutes = int(duration.group(1)) if duration else DEFAULT_DURATION
        burned = int(calories.group(1)) if calories else DEFAULT_CALORIES
        records.append(TrainingDay(
            week=current_week,
            day=current_day,
            activity=line,
            duration_minutes=minutes if 1 <= minutes <= MAX_DURATION else DEFAULT_DURATION,
            intensity=detect_intensity(text),
            calories_burned=burned if burned <= MAX_CALORIES else DEFAULT_CALORIES,
        ))

    return records


__all__ = ["extract_training_days", "detect_intensity"]
