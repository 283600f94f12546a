# agents/llm_extraction_agent.py
"""
MealPlan Extractor — Gemini Extraction Agent
=============================================
Optional hosted-LLM path. When a Gemini API key is configured the document
is sent to the model with a JSON-only prompt; the answer is validated with
pydantic, every food name goes through the clean-name gate and the plan is
re-validated by validate_plan(). Any failure falls back to the
deterministic pipeline in agents/document_agent.py.
"""

import json
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from agents.document_agent import (
    calculate_document_confidence,
    cross_fill_weight,
    ensure_sufficient_text,
    missing_data_warnings,
    parse_document_text,
)
from parsing.food_name_gate import clean_food_name, explain_rejection
from parsing.nutrition_estimator import estimate_nutrition
from parsing.parser_config import GOOGLE_API_KEY, PARSER_CONFIG, log
from parsing.plan_validator import validate_plan
from parsing.profile_extractor import compute_bmi
from parsing.schemas import (
    ExtractionResult,
    MealType,
    Measurement,
    NormalizedUnit,
    ParsedDay,
    ParsedIngredient,
    ParsedMeal,
    ParsedPlan,
    PersonalProfile,
    TrainingDay,
)

# =============================================================================
# CONFIGURATION
# =============================================================================
GEMINI_AVAILABLE = False
CLIENT = None

try:
    from google import genai
    from google.genai import types as genai_types

    if GOOGLE_API_KEY and PARSER_CONFIG["llm_enabled"]:
        CLIENT = genai.Client(api_key=GOOGLE_API_KEY)
        GEMINI_AVAILABLE = True
        log("✅ LLM Extraction: Gemini ready")
    else:
        log("⚠️ LLM Extraction: No API key found, using pipeline parser")
except ImportError as e:
    log(f"⚠️ LLM Extraction: google-genai not installed: {e}")


# =============================================================================
# RESPONSE SCHEMA
# =============================================================================
class LlmIngredient(BaseModel):
    name: str
    quantity_grams: Optional[float] = Field(None, gt=0, le=5000)
    unit: Optional[NormalizedUnit] = None
    quantity_text: str = ""


class LlmMeal(BaseModel):
    meal_type: MealType
    name: str = ""
    ingredients: List[LlmIngredient] = Field(default_factory=list)
    declared_calories: Optional[int] = Field(None, ge=0, le=10000)


class LlmDay(BaseModel):
    day: int = Field(ge=1, le=7)
    is_training_day: bool = False
    meals: List[LlmMeal] = Field(default_factory=list)


class LlmWeek(BaseModel):
    week: int = Field(ge=1, le=12)
    days: List[LlmDay] = Field(default_factory=list)


class LlmDocument(BaseModel):
    weeks: List[LlmWeek] = Field(default_factory=list)
    personal_profile: PersonalProfile = Field(default_factory=PersonalProfile)
    measurements: List[Measurement] = Field(default_factory=list)
    training_days: List[TrainingDay] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


EXTRACTION_PROMPT = """
You extract meal plans from Hungarian, Romanian or English documents.
Return ONLY a JSON object with this shape, no prose:

{{
  "weeks": [{{"week": 1, "days": [{{"day": 1, "is_training_day": false,
      "meals": [{{"meal_type": "breakfast|lunch|dinner|snack|post_workout",
                  "name": "header text", "declared_calories": null,
                  "ingredients": [{{"name": "food", "quantity_grams": 250,
                                    "unit": "g|ml|count", "quantity_text": "250g"}}]}}]}}]}}],
  "personal_profile": {{"name": null, "age": null, "weight": null, "height": null,
      "gender": null, "goal": null, "activity_level": null, "allergies": [],
      "dietary_preferences": [], "calorie_target": null}},
  "measurements": [],
  "training_days": [],
  "warnings": []
}}

Rules:
- day is 1 (Monday) to 7 (Sunday); keep food names in the document's language
- never invent foods or quantities; use null when a quantity is missing
- if there is no meal plan, return an empty "weeks" list

DOCUMENT:
{document}
"""

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def is_llm_parser_available() -> bool:
    return GEMINI_AVAILABLE and CLIENT is not None


def get_parser_info() -> Dict[str, Any]:
    available = is_llm_parser_available()
    return {
        "name": f"Gemini ({PARSER_CONFIG['gemini_model']})" if available else "Pipeline parser",
        "available": available,
        "model": PARSER_CONFIG["gemini_model"] if available else None,
    }


def parse_llm_json(raw_response: str) -> Dict[str, Any]:
    """JSON object from a model answer, tolerating a Markdown code fence."""
    cleaned = _CODE_FENCE.sub("", (raw_response or "").strip())
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError("LLM response is not a JSON object")
    return data


# =============================================================================
# CONVERSION
# =============================================================================
def plan_from_llm(document: LlmDocument, warnings: List[str]) -> Dict[str, Any]:
    """
    Build a ParsedPlan from the model's weeks, gating every food name.

    Returns:
        Dictionary with plan and markers_found (weeks + days + meals).
    """
    weeks: List[List[ParsedDay]] = []
    markers_found = 0

    for llm_week in sorted(document.weeks, key=lambda w: w.week):
        markers_found += 1
        days: List[ParsedDay] = []
        for llm_day in llm_week.days:
            markers_found += 1
            meals: List[ParsedMeal] = []
            for llm_meal in llm_day.meals:
                markers_found += 1
                ingredients: List[ParsedIngredient] = []
                for item in llm_meal.ingredients:
                    name = clean_food_name(item.name)
                    reason = explain_rejection(name)
                    if reason:
                        warnings.append(f'Unmatched ingredient: "{item.name}" ({reason})')
                        continue
                    ingredients.append(ParsedIngredient(
                        name=name,
                        quantity_grams=item.quantity_grams,
                        unit=item.unit if item.quantity_grams else None,
                        quantity_text=item.quantity_text if item.quantity_grams else "",
                        nutrition=estimate_nutrition(name),
                    ))
                meals.append(ParsedMeal(
                    meal_type=llm_meal.meal_type,
                    name=llm_meal.name or llm_meal.meal_type,
                    ingredients=ingredients,
                    declared_calories=llm_meal.declared_calories,
                ))
            days.append(ParsedDay(
                week=llm_week.week,
                day=llm_day.day,
                is_training_day=llm_day.is_training_day,
                meals=meals,
            ))
        if days:
            weeks.append(days)

    plan = ParsedPlan(
        weeks=weeks,
        detected_weeks=len(weeks),
        detected_days_per_week=max((len(week) for week in weeks), default=0),
    )
    return {"plan": plan, "markers_found": markers_found}


def result_from_llm(data: Dict[str, Any]) -> Optional[ExtractionResult]:
    """
    Validated ExtractionResult from the model's JSON, or None when the
    plan part is a hard failure.

    Raises:
        ValidationError: the JSON does not match the response schema
    """
    document = LlmDocument(**data)
    warnings = list(document.warnings)

    built = plan_from_llm(document, warnings)
    outcome = validate_plan(built["plan"], built["markers_found"], warnings)
    if outcome.is_hard_failure:
        log(f"⚠️ LLM plan rejected: {outcome.errors[0]}")
        return None

    profile = document.personal_profile
    if profile.bmi is None and profile.weight and profile.height:
        profile = profile.model_copy(update={"bmi": compute_bmi(profile.weight, profile.height)})
    measurements = cross_fill_weight(profile, document.measurements)

    return ExtractionResult(
        plan=outcome.plan,
        personal_profile=profile,
        measurements=measurements,
        training_days=document.training_days,
        warnings=[*outcome.warnings, *missing_data_warnings(profile, outcome)],
        confidence=outcome.confidence,
        document_confidence=calculate_document_confidence(
            profile, outcome, measurements, document.training_days
        ),
        parser="gemini",
    )


# =============================================================================
# MAIN: parse_document_with_llm
# =============================================================================
async def parse_document_with_llm(text: str, catalog: Any = None) -> ExtractionResult:
    """
    Parse a document with Gemini, falling back to the pipeline.

    Args:
        text: Raw document text
        catalog: Optional FoodCatalog, used by the pipeline fallback

    Returns:
        ExtractionResult with parser="gemini" on success, "pipeline" after
        a fallback.

    Raises:
        InsufficientTextError: fewer than PARSER_CONFIG["min_text_length"] characters
    """
    text = ensure_sufficient_text(text)

    if is_llm_parser_available():
        try:
            prompt = EXTRACTION_PROMPT.format(document=text[:PARSER_CONFIG["llm_max_chars"]])
            response = await CLIENT.aio.models.generate_content(
                model=PARSER_CONFIG["gemini_model"],
                contents=prompt,
                config=genai_types.GenerateContentConfig(
                    response_mime_type="application/json",
                    temperature=0.1,
                ),
            )
            result = result_from_llm(parse_llm_json(response.text))
            if result is not None:
                log(f"✅ Gemini extraction succeeded, confidence {result.confidence}")
                return result

        except ValidationError as e:
            log(f"⚠️ LLM validation failed: {e}. Using pipeline...")

        except (json.JSONDecodeError, ValueError) as e:
            log(f"⚠️ LLM JSON parse failed: {e}. Using pipeline...")

        except Exception as e:
            log(f"⚠️ LLM extraction failed: {e}. Using pipeline...")

    return await parse_document_text(text, catalog)


__all__ = [
    "GEMINI_AVAILABLE",
    "is_llm_parser_available",
    "get_parser_info",
    "parse_llm_json",
    "plan_from_llm",
    "result_from_llm",
    "parse_document_with_llm",
]
