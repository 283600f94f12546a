# parsing/schemas.py
"""
MealPlan Extractor — Validation Schemas
========================================
Pydantic models for every value the pipeline produces.

Finalized plan nodes (ingredient, meal, day, plan) are frozen: the
assembler builds them from mutable accumulators and never touches them
again.
"""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from parsing.food_name_gate import explain_rejection

# =============================================================================
# ENUMS
# =============================================================================
MealType = Literal["breakfast", "lunch", "dinner", "snack", "post_workout"]
NormalizedUnit = Literal["g", "ml", "count"]
DocumentFormat = Literal["pdf", "word", "image", "text"]
Intensity = Literal["light", "moderate", "intense"]

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack", "post_workout")


class LineTag(str, Enum):
    WEEK = "week"
    DAY = "day"
    MEAL = "meal"
    CONTENT = "content"


# =============================================================================
# INPUT
# =============================================================================
class RawDocument(BaseModel):
    """Uploaded source: bytes and/or already extracted text."""
    filename: str = ""
    content_type: str = ""
    content: bytes = b""
    text: Optional[str] = None
    format: Optional[DocumentFormat] = None


# =============================================================================
# TOKENIZER
# =============================================================================
class LineClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    tag: LineTag
    raw: str
    week: Optional[int] = Field(None, ge=1, le=12)
    day: Optional[int] = Field(None, ge=1, le=7)
    meal_type: Optional[MealType] = None

    @property
    def is_marker(self) -> bool:
        return self.tag is not LineTag.CONTENT


# =============================================================================
# FOOD ITEMS
# =============================================================================
class ParsedFoodCandidate(BaseModel):
    """One "+"-separated segment of a content line that passed the name gate."""
    model_config = ConfigDict(frozen=True)

    name: str
    amount: Optional[float] = Field(None, gt=0)
    unit_raw: Optional[str] = None
    unit: Optional[NormalizedUnit] = None
    quantity_grams: Optional[float] = Field(None, gt=0)
    quantity_text: str = ""
    glued_calories: Optional[int] = Field(None, ge=0)


class NutritionEstimate(BaseModel):
    """Per-100g macro profile resolved for a food name."""
    model_config = ConfigDict(frozen=True)

    calories_per_100g: float = Field(ge=0, le=1000)
    protein_per_100g: float = Field(ge=0, le=100)
    carbs_per_100g: float = Field(ge=0, le=100)
    fat_per_100g: float = Field(ge=0, le=100)
    category: str
    source: str
    is_generic: bool = False


class ParsedIngredient(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    quantity_grams: Optional[float] = Field(None, gt=0)
    unit: Optional[NormalizedUnit] = None
    quantity_text: str = ""
    matched_food_id: Optional[str] = None
    glued_calories: Optional[int] = Field(None, ge=0)
    nutrition: NutritionEstimate

    @field_validator("name")
    @classmethod
    def name_must_be_clean(cls, value: str) -> str:
        reason = explain_rejection(value)
        if reason:
            raise ValueError(f"unclean food name {value!r}: {reason}")
        return value

    @property
    def estimated_calories(self) -> Optional[int]:
        """Calories for the parsed quantity, None when untrustworthy."""
        if self.nutrition.is_generic or not self.quantity_grams:
            return None
        return round(self.nutrition.calories_per_100g * self.quantity_grams / 100)


# =============================================================================
# PLAN TREE
# =============================================================================
class ParsedMeal(BaseModel):
    model_config = ConfigDict(frozen=True)

    meal_type: MealType
    name: str
    ingredients: List[ParsedIngredient] = Field(default_factory=list)
    declared_calories: Optional[int] = Field(None, ge=0)


class ParsedDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    week: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=7)
    is_training_day: bool = False
    meals: List[ParsedMeal] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return "Edzesnap" if self.is_training_day else "Pihenonap"


class ParsedPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    weeks: List[List[ParsedDay]] = Field(default_factory=list)
    detected_weeks: int = Field(0, ge=0)
    detected_days_per_week: int = Field(0, ge=0)

    def iter_meals(self):
        for week in self.weeks:
            for day in week:
                for meal in day.meals:
                    yield meal


class ValidationOutcome(BaseModel):
    plan: Optional[ParsedPlan] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    markers_found: int = 0
    meals_with_food: int = 0
    total_ingredients: int = 0

    @property
    def is_hard_failure(self) -> bool:
        return self.plan is None


# =============================================================================
# SIDE EXTRACTORS
# =============================================================================
class BloodPressure(BaseModel):
    systolic: int = Field(ge=60, le=250)
    diastolic: int = Field(ge=30, le=150)


class PersonalProfile(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    weight: Optional[float] = Field(None, ge=20, le=300)
    height: Optional[float] = Field(None, ge=100, le=250)
    bmi: Optional[float] = Field(None, ge=10, le=60)
    gender: Optional[Literal["male", "female"]] = None
    blood_pressure: Optional[BloodPressure] = None
    activity_level: Optional[Literal[
        "sedentary", "lightly_active", "moderately_active",
        "very_active", "extremely_active",
    ]] = None
    goal: Optional[Literal["weight_loss", "muscle_gain", "maintenance"]] = None
    allergies: List[str] = Field(default_factory=list)
    dietary_preferences: List[str] = Field(default_factory=list)
    calorie_target: Optional[int] = Field(None, ge=500, le=10000)

    @property
    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class Measurement(BaseModel):
    date: str = Field(default_factory=lambda: datetime.now().date().isoformat())
    weight: Optional[float] = Field(None, ge=20, le=300)
    body_fat: Optional[float] = Field(None, ge=1, le=60)
    waist: Optional[float] = Field(None, ge=30, le=200)
    chest: Optional[float] = Field(None, ge=30, le=200)
    arm: Optional[float] = Field(None, ge=10, le=100)
    hip: Optional[float] = Field(None, ge=30, le=200)
    thigh: Optional[float] = Field(None, ge=10, le=100)
    neck: Optional[float] = Field(None, ge=10, le=100)
    notes: str = ""


class TrainingDay(BaseModel):
    week: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=7)
    activity: str
    duration_minutes: int = Field(ge=1, le=600)
    intensity: Intensity = "moderate"
    calories_burned: int = Field(ge=0, le=5000)


# =============================================================================
# RESULT
# =============================================================================
class ExtractionResult(BaseModel):
    """Everything extracted from one document."""
    plan: Optional[ParsedPlan] = None
    personal_profile: PersonalProfile = Field(default_factory=PersonalProfile)
    measurements: List[Measurement] = Field(default_factory=list)
    training_days: List[TrainingDay] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    document_confidence: float = Field(0.0, ge=0.0, le=1.0)
    parser: Literal["pipeline", "gemini"] = "pipeline"

    @property
    def has_parse_error(self) -> bool:
        return any(w.startswith("PARSE_ERROR:") for w in self.warnings)



__all__ = [
    "MealType",
    "MEAL_TYPES",
    "NormalizedUnit",
    "DocumentFormat",
    "LineTag",
    "RawDocument",
    "LineClassification",
    "ParsedFoodCandidate",
    "NutritionEstimate",
    "ParsedIngredient",
    "ParsedMeal",
    "ParsedDay",
    "ParsedPlan",
    "ValidationOutcome",
    "BloodPressure",
    "PersonalProfile",
    "Measurement",
    "TrainingDay",
    "ExtractionResult",
]
