# parsing/nutrition_estimator.py
"""
MealPlan Extractor — Nutrition Estimator
=========================================
Resolves a food name to a per-100g macro profile.

Lookup is an ordered list of strategies; the first one that returns a
profile wins:

1. knowledge table, exact / substring (longest alias wins)
2. knowledge table, shared word of 4+ letters
3. system foods, exact / substring
4. system foods, shared word
5. category keyword heuristics
6. generic profile (is_generic=True, calories never trusted downstream)

Works fully offline. No table is ever modified.
"""

import re
from typing import Callable, List, Optional, Sequence, Tuple

from parsing.food_knowledge import (
    CATEGORY_HEURISTICS,
    FOOD_KNOWLEDGE,
    GENERIC_PROFILE,
    SYSTEM_FOODS,
    FoodProfile,
)
from parsing.fuzzy_match import normalize_for_matching
from parsing.schemas import NutritionEstimate

MIN_OVERLAP_WORD = 4


def _contains_word(haystack: str, needle: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(needle)}(?!\w)", haystack) is not None


def _to_estimate(profile: FoodProfile, source: str) -> NutritionEstimate:
    return NutritionEstimate(
        calories_per_100g=profile.calories,
        protein_per_100g=profile.protein,
        carbs_per_100g=profile.carbs,
        fat_per_100g=profile.fat,
        category=profile.category,
        source=f"{source}:{profile.food_id}",
    )


# =============================================================================
# MATCHERS
# =============================================================================
def match_exact(name: str, table: Sequence[FoodProfile]) -> Optional[FoodProfile]:
    """
    Alias equal to the name, or contained in it as whole words (or the
    name contained in the alias). Longest alias wins, so "görög joghurt"
    beats "joghurt".
    """
    best: Optional[Tuple[int, FoodProfile]] = None
    for profile in table:
        for alias in profile.aliases:
            reverse = len(name) >= MIN_OVERLAP_WORD and _contains_word(alias, name)
            if name == alias or _contains_word(name, alias) or reverse:
                if best is None or len(alias) > best[0]:
                    best = (len(alias), profile)
    return best[1] if best else None


def match_word_overlap(name: str, table: Sequence[FoodProfile]) -> Optional[FoodProfile]:
    """First profile sharing a word of 4+ letters with the name."""
    words = {w for w in re.findall(r"\w+", name) if len(w) >= MIN_OVERLAP_WORD}
    if not words:
        return None
    for profile in table:
        for alias in profile.aliases:
            alias_words = {w for w in alias.split() if len(w) >= MIN_OVERLAP_WORD}
            if words & alias_words:
                return profile
    return None


# =============================================================================
# STRATEGIES
# =============================================================================
def lookup_knowledge_exact(name: str) -> Optional[NutritionEstimate]:
    profile = match_exact(name, FOOD_KNOWLEDGE)
    return _to_estimate(profile, "knowledge") if profile else None


def lookup_knowledge_overlap(name: str) -> Optional[NutritionEstimate]:
    profile = match_word_overlap(name, FOOD_KNOWLEDGE)
    return _to_estimate(profile, "knowledge") if profile else None


def lookup_system_exact(name: str) -> Optional[NutritionEstimate]:
    profile = match_exact(name, SYSTEM_FOODS)
    return _to_estimate(profile, "system") if profile else None


def lookup_system_overlap(name: str) -> Optional[NutritionEstimate]:
    profile = match_word_overlap(name, SYSTEM_FOODS)
    return _to_estimate(profile, "system") if profile else None


def lookup_category(name: str) -> Optional[NutritionEstimate]:
    for heuristic in CATEGORY_HEURISTICS:
        if heuristic.pattern.search(name):
            return NutritionEstimate(
                calories_per_100g=heuristic.calories,
                protein_per_100g=heuristic.protein,
                carbs_per_100g=heuristic.carbs,
                fat_per_100g=heuristic.fat,
                category=heuristic.category,
                source=f"category:{heuristic.category}",
            )
    return None


LOOKUP_STRATEGIES: List[Callable[[str], Optional[NutritionEstimate]]] = [
    lookup_knowledge_exact,
    lookup_knowledge_overlap,
    lookup_system_exact,
    lookup_system_overlap,
    lookup_category,
]


def generic_estimate() -> NutritionEstimate:
    return NutritionEstimate(
        calories_per_100g=GENERIC_PROFILE.calories,
        protein_per_100g=GENERIC_PROFILE.protein,
        carbs_per_100g=GENERIC_PROFILE.carbs,
        fat_per_100g=GENERIC_PROFILE.fat,
        category=GENERIC_PROFILE.category,
        source="generic",
        is_generic=True,
    )


def estimate_nutrition(name: str) -> NutritionEstimate:
    """
    Per-100g macros for a food name.

    Args:
        name: Food name in any of the supported languages, accents optional.

    Returns:
        NutritionEstimate. Unknown foods get the generic profile with
        is_generic=True.

    Example:
        >>> estimate_nutrition("Görög joghurt").calories_per_100g
        97.0
        >>> estimate_nutrition("xyzfood").is_generic
        True
    """
    normalized = normalize_for_matching(name)
    if not normalized:
        return generic_estimate()

    for strategy in LOOKUP_STRATEGIES:
        estimate = strategy(normalized)
        if estimate is not None:
            return estimate
    return generic_estimate()


__all__ = [
    "LOOKUP_STRATEGIES",
    "estimate_nutrition",
    "generic_estimate",
    "match_exact",
    "match_word_overlap",
]
