# memory/food_catalog.py
"""
MealPlan Extractor — Food Catalog (JSON-backed)
================================================
The persistence collaborator the plan assembler queries to attach an
existing catalog id to a parsed ingredient.

- FoodCatalog: the async point-query interface
- JsonFoodCatalog: reads a JSON food list once, answers lookups from memory

Lookups never write to the catalog or to the nutrition knowledge tables.
"""

import json
import os
import re
from typing import List, Optional, Protocol

from pydantic import BaseModel, Field, ValidationError

from parsing.fuzzy_match import normalize_for_matching
from parsing.parser_config import PARSER_CONFIG, log


# =============================================================================
# MODELS
# =============================================================================
class CatalogFood(BaseModel):
    id: str
    name: str
    aliases: List[str] = Field(default_factory=list)
    calories_per_100g: Optional[float] = Field(None, ge=0, le=1000)
    protein_per_100g: Optional[float] = Field(None, ge=0, le=100)
    carbs_per_100g: Optional[float] = Field(None, ge=0, le=100)
    fat_per_100g: Optional[float] = Field(None, ge=0, le=100)
    category: str = "other"


class FoodCatalog(Protocol):
    async def search_foods(self, name: str) -> List[CatalogFood]:
        ...


# =============================================================================
# JSON CATALOG
# =============================================================================
class JsonFoodCatalog:
    """Reads catalog entries from a JSON file."""

    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath or PARSER_CONFIG["catalog_path"]
        self.foods: List[CatalogFood] = self._load()

    def _load(self) -> List[CatalogFood]:
        if not os.path.exists(self.filepath):
            log(f"⚠️ Food catalog not found: {self.filepath}")
            return []

        try:
            with open(self.filepath, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            log(f"⚠️ Food catalog unreadable, using an empty catalog: {e}")
            return []

        entries = raw.get("foods", []) if isinstance(raw, dict) else raw
        if not isinstance(entries, list):
            log(f"⚠️ Food catalog has no food list: {self.filepath}")
            return []

        foods: List[CatalogFood] = []
        for entry in entries:
            try:
                foods.append(CatalogFood(**entry))
            except (TypeError, ValidationError) as e:
                log(f"⚠️ Skipping invalid catalog entry {entry!r}: {e}")

        log(f"📂 Food catalog: {len(foods)} entries from {self.filepath}")
        return foods

    @property
    def size(self) -> int:
        return len(self.foods)

    @staticmethod
    def _contains_words(haystack: str, needle: str) -> bool:
        return re.search(rf"(?<!\w){re.escape(needle)}(?!\w)", haystack) is not None

    def _keys(self, food: CatalogFood) -> List[str]:
        return [normalize_for_matching(n) for n in [food.name, *food.aliases] if n]

    async def search_foods(self, name: str) -> List[CatalogFood]:
        """
        Catalog entries matching a food name, exact matches first.

        Args:
            name: Ingredient name as parsed (accents optional)

        Returns:
            Matching entries; empty list when nothing matches.
        """
        query = normalize_for_matching(name)
        if not query:
            return []

        exact: List[CatalogFood] = []
        partial: List[CatalogFood] = []
        for food in self.foods:
            keys = self._keys(food)
            if query in keys:
                exact.append(food)
            elif any(
                self._contains_words(query, key) or self._contains_words(key, query)
                for key in keys
            ):
                partial.append(food)
        return exact + partial


__all__ = ["CatalogFood", "FoodCatalog", "JsonFoodCatalog"]
