# parsing/parser_config.py
"""
MealPlan Extractor — Parser Configuration
==========================================
Environment-driven settings shared by every pipeline stage.
"""

import os
from typing import Any, Dict

from dotenv import load_dotenv

# =============================================================================
# CONFIGURATION
# =============================================================================
load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

GOOGLE_API_KEY = os.environ.get("GOOGLE_API_KEY")


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


PARSER_CONFIG: Dict[str, Any] = {
    "verbose": _env_flag("MEALPLAN_VERBOSE", False),
    "min_text_length": int(os.environ.get("MEALPLAN_MIN_TEXT_LENGTH", "10")),
    "gemini_model": os.environ.get("MEALPLAN_GEMINI_MODEL", "gemini-2.0-flash"),
    "llm_enabled": _env_flag("MEALPLAN_LLM_ENABLED", True),
    "llm_max_chars": int(os.environ.get("MEALPLAN_LLM_MAX_CHARS", "30000")),
    "catalog_path": os.environ.get(
        "MEALPLAN_CATALOG_PATH",
        os.path.join(BASE_DIR, "data", "food_catalog.json"),
    ),
}


def log(message: str) -> None:
    """Console log line, silenced unless MEALPLAN_VERBOSE is set."""
    if PARSER_CONFIG["verbose"]:
        print(message)


__all__ = ["PARSER_CONFIG", "GOOGLE_API_KEY", "BASE_DIR", "log"]
