# parsing/food_knowledge.py
"""
MealPlan Extractor — Food Knowledge Tables
===========================================
Read-only per-100g macro tables consulted by the nutrition estimator:

- FOOD_KNOWLEDGE: common foods with HU / RO / EN aliases
- SYSTEM_FOODS: the built-in food list of the meal-plan catalog
- CATEGORY_HEURISTICS: keyword regex -> category profile

All tables are tuples of frozen models. Nothing writes to them.
"""

import re
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class FoodProfile(BaseModel):
    """Macros per 100 g for one food and all its spellings (accent-free)."""
    model_config = ConfigDict(frozen=True)

    food_id: str
    aliases: Tuple[str, ...]
    calories: float = Field(ge=0, le=1000)
    protein: float = Field(ge=0, le=100)
    carbs: float = Field(ge=0, le=100)
    fat: float = Field(ge=0, le=100)
    category: str


class CategoryHeuristic(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    category: str
    pattern: re.Pattern
    calories: float
    protein: float
    carbs: float
    fat: float


def _food(food_id, aliases, calories, protein, carbs, fat, category) -> FoodProfile:
    return FoodProfile(
        food_id=food_id,
        aliases=tuple(aliases),
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        category=category,
    )


# =============================================================================
# KNOWLEDGE TABLE
# =============================================================================
FOOD_KNOWLEDGE: Tuple[FoodProfile, ...] = (
    # Drinks / dairy
    _food("kave", ["kave", "cafea", "coffee", "espresso"], 2, 0.1, 0.4, 0, "drink"),
    _food("tej", ["tej", "lapte", "milk"], 50, 3.3, 4.7, 1.8, "dairy"),
    _food("gorog_joghurt", ["gorog joghurt", "iaurt grecesc", "greek yogurt", "greek yoghurt"],
          97, 9, 3.6, 5, "dairy"),
    _food("joghurt", ["joghurt", "iaurt", "yogurt", "yoghurt"], 61, 3.5, 4.7, 3.3, "dairy"),
    _food("turo", ["turo", "branza de vaci", "cottage cheese", "cottage"], 98, 11.1, 3.4, 4.3, "dairy"),
    _food("sajt", ["sajt", "trappista", "branza", "cascaval", "cheese"], 345, 25, 0.5, 27, "dairy"),
    _food("vaj", ["vaj", "unt", "butter"], 717, 0.9, 0.1, 81, "fat"),
    _food("tejfol", ["tejfol", "smantana", "sour cream"], 133, 2.1, 2.8, 12.5, "dairy"),
    _food("kefir", ["kefir"], 55, 3.4, 4.5, 2.5, "dairy"),
    # Grains
    _food("teljes_kiorlesu_kenyer",
          ["teljes kiorlesu kenyer", "paine integrala", "whole wheat bread", "wholegrain bread"],
          247, 13, 41, 3.4, "grain"),
    _food("kenyer", ["kenyer", "paine", "bread", "toast", "piritos"], 265, 9, 49, 3.2, "grain"),
    _food("zabpehely", ["zabpehely", "zab", "fulgi de ovaz", "ovaz", "oats", "oatmeal", "rolled oats"],
          379, 13.2, 67.7, 6.5, "grain"),
    _food("rizs", ["rizs", "orez", "rice"], 130, 2.7, 28.2, 0.3, "grain"),
    _food("teszta", ["teszta", "paste", "pasta", "spaghetti"], 131, 5, 25, 1.1, "grain"),
    _food("muzli", ["muzli", "musli", "muesli", "granola"], 378, 8.5, 66, 8, "grain"),
    _food("quinoa", ["quinoa", "kinoa"], 120, 4.4, 21.3, 1.9, "grain"),
    # Fruit
    _food("alma", ["alma", "mar", "mere", "apple"], 52, 0.3, 13.8, 0.2, "fruit"),
    _food("banan", ["banan", "banana"], 89, 1.1, 22.8, 0.3, "fruit"),
    _food("narancs", ["narancs", "portocala", "orange"], 47, 0.9, 11.8, 0.1, "fruit"),
    _food("eper", ["eper", "capsuni", "strawberry", "strawberries"], 33, 0.7, 7.7, 0.3, "fruit"),
    _food("afonya", ["afonya", "afine", "blueberry", "blueberries"], 57, 0.7, 14.5, 0.3, "fruit"),
    _food("avokado", ["avokado", "avocado"], 160, 2, 8.5, 14.7, "fruit"),
    # Vegetables
    _food("paradicsom", ["paradicsom", "rosii", "rosie", "tomato", "tomatoes"], 18, 0.9, 3.9, 0.2, "vegetable"),
    _food("uborka", ["uborka", "castravete", "castraveti", "cucumber"], 16, 0.7, 3.6, 0.1, "vegetable"),
    _food("paprika", ["paprika", "ardei", "bell pepper"], 26, 0.9, 6, 0.3, "vegetable"),
    _food("hagyma", ["hagyma", "ceapa", "onion"], 40, 1.1, 9.3, 0.1, "vegetable"),
    _food("burgonya", ["krumpli", "burgonya", "cartofi", "cartof", "potato", "potatoes"],
          77, 2, 17.5, 0.1, "vegetable"),
    _food("edesburgonya", ["edesburgonya", "batata", "cartofi dulci", "sweet potato"],
          86, 1.6, 20.1, 0.1, "vegetable"),
    _food("brokkoli", ["brokkoli", "broccoli"], 34, 2.8, 6.6, 0.4, "vegetable"),
    _food("sargarepa", ["sargarepa", "repa", "morcov", "morcovi", "carrot", "carrots"],
          41, 0.9, 9.6, 0.2, "vegetable"),
    _food("spenot", ["spenot", "spanac", "spinach"], 23, 2.9, 3.6, 0.4, "vegetable"),
    _food("gomba", ["gomba", "ciuperci", "mushroom", "mushrooms"], 22, 3.1, 3.3, 0.3, "vegetable"),
    _food("salata", ["salata", "lettuce", "salad"], 15, 1.4, 2.9, 0.2, "vegetable"),
    # Meat / fish / eggs
    _food("csirkemell", ["csirkemell", "piept de pui", "chicken breast", "pui", "chicken"],
          165, 31, 0, 3.6, "meat"),
    _food("csirkecomb", ["csirkecomb", "pulpe de pui", "pulpa de pui", "chicken thigh"],
          209, 26, 0, 10.9, "meat"),
    _food("pulykamell", ["pulykamell", "pulyka", "curcan", "piept de curcan", "turkey"],
          135, 30, 0, 1, "meat"),
    _food("sertes", ["sertes", "porc", "pork"], 242, 27.3, 0, 14, "meat"),
    _food("marha", ["marha", "vita", "beef", "steak"], 250, 26, 0, 15, "meat"),
    _food("sonka", ["sonka", "sunca", "ham"], 145, 21, 1.5, 5.5, "meat"),
    _food("lazac", ["lazac", "somon", "salmon"], 208, 20.4, 0, 13.4, "fish"),
    _food("tonhal", ["tonhal", "ton", "tuna"], 132, 29, 0, 1.3, "fish"),
    _food("tojas", ["tojas", "tojasfeherje", "oua", "ou", "egg", "eggs"], 155, 12.6, 1.1, 10.6, "egg"),
    # Legumes
    _food("lencse", ["lencse", "linte", "lentils"], 116, 9, 20, 0.4, "legume"),
    _food("csicseriborso", ["csicseriborso", "naut", "chickpeas"], 164, 8.9, 27.4, 2.6, "legume"),
    _food("bab", ["bab", "fasole", "beans"], 127, 8.7, 22.8, 0.5, "legume"),
    # Nuts / seeds
    _food("dio", ["dio", "nuci", "nuca", "walnut", "walnuts"], 654, 15.2, 13.7, 65.2, "nuts"),
    _food("mandula", ["mandula", "migdale", "almond", "almonds"], 579, 21.2, 21.7, 49.9, "nuts"),
    _food("mogyoro", ["mogyoro", "alune", "hazelnut", "peanut", "peanuts"], 567, 25.8, 16.1, 49.2, "nuts"),
    _food("mogyorovaj", ["mogyorovaj", "unt de arahide", "peanut butter"], 588, 25, 20, 50, "nuts"),
    _food("chia", ["chia", "chiamag", "seminte de chia", "chia seeds"], 486, 16.5, 42.1, 30.7, "nuts"),
    # Sweets / fats / supplements
    _food("etcsokolade", ["etcsokolade", "ciocolata neagra", "dark chocolate"], 546, 4.9, 60, 31.3, "sweets"),
    _food("mez", ["mez", "miere", "honey"], 304, 0.3, 82.4, 0, "sweets"),
    _food("olivaolaj", ["olivaolaj", "ulei de masline", "olive oil"], 884, 0, 0, 100, "oil"),
    _food("protein_shake", ["protein shake", "feherje shake", "whey", "proteinpor", "shake proteic"],
          380, 75, 8, 5, "supplement"),
)


# =============================================================================
# SYSTEM FOODS
# =============================================================================
SYSTEM_FOODS: Tuple[FoodProfile, ...] = (
    _food("sys_tojas", ["tojas"], 143, 13, 1, 10, "egg"),
    _food("sys_csirkemell", ["csirkemell"], 165, 31, 0, 4, "meat"),
    _food("sys_pulykamell", ["pulykamell"], 135, 30, 0, 1, "meat"),
    _food("sys_lazac", ["lazac"], 208, 20, 0, 13, "fish"),
    _food("sys_tokehal", ["tokehal", "cod"], 82, 18, 0, 1, "fish"),
    _food("sys_tonhal", ["tonhal"], 144, 30, 0, 1, "fish"),
    _food("sys_makrela", ["makrela", "macrou", "mackerel"], 205, 19, 0, 14, "fish"),
    _food("sys_csuka", ["csuka", "stiuca", "pike"], 88, 19, 0, 1, "fish"),
    _food("sys_garnela", ["garnela", "rak", "creveti", "shrimp"], 99, 24, 0, 0.3, "fish"),
    _food("sys_marhahus", ["marhahus", "carne de vita"], 250, 26, 0, 15, "meat"),
    _food("sys_serteskaraj", ["serteskaraj", "karaj", "cotlet de porc"], 231, 24, 0, 14, "meat"),
    _food("sys_tofu", ["tofu"], 76, 8, 2, 4.5, "legume"),
    _food("sys_barna_rizs", ["barna rizs", "orez brun", "brown rice"], 112, 2.6, 23, 0.9, "grain"),
    _food("sys_bulgur", ["bulgur"], 83, 3.1, 18.6, 0.2, "grain"),
    _food("sys_kuskusz", ["kuskusz", "cuscus", "couscous"], 112, 3.8, 23.2, 0.2, "grain"),
    _food("sys_puffasztott_rizs", ["puffasztott rizs", "rizsszelet", "rice cake"], 387, 8, 81, 3, "grain"),
    _food("sys_cukkini", ["cukkini", "dovlecel", "zucchini"], 17, 1.2, 3.1, 0.3, "vegetable"),
    _food("sys_karfiol", ["karfiol", "conopida", "cauliflower"], 25, 1.9, 5, 0.3, "vegetable"),
    _food("sys_zoldbab", ["zoldbab", "fasole verde", "green beans"], 31, 1.8, 7, 0.1, "vegetable"),
    _food("sys_mozzarella", ["mozzarella"], 280, 28, 3, 17, "dairy"),
    _food("sys_kokusztej", ["kokusztej", "lapte de cocos", "coconut milk"], 230, 2, 6, 24, "dairy"),
)


# =============================================================================
# CATEGORY HEURISTICS (last resort before the generic profile)
# =============================================================================
def _heuristic(category, pattern, calories, protein, carbs, fat) -> CategoryHeuristic:
    return CategoryHeuristic(
        category=category,
        pattern=re.compile(pattern),
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
    )


CATEGORY_HEURISTICS: Tuple[CategoryHeuristic, ...] = (
    _heuristic("meat", r"hus|csirke|pulyka|sertes|marha|borju|kolbasz|szalami|carne|pui|"
               r"curcan|porc|vita|meat|chicken|turkey|pork|beef|hal\b|peste|fish", 165, 25, 0, 7),
    _heuristic("egg", r"tojas|\boua?\b|egg", 143, 13, 1, 10),
    _heuristic("dairy", r"tej|sajt|joghurt|turo|kefir|lapte|iaurt|branza|milk|cheese|yog", 60, 5, 5, 3),
    _heuristic("grain", r"kenyer|zab|rizs|teszta|liszt|pehely|paine|orez|ovaz|paste|"
               r"bread|rice|pasta|oat|cereal", 130, 4, 28, 1),
    _heuristic("oil", r"olaj|ulei|\boil\b", 884, 0, 0, 100),
    _heuristic("fruit", r"gyumolcs|alma|korte|szilva|barack|szolo|fructe|fruct|"
               r"fruit|berry|bogyo", 55, 1, 13, 0.5),
    _heuristic("vegetable", r"zoldseg|salata|kaposzta|legume|zarzavat|vegetable|"
               r"salad|cabbage|leves|supa|soup", 25, 2, 4, 0.3),
    _heuristic("legume", r"bab|lencse|borso|fasole|linte|mazare|bean|lentil|pea\b", 120, 9, 20, 0.5),
    _heuristic("nuts", r"mogyoro|mag\b|magvak|seminte|nuci|nut|seed", 580, 18, 15, 50),
    _heuristic("sweets", r"csoki|csokolade|cukor|suti|torta|keksz|ciocolata|zahar|"
               r"prajitura|chocolate|sugar|cake|cookie", 300, 1, 75, 0.5),
)

GENERIC_PROFILE = _food("egyeb", ("egyeb",), 100, 5, 15, 3, "other")


__all__ = [
    "FoodProfile",
    "CategoryHeuristic",
    "FOOD_KNOWLEDGE",
    "SYSTEM_FOODS",
    "CATEGORY_HEURISTICS",
    "GENERIC_PROFILE",
]
