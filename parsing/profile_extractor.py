# parsing/profile_extractor.py
"""
MealPlan Extractor — Personal Profile Extractor
================================================
Pulls the client's personal data out of a meal-plan document: name, age,
weight, height, BMI, gender, blood pressure, activity level, goal,
allergies, dietary preferences and daily calorie target.

Pattern tables are (regex, value) rows tried in order; the first row that
yields an in-range value wins. Works in HU / RO / EN on accent-free text.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from parsing.fuzzy_match import normalize_for_matching
from parsing.schemas import BloodPressure, PersonalProfile

# =============================================================================
# PATTERN TABLES (accent-free, lowercase)
# =============================================================================
_UPPER = "A-ZÁÉÍÓÖŐÚÜŰĂÂÎȘȚŞŢ"
_LOWER = "a-záéíóöőúüűăâîșțşţ"
_PROPER_NAME = rf"([{_UPPER}][{_LOWER}]+(?:[ \t]+[{_UPPER}][{_LOWER}]+)*)"

NAME_PATTERNS = (
    re.compile(rf"(?i:nev|név|name|paciens|páciens|kliens|ugyfel|ügyfél|nume|client)\s*[:=\-–]\s*{_PROPER_NAME}"),
    re.compile(rf"(?i:kedves|tisztelt|draga|drága|dragă|stimate|stimata|stimată|dear)\s+{_PROPER_NAME}"),
)

_NUMBER = r"(\d+(?:[.,]\d+)?)"

WEIGHT_PATTERNS = (
    re.compile(rf"\b(?:test)?suly\s*[:=\-–]?\s*{_NUMBER}\s*(?:kg)?"),
    re.compile(rf"\b(?:weight|greutate)\s*[:=\-–]?\s*{_NUMBER}\s*(?:kg)?"),
    re.compile(rf"{_NUMBER}\s*kg\s*(?:testsuly|suly|test\s*tomeg|greutate)"),
)

HEIGHT_PATTERNS = (
    re.compile(rf"\b(?:magassag|height|inaltime)\s*[:=\-–]?\s*{_NUMBER}\s*(?:cm|m)?"),
    re.compile(rf"{_NUMBER}\s*(?:cm|m)\s*(?:magas|inaltime)"),
)

BMI_PATTERNS = (
    re.compile(rf"\bbmi\s*[:=\-–]?\s*{_NUMBER}"),
    re.compile(rf"testtomeg\s*index\s*[:=\-–]?\s*{_NUMBER}"),
    re.compile(rf"body\s*mass\s*index\s*[:=\-–]?\s*{_NUMBER}"),
    re.compile(rf"indice\s*de\s*masa\s*(?:corporala)?\s*[:=\-–]?\s*{_NUMBER}"),
)

AGE_PATTERNS = (
    re.compile(r"\b(?:kor|eletkor|age|varsta)\s*[:=\-–]?\s*(\d+)\s*(?:ev|eves|ani|years?)?\b"),
    re.compile(r"\b(\d+)\s*(?:eves|years?\s*old)\b"),
    re.compile(r"\b(\d+)\s*(?:de\s*)?ani\b"),
    re.compile(r"szuletesi?\s*(?:datum|ev|ido)\s*[:=\-–]?\s*(\d{4})"),
    re.compile(r"(?:born|nascut|data nasterii)\s*[:=\-–]?\s*(?:in\s*)?(\d{4})"),
)

GENDER_PATTERNS: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"\b(?:nem|gender|sex|gen)\s*[:=\-–]\s*(?:ferfi|male|masculin|barbat)"), "male"),
    (re.compile(r"\b(?:nem|gender|sex|gen)\s*[:=\-–]\s*(?:noi?|female|feminin|femeie)\b"), "female"),
    (re.compile(r"\b(?:ferfi|barbat|male|masculin)\b"), "male"),
    (re.compile(r"\b(?:holgy|female|femeie|feminin)\b"), "female"),
)

BLOOD_PRESSURE_PATTERNS = (
    re.compile(r"\b(?:vernyomas|blood\s*pressure|rr|bp|tensiune(?:\s*arteriala)?)\s*[:=\-–]?\s*(\d{2,3})\s*[/\\]\s*(\d{2,3})"),
    re.compile(r"(\d{2,3})\s*[/\\]\s*(\d{2,3})\s*(?:hgmm|mmhg)"),
)

ACTIVITY_PATTERNS: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"ulo\s*munka|ulomunka|irodai|sedentary|inaktiv|mozgasszegeny|sedentar"), "sedentary"),
    (re.compile(r"(?:enyhen|konnyen|kisse|lightly|usor)\s*(?:aktiv|mozgo|activ)"), "lightly_active"),
    (re.compile(r"(?:merseklete?n|kozepes(?:en)?|moderately|moderat)\s*(?:aktiv|mozgo|activ)"), "moderately_active"),
    (re.compile(r"(?:extrem(?:en)?|rendkivul|extremely)\s*(?:aktiv|mozgo|activ)"), "extremely_active"),
    (re.compile(r"(?:nagyon|intenziven|very|foarte)\s*(?:aktiv|mozgo|activ)"), "very_active"),
    (re.compile(r"heti\s*[45]\s*(?:alkalom|edzes)"), "very_active"),
    (re.compile(r"heti\s*[23]\s*(?:alkalom|edzes)"), "moderately_active"),
    (re.compile(r"heti\s*1\s*(?:alkalom|edzes)"), "lightly_active"),
    (re.compile(r"naponta\s*(?:edz|sportol)"), "extremely_active"),
)

GOAL_PATTERNS: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"fogyas|sulycsokken|testsuly\s*csokkent|weight\s*loss|deficit|slabire|pierdere"), "weight_loss"),
    (re.compile(r"izom(?:epites|noves|tomeg)|muscle|tomeges|\bbulk|masa\s*musculara"), "muscle_gain"),
    (re.compile(r"szinttartas|fenntartas|karbantartas|maintenance|mentinere"), "maintenance"),
)

ALLERGY_SECTION = re.compile(
    r"(?:allergiak?|intoleranciak?|erzekenyseg|allergies|allergy|sensitivity|alergii|alergie)"
    r"\s*[:=\-–]?\s*([^\n.]{3,100})"
)
ALLERGEN_CUES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"laktoz(?:mentes|erzekeny|intoleran)|fara\s*lactoza|lactose"), "Laktoz"),
    (re.compile(r"glutenmentes|gluten\s*(?:erzekeny|intoleran)|fara\s*gluten|gluten[- ]free"), "Gluten"),
    (re.compile(r"tejfeherje"), "Tejfeherje"),
    (re.compile(r"tojasallergia|tojas\s*erzekeny"), "Tojas"),
    (re.compile(r"mogyoroallergia|arahide|peanut\s*allergy"), "Mogyoro"),
)

PREFERENCE_SECTION = re.compile(
    r"(?:etrendi?\s*(?:preferencia|stilus|jelleg)|dieta\s*(?:tipusa?|jellege)|"
    r"etkezesi?\s*(?:szokasa?|forma)|regim\s*alimentar|dietary\s*preferences?)"
    r"\s*[:=\-–]?\s*([^\n.]{3,100})"
)
PREFERENCE_CUES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"vegetarianus|vegetarian"), "Vegetarian"),
    (re.compile(r"\bvegan"), "Vegan"),
    (re.compile(r"\bketo(?:gen)?"), "Ketogen"),
    (re.compile(r"\bpaleo"), "Paleo"),
    (re.compile(r"mediterran"), "Mediterran"),
    (re.compile(r"feherjedus|protein(?:dus|gazdag)|high\s*protein"), "Feherjedus"),
    (re.compile(r"szenhidrat\s*szegeny|low\s*carb"), "Low carb"),
    (re.compile(r"zsirszegeny|low\s*fat"), "Zsirszegeny"),
)

CALORIE_TARGET_PATTERNS = (
    re.compile(r"(?:napi\s*)?kaloria\s*(?:cel|szukseglet|igeny|target|limit)\s*[:=\-–]?\s*(\d{3,5})"),
    re.compile(r"(?:ajanlott|tervezett|cel)\s*(?:napi\s*)?(?:kaloria|energia)\s*[:=\-–]?\s*(\d{3,5})"),
    re.compile(r"(\d{3,5})\s*kcal\s*(?:napi|naponta|/\s*nap|pe\s*zi|zilnic|per\s*day|/\s*day)"),
    re.compile(r"\b(?:tdee|bmr|alapanyagcsere)\s*[:=\-–]?\s*(\d{3,5})"),
    re.compile(r"ossz(?:es)?\s*(?:napi\s*)?kaloria\s*[:=\-–]?\s*(\d{3,5})"),
    re.compile(r"(?:daily\s*calories|calorie\s*target)\s*[:=\-–]?\s*(\d{3,5})"),
)


# =============================================================================
# HELPERS
# =============================================================================
def normalize_lines(text: str) -> str:
    """normalize_for_matching() per line, keeping line breaks."""
    return "\n".join(normalize_for_matching(line) for line in (text or "").split("\n"))


def _to_float(value: str) -> float:
    return float(value.replace(",", "."))


def _first_number(patterns, text: str, low: float, high: float, convert=None) -> Optional[float]:
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        value = _to_float(match.group(1))
        if convert:
            value = convert(value)
        if low <= value <= high:
            return value
    return None


def _first_tag(table, text: str) -> Optional[str]:
    for pattern, tag in table:
        if pattern.search(text):
            return tag
    return None


def _split_list(section: str) -> List[str]:
    return [item.strip() for item in re.split(r"[,;]", section) if 1 < len(item.strip()) < 50]


def _age_from(value: float) -> float:
    current_year = datetime.now().year
    if 1900 < value <= current_year:
        return current_year - value
    return value


def _height_in_cm(value: float) -> float:
    return value * 100 if value < 3 else value


def compute_bmi(weight: float, height_cm: float) -> float:
    """BMI rounded to one decimal."""
    meters = height_cm / 100
    return round(weight / (meters * meters), 1)


# =============================================================================
# MAIN: extract_profile
# =============================================================================
def extract_profile(raw_text: str) -> PersonalProfile:
    """
    Extract the personal profile from sanitized document text.

    Name patterns run on the original text (they need capitalization);
    everything else runs on the accent-free lowercase form.

    Example:
        >>> extract_profile("Név: Kiss Anna\\nTestsúly: 68 kg\\nMagasság: 170 cm").bmi
        23.5
    """
    original = raw_text or ""
    text = normalize_lines(original)
    data: Dict[str, Any] = {}

    for pattern in NAME_PATTERNS:
        match = pattern.search(original)
        if match:
            data["name"] = match.group(1).strip()
            break

    data["weight"] = _first_number(WEIGHT_PATTERNS, text, 20, 300)
    data["height"] = _first_number(HEIGHT_PATTERNS, text, 100, 250, _height_in_cm)
    data["bmi"] = _first_number(BMI_PATTERNS, text, 10, 60)

    age = _first_number(AGE_PATTERNS, text, 1, 119, _age_from)
    data["age"] = int(age) if age is not None else None

    data["gender"] = _first_tag(GENDER_PATTERNS, text)

    for pattern in BLOOD_PRESSURE_PATTERNS:
        match = pattern.search(text)
        if match:
            systolic, diastolic = int(match.group(1)), int(match.group(2))
            if 60 < systolic < 250 and 30 < diastolic < 150:
                data["blood_pressure"] = BloodPressure(systolic=systolic, diastolic=diastolic)
                break

    data["activity_level"] = _first_tag(ACTIVITY_PATTERNS, text)
    data["goal"] = _first_tag(GOAL_PATTERNS, text)

    section = ALLERGY_SECTION.search(text)
    allergies = _split_list(section.group(1)) if section else []
    if not allergies:
        allergies = [label for pattern, label in ALLERGEN_CUES if pattern.search(text)]
    data["allergies"] = allergies

    section = PREFERENCE_SECTION.search(text)
    preferences = _split_list(section.group(1)) if section else []
    if not preferences:
        preferences = [label for pattern, label in PREFERENCE_CUES if pattern.search(text)]
    data["dietary_preferences"] = preferences

    target = _first_number(CALORIE_TARGET_PATTERNS, text, 501, 9999)
    data["calorie_target"] = int(target) if target is not None else None

    if data["bmi"] is None and data["weight"] and data["height"]:
        bmi = compute_bmi(data["weight"], data["height"])
        data["bmi"] = bmi if 10 <= bmi <= 60 else None

    return PersonalProfile(**{k: v for k, v in data.items() if v is not None})


__all__ = ["extract_profile", "compute_bmi", "normalize_lines"]
