# agents/document_agent.py
"""
MealPlan Extractor — Document Agent
====================================
Entry points that turn a document into an ExtractionResult:

- parse_document_text(): pasted or already extracted text
- parse_uploaded_file(): uploaded bytes (text / word / pdf)
- parse_to_structured_meal_plan(): week/day/meal JSON or an explicit error

The plan pipeline and the profile / measurement / training extractors run
over the same sanitized text. A hard plan failure always yields plan=None
with a PARSE_ERROR warning; no default plan is ever substituted.
"""

import io
import re
from typing import Any, Dict, List, Optional

import pdfplumber

from parsing.measurement_extractor import DEFAULT_NOTES, extract_measurements
from parsing.parser_config import PARSER_CONFIG, log
from parsing.plan_assembler import parse_meal_plan_text
from parsing.profile_extractor import extract_profile
from parsing.schemas import (
    DocumentFormat,
    ExtractionResult,
    Measurement,
    PersonalProfile,
    RawDocument,
    TrainingDay,
    ValidationOutcome,
)
from parsing.structured_output import to_structured_meal_plan
from parsing.text_sanitizer import sanitize
from parsing.training_extractor import extract_training_days


# =============================================================================
# ERRORS
# =============================================================================
class DocumentExtractionError(Exception):
    """No text could be obtained from the document; the pipeline never ran."""


class InsufficientTextError(DocumentExtractionError):
    pass


class UnsupportedDocumentError(DocumentExtractionError):
    pass


# =============================================================================
# FILE HANDLING
# =============================================================================
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "heic"}
MIN_BINARY_TEXT = 50

# Printable ASCII, Latin-1 letters, HU/RO letters and line breaks
_PRINTABLE = re.compile(
    r"[^\x20-\x7E\xC0-\xFF\n\r\tÁáÉéÍíÓóÖöŐőÚúÜüŰűĂăÂâÎîȘșȚțŞşŢţ]"
)


def detect_file_type(filename: str, content_type: str = "") -> DocumentFormat:
    """
    Format of an uploaded file from its extension and MIME type.

    Example:
        >>> detect_file_type("etrend.PDF")
        'pdf'
    """
    ext = (filename or "").lower().rsplit(".", 1)[-1] if "." in (filename or "") else ""
    mime = (content_type or "").lower()

    if ext == "pdf" or mime == "application/pdf":
        return "pdf"
    if ext in ("doc", "docx") or "word" in mime:
        return "word"
    if mime.startswith("image/") or ext in IMAGE_EXTENSIONS:
        return "image"
    return "text"


def _decode(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content.decode("cp1252", errors="replace")


def _printable_text(content: bytes, kind: str) -> str:
    cleaned = _PRINTABLE.sub(" ", _decode(content))
    if len(re.sub(r"\s", "", cleaned)) <= MIN_BINARY_TEXT:
        raise UnsupportedDocumentError(
            f"No readable text found in the {kind} file. Save it as PDF with a "
            "text layer or paste the plan as plain text."
        )
    return cleaned


def _pdf_text(content: bytes) -> str:
    """Text layer of a PDF via pdfplumber, empty when it cannot be read."""
    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        log(f"⚠️ pdfplumber could not read the PDF: {e}")
        return ""
    return "\n".join(pages).strip()


def read_document_text(document: RawDocument) -> str:
    """
    Text of an uploaded document.

    Already extracted text wins. Otherwise text files are decoded, pdf files
    are read with pdfplumber, and word files (or pdfs without a readable
    text layer) go through a printable-character filter. Images are
    rejected because OCR is not available.

    Raises:
        UnsupportedDocumentError: image file, or no readable text found
    """
    if document.text is not None:
        return document.text

    kind = document.format or detect_file_type(document.filename, document.content_type)
    if kind == "image":
        raise UnsupportedDocumentError(
            "Image files need OCR, which is not available. Paste the plan as "
            "plain text or upload a PDF."
        )
    if kind == "text":
        return _decode(document.content)
    if kind == "pdf":
        text = _pdf_text(document.content)
        if text:
            return text
    return _printable_text(document.content, kind)


def ensure_sufficient_text(text: Optional[str]) -> str:
    """Raise InsufficientTextError for (near) empty input."""
    text = text or ""
    if len(text.strip()) < PARSER_CONFIG["min_text_length"]:
        raise InsufficientTextError(
            f"Not enough text to parse ({len(text.strip())} characters). "
            "Paste the meal plan as plain text."
        )
    return text


# =============================================================================
# CONFIDENCE & CROSS-FILL
# =============================================================================
def calculate_document_confidence(
    profile: PersonalProfile,
    outcome: ValidationOutcome,
    measurements: List[Measurement],
    training_days: List[TrainingDay],
) -> float:
    """
    Coverage score of a whole document.

    +0.3 body data, +0.4 x plan confidence, +0.15 measurements,
    +0.15 training, +0.05 calorie target, +0.05 allergies.
    """
    confidence = 0.0
    factors = 0

    if profile.weight or profile.height or profile.age:
        confidence += 0.3
        factors += 1
    if outcome.plan is not None and outcome.plan.weeks:
        confidence += outcome.confidence * 0.4
        factors += 1
    if measurements:
        confidence += 0.15
        factors += 1
    if training_days:
        confidence += 0.15
        factors += 1
    if profile.calorie_target:
        confidence += 0.05
    if profile.allergies:
        confidence += 0.05

    if factors == 0:
        confidence = 0.05
    return round(min(1.0, max(0.0, confidence)), 2)


def cross_fill_weight(profile: PersonalProfile, measurements: List[Measurement]) -> List[Measurement]:
    """Copy the profile weight into the measurement record (or create one)."""
    if not profile.weight:
        return measurements
    if not measurements:
        return [Measurement(weight=profile.weight, notes=DEFAULT_NOTES)]
    if measurements[0].weight is None:
        first = measurements[0].model_copy(update={"weight": profile.weight})
        return [first, *measurements[1:]]
    return measurements


def missing_data_warnings(profile: PersonalProfile, outcome: ValidationOutcome) -> List[str]:
    warnings = []
    if not profile.weight:
        warnings.append("Body weight not found in the document")
    if not profile.height:
        warnings.append("Height not found in the document")
    if not profile.age:
        warnings.append("Age not found in the document")
    if outcome.plan is None or not outcome.plan.weeks:
        warnings.append(
            "Meal plan not found. Paste the plan as text with week/day/meal headers."
        )
    return warnings


# =============================================================================
# MAIN: parse_document_text
# =============================================================================
async def parse_document_text(text: str, catalog: Any = None) -> ExtractionResult:
    """
    Extract plan, profile, measurements and training days from text.

    Args:
        text: Raw document text (pasted or extracted)
        catalog: Optional FoodCatalog used to attach food ids

    Returns:
        ExtractionResult. plan is None and warnings start with the
        PARSE_ERROR message when the plan is a hard failure.

    Raises:
        InsufficientTextError: fewer than PARSER_CONFIG["min_text_length"] characters
    """
    text = ensure_sufficient_text(text)
    log(f"📄 Parsing document ({len(text)} chars)")

    sanitized = sanitize(text)
    outcome = await parse_meal_plan_text(text, catalog)

    profile = extract_profile(sanitized)
    measurements = cross_fill_weight(profile, extract_measurements(sanitized))
    training_days = extract_training_days(sanitized)

    warnings = [*outcome.errors, *outcome.warnings, *missing_data_warnings(profile, outcome)]
    document_confidence = calculate_document_confidence(
        profile, outcome, measurements, training_days
    )

    if outcome.is_hard_failure:
        log("⚠️ No usable meal plan, returning profile/measurement data only")
    else:
        log(f"✅ Document parsed, plan confidence {outcome.confidence}")

    return ExtractionResult(
        plan=outcome.plan,
        personal_profile=profile,
        measurements=measurements,
        training_days=training_days,
        warnings=warnings,
        confidence=outcome.confidence,
        document_confidence=document_confidence,
        parser="pipeline",
    )


async def parse_uploaded_file(document: RawDocument, catalog: Any = None) -> ExtractionResult:
    """
    Read an uploaded document and parse it.

    Raises:
        UnsupportedDocumentError: image or unreadable binary file
        InsufficientTextError: too little text extracted
    """
    text = read_document_text(document)
    log(f"📄 {document.filename or 'upload'}: {len(text)} chars extracted")
    return await parse_document_text(text, catalog)


async def parse_to_structured_meal_plan(text: str, catalog: Any = None) -> Dict[str, Any]:
    """
    Week/day/meal JSON for a document.

    Returns:
        Dictionary with status "success" and data, or status "error" with
        a human-readable error. Also carries the plan confidence and
        warnings.
    """
    text = ensure_sufficient_text(text)
    outcome = await parse_meal_plan_text(text, catalog)
    result = to_structured_meal_plan(outcome.plan)
    result["confidence"] = outcome.confidence
    result["warnings"] = [*outcome.errors, *outcome.warnings]
    return result


__all__ = [
    "DocumentExtractionError",
    "InsufficientTextError",
    "UnsupportedDocumentError",
    "detect_file_type",
    "read_document_text",
    "ensure_sufficient_text",
    "calculate_document_confidence",
    "cross_fill_weight",
    "missing_data_warnings",
    "parse_document_text",
    "parse_uploaded_file",
    "parse_to_structured_meal_plan",
]
