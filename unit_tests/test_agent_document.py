import asyncio
import zlib

import pytest

from agents.document_agent import (
    InsufficientTextError,
    UnsupportedDocumentError,
    calculate_document_confidence,
    cross_fill_weight,
    detect_file_type,
    ensure_sufficient_text,
    parse_document_text,
    parse_to_structured_meal_plan,
    parse_uploaded_file,
    read_document_text,
)
from parsing.plan_validator import NO_STRUCTURE_ERROR
from parsing.schemas import Measurement, PersonalProfile, RawDocument, ValidationOutcome
from parsing.structured_output import NO_STRUCTURE_MESSAGE


def test_detect_file_type():
    assert detect_file_type("etrend.PDF") == "pdf"
    assert detect_file_type("menu.docx") == "word"
    assert detect_file_type("photo.jpg") == "image"
    assert detect_file_type("scan", "image/png") == "image"
    assert detect_file_type("plan.txt", "text/plain") == "text"


def test_read_text_file(hu_plan_text):
    document = RawDocument(filename="plan.txt", content=hu_plan_text.encode("utf-8"))
    assert read_document_text(document) == hu_plan_text


def test_extracted_text_wins():
    document = RawDocument(filename="plan.pdf", content=b"%PDF", text="Hétfő\nReggeli")
    assert read_document_text(document) == "Hétfő\nReggeli"


def test_pdf_fallback_keeps_printable_text(hu_plan_text):
    content = b"%PDF-1.4\x00\x01" + hu_plan_text.encode("utf-8")
    text = read_document_text(RawDocument(filename="plan.pdf", content=content))

    assert "Görög joghurt 250g" in text
    assert "\x00" not in text


def test_image_is_rejected():
    with pytest.raises(UnsupportedDocumentError):
        read_document_text(RawDocument(filename="menu.png", content=b"\x89PNG"))


def test_unreadable_binary_is_rejected():
    with pytest.raises(UnsupportedDocumentError):
        read_document_text(RawDocument(filename="menu.pdf", content=b"%PDF\x00\x01\x02"))


def test_insufficient_text():
    with pytest.raises(InsufficientTextError):
        ensure_sufficient_text("  abc  ")
    with pytest.raises(InsufficientTextError):
        asyncio.run(parse_document_text(None))


def test_parse_full_document(hu_plan_text):
    result = asyncio.run(parse_document_text(hu_plan_text))

    assert result.parser == "pipeline"
    assert result.plan is not None
    monday, tuesday = result.plan.weeks[0]
    assert [m.meal_type for m in monday.meals] == ["breakfast", "lunch", "dinner"]
    assert [i.name for i in monday.meals[1].ingredients] == ["Csirkemell", "Rizs"]
    assert tuesday.day == 2

    assert result.personal_profile.name == "Kiss Anna"
    assert result.measurements[0].weight == 68
    assert result.training_days == []
    assert result.warnings == []
    assert 0 < result.confidence <= 1
    assert result.document_confidence > result.confidence * 0.4


def test_parse_failure_keeps_side_data():
    text = "Testsúly: 80 kg\nMagasság: 180 cm\nHello world, this is unrelated text."
    result = asyncio.run(parse_document_text(text))

    assert result.plan is None
    assert result.confidence == 0
    assert result.has_parse_error
    assert result.warnings[0] == NO_STRUCTURE_ERROR
    assert result.personal_profile.weight == 80
    assert any(w.startswith("Meal plan not found") for w in result.warnings)


def test_catalog_warnings(hu_plan_text, food_catalog):
    result = asyncio.run(parse_document_text(hu_plan_text, food_catalog))
    assert result.warnings == ['No catalog match for ingredient: "Túró"']


def test_parse_uploaded_file(hu_plan_text):
    document = RawDocument(
        filename="plan.txt",
        content_type="text/plain",
        content=hu_plan_text.encode("utf-8"),
    )
    result = asyncio.run(parse_uploaded_file(document))
    assert result.plan.detected_weeks == 1


def test_structured_plan(scenarios):
    result = asyncio.run(parse_to_structured_meal_plan(scenarios["A"]))

    assert result["status"] == "success"
    assert "tuesday" in result["data"]["week1"]
    assert result["confidence"] > 0


def test_structured_plan_error(scenarios):
    result = asyncio.run(parse_to_structured_meal_plan(scenarios["B"]))

    assert result["status"] == "error"
    assert result["error"] == NO_STRUCTURE_MESSAGE
    assert result["warnings"] == [NO_STRUCTURE_ERROR]


def test_cross_fill_weight():
    profile = PersonalProfile(weight=70)

    assert cross_fill_weight(profile, [])[0].weight == 70
    assert cross_fill_weight(profile, [Measurement(waist=80)])[0].weight == 70
    assert cross_fill_weight(profile, [Measurement(weight=72)])[0].weight == 72
    assert cross_fill_weight(PersonalProfile(), []) == []


def test_document_confidence_floor():
    assert calculate_document_confidence(PersonalProfile(), ValidationOutcome(), [], []) == 0.05


def build_pdf(lines):
    """Single-page PDF with a compressed Helvetica content stream."""
    ops = ["BT", "/F1 12 Tf", "72 720 Td", "16 TL"]
    for line in lines:
        ops.append(f"({line}) Tj T*")
    ops.append("ET")
    stream = zlib.compress("\n".join(ops).encode("latin-1"))

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d /Filter /FlateDecode >>\nstream\n" % len(stream)
        + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    pdf = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(pdf))
        pdf += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref = len(pdf)
    pdf += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        pdf += b"%010d 00000 n \n" % offset
    pdf += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1, xref,
    )
    return pdf


def test_compressed_pdf_text_layer():
    content = build_pdf(["1. het", "Hetfo", "Reggeli", "Zabpehely 60g", "Tej 200ml"])
    text = read_document_text(RawDocument(filename="etrend.pdf", content=content))

    assert "Zabpehely 60g" in text
    assert "/FlateDecode" not in text


def test_pdf_upload_yields_plan():
    content = build_pdf(["1. het", "Hetfo", "Reggeli", "Zabpehely 60g", "Tej 200ml"])
    document = RawDocument(filename="etrend.pdf", content_type="application/pdf", content=content)

    result = asyncio.run(parse_uploaded_file(document))

    assert result.plan is not None
    names = [i.name for i in result.plan.weeks[0][0].meals[0].ingredients]
    assert names == ["Zabpehely", "Tej"]
