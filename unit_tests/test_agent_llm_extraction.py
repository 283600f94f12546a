# unit_tests/test_agent_llm_extraction.py
"""
Unit Tests for the Gemini Extraction Agent
==========================================
The Gemini client is replaced by a stub; no network access is needed.

Run with: python -m pytest unit_tests/test_agent_llm_extraction.py -v
"""

import asyncio
import json
from types import SimpleNamespace

import pytest

import agents.llm_extraction_agent as llm_agent
from parsing.parser_config import PARSER_CONFIG

PAYLOAD = {
    "weeks": [{
        "week": 1,
        "days": [{
            "day": 1,
            "is_training_day": True,
            "meals": [{
                "meal_type": "breakfast",
                "name": "Reggeli",
                "ingredients": [
                    {"name": "Görög joghurt", "quantity_grams": 250, "unit": "g", "quantity_text": "250g"},
                    {"name": "3kj garbage"},
                ],
            }],
        }],
    }],
    "personal_profile": {"name": "Kiss Anna", "weight": 68, "height": 170, "age": 34},
    "measurements": [],
    "training_days": [],
    "warnings": [],
}


class StubModels:
    def __init__(self, text):
        self.text = text
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        await asyncio.sleep(0)
        return SimpleNamespace(text=self.text)


@pytest.fixture
def stub_gemini(monkeypatch):
    """Install a stub client answering with the given text."""
    def install(text):
        models = StubModels(text)
        monkeypatch.setattr(llm_agent, "CLIENT", SimpleNamespace(aio=SimpleNamespace(models=models)))
        monkeypatch.setattr(llm_agent, "GEMINI_AVAILABLE", True)
        monkeypatch.setattr(
            llm_agent, "genai_types",
            SimpleNamespace(GenerateContentConfig=lambda **kwargs: kwargs),
            raising=False,
        )
        return models
    return install


def test_parse_llm_json_strips_code_fence():
    assert llm_agent.parse_llm_json('```json\n{"weeks": []}\n```') == {"weeks": []}
    with pytest.raises(ValueError):
        llm_agent.parse_llm_json("[1, 2]")


def test_result_from_payload():
    result = llm_agent.result_from_llm(PAYLOAD)

    assert result.parser == "gemini"
    meal = result.plan.weeks[0][0].meals[0]
    assert [i.name for i in meal.ingredients] == ["Görög joghurt"]
    assert meal.ingredients[0].nutrition.source == "knowledge:gorog_joghurt"
    assert result.plan.weeks[0][0].is_training_day
    assert result.personal_profile.bmi == 23.5
    assert result.measurements[0].weight == 68
    assert any("3kj garbage" in w for w in result.warnings)


def test_payload_without_plan_is_rejected():
    assert llm_agent.result_from_llm({"weeks": []}) is None


def test_no_client_falls_back_to_pipeline(monkeypatch, hu_plan_text):
    monkeypatch.setattr(llm_agent, "GEMINI_AVAILABLE", False)

    result = asyncio.run(llm_agent.parse_document_with_llm(hu_plan_text))

    assert result.parser == "pipeline"
    assert result.plan is not None
    assert llm_agent.get_parser_info()["available"] is False


def test_gemini_answer_is_used(stub_gemini, hu_plan_text):
    models = stub_gemini("```json\n" + json.dumps(PAYLOAD) + "\n```")

    result = asyncio.run(llm_agent.parse_document_with_llm(hu_plan_text))

    assert result.parser == "gemini"
    assert models.calls[0]["model"] == PARSER_CONFIG["gemini_model"]
    assert llm_agent.get_parser_info()["available"] is True


def test_invalid_json_falls_back(stub_gemini, hu_plan_text):
    stub_gemini("Sorry, I cannot help with that.")

    result = asyncio.run(llm_agent.parse_document_with_llm(hu_plan_text))

    assert result.parser == "pipeline"
    assert result.plan is not None


def test_schema_violation_falls_back(stub_gemini, hu_plan_text):
    stub_gemini(json.dumps({"weeks": [{"week": 99, "days": []}]}))

    result = asyncio.run(llm_agent.parse_document_with_llm(hu_plan_text))
    assert result.parser == "pipeline"


def test_prompt_is_truncated(stub_gemini, monkeypatch, hu_plan_text):
    models = stub_gemini(json.dumps(PAYLOAD))
    monkeypatch.setitem(PARSER_CONFIG, "llm_max_chars", 20)

    asyncio.run(llm_agent.parse_document_with_llm(hu_plan_text))

    assert "Görög joghurt 250g" not in models.calls[0]["contents"]


def test_concurrent_parses_share_the_event_loop(stub_gemini, hu_plan_text):
    models = stub_gemini(json.dumps(PAYLOAD))

    async def run_both():
        return await asyncio.gather(
            llm_agent.parse_document_with_llm(hu_plan_text),
            llm_agent.parse_document_with_llm(hu_plan_text),
        )

    results = asyncio.run(run_both())

    assert [r.parser for r in results] == ["gemini", "gemini"]
    assert len(models.calls) == 2
