"""
Unit tests for the generation service: fence stripping, parsing, invariant
enforcement, conformance reporting and failure classification.
"""

import asyncio
import json

import pytest

from questify.generation import gpt_client
from questify.generation.errors import (
    ConfigurationError,
    GenerationError,
    UpstreamFormatError,
)
from questify.generation.schemas import GenerateRequest
from questify.generation.service import (
    check_conformance,
    enforce_invariants,
    generate_paper,
    parse_paper,
    parse_section_counts,
    strip_code_fences,
)


def _request(**overrides) -> GenerateRequest:
    data = {
        "domain": "School",
        "subDomain": "Class 8",
        "subject": "",
        "topics": "Fractions, Decimals",
        "questionTypes": ["MCQs", "Short Answers"],
        "programmingLevels": None,
        "numQuestions": "MCQs: 1, Short Answers: 1",
        "includeAnswers": True,
        "includeExplanations": False,
    }
    data.update(overrides)
    return GenerateRequest.model_validate(data)


def _paper_json() -> dict:
    return {
        "title": "Questify - Practice Paper",
        "domainInfo": "School - Class 8",
        "instructions": "Attempt all questions.",
        "sections": [
            {"type": "MCQs", "questions": [
                {"id": 1, "text": "1/2 as decimal?", "options": ["0.2", "0.5"], "marks": 1,
                 "answer": "0.5", "explanation": "Divide 1 by 2."},
            ]},
            {"type": "Short Answers", "questions": [
                {"id": 1, "text": "Define a fraction.", "options": ["x"], "marks": 2,
                 "answer": "Part of a whole."},
            ]},
        ],
    }


class TestStripCodeFences:
    def test_json_fence_removed(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence_removed(self):
        assert strip_code_fences('```\n{"a": 1}```') == '{"a": 1}'

    def test_unfenced_text_only_trimmed(self):
        assert strip_code_fences('  {"a": 1}\n') == '{"a": 1}'


class TestParsePaper:
    def test_valid_json_parsed(self):
        paper = parse_paper("```json\n" + json.dumps(_paper_json()) + "\n```")

        assert len(paper.sections) == 2
        assert paper.sections[0].questions[0].options == ["0.2", "0.5"]

    def test_not_json_is_invalid_format(self):
        """A reply of 'not json' is classified, not a crash."""
        with pytest.raises(UpstreamFormatError) as exc_info:
            parse_paper("not json")

        assert exc_info.value.message == "Invalid response format from AI"

    def test_json_string_is_invalid_format(self):
        with pytest.raises(UpstreamFormatError):
            parse_paper('"not json"')

    def test_schema_mismatch_is_invalid_format(self):
        with pytest.raises(UpstreamFormatError):
            parse_paper(json.dumps({"title": "x", "sections": [{"questions": []}]}))


class TestEnforceInvariants:
    def test_options_cleared_outside_mcq_sections(self):
        paper = enforce_invariants(parse_paper(json.dumps(_paper_json())), _request())

        assert paper.sections[0].questions[0].options == ["0.2", "0.5"]
        assert paper.sections[1].questions[0].options == []

    def test_explanations_dropped_when_not_requested(self):
        paper = enforce_invariants(parse_paper(json.dumps(_paper_json())), _request())

        assert paper.sections[0].questions[0].explanation is None

    def test_explanations_kept_when_requested(self):
        paper = enforce_invariants(
            parse_paper(json.dumps(_paper_json())), _request(includeExplanations=True)
        )

        assert paper.sections[0].questions[0].explanation == "Divide 1 by 2."

    def test_code_answers_kept_when_answers_off(self):
        data = _paper_json()
        data["sections"].append({"type": "Programming codes", "questions": [
            {"id": 1, "text": "Reverse a string.", "marks": 5, "answer": "def rev(s):\n    return s[::-1]"},
        ]})
        paper = enforce_invariants(parse_paper(json.dumps(data)), _request(includeAnswers=False))

        assert paper.sections[0].questions[0].answer is None
        assert paper.sections[2].questions[0].answer.startswith("def rev")

    def test_original_paper_untouched(self):
        original = parse_paper(json.dumps(_paper_json()))
        enforce_invariants(original, _request())

        assert original.sections[1].questions[0].options == ["x"]


class TestConformance:
    def test_parse_section_counts(self):
        assert parse_section_counts("MCQs: 5, Short Answers: 3, junk") == {"MCQs": 5, "Short Answers": 3}

    def test_conforming_paper_has_no_issues(self):
        paper = parse_paper(json.dumps(_paper_json()))

        assert check_conformance(paper, _request()) == []

    def test_count_mismatch_and_missing_section_reported(self):
        paper = parse_paper(json.dumps(_paper_json()))
        request = _request(questionTypes=["MCQs", "Long Answers"], numQuestions="MCQs: 3, Long Answers: 2")

        issues = check_conformance(paper, request)

        assert "section 'MCQs' has 1 questions, expected 3" in issues
        assert "missing section 'Long Answers'" in issues
        assert "unexpected section 'Short Answers'" in issues


class TestGeneratePaper:
    def test_missing_key_fails_before_model_call(self, no_api_key, monkeypatch):
        calls = []

        async def fake_call_model(prompt, **kwargs):
            calls.append(prompt)
            return "{}"

        monkeypatch.setattr(gpt_client, "call_model", fake_call_model)

        with pytest.raises(ConfigurationError) as exc_info:
            asyncio.run(generate_paper(_request()))

        assert "GEMINI_API_KEY" in exc_info.value.message
        assert calls == []

    def test_google_api_key_accepted(self, no_api_key, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "other-key")

        async def fake_call_model(prompt, **kwargs):
            return json.dumps(_paper_json())

        monkeypatch.setattr(gpt_client, "call_model", fake_call_model)

        paper = asyncio.run(generate_paper(_request()))

        assert paper.title == "Questify - Practice Paper"

    def test_model_exception_wrapped_with_message(self, api_key, monkeypatch):
        async def fake_call_model(prompt, **kwargs):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(gpt_client, "call_model", fake_call_model)

        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(generate_paper(_request()))

        assert exc_info.value.message == "quota exceeded"
        assert not isinstance(exc_info.value, UpstreamFormatError)

    def test_prompt_sent_once(self, api_key, monkeypatch):
        prompts = []

        async def fake_call_model(prompt, **kwargs):
            prompts.append(prompt)
            return json.dumps(_paper_json())

        monkeypatch.setattr(gpt_client, "call_model", fake_call_model)

        asyncio.run(generate_paper(_request()))

        assert len(prompts) == 1
        assert "Fractions, Decimals" in prompts[0]
