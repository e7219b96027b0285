"""
Generation Service

GenerateRequest → prompt → model → fence strip → JSON parse → schema validation
→ invariant enforcement → QuestionPaper.

Single attempt, no retry. Credential is checked before anything else so a
misconfigured deployment never reaches the model.
"""

import json
import logging
import re
from typing import Dict, List

from pydantic import ValidationError

from questify.generation import gpt_client
from questify.generation.errors import (
    DEFAULT_FAILURE_MESSAGE,
    GenerationError,
    UpstreamFormatError,
)
from questify.generation.prompt import build_prompt
from questify.generation.schemas import GenerateRequest, QuestionPaper, Section

log = logging.getLogger("questify.generation")

# Raw text logged on parse failure is capped at this many characters
RAW_LOG_LIMIT = 2000


# ─── Parsing ───────────────────────────────────────────────────────────────────

def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) wrapper."""
    text = (raw or "").strip()
    text = re.sub(r"^```(?:json)?\s*", "", text)
    text = re.sub(r"\s*```$", "", text)
    return text.strip()


def parse_paper(raw: str) -> QuestionPaper:
    """
    Parse model output into a QuestionPaper.

    Raises:
        UpstreamFormatError: text is not JSON, not an object, or fails the schema
    """
    text = strip_code_fences(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        log.error("[GENERATE] JSON parse error. Raw: %s", text[:RAW_LOG_LIMIT])
        raise UpstreamFormatError(raw=text)

    if not isinstance(data, dict):
        log.error("[GENERATE] Expected a JSON object, got %s. Raw: %s",
                  type(data).__name__, text[:RAW_LOG_LIMIT])
        raise UpstreamFormatError(raw=text)

    try:
        return QuestionPaper.model_validate(data)
    except ValidationError as e:
        log.error("[GENERATE] Schema validation failed: %s. Raw: %s",
                  e.errors(include_url=False), text[:RAW_LOG_LIMIT])
        raise UpstreamFormatError(raw=text)


# ─── Post-processing ───────────────────────────────────────────────────────────

def _clean_section(section: Section, request: GenerateRequest) -> Section:
    questions = []
    for q in section.questions:
        updates = {}
        if q.options and not section.is_mcq:
            updates["options"] = []
        if q.explanation and not request.include_explanations:
            updates["explanation"] = None
        if q.answer and not request.include_answers and not section.is_code:
            updates["answer"] = None
        if section.is_code and not q.answer:
            log.warning("[GENERATE] %s Q%s has no code answer", section.type, q.id)
        questions.append(q.model_copy(update=updates) if updates else q)
    return section.model_copy(update={"questions": questions})


def enforce_invariants(paper: QuestionPaper, request: GenerateRequest) -> QuestionPaper:
    """
    Apply the Question rules the prompt asks for but the model may ignore:
    options only in MCQ sections, explanations only when requested, answers
    only when requested (code sections always keep theirs).
    """
    sections = [_clean_section(s, request) for s in paper.sections]
    return paper.model_copy(update={"sections": sections})


def parse_section_counts(num_questions: str) -> Dict[str, int]:
    """'MCQs: 5, Short Answers: 3' → {'MCQs': 5, 'Short Answers': 3}. Malformed parts are skipped."""
    counts: Dict[str, int] = {}
    for part in (num_questions or "").split(","):
        label, sep, count = part.rpartition(":")
        if not sep:
            continue
        try:
            counts[label.strip()] = int(count.strip())
        except ValueError:
            continue
    return counts


def check_conformance(paper: QuestionPaper, request: GenerateRequest) -> List[str]:
    """
    Compare returned sections against the requested types and counts.
    Returns human-readable issues; an empty list means the paper conforms.
    """
    issues = []
    returned = {s.type: len(s.questions) for s in paper.sections}
    expected = parse_section_counts(request.num_questions)

    for qtype in request.question_types:
        if qtype not in returned:
            issues.append(f"missing section '{qtype}'")
            continue
        want = expected.get(qtype)
        if want is not None and returned[qtype] != want:
            issues.append(f"section '{qtype}' has {returned[qtype]} questions, expected {want}")

    for qtype in returned:
        if qtype not in request.question_types:
            issues.append(f"unexpected section '{qtype}'")
    return issues


# ─── Main entry ────────────────────────────────────────────────────────────────

async def generate_paper(request: GenerateRequest) -> QuestionPaper:
    """
    Generate one question paper.

    Raises:
        ConfigurationError:  no credential configured (model not contacted)
        UpstreamFormatError: model reply is not a valid paper
        GenerationError:     any other failure, carrying the underlying message
    """
    gpt_client.require_api_key()

    prompt = build_prompt(request)
    log.info("[GENERATE] domain=%s sub_domain=%s types=%s counts='%s'",
             request.domain, request.sub_domain, request.question_types, request.num_questions)

    try:
        raw = await gpt_client.call_model(prompt)
    except GenerationError:
        raise
    except Exception as e:
        log.error("[GENERATE] Model call failed: %s", e)
        raise GenerationError(str(e) or DEFAULT_FAILURE_MESSAGE) from e

    paper = enforce_invariants(parse_paper(raw), request)

    for issue in check_conformance(paper, request):
        log.warning("[GENERATE] Conformance: %s", issue)

    log.info("[GENERATE] OK: %d sections, %d questions",
             len(paper.sections), paper.total_questions)
    return paper
