"""
Generation Router — /api

Endpoints:
  POST /api/generate  — build a prompt, call the model, return a QuestionPaper

Failures come back as {"error": "<message>"} with status 500 (see main.py).
"""

import logging

from fastapi import APIRouter

from questify.generation.errors import GenerationError
from questify.generation.schemas import GenerateRequest, QuestionPaper
from questify.generation.service import generate_paper

router = APIRouter(prefix="/api", tags=["generation"])

log = logging.getLogger("questify.generation")


@router.post(
    "/generate",
    response_model=QuestionPaper,
    responses={500: {"description": "Missing credential, upstream failure or unparsable reply"}},
)
async def generate(request: GenerateRequest):
    """
    Generate a practice question paper.

    The request is passed through as given; required-field checks happen in
    the client before submission.
    """
    try:
        return await generate_paper(request)
    except GenerationError as e:
        log.error("[GENERATE] FAILED: %s", e.message)
        raise
    except Exception as e:
        log.exception("[GENERATE] Unexpected error")
        raise GenerationError(str(e) or "Failed to generate question paper") from e
