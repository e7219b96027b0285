"""
Pydantic schemas for the question paper contract.

Wire format is camelCase (domainInfo, subDomain, ...) to match the JSON the
model is asked to return; Python attributes are snake_case.

Request:   GenerateRequest   → POST /api/generate body
Response:  QuestionPaper     → Section[] → Question[]
History:   SavePaperRequest  → POST /api/papers body
"""

import enum
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ─── Vocabulary ────────────────────────────────────────────────────────────────

class Domain(str, enum.Enum):
    SCHOOL = "School"
    COLLEGE = "College"
    COMPETITIVE = "Competitive"


MCQS = "MCQs"
SHORT_ANSWERS = "Short Answers"
LONG_ANSWERS = "Long Answers"
CASE_BASED = "Case-based"
PROGRAMMING_CODES = "Programming codes"

BASE_QUESTION_TYPES = [MCQS, SHORT_ANSWERS, LONG_ANSWERS, CASE_BASED]
PROGRAMMING_LEVELS = ["Easy", "Mid", "Hard"]

DEFAULT_TITLE = "Questify - Practice Paper"
DEFAULT_INSTRUCTIONS = (
    "Attempt all questions. Questions are designed to test core conceptual "
    "understanding and practical application. Total marks are distributed per section."
)


def is_mcq_section(section_type: str) -> bool:
    label = (section_type or "").lower()
    return "mcq" in label or "multiple choice" in label


def is_code_section(section_type: str) -> bool:
    return "programming" in (section_type or "").lower()


# ─── Generation request ───────────────────────────────────────────────────────

class GenerateRequest(BaseModel):
    """
    Body of POST /api/generate.

    Field validation is the caller's job; the endpoint only needs a credential.
    Every field therefore has a permissive default.
    """
    model_config = ConfigDict(populate_by_name=True)

    domain: str = ""
    sub_domain: str = Field("", alias="subDomain")
    subject: Optional[str] = None
    topics: str = ""
    question_types: List[str] = Field(default_factory=list, alias="questionTypes")
    programming_levels: Optional[List[str]] = Field(None, alias="programmingLevels")
    num_questions: str = Field("", alias="numQuestions")   # "MCQs: 5, Short Answers: 5"
    include_answers: bool = Field(True, alias="includeAnswers")
    include_explanations: bool = Field(False, alias="includeExplanations")

    @property
    def domain_info(self) -> str:
        if self.subject:
            return f"{self.domain} - {self.sub_domain} ({self.subject})"
        return f"{self.domain} - {self.sub_domain}"


# ─── Question paper ───────────────────────────────────────────────────────────

class Question(BaseModel):
    """One question. `id` is local to its section."""
    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    options: List[str] = Field(default_factory=list)
    marks: int = Field(1, ge=1)
    answer: Optional[str] = None
    explanation: Optional[str] = None

    @field_validator("options", mode="before")
    @classmethod
    def _options_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            # Positional: option i is always labelled chr(ord("A") + i)
            return ["" if o is None else str(o).strip() for o in v]
        return v

    @field_validator("answer", "explanation", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Section(BaseModel):
    """A labelled group of questions of one type."""
    model_config = ConfigDict(frozen=True)

    type: str
    questions: List[Question] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _number_questions(cls, data: Any) -> Any:
        # Missing ids are filled by position; given ids are kept.
        if isinstance(data, dict) and isinstance(data.get("questions"), list):
            questions = []
            for i, q in enumerate(data["questions"], 1):
                if isinstance(q, dict) and q.get("id") is None:
                    q = {**q, "id": i}
                questions.append(q)
            data = {**data, "questions": questions}
        return data

    @property
    def is_mcq(self) -> bool:
        return is_mcq_section(self.type)

    @property
    def is_code(self) -> bool:
        return is_code_section(self.type)


PERSISTENCE_FIELDS = {"id", "created_at", "domain", "sub_domain"}


class QuestionPaper(BaseModel):
    """
    A generated paper. Immutable: every generation produces a new value.

    `id` and `created_at` are only set once the paper has been persisted.
    `domain` and `sub_domain` record what the paper was generated for; they are
    stored as row columns, not in the paper content.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[int] = None
    title: str = DEFAULT_TITLE
    domain_info: str = Field("", alias="domainInfo")
    instructions: str = ""
    sections: List[Section] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    domain: Optional[str] = None
    sub_domain: Optional[str] = Field(None, alias="subDomain")

    @property
    def total_questions(self) -> int:
        return sum(len(s.questions) for s in self.sections)

    @property
    def total_marks(self) -> int:
        return sum(q.marks for s in self.sections for q in s.questions)

    def to_content(self) -> dict:
        """JSON-ready dict of the paper body, without persistence fields."""
        return self.model_dump(mode="json", by_alias=True, exclude=PERSISTENCE_FIELDS)


# ─── Persistence API ──────────────────────────────────────────────────────────

class SavePaperRequest(BaseModel):
    """Body of POST /api/papers."""
    model_config = ConfigDict(populate_by_name=True)

    domain: str
    sub_domain: str = Field(..., alias="subDomain")
    content: QuestionPaper
