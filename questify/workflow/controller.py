"""
Workflow Controller

Drives the user journey:

    Unauthenticated ──sign-in──▶ DomainSelect ──domain──▶ Configure ──generate──▶ Preview
                                      ▲                                            │  ▲
                                      └────────── new paper ◀── History ◀──────────┘  │
                                                                 └──── select paper ──┘

Any step goes back to Unauthenticated on sign-out.

After a fresh generation the paper is shown at once; saving it and refreshing
history run as a background task whose failure never touches the shown paper.
"""

import asyncio
import enum
import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

from questify.generation.paper_exporter import export_filename, export_pdf, export_text
from questify.generation.schemas import (
    MCQS,
    PROGRAMMING_CODES,
    SHORT_ANSWERS,
    Domain,
    GenerateRequest,
    QuestionPaper,
)
from questify.workflow import catalog
from questify.workflow.errors import ExportError, InvalidTransition, ServiceError, ValidationError
from questify.workflow.session import AuthEvent, AuthSession, Session

log = logging.getLogger(__name__)

DEFAULT_SECTION_COUNT = 5


class Step(str, enum.Enum):
    UNAUTHENTICATED = "Unauthenticated"
    DOMAIN_SELECT = "DomainSelect"
    CONFIGURE = "Configure"
    PREVIEW = "Preview"
    HISTORY = "History"


SIGNED_IN_STEPS = (Step.DOMAIN_SELECT, Step.CONFIGURE, Step.PREVIEW, Step.HISTORY)


def _created_key(paper: QuestionPaper) -> Tuple[bool, float]:
    return (paper.created_at is not None, paper.created_at.timestamp() if paper.created_at else 0.0)


class WorkflowController:
    def __init__(self, client, auth: AuthSession):
        self._client = client
        self._auth = auth
        self._unsubscribe = None
        self._background: Set[asyncio.Task] = set()

        self.step = Step.UNAUTHENTICATED
        self.loading = False
        self.error: Optional[str] = None

        # Configuration
        self.domain = Domain.SCHOOL
        self.sub_domain = ""
        self.subject = ""
        self.topics = ""
        self.question_types: List[str] = [MCQS, SHORT_ANSWERS]
        self.programming_levels: List[str] = ["Mid"]
        self.section_counts: Dict[str, int] = {MCQS: DEFAULT_SECTION_COUNT, SHORT_ANSWERS: DEFAULT_SECTION_COUNT}
        self.include_answers = True
        self.include_explanations = False

        # Papers: replaced whole, never edited in place
        self.paper: Optional[QuestionPaper] = None
        self.history: Tuple[QuestionPaper, ...] = ()

    # ─── Lifecycle ─────────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Subscribe to auth events and pick up an already-open session."""
        self._unsubscribe = self._auth.subscribe(self._on_auth_event)
        session = self._auth.current
        if session is not None:
            self.step = Step.DOMAIN_SELECT
            await self.refresh_history(session)

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.wait_for_background()

    async def wait_for_background(self) -> None:
        """Wait for pending save/refresh tasks."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def _on_auth_event(self, event: AuthEvent, session: Optional[Session]) -> None:
        if event is AuthEvent.SIGNED_IN and session is not None:
            if self.step is Step.UNAUTHENTICATED:
                self.step = Step.DOMAIN_SELECT
            self._spawn(self.refresh_history(session))
        elif event is AuthEvent.SIGNED_OUT:
            self.step = Step.UNAUTHENTICATED
            self.history = ()
            self.paper = None

    def _require(self, *steps: Step) -> None:
        if self.step not in steps:
            raise InvalidTransition(f"Not allowed from {self.step.value}")

    # ─── Auth ──────────────────────────────────────────────────────────────────

    async def sign_in(self, email: str, password: str) -> bool:
        return await self._authenticate(self._auth.sign_in, email, password)

    async def sign_up(self, email: str, password: str) -> bool:
        return await self._authenticate(self._auth.sign_up, email, password)

    async def _authenticate(self, action, email: str, password: str) -> bool:
        self.error = None
        try:
            await action(email, password)
        except ServiceError as e:
            log.warning("[AUTH] %s", e.message)
            self.error = e.message
            return False
        return True

    async def sign_out(self) -> None:
        await self._auth.sign_out()

    # ─── Domain + configuration ────────────────────────────────────────────────

    def select_domain(self, domain: Union[Domain, str]) -> None:
        self._require(Step.DOMAIN_SELECT)
        self.domain = Domain(domain)
        self.sub_domain = ""
        self.subject = ""
        self.error = None
        self.step = Step.CONFIGURE

    def set_sub_domain(self, sub_domain: str) -> None:
        self.sub_domain = sub_domain
        self.subject = ""

    @property
    def sub_domain_options(self) -> List[str]:
        return catalog.sub_domain_options(self.domain)

    @property
    def subject_options(self) -> List[str]:
        return catalog.subject_options(self.sub_domain)

    @property
    def available_question_types(self) -> List[str]:
        return catalog.available_question_types(self.sub_domain, self.subject)

    def toggle_question_type(self, question_type: str) -> None:
        """
        Turning a type on gives it a count of 5 if it has none; turning it off
        keeps its count so turning it back on restores it.
        """
        if question_type in self.question_types:
            self.question_types = [t for t in self.question_types if t != question_type]
            return
        self.question_types = self.question_types + [question_type]
        if not self.section_counts.get(question_type):
            self.section_counts = {**self.section_counts, question_type: DEFAULT_SECTION_COUNT}

    def set_section_count(self, question_type: str, count: int) -> None:
        if not isinstance(count, int) or isinstance(count, bool) or count < 1:
            raise ValidationError(f"Number of questions for {question_type} must be a positive whole number")
        self.section_counts = {**self.section_counts, question_type: count}

    def toggle_programming_level(self, level: str) -> None:
        if level in self.programming_levels:
            self.programming_levels = [lv for lv in self.programming_levels if lv != level]
        else:
            self.programming_levels = self.programming_levels + [level]

    def validate(self) -> None:
        """Raise ValidationError when the request is incomplete."""
        if not self.sub_domain or not self.topics or (self.domain is Domain.COLLEGE and not self.subject):
            raise ValidationError("Please fill in all fields")
        if not self.question_types:
            raise ValidationError("Select at least one question type")
        if PROGRAMMING_CODES in self.question_types and not self.programming_levels:
            raise ValidationError("Select at least one programming difficulty level")

    def num_questions_summary(self) -> str:
        """'MCQs: 5, Short Answers: 8' in question-type order."""
        return ", ".join(
            f"{t}: {self.section_counts.get(t) or DEFAULT_SECTION_COUNT}" for t in self.question_types
        )

    def build_request(self) -> GenerateRequest:
        return GenerateRequest(
            domain=self.domain.value,
            sub_domain=self.sub_domain,
            subject=self.subject,
            topics=self.topics,
            question_types=list(self.question_types),
            programming_levels=(
                list(self.programming_levels) if PROGRAMMING_CODES in self.question_types else None
            ),
            num_questions=self.num_questions_summary(),
            include_answers=self.include_answers,
            include_explanations=self.include_explanations,
        )

    # ─── Generation ────────────────────────────────────────────────────────────

    @property
    def can_submit(self) -> bool:
        return self.step is Step.CONFIGURE and not self.loading

    async def generate(self) -> Optional[QuestionPaper]:
        """
        Submit the configuration. On success moves to Preview and returns the
        paper; on any failure stays in Configure with `error` set and returns None.
        A result that arrives after sign-out, an account switch or navigation away
        from Configure is discarded.
        """
        self._require(Step.CONFIGURE)
        if self.loading:
            log.warning("[GENERATE] Submission ignored: a generation is already running")
            return None

        try:
            self.validate()
        except ValidationError as e:
            self.error = e.message
            return None

        request = self.build_request()
        domain, sub_domain = self.domain.value, self.sub_domain
        session = self._auth.current
        self.loading = True
        self.error = None
        try:
            paper = await self._client.generate(request)
        except ServiceError as e:
            log.error("[GENERATE] %s", e.message)
            if not self._is_stale(session):
                self.error = e.message
            return None
        finally:
            self.loading = False

        if self._is_stale(session):
            log.info("[GENERATE] Discarding paper: session or step changed while generating")
            return None

        paper = paper.model_copy(update={"domain": domain, "sub_domain": sub_domain})
        self.paper = paper
        self.step = Step.PREVIEW

        if session is not None:
            self._spawn(self._persist(session, domain, sub_domain, paper))
        return paper

    def _is_stale(self, session: Optional[Session]) -> bool:
        return self._auth.current is not session or self.step is not Step.CONFIGURE

    async def _persist(self, session: Session, domain: str, sub_domain: str, paper: QuestionPaper) -> None:
        try:
            saved = await self._client.save_paper(session.access_token, domain, sub_domain, paper)
        except Exception as e:
            log.error("[HISTORY] Failed to save paper: %s", e)
            return
        log.info("[HISTORY] Saved paper id=%s", saved.id)
        await self.refresh_history(session)

    async def refresh_history(self, session: Optional[Session] = None) -> None:
        """Reload the user's papers, newest first."""
        session = session or self._auth.current
        if session is None:
            return
        try:
            papers = await self._client.list_papers(session.access_token)
        except Exception as e:
            log.error("[HISTORY] Error fetching papers: %s", e)
            return
        if self._auth.current is not session:
            # Signed out (or switched user) while loading
            return
        self.history = tuple(sorted(papers, key=_created_key, reverse=True))

    # ─── Navigation ────────────────────────────────────────────────────────────

    def open_history(self) -> None:
        self._require(*SIGNED_IN_STEPS)
        self.step = Step.HISTORY

    def select_paper(self, paper: Union[QuestionPaper, int]) -> None:
        """Load a history entry (by value or index) into Preview."""
        self._require(Step.HISTORY)
        if isinstance(paper, int):
            paper = self.history[paper]
        self.paper = paper
        self.step = Step.PREVIEW

    def new_paper(self) -> None:
        self._require(*SIGNED_IN_STEPS)
        self.step = Step.DOMAIN_SELECT

    def back(self) -> None:
        if self.step is Step.PREVIEW:
            self.step = Step.CONFIGURE
        elif self.step in (Step.CONFIGURE, Step.HISTORY):
            self.step = Step.DOMAIN_SELECT

    # ─── Export ────────────────────────────────────────────────────────────────

    def _write_export(self, directory: Union[str, Path], extension: str) -> Path:
        """Write the previewed paper; raises ExportError on any failure."""
        self._require(Step.PREVIEW)
        if self.paper is None:
            raise ExportError("No paper found to export")
        if self.paper.domain:
            domain, sub_domain = self.paper.domain, self.paper.sub_domain or ""
        else:
            domain, sub_domain = self.domain.value, self.sub_domain
        path = Path(directory) / export_filename(domain, sub_domain, extension)
        try:
            if extension == "pdf":
                path.write_bytes(export_pdf(self.paper).getvalue())
            else:
                path.write_text(export_text(self.paper), encoding="utf-8")
        except Exception as e:
            log.error("[EXPORT] %s export failed: %s", extension.upper(), e)
            raise ExportError(f"Failed to export {extension.upper()}. Try printing instead.") from e
        log.info("[EXPORT] Wrote %s", path)
        return path

    def _export(self, directory: Union[str, Path], extension: str) -> Optional[Path]:
        try:
            return self._write_export(directory, extension)
        except ExportError as e:
            self.error = e.message
            return None

    def export_txt(self, directory: Union[str, Path]) -> Optional[Path]:
        """Write the previewed paper as text. Returns the file path, or None with `error` set."""
        return self._export(directory, "txt")

    def export_pdf(self, directory: Union[str, Path]) -> Optional[Path]:
        """Write the previewed paper as PDF. Returns the file path, or None with `error` set."""
        return self._export(directory, "pdf")
