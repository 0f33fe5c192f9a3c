"""Assessment runner: load, collect responses, validate and submit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

import structlog

from ..schemas import (
    AssessmentDocument,
    Question,
    Submission,
    SubmissionRequest,
    UnsupportedQuestion,
)
from ..stores import AssessmentStore, SessionProvider, SubmissionStore
from .conditions import visibility_map
from .document import normalize_document
from .validation import DocumentValidation, ResponseValidator

RunnerState = Literal["loading", "ready", "submitting", "submitted"]

EMPTY_DOCUMENT_TITLE = "Assessment"


class RunnerStateError(RuntimeError):
    """Raised when a runner operation is invoked in the wrong state."""


@dataclass(slots=True)
class RunnerSession:
    """Mutable state of one candidate's pass through an assessment."""

    job_id: str
    document: AssessmentDocument | None = None
    responses: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    state: RunnerState = "loading"
    submission: Submission | None = None
    submit_failed: bool = False
    load_failed: bool = False

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to answer ("no assessment configured")."""
        return self.document is None or not self.document.sections


class _Liveness:
    __slots__ = ("alive",)

    def __init__(self) -> None:
        self.alive = True


class AssessmentRunner:
    """Drive one runner session against the assessment and submission stores."""

    def __init__(
        self,
        *,
        job_id: str,
        assessments: AssessmentStore,
        submissions: SubmissionStore,
        session_provider: SessionProvider | None = None,
        validator: ResponseValidator | None = None,
        candidate_id: str | None = None,
    ) -> None:
        self._job_id = str(job_id)
        self._assessments = assessments
        self._submissions = submissions
        self._session_provider = session_provider
        self._validator = validator or ResponseValidator()
        self._candidate_id = candidate_id
        self._session = RunnerSession(job_id=self._job_id)
        self._liveness = _Liveness()
        self._logger = structlog.get_logger(__name__).bind(job_id=self._job_id)

    @property
    def session(self) -> RunnerSession:
        return self._session

    @property
    def state(self) -> RunnerState:
        return self._session.state

    @property
    def active(self) -> bool:
        return self._liveness.alive

    async def load(self) -> RunnerSession:
        """Fetch and normalize the document; fall back to an empty one."""
        self._liveness.alive = False
        liveness = self._liveness = _Liveness()
        session = self._session = RunnerSession(job_id=self._job_id)

        load_failed = False
        try:
            raw = await self._assessments.fetch_assessment(self._job_id)
            document = normalize_document(raw) if raw is not None else None
        except Exception as exc:
            load_failed = True
            document = None
            self._logger.warning(
                "runner.load_failed", error=str(exc), error_type=type(exc).__name__
            )

        if not liveness.alive:
            self._logger.info("runner.load_discarded")
            return session

        session.document = document or AssessmentDocument(
            title=EMPTY_DOCUMENT_TITLE, sections=[]
        )
        session.load_failed = load_failed
        session.state = "ready"
        self._logger.info(
            "runner.loaded",
            found=document is not None,
            section_count=len(session.document.sections),
        )
        return session

    def set_answer(self, question_id: str, value: Any) -> None:
        """Record one answer and clear that question's pending error."""
        self._require_state("ready")
        self._session.responses[question_id] = value
        self._session.errors.pop(question_id, None)

    def toggle_option(self, question_id: str, value: str, checked: bool) -> None:
        """Add or remove ``value`` from a multi-choice answer."""
        current = self._session.responses.get(question_id)
        selected = list(current) if isinstance(current, list) else []
        if checked:
            selected.append(value)
        else:
            selected = [item for item in selected if item != value]
        self.set_answer(question_id, selected)

    def clear_answer(self, question_id: str) -> None:
        self._require_state("ready")
        self._session.responses.pop(question_id, None)
        self._session.errors.pop(question_id, None)

    def visibility(self) -> dict[str, bool]:
        if self._session.document is None:
            return {}
        return visibility_map(self._session.document, self._session.responses)

    def visible_questions(self) -> list[Question]:
        if self._session.document is None:
            return []
        shown = self.visibility()
        return [
            question
            for question in self._session.document.iter_questions()
            if shown.get(question.id) and not isinstance(question, UnsupportedQuestion)
        ]

    def validate(self) -> DocumentValidation:
        """Run the full submit-time validation and publish its errors."""
        if self._session.document is None:
            raise RunnerStateError("No document loaded")
        result = self._validator.validate_document(
            self._session.document, self._session.responses
        )
        self._session.errors = dict(result.errors)
        return result

    async def submit(self) -> Submission | None:
        """Validate and, when valid, write exactly one submission.

        Returns the stored submission, or ``None`` when validation failed,
        the write failed or the runner was closed while writing.
        """
        self._require_state("ready")
        if self._session.is_empty:
            raise RunnerStateError("No assessment configured for this job")

        session = self._session
        liveness = self._liveness
        session.state = "submitting"
        session.submit_failed = False

        result = self.validate()
        if not result.is_valid:
            session.state = "ready"
            self._logger.info("runner.submit_invalid", errors=result.errors)
            return None

        try:
            request = SubmissionRequest(
                responses=dict(session.responses),
                candidate_id=self._resolve_candidate_id(),
            )
            submission = await self._submissions.submit_assessment(self._job_id, request)
        except Exception as exc:
            self._logger.warning(
                "runner.submit_failed", error=str(exc), error_type=type(exc).__name__
            )
            if liveness.alive:
                session.state = "ready"
                session.submit_failed = True
            return None

        if not liveness.alive:
            self._logger.info("runner.submit_discarded", submission_id=submission.id)
            return None

        session.submission = submission
        session.responses = {}
        session.errors = {}
        session.state = "submitted"
        self._logger.info(
            "runner.submitted",
            submission_id=submission.id,
            candidate_id=submission.candidate_id,
        )
        return submission

    def close(self) -> None:
        """Retire the runner; results of in-flight requests are dropped."""
        self._liveness.alive = False

    def _resolve_candidate_id(self) -> str | None:
        if self._candidate_id:
            return self._candidate_id
        if self._session_provider is None:
            return None
        return self._session_provider.current_candidate_id()

    def _require_state(self, expected: RunnerState) -> None:
        if self._session.state != expected:
            raise RunnerStateError(
                f"Runner is {self._session.state!r}; expected {expected!r}"
            )


__all__ = [
    "AssessmentRunner",
    "EMPTY_DOCUMENT_TITLE",
    "RunnerSession",
    "RunnerState",
    "RunnerStateError",
]
