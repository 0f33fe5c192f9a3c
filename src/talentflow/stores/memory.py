"""In-process store used by tests and ad-hoc sessions."""

from __future__ import annotations

import copy
import uuid
from typing import Any, Mapping

import pendulum
import structlog

from ..schemas import Submission, SubmissionRequest


def now_ms() -> int:
    return int(pendulum.now("UTC").timestamp() * 1000)


def build_submission(request: SubmissionRequest, *, at: int | None = None) -> Submission:
    return Submission(
        id=uuid.uuid4().hex,
        at=now_ms() if at is None else at,
        candidate_id=request.candidate_id,
        responses=copy.deepcopy(request.responses),
    )


class InMemoryStore:
    """Dictionary-backed assessment and submission store."""

    def __init__(self, assessments: Mapping[str, dict[str, Any]] | None = None) -> None:
        self._assessments: dict[str, dict[str, Any]] = {
            str(job_id): copy.deepcopy(payload)
            for job_id, payload in (assessments or {}).items()
        }
        self._submissions: dict[str, list[Submission]] = {}
        self._timelines: dict[str, list[dict[str, Any]]] = {}
        self._logger = structlog.get_logger(__name__)

    async def fetch_assessment(self, job_id: str) -> dict[str, Any] | None:
        payload = self._assessments.get(str(job_id))
        return copy.deepcopy(payload) if payload is not None else None

    async def save_assessment(self, job_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        self._assessments[str(job_id)] = copy.deepcopy(payload)
        return copy.deepcopy(payload)

    async def submit_assessment(self, job_id: str, request: SubmissionRequest) -> Submission:
        submission = build_submission(request)
        self._submissions.setdefault(str(job_id), []).append(submission)
        if submission.candidate_id:
            self._timelines.setdefault(submission.candidate_id, []).append(
                {"at": submission.at, "type": "submission", "jobId": str(job_id)}
            )
        self._logger.info(
            "store.submission_written",
            job_id=job_id,
            submission_id=submission.id,
            candidate_id=submission.candidate_id,
        )
        return submission

    async def list_submissions(self, job_id: str) -> list[Submission]:
        return list(self._submissions.get(str(job_id), []))

    async def timeline(self, candidate_id: str) -> list[dict[str, Any]]:
        return list(self._timelines.get(str(candidate_id), []))

    async def seed_if_empty(self, assessments: Mapping[str, dict[str, Any]]) -> bool:
        if self._assessments:
            return False
        for job_id, payload in assessments.items():
            self._assessments[str(job_id)] = copy.deepcopy(payload)
        return True


class StaticSession:
    """Session provider returning a fixed candidate id."""

    def __init__(self, candidate_id: str | None = None) -> None:
        self._candidate_id = candidate_id

    def current_candidate_id(self) -> str | None:
        return self._candidate_id


__all__ = ["InMemoryStore", "StaticSession", "build_submission", "now_ms"]
