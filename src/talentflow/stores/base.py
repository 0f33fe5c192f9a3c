"""Store contracts shared by every persistence backend."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..schemas import Submission, SubmissionRequest


class StoreError(RuntimeError):
    """Raised when a store cannot complete a read or write."""


@runtime_checkable
class AssessmentStore(Protocol):
    """Read/write access to assessment documents keyed by job id.

    Documents are returned exactly as stored; callers normalize them.
    """

    async def fetch_assessment(self, job_id: str) -> dict[str, Any] | None:
        """Return the stored document for ``job_id`` or ``None`` if absent."""

    async def save_assessment(self, job_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Persist ``payload`` as the document for ``job_id``."""


@runtime_checkable
class SubmissionStore(Protocol):
    """Append-only submission records keyed by job id."""

    async def submit_assessment(self, job_id: str, request: SubmissionRequest) -> Submission:
        """Record one submission and return the stored record."""

    async def list_submissions(self, job_id: str) -> list[Submission]:
        """Return every submission recorded for ``job_id``, oldest first."""


@runtime_checkable
class SessionProvider(Protocol):
    """Resolve the candidate signed in to the current session."""

    def current_candidate_id(self) -> str | None:
        """Return the active candidate id, if any."""


__all__ = ["AssessmentStore", "SessionProvider", "StoreError", "SubmissionStore"]
