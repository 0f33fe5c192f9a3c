"""JSON-file backed store mirroring the browser storage layout."""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any, Mapping

import structlog
from pydantic import ValidationError

from ..schemas import Submission, SubmissionRequest
from .base import StoreError
from .memory import build_submission

_UNSAFE_KEY = re.compile(r"[^A-Za-z0-9._-]")


def _key_to_filename(key: str) -> str:
    return _UNSAFE_KEY.sub("_", str(key)) + ".json"


class JsonFileStore:
    """Directory store.

    Layout::

        <root>/assessments.json            {job_id: document}
        <root>/submissions/<job_id>.json   [submission, ...]
        <root>/timeline/<candidate>.json   [event, ...]
    """

    def __init__(self, root: str | Path):
        self._root = Path(root)
        self._logger = structlog.get_logger(__name__)

    @property
    def root(self) -> Path:
        return self._root

    async def fetch_assessment(self, job_id: str) -> dict[str, Any] | None:
        assessments = await asyncio.to_thread(self._read_assessments)
        payload = assessments.get(str(job_id))
        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise StoreError(f"Stored assessment for job {job_id!r} is not an object")
        return payload

    async def save_assessment(self, job_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        def _save() -> dict[str, Any]:
            assessments = self._read_assessments()
            assessments[str(job_id)] = payload
            self._write_json(self._assessments_path, assessments)
            return payload

        saved = await asyncio.to_thread(_save)
        self._logger.info("store.assessment_saved", job_id=job_id)
        return saved

    async def list_job_ids(self) -> list[str]:
        assessments = await asyncio.to_thread(self._read_assessments)
        return list(assessments.keys())

    async def seed_if_empty(self, assessments: Mapping[str, dict[str, Any]]) -> bool:
        def _seed() -> bool:
            if self._read_assessments():
                return False
            self._write_json(
                self._assessments_path,
                {str(job_id): payload for job_id, payload in assessments.items()},
            )
            return True

        seeded = await asyncio.to_thread(_seed)
        self._logger.info("store.seeded", seeded=seeded, job_count=len(assessments))
        return seeded

    async def submit_assessment(self, job_id: str, request: SubmissionRequest) -> Submission:
        submission = build_submission(request)

        def _append() -> None:
            # timeline first; the submission record is the commit point
            if submission.candidate_id:
                timeline_path = self._timeline_path(submission.candidate_id)
                events = self._read_list(timeline_path)
                events.append({"at": submission.at, "type": "submission", "jobId": str(job_id)})
                self._write_json(timeline_path, events)
            path = self._submissions_path(job_id)
            records = self._read_list(path)
            records.append(submission.to_payload())
            self._write_json(path, records)

        await asyncio.to_thread(_append)
        self._logger.info(
            "store.submission_written",
            job_id=job_id,
            submission_id=submission.id,
            candidate_id=submission.candidate_id,
        )
        return submission

    async def list_submissions(self, job_id: str) -> list[Submission]:
        records = await asyncio.to_thread(self._read_list, self._submissions_path(job_id))
        try:
            return [Submission.model_validate(record) for record in records]
        except ValidationError as exc:
            raise StoreError(f"Invalid submission record for job {job_id!r}: {exc}") from exc

    async def timeline(self, candidate_id: str) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._read_list, self._timeline_path(candidate_id))

    @property
    def _assessments_path(self) -> Path:
        return self._root / "assessments.json"

    def _submissions_path(self, job_id: str) -> Path:
        return self._root / "submissions" / _key_to_filename(job_id)

    def _timeline_path(self, candidate_id: str) -> Path:
        return self._root / "timeline" / _key_to_filename(candidate_id)

    def _read_assessments(self) -> dict[str, Any]:
        data = self._read_json(self._assessments_path, default={})
        if not isinstance(data, dict):
            raise StoreError(f"{self._assessments_path} must contain a JSON object")
        return data

    def _read_list(self, path: Path) -> list[Any]:
        data = self._read_json(path, default=[])
        if not isinstance(data, list):
            raise StoreError(f"{path} must contain a JSON array")
        return data

    @staticmethod
    def _read_json(path: Path, *, default: Any) -> Any:
        if not path.exists():
            return default
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Invalid JSON in {path}: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"Cannot read {path}: {exc}") from exc

    @staticmethod
    def _write_json(path: Path, payload: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            raise StoreError(f"Cannot write {path}: {exc}") from exc


class JsonSessionFile:
    """Session provider reading ``{"candidateId": ...}`` from a JSON file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._logger = structlog.get_logger(__name__)

    def current_candidate_id(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            self._logger.warning("session.unreadable", path=str(self._path), error=str(exc))
            return None
        if not isinstance(data, dict):
            self._logger.warning("session.malformed", path=str(self._path))
            return None
        candidate_id = data.get("candidateId")
        if candidate_id is None or candidate_id == "":
            return None
        return str(candidate_id)


__all__ = ["JsonFileStore", "JsonSessionFile"]
