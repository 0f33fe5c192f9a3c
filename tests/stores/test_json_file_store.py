from __future__ import annotations

import json
from pathlib import Path

import pytest

from talentflow.schemas import SubmissionRequest
from talentflow.stores import (
    AssessmentStore,
    InMemoryStore,
    JsonFileStore,
    JsonSessionFile,
    SessionProvider,
    StoreError,
    SubmissionStore,
)


@pytest.fixture
def store(tmp_path: Path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "store")


def test_stores_satisfy_protocols(store):
    for candidate in (store, InMemoryStore()):
        assert isinstance(candidate, AssessmentStore)
        assert isinstance(candidate, SubmissionStore)
    assert isinstance(JsonSessionFile("session.json"), SessionProvider)


@pytest.mark.asyncio
async def test_missing_assessment_returns_none(store):
    assert await store.fetch_assessment("1") is None
    assert await store.list_submissions("1") == []


@pytest.mark.asyncio
async def test_save_then_fetch(store):
    payload = {"title": "T", "sections": []}

    await store.save_assessment("1", payload)
    await store.save_assessment("2", {"title": "Other"})

    assert await store.fetch_assessment("1") == payload
    assert await store.list_job_ids() == ["1", "2"]
    on_disk = json.loads((store.root / "assessments.json").read_text(encoding="utf-8"))
    assert set(on_disk) == {"1", "2"}


@pytest.mark.asyncio
async def test_seed_only_when_empty(store):
    assert await store.seed_if_empty({"1": {"title": "Seeded"}}) is True
    assert await store.seed_if_empty({"2": {"title": "Ignored"}}) is False
    assert await store.list_job_ids() == ["1"]


@pytest.mark.asyncio
async def test_submissions_append_and_record_timeline(store):
    first = await store.submit_assessment(
        "1", SubmissionRequest(responses={"q1": "Yes"}, candidate_id="42")
    )
    second = await store.submit_assessment("1", SubmissionRequest(responses={"q1": "No"}))

    records = await store.list_submissions("1")

    assert [record.id for record in records] == [first.id, second.id]
    assert records[0].responses == {"q1": "Yes"}
    assert records[0].candidate_id == "42"
    assert records[1].candidate_id is None
    assert await store.timeline("42") == [{"at": first.at, "type": "submission", "jobId": "1"}]


@pytest.mark.asyncio
async def test_malformed_json_raises_store_error(store):
    store.root.mkdir(parents=True)
    (store.root / "assessments.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreError):
        await store.fetch_assessment("1")


@pytest.mark.asyncio
async def test_non_object_assessment_raises_store_error(store):
    store.root.mkdir(parents=True)
    (store.root / "assessments.json").write_text(json.dumps({"1": ["bad"]}), encoding="utf-8")

    with pytest.raises(StoreError):
        await store.fetch_assessment("1")


@pytest.mark.asyncio
async def test_invalid_submission_record_raises_store_error(store):
    path = store.root / "submissions" / "1.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps([{"responses": {}}]), encoding="utf-8")

    with pytest.raises(StoreError):
        await store.list_submissions("1")


def test_session_file_reads_candidate_id(tmp_path: Path):
    path = tmp_path / "session.json"
    session = JsonSessionFile(path)
    assert session.current_candidate_id() is None

    path.write_text(json.dumps({"candidateId": 17}), encoding="utf-8")
    assert session.current_candidate_id() == "17"

    path.write_text("[]", encoding="utf-8")
    assert session.current_candidate_id() is None

    path.write_text("{broken", encoding="utf-8")
    assert session.current_candidate_id() is None


@pytest.mark.asyncio
async def test_failed_timeline_write_stores_no_submission(store):
    store.root.mkdir(parents=True)
    (store.root / "timeline").write_text("not a directory", encoding="utf-8")

    with pytest.raises(StoreError):
        await store.submit_assessment(
            "1", SubmissionRequest(responses={"q1": "Yes"}, candidate_id="42")
        )

    assert await store.list_submissions("1") == []
