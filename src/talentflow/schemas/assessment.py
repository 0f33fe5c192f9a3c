"""Assessment document, submission and response records."""

from __future__ import annotations

from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..coercion import stringify
from .question import Question

ResponseMap = dict[str, Any]
ErrorMap = dict[str, str]


def _blank_if_none(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return stringify(value)
    return value


def _candidate_id(value: Any) -> Any:
    # candidate ids are numeric in some stores
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Section(BaseModel):
    """Ordered group of questions."""

    id: str = ""
    title: str = ""
    description: str = ""
    questions: list[Question] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    _blank_text = field_validator("id", "title", "description", mode="before")(
        _blank_if_none
    )

    @field_validator("questions", mode="before")
    @classmethod
    def _default_questions(cls, value: Any) -> Any:
        return [] if value is None else value


class AssessmentDocument(BaseModel):
    """Full assessment definition for one job."""

    title: str = ""
    description: str = ""
    sections: list[Section] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    _blank_text = field_validator("title", "description", mode="before")(
        _blank_if_none
    )

    def iter_questions(self) -> Iterator[Question]:
        for section in self.sections:
            yield from section.questions

    def find_question(self, question_id: str) -> Question | None:
        for question in self.iter_questions():
            if question.id == question_id:
                return question
        return None

    def find_section(self, section_id: str) -> Section | None:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def to_payload(self) -> dict[str, Any]:
        """Serialize with wire (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SubmissionRequest(BaseModel):
    """Body of a submission write."""

    responses: ResponseMap = Field(default_factory=dict)
    candidate_id: str | None = Field(default=None, alias="candidateId")

    model_config = ConfigDict(populate_by_name=True)

    _normalize_candidate = field_validator("candidate_id", mode="before")(_candidate_id)


class Submission(BaseModel):
    """Stored record of one completed, validated response set."""

    id: str
    at: int
    candidate_id: str | None = Field(default=None, alias="candidateId")
    responses: ResponseMap = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    _normalize_candidate = field_validator("candidate_id", mode="before")(_candidate_id)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "AssessmentDocument",
    "ErrorMap",
    "ResponseMap",
    "Section",
    "Submission",
    "SubmissionRequest",
]
