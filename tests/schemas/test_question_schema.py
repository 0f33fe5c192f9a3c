from __future__ import annotations

import pytest
from pydantic import ValidationError

from talentflow.schemas import (
    FileUploadQuestion,
    LongTextQuestion,
    MultiChoiceQuestion,
    NumericQuestion,
    ShortTextQuestion,
    SingleChoiceQuestion,
    Submission,
    SubmissionRequest,
    UnsupportedQuestion,
    parse_question,
)


@pytest.mark.parametrize(
    "question_type, expected",
    [
        ("single-choice", SingleChoiceQuestion),
        ("multi-choice", MultiChoiceQuestion),
        ("short-text", ShortTextQuestion),
        ("long-text", LongTextQuestion),
        ("numeric", NumericQuestion),
        ("file-upload", FileUploadQuestion),
    ],
)
def test_type_field_selects_variant(question_type, expected):
    question = parse_question({"id": "q", "type": question_type})
    assert isinstance(question, expected)
    assert question.type == question_type


@pytest.mark.parametrize(
    "raw",
    [{"id": "q", "type": "rating"}, {"id": "q", "type": ""}, {"id": "q"}],
)
def test_unknown_type_is_carried_as_unsupported(raw):
    question = parse_question(raw)
    assert isinstance(question, UnsupportedQuestion)


def test_unsupported_question_keeps_extra_fields():
    question = parse_question({"id": "q", "type": "rating", "stars": 5})
    assert question.type == "rating"
    assert question.model_dump()["stars"] == 5


def test_missing_id_is_rejected():
    with pytest.raises(ValidationError):
        parse_question({"type": "short-text"})


def test_null_collections_default_to_empty():
    choice = parse_question({"id": "q", "type": "single-choice", "options": None, "label": None})
    assert choice.options == []
    assert choice.label == ""

    numeric = parse_question({"id": "n", "type": "numeric", "validation": None})
    assert numeric.validation.min is None
    assert numeric.validation.max is None


def test_option_values():
    question = parse_question(
        {
            "id": "q",
            "type": "multi-choice",
            "options": [
                {"id": "a", "label": "Python", "value": "py"},
                {"id": "b", "label": "Go", "value": "go"},
            ],
        }
    )
    assert question.option_values() == ["py", "go"]


def test_text_validation_reads_max_length_alias():
    question = parse_question({"id": "q", "type": "long-text", "validation": {"maxLength": 200}})
    assert question.validation.max_length == 200
    assert question.model_dump(by_alias=True)["validation"]["maxLength"] == 200


def test_submission_request_stringifies_numeric_candidate():
    request = SubmissionRequest.model_validate({"responses": {"q": "a"}, "candidateId": 12})
    assert request.candidate_id == "12"


def test_submission_payload_uses_wire_names():
    submission = Submission(id="abc", at=1_700_000_000_000, candidate_id="7", responses={"q": ["a"]})
    assert submission.to_payload() == {
        "id": "abc",
        "at": 1_700_000_000_000,
        "candidateId": "7",
        "responses": {"q": ["a"]},
    }


def test_submission_is_immutable():
    submission = Submission(id="abc", at=1)
    with pytest.raises(ValidationError):
        submission.id = "other"


def test_numeric_ids_labels_and_option_values_are_stringified():
    question = parse_question(
        {
            "id": 12,
            "type": "single-choice",
            "label": 3,
            "options": [{"id": 1, "label": "Five", "value": 5}, {"id": "o2", "label": 2.5, "value": 6.0}],
            "showIf": {"questionId": 11, "equals": "Yes"},
        }
    )

    assert question.id == "12"
    assert question.label == "3"
    assert [(o.id, o.label, o.value) for o in question.options] == [("1", "Five", "5"), ("o2", "2.5", "6")]
    assert question.show_if.question_id == "11"
