from __future__ import annotations

import pytest

from talentflow.core import AssessmentBuilder, BuilderError, normalize_document
from talentflow.schemas import MultiChoiceQuestion, NumericQuestion, ShortTextQuestion
from talentflow.stores import InMemoryStore


def build_builder() -> tuple[AssessmentBuilder, str]:
    builder = AssessmentBuilder()
    builder.set_details(title="Platform Engineer", description="Screening")
    section = builder.add_section("Basics")
    return builder, section.id


def test_add_question_defaults_to_short_text():
    builder, section_id = build_builder()

    question = builder.add_question(section_id)

    assert isinstance(question, ShortTextQuestion)
    assert question.label == "New Question"
    assert question.id.startswith("question-")
    assert builder.document.sections[0].questions == [question]


def test_update_question_switches_variant_on_type_change():
    builder, section_id = build_builder()
    question = builder.add_question(section_id, label="Years")

    updated = builder.update_question(
        section_id, question.id, type="numeric", validation={"min": 0, "max": 40}
    )

    assert isinstance(updated, NumericQuestion)
    assert updated.id == question.id
    assert updated.label == "Years"
    assert updated.validation.max == 40
    assert builder.document.find_question(question.id) is updated


def test_option_editing():
    builder, section_id = build_builder()
    question = builder.add_question(section_id, question_type="multi-choice", label="Stack")

    python = builder.add_option(section_id, question.id, label="Python", value="python")
    go = builder.add_option(section_id, question.id, label="Go", value="go")
    builder.update_option(section_id, question.id, go.id, label="Golang")
    builder.remove_option(section_id, question.id, python.id)

    current = builder.document.find_question(question.id)
    assert isinstance(current, MultiChoiceQuestion)
    assert [(option.label, option.value) for option in current.options] == [("Golang", "go")]


def test_options_require_choice_question():
    builder, section_id = build_builder()
    question = builder.add_question(section_id)

    with pytest.raises(BuilderError):
        builder.add_option(section_id, question.id)


def test_set_and_clear_condition():
    builder, section_id = build_builder()
    target = builder.add_question(section_id, question_type="single-choice", label="Remote?")
    follow_up = builder.add_question(section_id, label="Which timezone?")

    conditioned = builder.set_condition(section_id, follow_up.id, target_id=target.id, equals="Yes")
    assert conditioned.show_if.question_id == target.id
    assert conditioned.show_if.equals == "Yes"

    cleared = builder.clear_condition(section_id, follow_up.id)
    assert cleared.show_if is None


def test_clear_condition_drops_legacy_shape():
    document = normalize_document(
        {
            "sections": [
                {
                    "id": "s1",
                    "questions": [
                        {"id": "q1", "type": "short-text"},
                        {"id": "q2", "type": "short-text", "condition": {"if": {"questionId": "q1"}}},
                    ],
                }
            ]
        }
    )
    builder = AssessmentBuilder(document)

    cleared = builder.clear_condition("s1", "q2")

    assert cleared.show_if is None


def test_set_condition_rejects_bad_targets():
    builder, section_id = build_builder()
    question = builder.add_question(section_id)

    with pytest.raises(BuilderError):
        builder.set_condition(section_id, question.id, target_id=question.id)
    with pytest.raises(BuilderError):
        builder.set_condition(section_id, question.id, target_id="missing")


def test_unknown_ids_raise():
    builder, section_id = build_builder()

    with pytest.raises(BuilderError):
        builder.add_question("missing")
    with pytest.raises(BuilderError):
        builder.update_question(section_id, "missing", label="x")
    with pytest.raises(BuilderError):
        builder.remove_section("missing")


def test_section_editing():
    builder, section_id = build_builder()
    builder.update_section(section_id, title="Experience", description=None)
    extra = builder.add_section()

    assert builder.document.sections[0].title == "Experience"
    assert builder.document.sections[0].description == ""
    builder.remove_section(extra.id)
    assert [section.id for section in builder.document.sections] == [section_id]


@pytest.mark.asyncio
async def test_save_and_reload_round_trip():
    store = InMemoryStore()
    builder, section_id = build_builder()
    target = builder.add_question(section_id, question_type="single-choice", label="Remote?")
    builder.add_option(section_id, target.id, label="Yes", value="Yes")
    follow_up = builder.add_question(section_id, label="Timezone", required=True)
    builder.set_condition(section_id, follow_up.id, target_id=target.id, equals="Yes")

    saved = await builder.save(store, "5")
    reloaded = await AssessmentBuilder.load(store, "5")

    assert saved["title"] == "Platform Engineer"
    assert saved["sections"][0]["questions"][1]["showIf"] == {
        "questionId": target.id,
        "equals": "Yes",
    }
    assert reloaded.document == builder.document


@pytest.mark.asyncio
async def test_save_refuses_documents_with_broken_conditions():
    store = InMemoryStore()
    builder, section_id = build_builder()
    question = builder.add_question(section_id)
    builder.update_question(section_id, question.id, showIf={"questionId": "gone"})

    with pytest.raises(BuilderError) as excinfo:
        await builder.save(store, "5")

    assert [issue.kind for issue in excinfo.value.issues] == ["unknown_target"]
    assert await store.fetch_assessment("5") is None


@pytest.mark.asyncio
async def test_load_missing_assessment_starts_blank():
    builder = await AssessmentBuilder.load(InMemoryStore(), "404")
    assert builder.document.sections == []
