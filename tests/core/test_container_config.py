from __future__ import annotations

import pytest
from pydantic import ValidationError

from talentflow.container import create_container
from talentflow.core import AssessmentRunner, ResponseValidator
from talentflow.schemas.config import AppConfig, load_config
from talentflow.stores import InMemoryStore, JsonFileStore, JsonSessionFile, StaticSession


def test_create_container_defaults():
    container = create_container()

    assert isinstance(container.store(), InMemoryStore)
    assert container.store() is container.store()
    assert container.session_provider().current_candidate_id() is None
    assert isinstance(container.validator(), ResponseValidator)


def test_create_container_with_overrides(tmp_path):
    container = create_container(
        settings={
            "store": {"path": str(tmp_path / "store")},
            "session": {"path": str(tmp_path / "session.json")},
            "validator": {"messages": {"required": "Please answer", "maximum": None}},
        }
    )

    store = container.store()
    validator = container.validator()
    runner = container.runner(job_id="3")

    assert isinstance(store, JsonFileStore)
    assert store.root == tmp_path / "store"
    assert isinstance(container.session_provider(), JsonSessionFile)
    assert validator._messages.required == "Please answer"
    assert validator._messages.maximum == "Max {max}"
    assert isinstance(runner, AssessmentRunner)
    assert runner._assessments is store
    assert runner._submissions is store
    assert runner._validator is validator


def test_session_candidate_from_settings():
    container = create_container(settings={"session": {"candidate_id": "42"}})

    session = container.session_provider()

    assert isinstance(session, StaticSession)
    assert session.current_candidate_id() == "42"


def test_load_config_validation():
    data = {
        "store": {"path": "data/store"},
        "validator": {"messages": {"required": "Required"}},
        "logging": {"level": "DEBUG", "renderer": "console"},
    }
    app_config = load_config(data)
    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings["store"] == {"path": "data/store"}
    assert settings["validator"]["messages"] == {"required": "Required"}
    assert settings["logging"] == {"level": "DEBUG", "renderer": "console"}
    assert "session" not in settings


def test_load_config_defaults():
    assert load_config(None).to_settings() == {"logging": {"level": "INFO", "renderer": "json"}}


@pytest.mark.parametrize(
    "raw",
    [
        ["not", "a", "mapping"],
        {"unknown": {}},
        {"validator": {"messages": {"bogus": "x"}}},
        {"logging": {"renderer": "xml"}},
    ],
)
def test_load_config_rejects_invalid(raw):
    with pytest.raises(ValidationError):
        load_config(raw)
