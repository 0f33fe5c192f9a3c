"""Dependency injection container for the assessment engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import AssessmentRunner, ResponseValidator, ValidationMessages
from .stores import InMemoryStore, JsonFileStore, JsonSessionFile, StaticSession


class AssessmentContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    store = providers.Singleton(InMemoryStore)

    session_provider = providers.Singleton(
        StaticSession,
        candidate_id=config.session.candidate_id,
    )

    validator = providers.Singleton(ResponseValidator)

    runner = providers.Factory(
        AssessmentRunner,
        assessments=store,
        submissions=store,
        session_provider=session_provider,
        validator=validator,
    )


def create_container(*, settings: dict | None = None) -> AssessmentContainer:
    """Instantiate container with optional overrides."""

    container = AssessmentContainer()

    if not settings:
        return container

    container.config.from_dict(settings)

    store_settings = settings.get("store") or {}
    if store_settings.get("path"):
        container.store.override(
            providers.Singleton(JsonFileStore, root=store_settings["path"])
        )

    session_settings = settings.get("session") or {}
    if session_settings.get("path"):
        container.session_provider.override(
            providers.Singleton(JsonSessionFile, path=session_settings["path"])
        )

    raw_messages = (settings.get("validator") or {}).get("messages") or {}
    messages = {key: value for key, value in raw_messages.items() if value}
    if messages:
        container.validator.override(
            providers.Singleton(ResponseValidator, messages=ValidationMessages(**messages))
        )

    return container
