"""Typer CLI entrypoint for the assessment engine."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional

import pendulum
import typer
import yaml
from pydantic import ValidationError

from .container import AssessmentContainer, create_container
from .core import (
    AssessmentRunner,
    ResponseValidator,
    lint_conditions,
    normalize_document,
)
from .loaders import DocumentLoader, OutputWriter, ResponseLoader
from .logging import configure_logging
from .schemas.config import load_config
from .seed import sample_assessments
from .stores import StoreError

app = typer.Typer(help="Assessment builder and runner CLI.")

DEFAULT_SEED_JOBS = ["1", "2", "3"]


def _bootstrap(
    *,
    config: Path | None,
    log_level: str | None,
    store: Path | None = None,
    session: Path | None = None,
) -> AssessmentContainer:
    raw: Any = None
    if config:
        with config.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
        if not isinstance(raw, dict):
            raise typer.BadParameter("Config file must be a YAML object", param_hint="'--config'")
    try:
        app_config = load_config(raw)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_hint="'--config'") from exc

    settings = app_config.to_settings()
    if store is not None:
        settings.setdefault("store", {})["path"] = str(store)
    if session is not None:
        settings.setdefault("session", {})["path"] = str(session)

    configure_logging(log_level or app_config.logging.level, app_config.logging.renderer)
    return create_container(settings=settings)


def _emit(payload: Any, output: Path | None) -> None:
    if output is not None:
        OutputWriter().write(output, payload)
        return
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _load_document(path: Path) -> Any:
    try:
        return normalize_document(DocumentLoader().load(path))
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="'--document'") from exc


def _load_responses(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    try:
        return ResponseLoader().load(path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="'--responses'") from exc


@app.command()
def seed(
    store: Path = typer.Option(..., file_okay=False, help="Store directory."),
    job: Optional[List[str]] = typer.Option(None, "--job", help="Job id to seed (repeatable)."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Seed an empty store with sample assessments."""
    container = _bootstrap(config=config, log_level=log_level, store=store)
    job_ids = job or DEFAULT_SEED_JOBS
    seeded = asyncio.run(container.store().seed_if_empty(sample_assessments(job_ids)))
    if seeded:
        typer.echo(f"Seeded {len(job_ids)} assessments into {store}.")
    else:
        typer.echo(f"Store {store} already has assessments; nothing seeded.")


@app.command()
def show(
    store: Path = typer.Option(..., exists=True, file_okay=False, help="Store directory."),
    job: str = typer.Option(..., help="Job id."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write the document here instead of stdout."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Print the normalized assessment for a job."""
    container = _bootstrap(config=config, log_level=log_level, store=store)
    try:
        raw = asyncio.run(container.store().fetch_assessment(job))
        document = normalize_document(raw) if raw is not None else None
    except (StoreError, ValueError) as exc:
        typer.echo(f"Cannot read assessment for job {job}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if document is None:
        typer.echo(f"No assessment configured for job {job}.", err=True)
        raise typer.Exit(code=1)
    _emit(document.to_payload(), output)


@app.command()
def check(
    document: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Assessment document (JSON or YAML)."),
    responses: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Responses keyed by question id."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write the report here instead of stdout."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Evaluate visibility and validation of responses without submitting."""
    container = _bootstrap(config=config, log_level=log_level)
    validator: ResponseValidator = container.validator()
    result = validator.validate_document(_load_document(document), _load_responses(responses))
    report = {
        "valid": result.is_valid,
        "errors": result.errors,
        "visible": [qid for qid, shown in result.visibility.items() if shown],
        "hidden": [qid for qid, shown in result.visibility.items() if not shown],
    }
    _emit(report, output)
    if not result.is_valid:
        raise typer.Exit(code=1)


@app.command()
def lint(
    document: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Assessment document (JSON or YAML)."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Report visibility rules that reference missing or conditional questions."""
    _bootstrap(config=config, log_level=log_level)
    issues = lint_conditions(_load_document(document))
    for issue in issues:
        typer.echo(f"{issue.severity}: {issue.question_id}: {issue.message}")
    if any(issue.severity == "error" for issue in issues):
        raise typer.Exit(code=1)
    typer.echo(f"{len(issues)} warning(s).")


@app.command()
def submit(
    store: Path = typer.Option(..., exists=True, file_okay=False, help="Store directory."),
    job: str = typer.Option(..., help="Job id."),
    responses: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Responses keyed by question id."),
    candidate_id: Optional[str] = typer.Option(None, help="Candidate id; defaults to the session's candidate."),
    session: Optional[Path] = typer.Option(None, dir_okay=False, help="Candidate session JSON file."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write the submission here instead of stdout."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Run the assessment with the given responses and record a submission."""
    container = _bootstrap(config=config, log_level=log_level, store=store, session=session)
    answers = _load_responses(responses)
    runner: AssessmentRunner = container.runner(job_id=job, candidate_id=candidate_id)

    async def _run() -> Any:
        await runner.load()
        if runner.session.is_empty:
            return None
        for question_id, value in answers.items():
            runner.set_answer(question_id, value)
        return await runner.submit()

    submission = asyncio.run(_run())
    state = runner.session

    if state.is_empty:
        typer.echo(f"No assessment configured for job {job}.", err=True)
        raise typer.Exit(code=1)
    if submission is None:
        if state.submit_failed:
            typer.echo("Failed to submit.", err=True)
        else:
            _emit({"errors": state.errors}, output)
        raise typer.Exit(code=1)
    _emit(submission.to_payload(), output)


@app.command()
def submissions(
    store: Path = typer.Option(..., exists=True, file_okay=False, help="Store directory."),
    job: str = typer.Option(..., help="Job id."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write the listing here instead of stdout."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """List submissions recorded for a job."""
    container = _bootstrap(config=config, log_level=log_level, store=store)
    try:
        records = asyncio.run(container.store().list_submissions(job))
    except StoreError as exc:
        typer.echo(f"Cannot read submissions for job {job}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    listing = []
    for record in records:
        payload = record.to_payload()
        payload["submittedAt"] = pendulum.from_timestamp(record.at / 1000).to_iso8601_string()
        listing.append(payload)
    _emit(listing, output)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
