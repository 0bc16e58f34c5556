from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import click
from pydantic import ValidationError

from survey_intake.core.config import settings
from survey_intake.core.errors import SurveyError
from survey_intake.core.logging import get_logger, setup_logging
from survey_intake.models.survey import ChoiceId, Question, QuestionType, Respondent
from survey_intake.services.catalog_loader import CatalogLoader
from survey_intake.services.response_sink import JsonFileResponseSink
from survey_intake.services.survey_session import SurveySession

logger = get_logger(__name__)


@click.group()
def cli() -> None:
    """Validate and submit survey answers against a question catalog."""


@cli.command("check")
@click.argument("answers_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--catalog", "catalog_path", type=click.Path(path_type=Path), default=None,
              help="Question catalog JSON (defaults to SURVEY_CATALOG_PATH).")
def check_cmd(answers_path: Path, catalog_path: Path | None) -> None:
    """Report which questions are still unanswered."""

    session = _build_session(catalog_path, answers_path, name="Anonymous")
    report = session.validate()
    click.echo(f"Answered {report.answered_questions} of {report.total_questions} questions")
    for item in report.unanswered:
        click.echo(f"  {item.position}. {item.text}")
    if not report.is_complete:
        raise SystemExit(1)


@cli.command("submit")
@click.argument("answers_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", required=True, help="Respondent display name.")
@click.option("--catalog", "catalog_path", type=click.Path(path_type=Path), default=None,
              help="Question catalog JSON (defaults to SURVEY_CATALOG_PATH).")
@click.option("--outbox", "outbox_path", type=click.Path(path_type=Path), default=None,
              help="Store the payload in this response file (defaults to SURVEY_OUTBOX_PATH).")
@click.option("--dry-run", is_flag=True, help="Print the payload without storing it.")
def submit_cmd(
    answers_path: Path,
    name: str,
    catalog_path: Path | None,
    outbox_path: Path | None,
    dry_run: bool,
) -> None:
    """Assemble the submission payload for a completed answers file."""

    session = _build_session(catalog_path, answers_path, name=name)
    try:
        payload = session.build_submission()
    except SurveyError as exc:
        for item in session.validate().unanswered:
            click.echo(f"  {item.position}. {item.text}", err=True)
        raise click.ClickException(str(exc)) from exc

    click.echo(json.dumps(payload.to_wire(), indent=2))
    if dry_run:
        return

    sink = JsonFileResponseSink(outbox_path or settings.outbox_path)
    try:
        response_id = session.submit(sink)
    except SurveyError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Stored response {response_id}", err=True)


def _build_session(catalog_path: Path | None, answers_path: Path, *, name: str) -> SurveySession:
    try:
        respondent = Respondent(name=name)
    except ValidationError as exc:
        raise click.BadParameter(exc.errors()[0]["msg"], param_hint="--name") from exc

    try:
        catalog = CatalogLoader(catalog_path or settings.catalog_path).catalog
        session = SurveySession(
            catalog,
            respondent,
            catalog_ordered_submission=settings.catalog_ordered_submission,
        )
        raw_answers = json.loads(answers_path.read_text(encoding="utf-8"))
        if not isinstance(raw_answers, dict):
            raise click.ClickException(f"{answers_path}: expected an object keyed by question id")
        _replay_answers(session, raw_answers)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{answers_path}: invalid JSON ({exc})") from exc
    except (SurveyError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    return session


def _replay_answers(session: SurveySession, raw_answers: Mapping[str, Any]) -> None:
    """Feed an answers file through the same interactions the UI would make."""

    by_key = {str(question.id): question for question in session.catalog.questions}
    for key, value in raw_answers.items():
        question = by_key.get(str(key))
        if question is None:
            logger.warning("Ignoring answer for unknown question %s", key)
            continue

        if question.type == QuestionType.TEXT:
            session.set_text(question.id, "" if value is None else str(value))
            continue

        entries = value if isinstance(value, list) else [value]
        for entry in entries:
            if not isinstance(entry, dict) or "choice_id" not in entry:
                raise ValueError(f"question {key}: choice answers need a choice_id")
            choice_id = _resolve_choice_id(question, entry["choice_id"])
            session.select_choice(question.id, choice_id)
            if entry.get("other_text"):
                session.set_other_text(question.id, entry["other_text"], choice_id=choice_id)


def _resolve_choice_id(question: Question, raw_id: Any) -> ChoiceId:
    for choice in question.choices:
        if str(choice.id) == str(raw_id):
            return choice.id
    return raw_id


def main() -> None:
    """Run the survey intake command line."""

    setup_logging(settings.logging.level, settings.logging.json_logs)
    cli()


if __name__ == "__main__":
    main()
