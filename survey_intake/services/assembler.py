from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List, Sequence, Tuple

from survey_intake.core.logging import get_logger
from survey_intake.models.submission import SubmissionLine, SubmissionPayload
from survey_intake.models.survey import Question, QuestionId
from survey_intake.services.answer_store import AnswerStore, answer_field, is_selection_sequence

logger = get_logger(__name__)


def assemble(
    user_name: str,
    answers: AnswerStore | Mapping[QuestionId, Any],
    questions: Sequence[Question] | None = None,
) -> SubmissionPayload:
    """Flatten stored answers into the create-response payload.

    Multi-choice answers produce one line per selected choice, everything else
    one line per question. Lines follow the store's insertion order unless
    ``questions`` is given, in which case they follow catalog order and answers
    for questions outside the catalog are dropped.

    Completeness is not re-checked here; run the validator first.
    """

    entries = answers.entries if isinstance(answers, AnswerStore) else answers
    lines: List[SubmissionLine] = []
    for question_id, value in _ordered_entries(entries, questions):
        lines.extend(_lines_for(question_id, value))

    payload = SubmissionPayload(user_name=user_name, answers=lines)
    logger.debug("Assembled %d submission lines for %d answers", len(lines), len(entries))
    return payload


def _ordered_entries(
    entries: Mapping[QuestionId, Any],
    questions: Sequence[Question] | None,
) -> Iterable[Tuple[QuestionId, Any]]:
    if questions is None:
        return list(entries.items())
    return [(question.id, entries[question.id]) for question in questions if question.id in entries]


def _lines_for(question_id: QuestionId, value: Any) -> List[SubmissionLine]:
    if value is None:
        return []
    if is_selection_sequence(value):
        return [_choice_line(question_id, entry) for entry in value]
    if not isinstance(value, str) and answer_field(value, "choice_text") is not None:
        return [_choice_line(question_id, value)]
    return [SubmissionLine(question_id=question_id, answer_text=value)]


def _choice_line(question_id: QuestionId, entry: Any) -> SubmissionLine:
    return SubmissionLine(
        question_id=question_id,
        answer_text=answer_field(entry, "choice_text"),
        written_answer=_written_answer(answer_field(entry, "other_text")),
    )


def _written_answer(other_text: Any) -> str | None:
    if isinstance(other_text, str) and other_text.strip():
        return other_text.strip()
    return None
