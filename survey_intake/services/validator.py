from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Sequence

from survey_intake.core.logging import get_logger
from survey_intake.models.submission import UnansweredQuestion, ValidationReport
from survey_intake.models.survey import Question, QuestionId, QuestionType
from survey_intake.services.answer_store import UNANSWERED, AnswerStore, answer_field, is_selection_sequence

logger = get_logger(__name__)


def validate(questions: Sequence[Question], answers: AnswerStore | Mapping[QuestionId, Any]) -> ValidationReport:
    """Report which catalog questions lack a valid answer.

    ``questions`` must be the same catalog snapshot that drives navigation.
    Answers stored for ids outside the catalog are ignored.
    """

    entries = answers.entries if isinstance(answers, AnswerStore) else answers
    unanswered: List[UnansweredQuestion] = []

    for position, question in enumerate(questions, start=1):
        answer = entries.get(question.id, UNANSWERED)
        if not has_valid_answer(question, answer):
            unanswered.append(UnansweredQuestion(id=question.id, text=question.text, position=position))

    report = ValidationReport(unanswered=unanswered, total_questions=len(questions))
    logger.debug(
        "Validated %d questions, %d unanswered", report.total_questions, len(report.unanswered)
    )
    return report


def has_valid_answer(question: Question, answer: Any) -> bool:
    """Return True when ``answer`` satisfies the rule for ``question.type``.

    Unknown question types never validate.
    """

    if answer is UNANSWERED or answer is None:
        return False
    rule = _RULES.get(question.type)
    if rule is None:
        return False
    return rule(question, answer)


def _needs_elaboration(question: Question, entry: Any) -> bool:
    choice = question.find_choice(answer_field(entry, "choice_id"))
    return choice is not None and choice.is_other


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _valid_single(question: Question, answer: Any) -> bool:
    if is_selection_sequence(answer) or isinstance(answer, str):
        return False
    choice_id = answer_field(answer, "choice_id")
    if choice_id is None or question.find_choice(choice_id) is None:
        return False
    if _needs_elaboration(question, answer) and not _has_text(answer_field(answer, "other_text")):
        return False
    return True


def _valid_multi(question: Question, answer: Any) -> bool:
    if not is_selection_sequence(answer) or not answer:
        return False
    if question.max_selections and len(answer) > question.max_selections:
        return False
    for entry in answer:
        if question.find_choice(answer_field(entry, "choice_id")) is None:
            return False
        if _needs_elaboration(question, entry) and not _has_text(answer_field(entry, "other_text")):
            return False
    if len({answer_field(entry, "choice_id") for entry in answer}) != len(answer):
        return False
    return True


def _valid_text(question: Question, answer: Any) -> bool:
    return _has_text(answer)


_RULES: Dict[Any, Callable[[Question, Any], bool]] = {
    QuestionType.SINGLE: _valid_single,
    QuestionType.MULTI: _valid_multi,
    QuestionType.TEXT: _valid_text,
}
