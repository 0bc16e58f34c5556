from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Tuple

from survey_intake.core.errors import MaxSelectionsExceeded, UnknownQuestionError
from survey_intake.core.logging import get_logger
from survey_intake.models.survey import Choice, ChoiceAnswer, ChoiceId, Question, QuestionId, QuestionType

logger = get_logger(__name__)


class _Unanswered:
    """Marker returned by :func:`get_answer` for questions without an entry."""

    _instance: "_Unanswered | None" = None

    def __new__(cls) -> "_Unanswered":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNANSWERED"


UNANSWERED = _Unanswered()


@dataclass(frozen=True)
class AnswerStore:
    """Immutable snapshot of the answers given so far, keyed by question id.

    Values are stored as given: a :class:`ChoiceAnswer` for single-choice
    questions, a tuple of them (in selection order) for multi-choice questions
    and a plain string for text questions. Shapes are not checked here; the
    validator decides what counts as answered.
    """

    entries: Mapping[QuestionId, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __contains__(self, question_id: object) -> bool:
        return question_id in self.entries

    def __iter__(self) -> Iterator[QuestionId]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def items(self):
        return self.entries.items()

    def as_dict(self) -> dict[QuestionId, Any]:
        return dict(self.entries)


def set_answer(store: AnswerStore, question_id: QuestionId, value: Any) -> AnswerStore:
    """Return a store whose entry for ``question_id`` is ``value``.

    The previous value is replaced wholesale. ``None`` removes the entry.
    """

    entries = dict(store.entries)
    if value is None:
        entries.pop(question_id, None)
        logger.debug("Cleared answer for question %r", question_id)
    else:
        entries[question_id] = value
        logger.debug("Stored answer for question %r", question_id)
    return AnswerStore(entries)


def get_answer(store: AnswerStore, question_id: QuestionId) -> Any:
    """Return the stored value or :data:`UNANSWERED`."""

    return store.entries.get(question_id, UNANSWERED)


def answer_field(entry: Any, name: str) -> Any:
    """Read ``name`` from a choice entry that may be a model or a plain mapping."""

    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def is_selection_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def set_text_answer(store: AnswerStore, question_id: QuestionId, text: str) -> AnswerStore:
    return set_answer(store, question_id, text)


def select_single_choice(store: AnswerStore, question: Question, choice_id: ChoiceId) -> AnswerStore:
    """Select ``choice_id`` on a single-choice question.

    Selecting the choice that is already selected clears the answer. An
    existing elaboration text survives the switch only when the newly selected
    choice is an "other" choice.
    """

    _require_type(question, QuestionType.SINGLE)
    choice = _require_choice(question, choice_id)
    current = get_answer(store, question.id)

    if current is not UNANSWERED and answer_field(current, "choice_id") == choice.id:
        return set_answer(store, question.id, None)

    other_text = answer_field(current, "other_text") if current is not UNANSWERED else None
    answer = ChoiceAnswer(
        choice_id=choice.id,
        choice_text=choice.text,
        other_text=other_text if choice.is_other and other_text else None,
    )
    return set_answer(store, question.id, answer)


def toggle_multi_choice(store: AnswerStore, question: Question, choice_id: ChoiceId) -> AnswerStore:
    """Add or remove ``choice_id`` from a multi-choice selection.

    Raises :class:`MaxSelectionsExceeded` when adding the choice would go past
    ``question.max_selections``; the given store is left as it was.
    """

    _require_type(question, QuestionType.MULTI)
    choice = _require_choice(question, choice_id)
    current = _selections(get_answer(store, question.id))

    if any(answer_field(entry, "choice_id") == choice.id for entry in current):
        selections = tuple(entry for entry in current if answer_field(entry, "choice_id") != choice.id)
    else:
        selections = current + (ChoiceAnswer(choice_id=choice.id, choice_text=choice.text),)

    if question.max_selections and len(selections) > question.max_selections:
        logger.info(
            "Rejected selection %r on question %r: limit of %d reached",
            choice.id,
            question.id,
            question.max_selections,
        )
        raise MaxSelectionsExceeded(question.id, question.max_selections)

    return set_answer(store, question.id, selections)


def set_other_text(
    store: AnswerStore,
    question: Question,
    text: str,
    *,
    choice_id: ChoiceId | None = None,
) -> AnswerStore:
    """Attach elaboration text to a selected "other" choice.

    For single-choice questions the current selection is used; multi-choice
    questions need ``choice_id``. Nothing changes when the targeted choice is
    not selected or is not an "other" choice.
    """

    current = get_answer(store, question.id)

    if question.type == QuestionType.SINGLE:
        if current is UNANSWERED or is_selection_sequence(current):
            return store
        selected = question.find_choice(answer_field(current, "choice_id"))
        if selected is None or not selected.is_other:
            return store
        return set_answer(store, question.id, _with_other_text(current, selected, text))

    if question.type == QuestionType.MULTI:
        if choice_id is None:
            raise ValueError("choice_id is required for multi-choice elaboration text")
        choice = _require_choice(question, choice_id)
        if not choice.is_other:
            return store
        current_selections = _selections(current)
        if not any(answer_field(entry, "choice_id") == choice.id for entry in current_selections):
            return store
        selections = tuple(
            _with_other_text(entry, choice, text) if answer_field(entry, "choice_id") == choice.id else entry
            for entry in current_selections
        )
        return set_answer(store, question.id, selections)

    raise ValueError(f"question {question.id!r} does not accept elaboration text")


def _with_other_text(entry: Any, choice: Choice, text: str) -> ChoiceAnswer:
    return ChoiceAnswer(
        choice_id=choice.id,
        choice_text=answer_field(entry, "choice_text") or choice.text,
        other_text=text,
    )


def _selections(value: Any) -> Tuple[Any, ...]:
    if is_selection_sequence(value):
        return tuple(value)
    return ()


def _require_type(question: Question, expected: QuestionType) -> None:
    if question.type != expected:
        raise ValueError(f"question {question.id!r} is not a {expected.value} question")


def _require_choice(question: Question, choice_id: ChoiceId) -> Choice:
    choice = question.find_choice(choice_id)
    if choice is None:
        raise UnknownQuestionError(f"question {question.id!r} has no choice {choice_id!r}")
    return choice


__all__ = [
    "UNANSWERED",
    "AnswerStore",
    "answer_field",
    "get_answer",
    "is_selection_sequence",
    "select_single_choice",
    "set_answer",
    "set_other_text",
    "set_text_answer",
    "toggle_multi_choice",
]
