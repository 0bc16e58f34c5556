from __future__ import annotations

import pytest

from survey_intake.models.survey import Choice, ChoiceAnswer, Question, QuestionType
from survey_intake.services.answer_store import AnswerStore, set_answer
from survey_intake.services.validator import has_valid_answer, validate


def _text_question(question_id: str = "q1") -> Question:
    return Question(id=question_id, text="Say something", type=QuestionType.TEXT)


def _single_question() -> Question:
    return Question(
        id="q1",
        text="Do you agree?",
        type=QuestionType.SINGLE,
        choices=[Choice(id="c1", text="Yes"), Choice(id="c2", text="Other", is_other=True)],
    )


def _multi_question(max_selections: int | None = None) -> Question:
    return Question(
        id="q2",
        text="Pick some",
        type=QuestionType.MULTI,
        max_selections=max_selections,
        choices=[
            Choice(id="a", text="A"),
            Choice(id="b", text="B"),
            Choice(id="o", text="Other", is_other=True),
        ],
    )


def _store(**entries: object) -> AnswerStore:
    store = AnswerStore()
    for question_id, value in entries.items():
        store = set_answer(store, question_id, value)
    return store


def test_missing_text_answer_reported_with_position() -> None:
    report = validate([_text_question()], AnswerStore())

    assert not report.is_complete
    assert [(item.id, item.position) for item in report.unanswered] == [("q1", 1)]
    assert report.total_questions == 1
    assert report.answered_questions == 0


@pytest.mark.parametrize("value", ["", " ", "\t\n  "])
def test_blank_text_is_invalid(value: str) -> None:
    assert not has_valid_answer(_text_question(), value)


@pytest.mark.parametrize("value", ["x", "  hello  ", "\n.\n"])
def test_text_with_content_is_valid(value: str) -> None:
    assert has_valid_answer(_text_question(), value)


def test_non_string_text_answer_is_invalid() -> None:
    assert not has_valid_answer(_text_question(), ChoiceAnswer(choice_id="c1", choice_text="Yes"))


def test_single_without_answer_is_invalid() -> None:
    assert not has_valid_answer(_single_question(), None)


def test_single_regular_choice_is_valid() -> None:
    assert has_valid_answer(_single_question(), ChoiceAnswer(choice_id="c1", choice_text="Yes"))


def test_single_other_choice_without_text_is_invalid() -> None:
    answer = ChoiceAnswer(choice_id="c2", choice_text="Other")

    assert not has_valid_answer(_single_question(), answer)


def test_single_other_choice_with_blank_text_is_invalid() -> None:
    answer = ChoiceAnswer(choice_id="c2", choice_text="Other", other_text="   ")

    assert not has_valid_answer(_single_question(), answer)


def test_single_other_choice_with_text_is_valid() -> None:
    answer = ChoiceAnswer(choice_id="c2", choice_text="Other", other_text="Maybe")

    assert has_valid_answer(_single_question(), answer)


def test_single_other_flag_comes_from_catalog_not_answer() -> None:
    answer = {"choice_id": "c2", "choice_text": "Other", "is_other": False}

    assert not has_valid_answer(_single_question(), answer)


def test_single_answer_without_choice_id_is_invalid() -> None:
    assert not has_valid_answer(_single_question(), {"choice_text": "Yes"})


def test_single_answer_with_unknown_choice_is_invalid() -> None:
    assert not has_valid_answer(_single_question(), ChoiceAnswer(choice_id="zz", choice_text="?"))


def test_single_answer_with_wrong_shape_is_invalid() -> None:
    assert not has_valid_answer(_single_question(), "Yes")
    assert not has_valid_answer(_single_question(), [ChoiceAnswer(choice_id="c1", choice_text="Yes")])


def test_multi_requires_non_empty_sequence() -> None:
    question = _multi_question()

    assert not has_valid_answer(question, ())
    assert not has_valid_answer(question, [])
    assert not has_valid_answer(question, ChoiceAnswer(choice_id="a", choice_text="A"))


def test_multi_with_regular_choices_is_valid() -> None:
    answer = (
        ChoiceAnswer(choice_id="b", choice_text="B"),
        ChoiceAnswer(choice_id="a", choice_text="A"),
    )

    assert has_valid_answer(_multi_question(), answer)


def test_multi_other_choice_needs_text() -> None:
    question = _multi_question()
    missing = (ChoiceAnswer(choice_id="a", choice_text="A"), ChoiceAnswer(choice_id="o", choice_text="Other"))
    filled = (
        ChoiceAnswer(choice_id="a", choice_text="A"),
        ChoiceAnswer(choice_id="o", choice_text="Other", other_text="Something"),
    )

    assert not has_valid_answer(question, missing)
    assert has_valid_answer(question, filled)


@pytest.mark.parametrize("other_text", ["", "   ", "\t\n "])
def test_multi_other_choice_with_blank_text_is_invalid(other_text: str) -> None:
    answer = (
        ChoiceAnswer(choice_id="a", choice_text="A"),
        ChoiceAnswer(choice_id="o", choice_text="Other", other_text=other_text),
    )

    assert not has_valid_answer(_multi_question(), answer)


def test_multi_over_limit_is_invalid() -> None:
    answer = (
        ChoiceAnswer(choice_id="a", choice_text="A"),
        ChoiceAnswer(choice_id="b", choice_text="B"),
    )

    assert not has_valid_answer(_multi_question(max_selections=1), answer)


def test_multi_with_repeated_choice_is_invalid() -> None:
    question = _multi_question()
    answer = (
        ChoiceAnswer(choice_id="a", choice_text="A"),
        ChoiceAnswer(choice_id="a", choice_text="A"),
    )

    assert not has_valid_answer(question, answer)
    assert not validate([question], {"q2": answer}).is_complete


def test_unknown_question_type_is_never_valid() -> None:
    question = Question(id="r", text="Rate us", type="rating")

    assert not has_valid_answer(question, "5")


def test_report_uses_catalog_order_and_ignores_stale_answers() -> None:
    questions = [_text_question("q1"), _single_question().model_copy(update={"id": "q2"}), _text_question("q3")]
    store = _store(q3="done", stale="left over")

    report = validate(questions, store)

    assert [(item.id, item.position) for item in report.unanswered] == [("q1", 1), ("q2", 2)]
    assert report.total_questions == 3
    assert report.answered_questions == 1


def test_complete_report() -> None:
    questions = [_text_question("q1"), _multi_question()]
    store = _store(q1="hi", q2=(ChoiceAnswer(choice_id="a", choice_text="A"),))

    report = validate(questions, store)

    assert report.is_complete
    assert report.unanswered == []
    assert report.model_dump()["is_complete"] is True


def test_validate_accepts_plain_mapping() -> None:
    report = validate([_text_question()], {"q1": "hello"})

    assert report.is_complete


def test_empty_catalog_is_complete() -> None:
    assert validate([], AnswerStore()).is_complete
