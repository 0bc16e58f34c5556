from __future__ import annotations

import pytest
from pydantic import ValidationError

from survey_intake.models.survey import Question, QuestionType, Respondent, is_valid_respondent_name


def test_question_parses_wire_shape() -> None:
    question = Question.model_validate(
        {
            "id": 4,
            "question_text": "Pick two",
            "question_type": "multi",
            "max_selections": 2,
            "choices": [
                {"id": 1, "choice_text": "A", "is_other": 0},
                {"id": 2, "choice_text": "Other", "is_other": 1},
            ],
        }
    )

    assert question.type is QuestionType.MULTI
    assert question.max_selections == 2
    assert [choice.is_other for choice in question.choices] == [False, True]
    assert question.find_choice(2).text == "Other"
    assert question.find_choice(3) is None


def test_question_keeps_unknown_type_as_string() -> None:
    question = Question.model_validate({"id": 1, "question_text": "Rate", "question_type": "rating"})

    assert question.type == "rating"


def test_choice_question_needs_choices() -> None:
    with pytest.raises(ValidationError):
        Question.model_validate({"id": 1, "question_text": "Pick", "question_type": "single", "choices": []})


def test_choice_ids_must_be_unique() -> None:
    with pytest.raises(ValidationError):
        Question.model_validate(
            {
                "id": 1,
                "question_text": "Pick",
                "question_type": "single",
                "choices": [{"id": 1, "choice_text": "A"}, {"id": 1, "choice_text": "B"}],
            }
        )


def test_text_question_cannot_have_choices() -> None:
    with pytest.raises(ValidationError):
        Question.model_validate(
            {"id": 1, "question_text": "Why", "question_type": "text", "choices": [{"id": 1, "choice_text": "A"}]}
        )


def test_text_question_accepts_null_choices() -> None:
    question = Question.model_validate({"id": 1, "question_text": "Why", "question_type": "text", "choices": None})

    assert question.choices == ()


def test_max_selections_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Question.model_validate(
            {
                "id": 1,
                "question_text": "Pick",
                "question_type": "multi",
                "max_selections": 0,
                "choices": [{"id": 1, "choice_text": "A"}],
            }
        )


@pytest.mark.parametrize("name", ["Al", "Alice", "Mary Ann", "  Bo  ", "A" * 50])
def test_valid_respondent_names(name: str) -> None:
    assert is_valid_respondent_name(name)


@pytest.mark.parametrize("name", ["", "A", "  A  ", "A" * 51, "R2D2", "Anne-Marie", "Zoë", None])
def test_invalid_respondent_names(name: str | None) -> None:
    assert not is_valid_respondent_name(name)


def test_respondent_trims_name() -> None:
    assert Respondent(name="  Alice ").name == "Alice"


def test_respondent_rejects_invalid_name() -> None:
    with pytest.raises(ValidationError):
        Respondent(name="x1")
