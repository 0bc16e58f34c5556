from __future__ import annotations

import re
from enum import Enum
from typing import List, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

QuestionId = Union[int, str]
ChoiceId = Union[int, str]

_NAME_PATTERN = re.compile(r"^[A-Za-z\s]+$")
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50


class QuestionType(str, Enum):
    SINGLE = "single"
    MULTI = "multi"
    TEXT = "text"


CHOICE_TYPES = frozenset({QuestionType.SINGLE, QuestionType.MULTI})


class Choice(BaseModel):
    """One selectable option of a single- or multi-choice question."""

    id: ChoiceId
    text: str = Field(alias="choice_text")
    is_other: bool = False

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}


class Question(BaseModel):
    """A catalog entry as served by the response-intake service.

    Unknown ``question_type`` values are kept as plain strings so that a newer
    catalog still loads; the validator treats such questions as never answered.
    """

    id: QuestionId
    text: str = Field(alias="question_text")
    type: Union[QuestionType, str] = Field(alias="question_type", union_mode="left_to_right")
    choices: Tuple[Choice, ...] = ()
    max_selections: int | None = None

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    @field_validator("choices", mode="before")
    @classmethod
    def _none_means_no_choices(cls, value: object) -> object:
        if value is None:
            return ()
        return value

    @field_validator("max_selections")
    @classmethod
    def _positive_bound(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("max_selections must be a positive integer")
        return value

    @model_validator(mode="after")
    def _choices_match_type(self) -> "Question":
        if self.type in CHOICE_TYPES:
            if not self.choices:
                raise ValueError(f"{self.type.value} question {self.id!r} must define at least one choice")
            ids = [choice.id for choice in self.choices]
            if len(set(ids)) != len(ids):
                raise ValueError(f"question {self.id!r} has duplicate choice ids")
        elif self.type == QuestionType.TEXT and self.choices:
            raise ValueError(f"text question {self.id!r} cannot define choices")
        return self

    def find_choice(self, choice_id: ChoiceId | None) -> Choice | None:
        """Return the choice with ``choice_id`` or ``None``."""

        if choice_id is None:
            return None
        for choice in self.choices:
            if choice.id == choice_id:
                return choice
        return None


class Catalog(BaseModel):
    """Ordered, read-only snapshot of the questions for one session."""

    questions: Tuple[Question, ...] = ()

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _unique_question_ids(self) -> "Catalog":
        ids = [question.id for question in self.questions]
        if len(set(ids)) != len(ids):
            raise ValueError("catalog contains duplicate question ids")
        return self

    @property
    def size(self) -> int:
        """Return the number of questions in the catalog."""

        return len(self.questions)

    def get(self, question_id: QuestionId) -> Question | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def position_of(self, question_id: QuestionId) -> int | None:
        """Return the zero-based catalog index of ``question_id``."""

        for index, question in enumerate(self.questions):
            if question.id == question_id:
                return index
        return None


class ChoiceAnswer(BaseModel):
    """A selected choice, optionally carrying the respondent's elaboration."""

    choice_id: ChoiceId
    choice_text: str
    other_text: str | None = None

    model_config = {"frozen": True, "extra": "forbid"}


def is_valid_respondent_name(name: str | None) -> bool:
    """Return True when ``name`` is acceptable on the name entry screen."""

    if not name:
        return False
    trimmed = name.strip()
    if not NAME_MIN_LENGTH <= len(trimmed) <= NAME_MAX_LENGTH:
        return False
    return bool(_NAME_PATTERN.match(name))


class Respondent(BaseModel):
    """The person filling in the survey."""

    name: str

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not is_valid_respondent_name(value):
            raise ValueError(
                f"name must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters of letters and spaces"
            )
        return value.strip()


__all__: List[str] = [
    "CHOICE_TYPES",
    "Catalog",
    "Choice",
    "ChoiceAnswer",
    "ChoiceId",
    "Question",
    "QuestionId",
    "QuestionType",
    "Respondent",
    "is_valid_respondent_name",
]
