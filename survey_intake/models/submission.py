from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field, computed_field

from survey_intake.models.survey import QuestionId


class UnansweredQuestion(BaseModel):
    """A catalog question that still needs a valid answer."""

    id: QuestionId
    text: str
    position: int = Field(..., ge=1, description="1-based position in the catalog.")

    model_config = {"frozen": True, "extra": "forbid"}


class ValidationReport(BaseModel):
    """Completeness of an answer store against a catalog."""

    unanswered: List[UnansweredQuestion] = Field(default_factory=list)
    total_questions: int = 0

    model_config = {"frozen": True, "extra": "forbid"}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_complete(self) -> bool:
        """Return True when every catalog question has a valid answer."""

        return not self.unanswered

    @computed_field  # type: ignore[prop-decorator]
    @property
    def answered_questions(self) -> int:
        """Count the catalog questions with a valid answer."""

        return self.total_questions - len(self.unanswered)


class SubmissionLine(BaseModel):
    """One flat answer row accepted by the response-intake service."""

    question_id: QuestionId
    answer_text: Any = None
    written_answer: str | None = None

    model_config = {"frozen": True, "extra": "forbid"}


class SubmissionPayload(BaseModel):
    """Body of a create-response request."""

    user_name: str
    answers: List[SubmissionLine] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "forbid"}

    def to_wire(self) -> Dict[str, Any]:
        """Return the JSON-ready body, omitting absent written answers."""

        return {
            "user_name": self.user_name,
            "answers": [line.model_dump(exclude_none=True) for line in self.answers],
        }
