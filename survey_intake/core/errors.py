from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from survey_intake.models.submission import ValidationReport


class SurveyError(Exception):
    # Base class for expected survey failures.
    pass


class CatalogError(SurveyError):
    # Raised when a question catalog cannot be read or does not validate.
    pass


class UnknownQuestionError(SurveyError):
    # Raised when an interaction names a question or choice missing from the catalog.
    pass


class MaxSelectionsExceeded(SurveyError):
    """Raised when a multi-choice toggle would go past ``max_selections``."""

    def __init__(self, question_id: object, max_selections: int) -> None:
        super().__init__(f"Maximum {max_selections} selections allowed!")
        self.question_id = question_id
        self.max_selections = max_selections


class IncompleteSurveyError(SurveyError):
    """Raised when a submission is attempted before every question is answered."""

    def __init__(self, report: "ValidationReport") -> None:
        missing = len(report.unanswered)
        super().__init__(f"Please answer {missing} missing questions")
        self.report = report


class SubmissionError(SurveyError, RuntimeError):
    # Raised when a transport fails to accept a submission payload.
    pass
