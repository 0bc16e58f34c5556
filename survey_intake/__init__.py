from .models.submission import SubmissionLine, SubmissionPayload, UnansweredQuestion, ValidationReport
from .models.survey import Catalog, Choice, ChoiceAnswer, Question, QuestionType, Respondent, is_valid_respondent_name
from .services.answer_store import UNANSWERED, AnswerStore, get_answer, set_answer
from .services.assembler import assemble
from .services.navigation import NavigationState, next_step, previous_step, set_total_steps
from .services.survey_session import SurveySession
from .services.validator import validate

__all__ = [
    "UNANSWERED",
    "AnswerStore",
    "Catalog",
    "Choice",
    "ChoiceAnswer",
    "NavigationState",
    "Question",
    "QuestionType",
    "Respondent",
    "SubmissionLine",
    "SubmissionPayload",
    "SurveySession",
    "UnansweredQuestion",
    "ValidationReport",
    "assemble",
    "get_answer",
    "is_valid_respondent_name",
    "next_step",
    "previous_step",
    "set_answer",
    "set_total_steps",
    "validate",
]
