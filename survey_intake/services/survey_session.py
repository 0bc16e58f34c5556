from __future__ import annotations

from typing import Any

from survey_intake.core.errors import IncompleteSurveyError, UnknownQuestionError
from survey_intake.core.logging import get_logger
from survey_intake.models.submission import SubmissionPayload, ValidationReport
from survey_intake.models.survey import Catalog, ChoiceId, Question, QuestionId, QuestionType, Respondent
from survey_intake.services import answer_store, navigation
from survey_intake.services.answer_store import AnswerStore
from survey_intake.services.assembler import assemble
from survey_intake.services.navigation import NavigationState
from survey_intake.services.response_sink import ResponseTransport
from survey_intake.services.validator import validate

logger = get_logger(__name__)


class SurveySession:
    """One respondent's pass through a catalog.

    Holds the catalog snapshot together with the answer store and navigation
    state, so that navigation, validation and assembly all see the same
    questions. State objects are replaced on every interaction, never mutated.
    """

    def __init__(
        self,
        catalog: Catalog,
        respondent: Respondent,
        *,
        catalog_ordered_submission: bool = True,
    ) -> None:
        self._catalog = catalog
        self._respondent = respondent
        self._catalog_ordered_submission = catalog_ordered_submission
        self.answers = AnswerStore()
        self.navigation = navigation.set_total_steps(NavigationState(), catalog.size)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def respondent(self) -> Respondent:
        return self._respondent

    @property
    def current_question(self) -> Question | None:
        """Return the question shown at the current step."""

        if not self.navigation.is_initialized:
            return None
        return self._catalog.questions[self.navigation.current_step]

    def next(self) -> NavigationState:
        self.navigation = navigation.next_step(self.navigation)
        return self.navigation

    def previous(self) -> NavigationState:
        self.navigation = navigation.previous_step(self.navigation)
        return self.navigation

    def answer_for(self, question_id: QuestionId) -> Any:
        return answer_store.get_answer(self.answers, question_id)

    def select_choice(self, question_id: QuestionId, choice_id: ChoiceId) -> None:
        """Apply a click on a choice of a single- or multi-choice question.

        Raises :class:`~survey_intake.core.errors.MaxSelectionsExceeded` when a
        multi-choice limit would be exceeded; the stored answer is unchanged.
        """

        question = self._question(question_id)
        if question.type == QuestionType.MULTI:
            self.answers = answer_store.toggle_multi_choice(self.answers, question, choice_id)
        else:
            self.answers = answer_store.select_single_choice(self.answers, question, choice_id)

    def set_other_text(self, question_id: QuestionId, text: str, *, choice_id: ChoiceId | None = None) -> None:
        question = self._question(question_id)
        self.answers = answer_store.set_other_text(self.answers, question, text, choice_id=choice_id)

    def set_text(self, question_id: QuestionId, text: str) -> None:
        question = self._question(question_id)
        if question.type != QuestionType.TEXT:
            raise ValueError(f"question {question_id!r} is not a text question")
        self.answers = answer_store.set_text_answer(self.answers, question.id, text)

    def validate(self) -> ValidationReport:
        return validate(self._catalog.questions, self.answers)

    def build_submission(self) -> SubmissionPayload:
        """Validate and assemble; raise if anything is still missing."""

        report = self.validate()
        if not report.is_complete:
            logger.info(
                "Submission blocked: %d of %d questions unanswered",
                len(report.unanswered),
                report.total_questions,
            )
            raise IncompleteSurveyError(report)

        questions = self._catalog.questions if self._catalog_ordered_submission else None
        return assemble(self._respondent.name, self.answers, questions)

    def submit(self, transport: ResponseTransport) -> str:
        """Send the completed survey through ``transport`` and return its response id."""

        payload = self.build_submission()
        response_id = transport.send(payload)
        logger.info("Submitted survey for %s as response %s", self._respondent.name, response_id)
        return response_id

    def _question(self, question_id: QuestionId) -> Question:
        question = self._catalog.get(question_id)
        if question is None:
            raise UnknownQuestionError(f"Unknown question id: {question_id!r}")
        return question
