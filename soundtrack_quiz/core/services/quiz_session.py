"""Service for walking a player through a generated batch of questions."""

from __future__ import annotations

from dataclasses import dataclass, replace

from soundtrack_quiz.constants.quiz_constants import MAX_ATTEMPTS, QUIZ_ADVANCE_SECONDS, QUIZ_RETRY_FEEDBACK_SECONDS
from soundtrack_quiz.core.models import QuizMode, QuizQuestion, QuizResult
from soundtrack_quiz.core.services.answer_round import AnswerRound, GuessOutcome, RoundState
from soundtrack_quiz.core.services.scorecard import Scorecard


@dataclass(frozen=True, slots=True)
class QuizSnapshot:
    """Consistent view of a session's current question and round."""

    session_id: str
    mode: QuizMode
    position: int
    question_count: int
    complete: bool
    question: QuizQuestion | None = None
    state: RoundState | None = None
    attempts: int = 0
    max_attempts: int = MAX_ATTEMPTS
    wrong_guesses: tuple[str, ...] = ()
    revealed_answer: str | None = None


class QuizSession:
    """Manages the state of one multi-question quiz."""

    def __init__(
        self,
        session_id: str,
        questions: list[QuizQuestion],
        mode: QuizMode = QuizMode.REGULAR,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        if not questions:
            raise ValueError("A quiz session needs at least one question.")
        self._session_id = session_id
        self._questions = list(questions)
        self._mode = mode
        self._max_attempts = max_attempts
        self._position = 0
        self._round = self._new_round(self._questions[0])
        self._scorecard = Scorecard()
        self._complete = False

    def _new_round(self, question: QuizQuestion) -> AnswerRound:
        return AnswerRound(question.correct_answer, question.options, self._max_attempts)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def mode(self) -> QuizMode:
        return self._mode

    def is_complete(self) -> bool:
        return self._complete

    def submit_answer(self, option: str) -> GuessOutcome:
        if self._complete:
            raise RuntimeError("The quiz is already complete.")
        question = self._questions[self._position]
        outcome = self._round.guess(option)
        if not outcome.is_terminal:
            return replace(outcome, clear_after_seconds=QUIZ_RETRY_FEEDBACK_SECONDS)
        self._scorecard.record_answer(question, option, outcome.is_correct)
        return replace(outcome, clear_after_seconds=QUIZ_ADVANCE_SECONDS)

    def move_to_next_question(self) -> QuizQuestion | None:
        """Advance once the current question is finished; None when the quiz ends."""
        if self._complete:
            return None
        if not self._round.is_terminal():
            raise RuntimeError("Answer the current question before moving on.")
        if self._position >= len(self._questions) - 1:
            self._complete = True
            return None
        self._position += 1
        question = self._questions[self._position]
        self._round = self._new_round(question)
        return question

    def get_result(self) -> QuizResult:
        return self._scorecard.get_result()

    def snapshot(self) -> QuizSnapshot:
        """Capture the question and its round together."""
        if self._complete:
            return QuizSnapshot(
                session_id=self._session_id,
                mode=self._mode,
                position=self._position,
                question_count=len(self._questions),
                complete=True,
                max_attempts=self._max_attempts,
            )
        return QuizSnapshot(
            session_id=self._session_id,
            mode=self._mode,
            position=self._position,
            question_count=len(self._questions),
            complete=False,
            question=self._questions[self._position],
            state=self._round.state,
            attempts=self._round.attempts,
            max_attempts=self._round.max_attempts,
            wrong_guesses=tuple(self._round.wrong_guesses),
            revealed_answer=self._round.revealed_answer(),
        )
