"""State machine for evaluating guesses against a single target label."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from soundtrack_quiz.constants.quiz_constants import (
    CORRECT_FEEDBACK_SECONDS,
    MAX_ATTEMPTS,
    RETRY_FEEDBACK_SECONDS,
)


class RoundState(str, Enum):
    PLAYING = "playing"
    CORRECT = "correct"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True, slots=True)
class GuessOutcome:
    """Result of a single guess, including the transient feedback to show."""

    state: RoundState
    guessed: str
    is_correct: bool
    attempts: int
    message: str
    clear_after_seconds: float
    revealed_answer: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state is not RoundState.PLAYING


class AnswerRound:
    """Tracks attempts for one target: playing -> correct | exhausted."""

    def __init__(
        self,
        correct_answer: str,
        options: list[str] | tuple[str, ...] | None = None,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive.")
        self._correct_answer = correct_answer
        self._options = tuple(options) if options is not None else None
        self._max_attempts = max_attempts
        self._state = RoundState.PLAYING
        self._attempts = 0
        self._wrong_guesses: list[str] = []
        self._selected_answer: str | None = None

    @classmethod
    def restore(
        cls,
        correct_answer: str,
        options: list[str] | tuple[str, ...] | None,
        attempts: int,
        wrong_guesses: list[str],
        selected_answer: str | None = None,
        completed: bool = False,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> AnswerRound:
        """Rebuild a round from persisted progress."""
        round_ = cls(correct_answer, options, max_attempts)
        round_._attempts = max(0, attempts)
        round_._wrong_guesses = list(wrong_guesses)
        if completed:
            round_._selected_answer = selected_answer
            if selected_answer == correct_answer:
                round_._state = RoundState.CORRECT
            else:
                round_._state = RoundState.EXHAUSTED
        elif round_._attempts >= max_attempts:
            round_._state = RoundState.EXHAUSTED
        return round_

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def wrong_guesses(self) -> list[str]:
        return list(self._wrong_guesses)

    @property
    def selected_answer(self) -> str | None:
        return self._selected_answer

    @property
    def correct_answer(self) -> str:
        return self._correct_answer

    def is_terminal(self) -> bool:
        return self._state is not RoundState.PLAYING

    def is_correct(self) -> bool:
        return self._state is RoundState.CORRECT

    def revealed_answer(self) -> str | None:
        """Return the correct answer once the round is over."""
        return self._correct_answer if self.is_terminal() else None

    def guess(self, option: str) -> GuessOutcome:
        if self.is_terminal():
            raise RuntimeError("This round is already finished.")
        if self._options is not None and option not in self._options:
            raise ValueError(f"'{option}' is not one of the offered options.")
        if option in self._wrong_guesses:
            raise ValueError(f"'{option}' was already guessed.")

        self._attempts += 1
        if option == self._correct_answer:
            self._state = RoundState.CORRECT
            self._selected_answer = option
            return GuessOutcome(
                state=self._state,
                guessed=option,
                is_correct=True,
                attempts=self._attempts,
                message="Correct!",
                clear_after_seconds=CORRECT_FEEDBACK_SECONDS,
                revealed_answer=self._correct_answer,
            )

        self._wrong_guesses.append(option)
        if self._attempts >= self._max_attempts:
            self._state = RoundState.EXHAUSTED
            self._selected_answer = option
            return GuessOutcome(
                state=self._state,
                guessed=option,
                is_correct=False,
                attempts=self._attempts,
                message=f"Incorrect! The answer is {self._correct_answer}.",
                clear_after_seconds=CORRECT_FEEDBACK_SECONDS,
                revealed_answer=self._correct_answer,
            )

        return GuessOutcome(
            state=self._state,
            guessed=option,
            is_correct=False,
            attempts=self._attempts,
            message=f"Incorrect! Try again. ({self._attempts}/{self._max_attempts} attempts)",
            clear_after_seconds=RETRY_FEEDBACK_SECONDS,
        )
