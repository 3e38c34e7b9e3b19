"""Service for playing the song of the day and persisting progress."""

from __future__ import annotations

from datetime import date
import logging

from soundtrack_quiz.constants.about import SHARE_TITLE
from soundtrack_quiz.constants.quiz_constants import MAX_ATTEMPTS
from soundtrack_quiz.core.formatting import format_date_readable
from soundtrack_quiz.core.models import DailyProgress, LabelKind, Song
from soundtrack_quiz.core.services.answer_round import AnswerRound, GuessOutcome, RoundState
from soundtrack_quiz.core.services.progress_store import DailyProgressRepository

logger = logging.getLogger(__name__)


class DailyGame:
    """One player's attempt at a given day's song."""

    def __init__(
        self,
        day: date,
        song: Song,
        options: list[str],
        repository: DailyProgressRepository,
        label_kind: LabelKind = LabelKind.GAME,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        correct = song.label_for(label_kind)
        if correct is None:
            raise ValueError(f"Song '{song.title}' has no {label_kind.value}.")
        self._day = day
        self._song = song
        self._options = list(options)
        self._repository = repository
        self._label_kind = label_kind
        self._hint_used = False
        self._round = self._resume(correct, max_attempts)

    def _resume(self, correct: str, max_attempts: int) -> AnswerRound:
        progress = self._repository.load(self._day)
        if progress is None:
            return AnswerRound(correct, self._options, max_attempts)

        self._hint_used = progress.hint_used
        return AnswerRound.restore(
            correct,
            self._options,
            attempts=progress.attempts,
            wrong_guesses=progress.wrong_guesses,
            selected_answer=progress.selected_answer,
            completed=progress.game_complete,
            max_attempts=max_attempts,
        )

    @property
    def day(self) -> date:
        return self._day

    @property
    def song(self) -> Song:
        return self._song

    @property
    def options(self) -> list[str]:
        return list(self._options)

    @property
    def state(self) -> RoundState:
        return self._round.state

    @property
    def attempts(self) -> int:
        return self._round.attempts

    @property
    def max_attempts(self) -> int:
        return self._round.max_attempts

    @property
    def wrong_guesses(self) -> list[str]:
        return self._round.wrong_guesses

    @property
    def selected_answer(self) -> str | None:
        return self._round.selected_answer

    @property
    def hint_used(self) -> bool:
        return self._hint_used

    def is_complete(self) -> bool:
        return self._round.is_terminal()

    def is_correct(self) -> bool:
        return self._round.is_correct()

    def revealed_answer(self) -> str | None:
        return self._round.revealed_answer()

    def hint(self) -> str | None:
        """Return the hint text if it has been revealed."""
        return self._song.hint_for(self._label_kind) if self._hint_used else None

    def guess(self, option: str) -> GuessOutcome:
        outcome = self._round.guess(option)
        self._save()
        logger.info(
            "Daily guess for %s: state=%s attempts=%d",
            self._day.isoformat(),
            outcome.state.value,
            outcome.attempts,
        )
        return outcome

    def use_hint(self) -> str | None:
        if self.is_complete():
            raise RuntimeError("Today's game is already finished.")
        self._hint_used = True
        self._save()
        return self.hint()

    def share_text(self) -> str:
        if not self.is_complete():
            raise RuntimeError("Finish today's game before sharing the result.")
        emoji_result = "🎮 ✅" if self.is_correct() else "🎮 ❌"
        attempts_text = f"({self.attempts}/{self.max_attempts} attempts)"
        hint_text = " 🔍" if self._hint_used else ""
        return (
            f"{SHARE_TITLE} - {format_date_readable(self._day)}\n\n"
            f'"{self._song.title}" by {self._song.artist}\n\n'
            f"{emoji_result} {attempts_text}{hint_text}"
        )

    def _save(self) -> None:
        progress = DailyProgress(
            date=self._day.isoformat(),
            selected_answer=self._round.selected_answer,
            wrong_guesses=self._round.wrong_guesses,
            is_correct=self._round.is_correct(),
            hint_used=self._hint_used,
            attempts=self._round.attempts,
            game_complete=self._round.is_terminal(),
        )
        self._repository.save(progress)
