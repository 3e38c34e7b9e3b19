"""Domain models for the soundtrack quiz."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LabelKind(str, Enum):
    """Which song attribute serves as the answer label."""

    GAME = "game"
    RADIO_STATION = "radio_station"


class QuizMode(str, Enum):
    REGULAR = "regular"
    PRO = "pro"


@dataclass(frozen=True, slots=True)
class Song:
    """Immutable catalog record for a single soundtrack entry."""

    title: str
    artist: str
    game: str | None = None
    radio_station: str | None = None
    video_title: str = ""
    video_link: str = ""
    page_info: str = ""
    published: str | None = None
    view_count: int = 0
    like_count: int = 0
    popularity_score: float = 0.0  # Derived once when the catalog is loaded
    views_per_year: int = 0

    def label_for(self, kind: LabelKind) -> str | None:
        if kind is LabelKind.GAME:
            return self.game
        return self.radio_station

    def hint_for(self, kind: LabelKind) -> str | None:
        """Return the attribute that is not the answer, shown as a hint."""
        if kind is LabelKind.GAME:
            return self.radio_station
        return self.game

    @property
    def identity(self) -> tuple[str, str]:
        return (self.title.strip().lower(), self.artist.strip().lower())


@dataclass(frozen=True, slots=True)
class Catalog:
    """Ordered songs plus the valid answer labels, read-only once loaded."""

    songs: tuple[Song, ...]
    labels: tuple[str, ...]
    label_kind: LabelKind = LabelKind.GAME

    def __len__(self) -> int:
        return len(self.songs)

    def is_empty(self) -> bool:
        return not self.songs


@dataclass(frozen=True, slots=True)
class QuizQuestion:
    """Multiple-choice question with exactly four options."""

    song: Song
    options: tuple[str, ...]
    correct_answer: str
    label_kind: LabelKind = LabelKind.GAME


@dataclass(slots=True)
class DailyProgress:
    """Per-day state persisted through the key-value storage port."""

    date: str
    selected_answer: str | None = None
    wrong_guesses: list[str] = field(default_factory=list)
    is_correct: bool = False
    hint_used: bool = False
    attempts: int = 0
    game_complete: bool = False

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "date": self.date,
            "wrongGuesses": list(self.wrong_guesses),
            "hintUsed": self.hint_used,
            "attempts": self.attempts,
            "gameComplete": self.game_complete,
        }
        if self.game_complete:
            payload["selectedAnswer"] = self.selected_answer
            payload["isCorrect"] = self.is_correct
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, object], day: str) -> DailyProgress:
        wrong_guesses = data.get("wrongGuesses")
        attempts = data.get("attempts")
        selected = data.get("selectedAnswer")
        return cls(
            date=day,
            selected_answer=selected if isinstance(selected, str) else None,
            wrong_guesses=[str(g) for g in wrong_guesses] if isinstance(wrong_guesses, list) else [],
            is_correct=data.get("isCorrect") is True,
            hint_used=data.get("hintUsed") is True,
            attempts=attempts if isinstance(attempts, int) and attempts > 0 else 0,
            game_complete=data.get("gameComplete") is True,
        )


@dataclass(frozen=True, slots=True)
class QuestionResult:
    """Outcome of one answered quiz question."""

    song_title: str
    artist: str
    guessed: str
    correct: str
    is_correct: bool
    video_id: str | None = None


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Summary snapshot of a quiz session."""

    total_questions: int
    correct_answers: int
    score: int
    questions: tuple[QuestionResult, ...] = ()
