"""Business logic shared by the API: daily games, quiz sessions and catalogs."""

from __future__ import annotations

from collections import OrderedDict
from datetime import date
import logging
import random
from threading import Lock
from typing import Callable
from uuid import uuid4

from soundtrack_quiz.constants.quiz_constants import MAX_ACTIVE_QUIZ_SESSIONS, MAX_ATTEMPTS, QUESTION_COUNT
from soundtrack_quiz.core.daily_selector import build_options_for_day, pick_song_for_day, previous_day
from soundtrack_quiz.core.errors import NoOperationError
from soundtrack_quiz.core.models import QuizMode, QuizResult, Song
from soundtrack_quiz.core.quiz_generator import QuizBatch, generate_quiz_batch
from soundtrack_quiz.core.services.answer_round import GuessOutcome
from soundtrack_quiz.core.services.catalog_repository import CatalogRepository
from soundtrack_quiz.core.services.daily_game import DailyGame
from soundtrack_quiz.core.services.progress_store import (
    DailyProgressRepository,
    InMemoryKeyValueStore,
    KeyValueStore,
)
from soundtrack_quiz.core.services.quiz_session import QuizSession, QuizSnapshot

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade for the game services: catalogs, daily games and quiz sessions."""

    def __init__(
        self,
        catalogs: CatalogRepository,
        store: KeyValueStore | None = None,
        today_provider: Callable[[], date] = date.today,
        rng_factory: Callable[[int | None], random.Random] = random.Random,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        self._lock = Lock()
        self._catalogs = catalogs
        self._store = store if store is not None else InMemoryKeyValueStore()
        self._today_provider = today_provider
        self._rng_factory = rng_factory
        self._max_attempts = max_attempts
        self._quiz_sessions: OrderedDict[str, QuizSession] = OrderedDict()

    # --- Catalog ---

    def get_catalogs(self) -> CatalogRepository:
        return self._catalogs

    def get_today(self) -> date:
        return self._today_provider()

    # --- Daily Song ---

    def get_song_for_day(self, day: date | None = None) -> Song | None:
        target = day if day is not None else self.get_today()
        return pick_song_for_day(self._catalogs.get_daily_songs(), self._catalogs.get_songs(), target)

    def get_yesterday_song(self, day: date | None = None) -> Song | None:
        target = day if day is not None else self.get_today()
        return self.get_song_for_day(previous_day(target))

    def get_daily_game(self, player_id: str, day: date | None = None) -> DailyGame | None:
        with self._lock:
            return self._open_daily_game(player_id, day)

    def submit_daily_guess(self, player_id: str, option: str, day: date | None = None) -> tuple[DailyGame, GuessOutcome]:
        with self._lock:
            game = self._require_daily_game(player_id, day)
            return game, game.guess(option)

    def use_daily_hint(self, player_id: str, day: date | None = None) -> DailyGame:
        with self._lock:
            game = self._require_daily_game(player_id, day)
            game.use_hint()
            return game

    def get_daily_share_text(self, player_id: str, day: date | None = None) -> str:
        with self._lock:
            return self._require_daily_game(player_id, day).share_text()

    def _require_daily_game(self, player_id: str, day: date | None) -> DailyGame:
        game = self._open_daily_game(player_id, day)
        if game is None:
            raise NoOperationError("No song is available for today.")
        return game

    def _open_daily_game(self, player_id: str, day: date | None) -> DailyGame | None:
        target = day if day is not None else self.get_today()
        song = self.get_song_for_day(target)
        if song is None:
            return None
        kind = self._catalogs.get_label_kind()
        correct = song.label_for(kind)
        if correct is None:
            logger.error("Daily song '%s' has no %s", song.title, kind.value)
            return None
        options = build_options_for_day(self._catalogs.get_labels(), correct, target)
        repository = DailyProgressRepository(self._store, namespace=player_id)
        return DailyGame(target, song, options, repository, label_kind=kind, max_attempts=self._max_attempts)

    # --- Quiz Sessions ---

    def create_quiz_session(
        self,
        mode: QuizMode = QuizMode.REGULAR,
        question_count: int = QUESTION_COUNT,
        seed: int | None = None,
    ) -> tuple[QuizSnapshot | None, QuizBatch]:
        """Generate questions and open a session; the snapshot is None when generation failed."""
        batch = generate_quiz_batch(
            self._catalogs.get_songs(),
            self._catalogs.get_labels(),
            mode,
            question_count,
            rng=self._rng_factory(seed),
            label_kind=self._catalogs.get_label_kind(),
        )
        if batch.is_empty():
            return None, batch

        session = QuizSession(uuid4().hex, list(batch.questions), mode=QuizMode(mode), max_attempts=self._max_attempts)
        with self._lock:
            self._quiz_sessions[session.session_id] = session
            while len(self._quiz_sessions) > MAX_ACTIVE_QUIZ_SESSIONS:
                evicted_id, _ = self._quiz_sessions.popitem(last=False)
                logger.info("Evicted quiz session %s", evicted_id)
            snapshot = session.snapshot()
        logger.info("Created %s quiz session %s with %d questions", session.mode.value, session.session_id, len(batch.questions))
        return snapshot, batch

    def get_quiz_snapshot(self, session_id: str) -> QuizSnapshot:
        with self._lock:
            return self._get_session(session_id).snapshot()

    def submit_quiz_answer(self, session_id: str, option: str) -> GuessOutcome:
        with self._lock:
            return self._get_session(session_id).submit_answer(option)

    def move_to_next_question(self, session_id: str) -> QuizSnapshot:
        """Advance the session and return its state after the move."""
        with self._lock:
            session = self._get_session(session_id)
            session.move_to_next_question()
            return session.snapshot()

    def get_quiz_result(self, session_id: str) -> QuizResult:
        with self._lock:
            return self._get_session(session_id).get_result()

    def discard_quiz_session(self, session_id: str) -> None:
        with self._lock:
            if self._quiz_sessions.pop(session_id, None) is None:
                raise KeyError(f"Unknown quiz session '{session_id}'.")
        logger.info("Discarded quiz session %s", session_id)

    def get_active_session_count(self) -> int:
        with self._lock:
            return len(self._quiz_sessions)

    def _get_session(self, session_id: str) -> QuizSession:
        session = self._quiz_sessions.get(session_id)
        if session is None:
            raise KeyError(f"Unknown quiz session '{session_id}'.")
        return session
