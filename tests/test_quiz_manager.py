from __future__ import annotations

from datetime import date
import threading

import pytest

from conftest import GAMES, make_catalog, make_song

from soundtrack_quiz.core.errors import NoOperationError
from soundtrack_quiz.core.models import QuizMode, Song
from soundtrack_quiz.core.quiz_generator import GenerationIssue
from soundtrack_quiz.core.quiz_manager import QuizManager
from soundtrack_quiz.core.services.answer_round import RoundState
from soundtrack_quiz.core.services.catalog_repository import CatalogRepository


@pytest.fixture
def manager(catalogs, launch_day) -> QuizManager:
    return QuizManager(catalogs, today_provider=lambda: launch_day)


def _wrong_options(game) -> list[str]:
    return [option for option in game.options if option != game.song.game]


def test_daily_song_comes_from_curated_catalog(manager, curated_catalog):
    game = manager.get_daily_game("player")
    assert game.song == curated_catalog.songs[0]
    assert len(game.options) == 4
    assert game.song.game in game.options


def test_yesterday_uses_the_previous_date(manager, launch_day):
    assert manager.get_yesterday_song() == manager.get_song_for_day(date(2025, 3, 17))
    assert manager.get_song_for_day(launch_day) != manager.get_song_for_day(date(2025, 3, 19))


def test_daily_options_survive_reopening(manager):
    assert manager.get_daily_game("p").options == manager.get_daily_game("p").options


def test_daily_flow_persists_per_player(manager):
    game = manager.get_daily_game("p1")
    wrong = _wrong_options(game)

    _, outcome = manager.submit_daily_guess("p1", wrong[0])
    assert outcome.state is RoundState.PLAYING
    assert manager.get_daily_game("p1").attempts == 1
    assert manager.get_daily_game("p2").attempts == 0

    game, outcome = manager.submit_daily_guess("p1", wrong[1])
    assert outcome.state is RoundState.EXHAUSTED
    assert outcome.revealed_answer == game.song.game
    assert "❌ (2/2 attempts)" in manager.get_daily_share_text("p1")


def test_daily_hint(manager):
    game = manager.use_daily_hint("p1")
    assert game.hint_used
    assert game.hint() == game.song.radio_station


def test_empty_curated_catalog_falls_back_to_full_catalog():
    repository = CatalogRepository(make_catalog([make_song("Lone", "Game A")], GAMES), make_catalog([], GAMES))
    manager = QuizManager(repository, today_provider=lambda: date(2025, 3, 18))
    game = manager.get_daily_game("p")
    assert game is not None
    assert game.song.title == "Lone"


def test_daily_game_is_none_when_song_lacks_label(launch_day):
    catalog = make_catalog([make_song("Named", "Game A")], GAMES)
    nameless = make_catalog([Song(title="Nameless", artist="X")], GAMES)
    manager = QuizManager(CatalogRepository(catalog, nameless), today_provider=lambda: launch_day)
    assert manager.get_daily_game("p") is None
    with pytest.raises(NoOperationError):
        manager.submit_daily_guess("p", "Game A")


def test_quiz_session_lifecycle(manager):
    snapshot, batch = manager.create_quiz_session(QuizMode.REGULAR, 5, seed=7)
    assert batch.issue is None
    assert snapshot.position == 0
    assert snapshot.state is RoundState.PLAYING
    assert manager.get_active_session_count() == 1
    session_id = snapshot.session_id

    for _ in range(snapshot.question_count):
        question = manager.get_quiz_snapshot(session_id).question
        manager.submit_quiz_answer(session_id, question.correct_answer)
        after = manager.move_to_next_question(session_id)
        assert after.attempts == 0

    final = manager.get_quiz_snapshot(session_id)
    assert final.complete
    assert final.question is None
    result = manager.get_quiz_result(session_id)
    assert result.total_questions == 5
    assert result.score == 100

    manager.discard_quiz_session(session_id)
    assert manager.get_active_session_count() == 0
    with pytest.raises(KeyError):
        manager.get_quiz_snapshot(session_id)
    with pytest.raises(KeyError):
        manager.discard_quiz_session(session_id)


def test_snapshot_pairs_question_with_its_own_round(manager):
    snapshot, _ = manager.create_quiz_session(QuizMode.REGULAR, 5, seed=3)
    session_id = snapshot.session_id
    first_question = snapshot.question
    wrong = [option for option in first_question.options if option != first_question.correct_answer]

    manager.submit_quiz_answer(session_id, wrong[0])
    during = manager.get_quiz_snapshot(session_id)
    assert during.question == first_question
    assert during.attempts == 1
    assert during.wrong_guesses == (wrong[0],)

    manager.submit_quiz_answer(session_id, wrong[1])
    moved = manager.move_to_next_question(session_id)
    assert moved.position == 1
    assert moved.question != first_question
    assert moved.attempts == 0
    assert moved.wrong_guesses == ()
    assert moved.revealed_answer is None


def test_snapshots_stay_consistent_under_concurrent_play(manager):
    snapshot, _ = manager.create_quiz_session(QuizMode.REGULAR, 5, seed=9)
    session_id = snapshot.session_id
    seen = []

    def play() -> None:
        while True:
            current = manager.get_quiz_snapshot(session_id)
            if current.complete:
                return
            if current.state is RoundState.PLAYING:
                try:
                    manager.submit_quiz_answer(session_id, current.question.correct_answer)
                except RuntimeError:
                    pass
            try:
                manager.move_to_next_question(session_id)
            except RuntimeError:
                pass

    def watch() -> None:
        for _ in range(500):
            seen.append(manager.get_quiz_snapshot(session_id))

    threads = [threading.Thread(target=play), threading.Thread(target=watch), threading.Thread(target=watch)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert manager.get_quiz_snapshot(session_id).complete
    for item in seen:
        if item.complete:
            assert item.question is None
            continue
        assert item.question is not None
        if item.state is RoundState.PLAYING:
            assert item.attempts == 0
            assert item.revealed_answer is None
        else:
            assert item.revealed_answer == item.question.correct_answer


def test_same_seed_same_questions(manager):
    first, _ = manager.create_quiz_session(QuizMode.PRO, 4, seed=11)
    second, _ = manager.create_quiz_session(QuizMode.PRO, 4, seed=11)
    assert first.question == second.question
    assert first.session_id != second.session_id


def test_failed_generation_opens_no_session(launch_day):
    catalog = make_catalog([make_song("A", "Game A"), make_song("B", "Game B")], GAMES[:3])
    manager = QuizManager(CatalogRepository(catalog), today_provider=lambda: launch_day)
    snapshot, batch = manager.create_quiz_session()
    assert snapshot is None
    assert batch.issue is GenerationIssue.INSUFFICIENT_DATA
    assert manager.get_active_session_count() == 0


def test_unknown_session_raises_key_error(manager):
    with pytest.raises(KeyError):
        manager.submit_quiz_answer("missing", "Game A")
