from __future__ import annotations

from collections import Counter
import random

from conftest import GAMES, make_song

from soundtrack_quiz.core.models import LabelKind, QuizMode
from soundtrack_quiz.core.popularity import score_songs
from soundtrack_quiz.core.quiz_generator import (
    GenerationIssue,
    candidate_pool,
    generate_quiz,
    generate_quiz_batch,
    select_diverse_songs,
)


def _assert_well_formed(questions, labels):
    for question in questions:
        assert len(question.options) == 4
        assert len(set(question.options)) == 4
        assert question.options.count(question.correct_answer) == 1
        assert question.correct_answer == question.song.label_for(question.label_kind)
        assert set(question.options) <= set(labels)


def test_two_song_example_builds_two_questions():
    songs = score_songs([make_song("X", "A"), make_song("Y", "B")], current_year=2025)
    labels = ["A", "B", "C", "D"]
    questions = generate_quiz(songs, labels, QuizMode.REGULAR, 2, rng=random.Random(1))
    assert len(questions) == 2
    _assert_well_formed(questions, labels)
    assert {q.song.title: q.correct_answer for q in questions} == {"X": "A", "Y": "B"}


def test_one_question_per_label_when_pool_covers_every_label(five_game_songs):
    for seed in range(20):
        questions = generate_quiz(five_game_songs, GAMES, QuizMode.REGULAR, 5, rng=random.Random(seed))
        assert len(questions) == 5
        assert sorted(q.correct_answer for q in questions) == sorted(GAMES)
        _assert_well_formed(questions, GAMES)


def test_never_returns_more_than_requested(five_game_songs):
    for count in (1, 3, 5, 8):
        questions = generate_quiz(five_game_songs, GAMES, QuizMode.PRO, count, rng=random.Random(count))
        assert len(questions) <= count
        _assert_well_formed(questions, GAMES)


def test_count_is_capped_by_distinct_labels(five_game_songs):
    batch = generate_quiz_batch(five_game_songs, GAMES, QuizMode.REGULAR, 8, rng=random.Random(3))
    assert len(batch.questions) == 5
    assert batch.issue is GenerationIssue.INSUFFICIENT_DATA


def test_empty_inputs_return_empty_without_raising(five_game_songs):
    assert generate_quiz([], GAMES) == []
    assert generate_quiz(five_game_songs, []) == []
    assert generate_quiz_batch([], GAMES).issue is GenerationIssue.NO_OPERATION
    assert generate_quiz_batch(five_game_songs, []).issue is GenerationIssue.INVALID_INPUT


def test_mismatched_labels_are_invalid_input(five_game_songs):
    batch = generate_quiz_batch(five_game_songs, ["P", "Q", "R", "S"])
    assert batch.is_empty()
    assert batch.issue is GenerationIssue.INVALID_INPUT


def test_fewer_than_four_labels_is_insufficient(five_game_songs):
    batch = generate_quiz_batch(five_game_songs, GAMES[:3], QuizMode.REGULAR, 2)
    assert batch.is_empty()
    assert batch.issue is GenerationIssue.INSUFFICIENT_DATA


def test_unexpected_errors_become_empty_batch(five_game_songs):
    class BrokenRandom(random.Random):
        def random(self):
            raise ArithmeticError("boom")

    batch = generate_quiz_batch(five_game_songs, GAMES, rng=BrokenRandom())
    assert batch.is_empty()
    assert batch.issue is GenerationIssue.UNEXPECTED_ERROR


def test_same_seed_gives_same_quiz(five_game_songs):
    first = generate_quiz(five_game_songs, GAMES, QuizMode.REGULAR, 5, rng=random.Random(42))
    second = generate_quiz(five_game_songs, GAMES, QuizMode.REGULAR, 5, rng=random.Random(42))
    assert first == second


def test_regular_pool_is_the_popular_head():
    songs = score_songs(
        [make_song(f"S{i}", GAMES[i % 5], views=(i + 1) * 100, likes=0) for i in range(40)],
        current_year=2025,
    )
    pool = candidate_pool(songs, QuizMode.REGULAR, 5, random.Random(0))
    # 25% of 40 is 10, which already meets the 2 * 5 minimum.
    assert len(pool) == 10
    assert {song.title for song in pool} == {f"S{i}" for i in range(30, 40)}


def test_regular_pool_widens_to_twice_the_question_count():
    songs = score_songs([make_song(f"S{i}", GAMES[i % 5], views=i + 1) for i in range(16)], current_year=2025)
    pool = candidate_pool(songs, QuizMode.REGULAR, 5, random.Random(0))
    assert len(pool) == 10


def test_pro_pool_uses_the_tail():
    songs = score_songs([make_song(f"S{i}", GAMES[i % 5], views=(i + 1) * 100) for i in range(40)], current_year=2025)
    pool = candidate_pool(songs, QuizMode.PRO, 5, random.Random(0))
    assert len(pool) == 30
    assert {song.title for song in pool} == {f"S{i}" for i in range(30)}


def test_pro_pool_falls_back_to_whole_catalog_when_tail_is_small(five_game_songs):
    pool = candidate_pool(five_game_songs, QuizMode.PRO, 5, random.Random(0))
    assert sorted(song.title for song in pool) == sorted(song.title for song in five_game_songs)


def test_diversity_relaxes_to_two_per_label_then_unconstrained():
    songs = [make_song(f"S{i}", "A" if i < 4 else "B") for i in range(6)]
    picked = select_diverse_songs(songs, 3, LabelKind.GAME)
    assert Counter(song.game for song in picked) == Counter({"A": 2, "B": 1})
    picked = select_diverse_songs(songs, 6, LabelKind.GAME)
    assert len(picked) == 6


def test_duplicate_title_and_artist_are_skipped():
    songs = [
        make_song("Same", "A", artist="Band"),
        make_song("same ", "B", artist="band"),
        make_song("Other", "C"),
    ]
    picked = select_diverse_songs(songs, 3, LabelKind.GAME)
    assert [song.title for song in picked] == ["Same", "Other"]


def test_radio_station_labels():
    stations = ["Radio X", "K-DST", "Bounce FM", "Flash FM"]
    songs = score_songs(
        [make_song(f"S{i}", "Game", station=station) for i, station in enumerate(stations)],
        current_year=2025,
    )
    questions = generate_quiz(
        songs, stations, QuizMode.REGULAR, 4, rng=random.Random(5), label_kind=LabelKind.RADIO_STATION
    )
    assert len(questions) == 4
    assert sorted(q.correct_answer for q in questions) == sorted(stations)
    _assert_well_formed(questions, stations)
