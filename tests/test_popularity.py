from __future__ import annotations

import math

from conftest import make_song

from soundtrack_quiz.constants.quiz_constants import MIN_POPULARITY_SCORE
from soundtrack_quiz.core.popularity import popularity_score, score_songs, views_per_year


def test_blends_views_and_likes_equally():
    songs = score_songs(
        [make_song("Top", "A", views=1000, likes=100), make_song("Half", "A", views=500, likes=25)],
        current_year=2025,
    )
    assert songs[0].popularity_score == 1.0
    assert math.isclose(songs[1].popularity_score, 0.5 * 0.5 + 0.5 * 0.25)


def test_views_alone_when_no_song_has_likes():
    songs = score_songs(
        [make_song("Top", "A", views=800, likes=0), make_song("Low", "A", views=200, likes=0)],
        current_year=2025,
    )
    assert math.isclose(songs[1].popularity_score, 0.25)


def test_zero_signal_gets_minimum_score():
    song = make_song("Silent", "A", views=0, likes=0)
    assert popularity_score(song, 0, 0) == MIN_POPULARITY_SCORE
    assert score_songs([song], current_year=2025)[0].popularity_score == MIN_POPULARITY_SCORE


def test_scoring_keeps_original_records_untouched():
    original = make_song("Top", "A")
    scored = score_songs([original], current_year=2025)[0]
    assert original.popularity_score == 0.0
    assert scored.title == original.title


def test_views_per_year():
    assert views_per_year(1000, "2020-06-01", 2025) == 200
    assert views_per_year(1000, "2025-01-01", 2025) == 1000
    assert views_per_year(1000, None, 2025) == 1000
    assert views_per_year(1000, "not a date", 2025) == 1000


def test_empty_catalog_scores_nothing():
    assert score_songs([]) == []
