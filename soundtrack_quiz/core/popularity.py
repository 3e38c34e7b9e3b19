"""Popularity scoring for catalog songs.

Scores are computed once when a catalog is loaded. View and like counts are
normalized against the catalog maximum and blended with equal weights; when
no song carries a like count the view signal is used alone.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
import math

from soundtrack_quiz.constants.quiz_constants import LIKE_WEIGHT, MIN_POPULARITY_SCORE, VIEW_WEIGHT
from soundtrack_quiz.core.models import Song


def score_songs(songs: list[Song], current_year: int | None = None) -> list[Song]:
    """Return copies of ``songs`` with popularity and views-per-year filled in."""
    if not songs:
        return []
    year = current_year if current_year is not None else date.today().year
    max_views = max(song.view_count for song in songs)
    max_likes = max(song.like_count for song in songs)

    scored: list[Song] = []
    for song in songs:
        scored.append(
            replace(
                song,
                popularity_score=popularity_score(song, max_views, max_likes),
                views_per_year=views_per_year(song.view_count, song.published, year),
            )
        )
    return scored


def popularity_score(song: Song, max_views: int, max_likes: int) -> float:
    view_signal = _normalize(song.view_count, max_views)
    if max_likes > 0:
        score = VIEW_WEIGHT * view_signal + LIKE_WEIGHT * _normalize(song.like_count, max_likes)
    else:
        score = view_signal
    if math.isnan(score) or score <= 0:
        return MIN_POPULARITY_SCORE
    return score


def views_per_year(view_count: int, published: str | None, current_year: int) -> int:
    publication_year = _publication_year(published)
    if publication_year is None:
        years_online = 1
    else:
        years_online = max(1, current_year - publication_year)
    return round(view_count / years_online)


def _normalize(value: int, maximum: int) -> float:
    if maximum <= 0:
        return 0.0
    return value / maximum


def _publication_year(published: str | None) -> int | None:
    if not published:
        return None
    try:
        return date.fromisoformat(published.strip()[:10]).year
    except ValueError:
        return None
