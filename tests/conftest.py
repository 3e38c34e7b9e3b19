from __future__ import annotations

from datetime import date

import pytest

from soundtrack_quiz.core.models import Catalog, LabelKind, Song
from soundtrack_quiz.core.popularity import score_songs
from soundtrack_quiz.core.services.catalog_repository import CatalogRepository


def make_song(
    title: str,
    game: str,
    station: str | None = None,
    artist: str | None = None,
    views: int = 1000,
    likes: int = 10,
    link: str = "",
) -> Song:
    return Song(
        title=title,
        artist=artist or f"{title} Artist",
        game=game,
        radio_station=station or f"{game} FM",
        video_link=link,
        view_count=views,
        like_count=likes,
    )


def make_catalog(songs: list[Song], labels: list[str], kind: LabelKind = LabelKind.GAME) -> Catalog:
    return Catalog(songs=tuple(score_songs(songs, current_year=2025)), labels=tuple(labels), label_kind=kind)


GAMES = ["Game A", "Game B", "Game C", "Game D", "Game E"]


@pytest.fixture
def five_game_songs() -> list[Song]:
    songs = []
    for index, game in enumerate(GAMES):
        songs.append(make_song(f"Song {game} 1", game, views=10_000 * (index + 1), likes=100 * (index + 1)))
        songs.append(make_song(f"Song {game} 2", game, views=1_000 * (index + 1), likes=10 * (index + 1)))
    return score_songs(songs, current_year=2025)


@pytest.fixture
def full_catalog(five_game_songs: list[Song]) -> Catalog:
    return Catalog(songs=tuple(five_game_songs), labels=tuple(GAMES))


@pytest.fixture
def curated_catalog(five_game_songs: list[Song]) -> Catalog:
    return Catalog(songs=tuple(five_game_songs[::2]), labels=tuple(GAMES))


@pytest.fixture
def catalogs(full_catalog: Catalog, curated_catalog: Catalog) -> CatalogRepository:
    return CatalogRepository(full_catalog, curated_catalog)


@pytest.fixture
def launch_day() -> date:
    return date(2025, 3, 18)
