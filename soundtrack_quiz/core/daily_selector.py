"""Deterministic song-of-the-day selection.

The curated catalog is walked in order during the first cycle, so no song
repeats until every song has been shown. Later cycles reindex each position
with ``(pos * 31 + cycle * 17) % n``, which varies by cycle while remaining
reproducible for any given date. When 31 shares a factor with ``n`` the
multiplier moves up to the next coprime value so each cycle still visits
every song once.
"""

from __future__ import annotations

from datetime import date, timedelta
import logging
import math
import random
from typing import Sequence

from soundtrack_quiz.constants.quiz_constants import (
    DAILY_EPOCH_START,
    DAILY_REINDEX_CYCLE_FACTOR,
    DAILY_REINDEX_POSITION_FACTOR,
    OPTION_COUNT,
)
from soundtrack_quiz.core.models import Song

logger = logging.getLogger(__name__)


def day_offset(day: date, epoch_start: date = DAILY_EPOCH_START) -> int:
    return (day - epoch_start).days


def daily_index(offset: int, catalog_size: int) -> int:
    """Map a day offset onto a catalog index."""
    if catalog_size <= 0:
        raise ValueError("Catalog size must be positive.")
    if offset < 0:
        return 0
    cycle, pos = divmod(offset, catalog_size)
    if cycle == 0:
        return pos
    factor = reindex_factor(catalog_size)
    return (pos * factor + cycle * DAILY_REINDEX_CYCLE_FACTOR) % catalog_size


def reindex_factor(catalog_size: int) -> int:
    """Return the position multiplier, bumped until it is coprime with the catalog size."""
    factor = DAILY_REINDEX_POSITION_FACTOR
    while math.gcd(factor, catalog_size) != 1:
        factor += 1
    return factor


def select_daily_song(
    songs: Sequence[Song],
    day: date,
    epoch_start: date = DAILY_EPOCH_START,
) -> Song | None:
    if not songs:
        logger.warning("No songs available for daily selection on %s", day.isoformat())
        return None
    return songs[daily_index(day_offset(day, epoch_start), len(songs))]


def select_fallback_song(songs: Sequence[Song], day_string: str) -> Song | None:
    """Index the full catalog by the sum of the date string's character codes."""
    if not songs:
        logger.warning("No songs available for fallback selection on %s", day_string)
        return None
    return songs[sum(ord(char) for char in day_string) % len(songs)]


def pick_song_for_day(
    curated: Sequence[Song] | None,
    full: Sequence[Song] | None,
    day: date,
    epoch_start: date = DAILY_EPOCH_START,
) -> Song | None:
    if curated:
        return select_daily_song(curated, day, epoch_start)
    logger.info("Curated catalog unavailable; using fallback selection for %s", day.isoformat())
    return select_fallback_song(full or (), day.isoformat())


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def build_options_for_day(labels: Sequence[str], correct: str, day: date) -> list[str]:
    """Return answer options that stay stable for the whole day."""
    rng = random.Random(day.isoformat())
    distractors = [label for label in labels if label != correct]
    chosen = rng.sample(distractors, min(OPTION_COUNT - 1, len(distractors)))
    options = chosen + [correct]
    rng.shuffle(options)
    return options
