"""Game and selection constants shared across the core and API layers."""

from datetime import date
from pathlib import Path

DAILY_EPOCH_START: date = date(2025, 3, 18)
DAILY_REINDEX_POSITION_FACTOR: int = 31
DAILY_REINDEX_CYCLE_FACTOR: int = 17

MAX_ATTEMPTS: int = 2
QUESTION_COUNT: int = 5
OPTION_COUNT: int = 4

REGULAR_TOP_FRACTION: float = 0.25
MIN_POPULARITY_SCORE: float = 1e-6
VIEW_WEIGHT: float = 0.5
LIKE_WEIGHT: float = 0.5

# Delays after which the client should hide transient feedback.
CORRECT_FEEDBACK_SECONDS: float = 3.0
RETRY_FEEDBACK_SECONDS: float = 2.0
QUIZ_RETRY_FEEDBACK_SECONDS: float = 1.5
QUIZ_ADVANCE_SECONDS: float = 2.0

PROGRESS_KEY_PREFIX: str = "song-day-"

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
DEFAULT_CATALOG_PATH: Path = DATA_DIR / "songs.json"
DEFAULT_CURATED_CATALOG_PATH: Path = DATA_DIR / "curated-songs.json"

MAX_ACTIVE_QUIZ_SESSIONS: int = 1000
