"""Network configuration constants for the soundtrack quiz API."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
PLAYER_COOKIE_NAME: str = "soundtrack_quiz_player"
PLAYER_COOKIE_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 365
