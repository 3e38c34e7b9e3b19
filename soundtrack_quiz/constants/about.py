"""Static metadata describing the soundtrack quiz."""

APP_NAME = "GTA Song Quiz"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "A soundtrack trivia game: listen to a song and guess which game or radio "
    "station it belongs to. Play the song of the day or a five-question quiz."
)
SHARE_TITLE = "GTA Song of the Day"
