"""Small text helpers shared by the game services and the API."""

from __future__ import annotations

from datetime import date
import re

_YOUTUBE_ID_PATTERN = re.compile(r"^.*((youtu\.be/)|(v/)|(/u/\w/)|(embed/)|(watch\?))\??v?=?([^#&?]*).*")


def extract_youtube_id(url: str | None) -> str:
    """Return the 11-character video id from a YouTube URL, or ''."""
    if not url:
        return ""
    match = _YOUTUBE_ID_PATTERN.match(url)
    if match and match.group(7) and len(match.group(7)) == 11:
        return match.group(7)
    return ""


def format_date_readable(day: date) -> str:
    """Format as '18 March'."""
    return f"{day.day} {day.strftime('%B')}"
