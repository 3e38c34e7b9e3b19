"""Utilities for loading song catalogs from the JSON files built offline.

File format:

    {
      "songs": [
        {
          "full_name": "Grand Theft Auto: San Andreas",
          "radio_station": "Radio Los Santos",
          "song_title": "Nuthin' but a 'G' Thang",
          "artist": "Dr. Dre",
          "yt_vid_title": "...",
          "yt_vid_link": "https://www.youtube.com/watch?v=...",
          "yt_page_info": "...",
          "yt_view_count": "1,234,567",
          "yt_like_count": 8910,
          "yt_pub_date": "2015-06-12"
        }
      ],
      "gameNames": ["Grand Theft Auto: San Andreas", "..."],
      "radioStations": ["Radio Los Santos", "..."]
    }

Either ``gameNames`` or ``radioStations`` must be present and non-empty. The
curated catalog uses the same shape with a shorter song list.

Architecture note:
    Each song record is validated on its own so that one malformed row does
    not take the whole catalog down. Rejected rows are logged and counted.
    A document without any valid song, or without answer labels, is rejected
    as a whole.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from soundtrack_quiz.core.errors import DataUnavailableError
from soundtrack_quiz.core.models import Catalog, LabelKind, Song
from soundtrack_quiz.core.popularity import score_songs

logger = logging.getLogger(__name__)


class CatalogImportError(DataUnavailableError):
    """Raised when a catalog file cannot be read or does not match the schema."""


@dataclass(slots=True)
class ImportedCatalog:
    """Container for an imported catalog and load diagnostics."""

    source_path: Path | None
    catalog: Catalog
    rejected_records: int = 0


class SongRecord(BaseModel):
    """Schema for a single song row in the catalog file."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    song_title: str
    artist: str
    full_name: str | None = None
    radio_station: str | None = None
    yt_vid_title: str = ""
    yt_vid_link: str = ""
    yt_page_info: str = ""
    yt_pub_date: str | None = None
    yt_view_count: int = 0
    yt_like_count: int = 0

    @field_validator("song_title", "artist")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("full_name", "radio_station", "yt_pub_date", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("yt_vid_title", "yt_vid_link", "yt_page_info", mode="before")
    @classmethod
    def _none_to_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("yt_view_count", "yt_like_count", mode="before")
    @classmethod
    def _parse_counter(cls, value: Any) -> int:
        if value is None or value == "":
            return 0
        if isinstance(value, bool):
            raise ValueError("counter must be a number")
        if isinstance(value, (int, float)):
            if value != value or value < 0:  # NaN or negative
                raise ValueError("counter must be a non-negative number")
            return int(value)
        if isinstance(value, str):
            digits = value.replace(",", "").replace("_", "").strip()
            if not digits.isdigit():
                raise ValueError(f"counter is not numeric: {value!r}")
            return int(digits)
        raise ValueError("counter must be a number")

    def to_song(self) -> Song:
        return Song(
            title=self.song_title,
            artist=self.artist,
            game=self.full_name,
            radio_station=self.radio_station,
            video_title=self.yt_vid_title,
            video_link=self.yt_vid_link,
            page_info=self.yt_page_info,
            published=self.yt_pub_date,
            view_count=self.yt_view_count,
            like_count=self.yt_like_count,
        )


def load_catalog_from_file(
    file_path: Path,
    label_kind: LabelKind | None = None,
    current_year: int | None = None,
) -> ImportedCatalog:
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogImportError(f"Unable to read catalog file {file_path}: {exc}") from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogImportError(f"Catalog file {file_path} is not valid JSON: {exc}") from exc

    imported = parse_catalog_document(document, label_kind=label_kind, current_year=current_year)
    imported.source_path = file_path
    logger.info(
        "Loaded %d songs and %d %s labels from %s",
        len(imported.catalog.songs),
        len(imported.catalog.labels),
        imported.catalog.label_kind.value,
        file_path,
    )
    return imported


def parse_catalog_document(
    document: Any,
    label_kind: LabelKind | None = None,
    current_year: int | None = None,
) -> ImportedCatalog:
    """Validate an already decoded catalog document."""
    if not isinstance(document, dict):
        raise CatalogImportError("Catalog document must be a JSON object.")

    raw_songs = document.get("songs")
    if not isinstance(raw_songs, list):
        raise CatalogImportError("Catalog document must contain a 'songs' list.")

    kind, labels = _resolve_labels(document, label_kind)

    songs: list[Song] = []
    rejected = 0
    for index, raw in enumerate(raw_songs):
        song = _parse_song(index, raw, kind)
        if song is None:
            rejected += 1
            continue
        songs.append(song)

    if not songs:
        raise CatalogImportError("Catalog did not contain any valid songs.")
    if rejected:
        logger.warning("Rejected %d malformed song records", rejected)

    scored = score_songs(songs, current_year=current_year)
    catalog = Catalog(
        songs=tuple(scored),
        labels=labels,
        label_kind=kind,
    )
    return ImportedCatalog(source_path=None, catalog=catalog, rejected_records=rejected)


def _resolve_labels(document: dict[str, Any], label_kind: LabelKind | None) -> tuple[LabelKind, tuple[str, ...]]:
    candidates = {
        LabelKind.GAME: document.get("gameNames"),
        LabelKind.RADIO_STATION: document.get("radioStations"),
    }
    if label_kind is not None:
        order = [label_kind]
    else:
        order = [LabelKind.GAME, LabelKind.RADIO_STATION]

    for kind in order:
        labels = _clean_labels(candidates[kind])
        if labels:
            return kind, labels

    if label_kind is not None:
        key = "gameNames" if label_kind is LabelKind.GAME else "radioStations"
        raise CatalogImportError(f"Catalog must define a non-empty '{key}' list.")
    raise CatalogImportError("Catalog must define a non-empty 'gameNames' or 'radioStations' list.")


def _clean_labels(raw_labels: Any) -> tuple[str, ...]:
    if not isinstance(raw_labels, list):
        return ()
    seen: dict[str, None] = {}
    for raw in raw_labels:
        if isinstance(raw, str) and raw.strip():
            seen.setdefault(raw.strip(), None)
    return tuple(seen)


def _parse_song(index: int, raw: Any, kind: LabelKind) -> Song | None:
    if not isinstance(raw, dict):
        logger.warning("Song record %d is not an object; skipping", index)
        return None
    try:
        record = SongRecord.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Song record %d is malformed; skipping (%d errors)", index, exc.error_count())
        return None
    song = record.to_song()
    if not song.label_for(kind):
        logger.warning("Song record %d has no %s; skipping", index, kind.value)
        return None
    return song

