"""Key-value storage port and the per-day progress repository built on it."""

from __future__ import annotations

from datetime import date
import json
import logging
from pathlib import Path
from threading import Lock
from typing import Protocol

from soundtrack_quiz.constants.quiz_constants import PROGRESS_KEY_PREFIX
from soundtrack_quiz.core.models import DailyProgress

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal storage capability the game logic depends on."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value


class JsonFileKeyValueStore:
    """Stores every entry in one JSON object on disk."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path.resolve()
        self._lock = Lock()
        self._values = self._read()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then rename over the target
            temp_path = self._file_path.with_name(self._file_path.name + ".tmp")
            temp_path.write_text(json.dumps(self._values, indent=2), encoding="utf-8")
            temp_path.replace(self._file_path)

    def _read(self) -> dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Unable to read progress file %s: %s", self._file_path, exc)
            return {}
        if not isinstance(data, dict):
            logger.error("Progress file %s does not hold a JSON object", self._file_path)
            return {}
        return {str(key): str(value) for key, value in data.items()}


class DailyProgressRepository:
    """Reads and writes DailyProgress records keyed by calendar date."""

    def __init__(self, store: KeyValueStore, namespace: str | None = None) -> None:
        self._store = store
        self._namespace = namespace

    def key_for(self, day: date) -> str:
        key = f"{PROGRESS_KEY_PREFIX}{day.isoformat()}"
        if self._namespace:
            return f"{self._namespace}/{key}"
        return key

    def load(self, day: date) -> DailyProgress | None:
        """Return stored progress, or None when absent or unreadable."""
        raw = self._store.get(self.key_for(day))
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Error parsing saved progress for %s: %s", day.isoformat(), exc)
            return None
        if not isinstance(data, dict):
            logger.error("Saved progress for %s is not an object", day.isoformat())
            return None
        return DailyProgress.from_dict(data, day.isoformat())

    def save(self, progress: DailyProgress) -> None:
        day = date.fromisoformat(progress.date)
        self._store.set(self.key_for(day), json.dumps(progress.to_dict()))
