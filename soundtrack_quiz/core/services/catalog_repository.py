"""Service holding the full and curated catalogs for the lifetime of the app."""

from __future__ import annotations

import logging
from pathlib import Path

from soundtrack_quiz.core.catalog_importer import CatalogImportError, load_catalog_from_file
from soundtrack_quiz.core.models import Catalog, LabelKind, Song

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Owns the loaded catalogs; both are read-only once set."""

    def __init__(self, catalog: Catalog, curated: Catalog | None = None, rejected_records: int = 0) -> None:
        if catalog.is_empty():
            raise ValueError("Catalog must contain at least one song.")
        self._catalog = catalog
        self._curated = curated if curated is not None and not curated.is_empty() else None
        self._rejected_records = rejected_records

    @classmethod
    def from_files(
        cls,
        catalog_path: Path,
        curated_path: Path | None = None,
        label_kind: LabelKind | None = None,
    ) -> CatalogRepository:
        """Load the full catalog; the curated one is optional and may fail quietly."""
        imported = load_catalog_from_file(catalog_path, label_kind=label_kind)
        catalog = imported.catalog
        rejected = imported.rejected_records
        curated = None
        if curated_path is not None:
            try:
                imported_curated = load_catalog_from_file(curated_path, label_kind=catalog.label_kind)
                curated = imported_curated.catalog
                rejected += imported_curated.rejected_records
            except CatalogImportError as exc:
                logger.warning("Curated catalog unavailable, falling back to the full catalog: %s", exc)
        return cls(catalog, curated, rejected_records=rejected)

    def has_curated_catalog(self) -> bool:
        return self._curated is not None

    def get_label_kind(self) -> LabelKind:
        return self._catalog.label_kind

    def get_labels(self) -> tuple[str, ...]:
        return self._catalog.labels

    def get_songs(self) -> tuple[Song, ...]:
        return self._catalog.songs

    def get_rejected_record_count(self) -> int:
        """Return how many malformed song records were skipped while loading."""
        return self._rejected_records

    def get_daily_songs(self) -> tuple[Song, ...] | None:
        """Return the curated songs used by the daily selector, if any."""
        return self._curated.songs if self._curated is not None else None

