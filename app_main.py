"""Application entry point for the soundtrack quiz API."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from soundtrack_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from soundtrack_quiz.constants.quiz_constants import DEFAULT_CATALOG_PATH, DEFAULT_CURATED_CATALOG_PATH
from soundtrack_quiz.core.catalog_importer import CatalogImportError
from soundtrack_quiz.core.models import LabelKind
from soundtrack_quiz.core.quiz_manager import QuizManager
from soundtrack_quiz.core.services.catalog_repository import CatalogRepository
from soundtrack_quiz.core.services.progress_store import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from soundtrack_quiz.server.api_server import run_api_server
from soundtrack_quiz.utils.logging_config import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the soundtrack quiz API.")
    parser.add_argument("--catalog", type=Path, default=DEFAULT_CATALOG_PATH, help="Full catalog JSON file.")
    parser.add_argument(
        "--curated",
        type=Path,
        default=DEFAULT_CURATED_CATALOG_PATH,
        help="Curated catalog JSON file used for the song of the day.",
    )
    parser.add_argument(
        "--label-kind",
        choices=[kind.value for kind in LabelKind],
        default=None,
        help="Answer label to quiz on; defaults to whatever the catalog defines.",
    )
    parser.add_argument("--state-file", type=Path, default=None, help="JSON file for per-day progress.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Initialize logging, load the catalogs and serve the API."""
    args = _parse_args(argv)
    logger = configure_logging(logging.DEBUG if args.debug else logging.INFO)
    logger.info("Starting soundtrack quiz…")

    label_kind = LabelKind(args.label_kind) if args.label_kind else None
    try:
        catalogs = CatalogRepository.from_files(args.catalog, args.curated, label_kind=label_kind)
    except CatalogImportError as exc:
        logger.error("Unable to load the song catalog: %s", exc)
        sys.exit(1)

    store: KeyValueStore
    if args.state_file is not None:
        store = JsonFileKeyValueStore(args.state_file)
    else:
        store = InMemoryKeyValueStore()

    quiz_manager = QuizManager(catalogs, store=store)
    logger.info("API available at http://%s:%d/", args.host, args.port)
    run_api_server(quiz_manager, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
