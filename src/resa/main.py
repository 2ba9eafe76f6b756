"""Command-line entry point for the showing assistant."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import structlog

from .assembler import generate
from .config import Settings
from .errors import ItineraryConsistencyError, TourValidationError
from .rendering import format_response


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure structlog + stdlib logging.

    Logs go to stderr so the JSON written to stdout stays machine readable.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


LOGGER = structlog.get_logger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """CLI argument parsing."""
    parser = argparse.ArgumentParser(description="Build a showing itinerary and email drafts from a tour request.")
    parser.add_argument(
        "input",
        help="Path to the tour request JSON document, or '-' to read from stdin.",
    )
    parser.add_argument(
        "--text",
        action="store_true",
        help="Print a readable itinerary and the drafts instead of the JSON response.",
    )
    parser.add_argument(
        "--update",
        action="store_true",
        help="Treat this run as an update and draft the updated itinerary email.",
    )
    return parser.parse_args(argv)


def load_document(source: str) -> Any:
    """Read the request document from a file path or stdin."""
    if source == "-":
        return json.load(sys.stdin)
    return json.loads(Path(source).read_text(encoding="utf-8"))


def cli(argv: Optional[list[str]] = None) -> int:
    """Console script entrypoint."""
    args = parse_args(argv)
    settings = Settings()
    configure_logging(settings.log_level)

    try:
        document = load_document(args.input)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error: could not read {args.input}: {exc}", file=sys.stderr)
        return 2

    try:
        response = generate(document, settings=settings, force_update_run=args.update)
    except TourValidationError as exc:
        for reason in exc.reasons:
            print(f"Error: {reason}", file=sys.stderr)
        return 2
    except ItineraryConsistencyError as exc:
        LOGGER.exception("itinerary.failed", error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.text:
        print(format_response(response, fallback_name=settings.fallback_tour_name, clock_format=settings.clock_format))
    else:
        print(json.dumps(response.to_document(), indent=settings.json_indent or None, ensure_ascii=False))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
