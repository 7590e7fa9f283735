"""CLI entrypoint for building the notes site."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from listing import RECENT_NOTES_LIMIT, build_listing
from notes_feed import load_notes
from site_writer import write_site
from tailwind_config import write_tailwind_config


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {raw}")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Build the notes site from markdown notes")
    parser.add_argument("--notes-dir", default=None, help="Directory of markdown notes (default: $NOTES_DIR or _notes)")
    parser.add_argument("--output-dir", default=None, help="Where to write HTML (default: $SITE_OUTPUT_DIR or _site)")
    parser.add_argument("--base-path", default=None, help="Site prefix for links (default: $SITE_BASEURL or '')")
    parser.add_argument(
        "--limit",
        type=_positive_int,
        default=RECENT_NOTES_LIMIT,
        help="Number of recent notes on the landing page",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only log what would be built, without writing files",
    )
    parser.add_argument(
        "--tailwind-config",
        default=None,
        help="Path of the generated Tailwind config (default: $TAILWIND_CONFIG_PATH or tailwind.config.js)",
    )
    parser.add_argument("--skip-tailwind", action="store_true", help="Do not write the Tailwind config")
    return parser.parse_args(argv)


def run(
    notes_dir: str | None,
    output_dir: str | None,
    base_path: str,
    limit: int,
    dry_run: bool,
    tailwind_path: str | None = None,
    skip_tailwind: bool = False,
) -> int:
    """Run one site build and return the process exit code."""
    notes = load_notes(notes_dir)
    logging.info("Loaded %s notes", len(notes))

    for entry in build_listing(notes, base_path=base_path, limit=limit):
        logging.info("Recent: %s | %s | %s", entry.date_label, entry.title, entry.href)

    if dry_run:
        logging.info(
            "[dry-run] Would write landing page and %s note pages to %s",
            len(notes),
            output_dir,
        )
        return 0

    result = write_site(notes, output_dir=output_dir, base_path=base_path, limit=limit)

    if not skip_tailwind:
        write_tailwind_config(tailwind_path)

    logging.info(
        "Run complete. notes=%s pages_written=%s pages_failed=%s",
        len(notes),
        result.pages_written,
        result.pages_failed,
    )
    return 1 if result.pages_failed else 0


def main(argv: list[str] | None = None) -> int:
    """Initialize config and build the site."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    # Environment is read here, after .env is loaded, so it overrides module defaults.
    return run(
        notes_dir=args.notes_dir or os.getenv("NOTES_DIR"),
        output_dir=args.output_dir or os.getenv("SITE_OUTPUT_DIR"),
        base_path=args.base_path if args.base_path is not None else os.getenv("SITE_BASEURL", ""),
        limit=args.limit,
        dry_run=args.dry_run,
        tailwind_path=args.tailwind_config or os.getenv("TAILWIND_CONFIG_PATH"),
        skip_tailwind=args.skip_tailwind,
    )


if __name__ == "__main__":
    sys.exit(main())
