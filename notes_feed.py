"""Markdown notes ingestion helpers."""

from __future__ import annotations

import logging
import os
from datetime import UTC, date, datetime, time
from pathlib import Path
from typing import Any

import frontmatter
import yaml

from models import Note

NOTES_DIR = os.getenv("NOTES_DIR", "_notes")
NOTE_SUFFIXES = (".md", ".markdown")
NOTES_URL_PREFIX = "/notes"

LOGGER = logging.getLogger(__name__)


def load_notes(notes_dir: str | None = None) -> list[Note]:
    """Discover and normalize every note under the notes directory.

    Files are visited in sorted path order. Notes that cannot be parsed, lack
    a title or date, are marked `published: false`, or reuse an earlier
    note's url are skipped with a log line. The result keeps discovery order;
    sorting is left to the listing.

    Args:
        notes_dir: Directory to scan. Defaults to NOTES_DIR (env, then '_notes').
    """
    root = Path(notes_dir or NOTES_DIR)
    if not root.is_dir():
        LOGGER.warning("notes: directory not found: %s", root)
        return []

    paths = sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in NOTE_SUFFIXES)

    notes_by_url: dict[str, Note] = {}
    skipped = 0
    for path in paths:
        note = _load_note(path, root)
        if note is None:
            skipped += 1
            continue

        if note.url in notes_by_url:
            skipped += 1
            LOGGER.warning(
                "notes: duplicate url=%s in %s, keeping %s",
                note.url,
                path,
                notes_by_url[note.url].source_path,
            )
            continue

        notes_by_url[note.url] = note

    LOGGER.info(
        "notes: dir=%s files=%s loaded=%s skipped=%s",
        root,
        len(paths),
        len(notes_by_url),
        skipped,
    )
    return list(notes_by_url.values())


def _load_note(path: Path, root: Path) -> Note | None:
    """Parse one markdown file into a Note, or None when it is unusable."""
    try:
        post = frontmatter.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError) as exc:
        LOGGER.warning("notes: failed to parse %s, skipping: %s", path, exc)
        return None

    metadata: dict[str, Any] = post.metadata if isinstance(post.metadata, dict) else {}

    if metadata.get("published") is False:
        LOGGER.info("notes: unpublished, skipping: %s", path)
        return None

    title = _as_title(metadata.get("title"))
    if not title:
        LOGGER.warning("notes: missing title in %s, skipping", path)
        return None

    published_at = _parse_published_at(metadata.get("date"))
    if published_at is None:
        LOGGER.warning("notes: missing or invalid date in %s, skipping", path)
        return None

    return Note(
        title=title,
        published_at=published_at,
        url=_note_url(metadata.get("permalink"), path, root),
        body=post.content,
        source_path=str(path),
    )


def _note_url(permalink: Any, path: Path, root: Path) -> str:
    explicit = _as_str(permalink)
    if explicit:
        return _normalize_url(explicit)

    relative = path.relative_to(root).with_suffix("")
    return f"{NOTES_URL_PREFIX}/{relative.as_posix()}/"


def _normalize_url(url: str) -> str:
    """Canonical form of a permalink: one leading slash, no empty segments,
    and a trailing slash unless it names an .html file."""
    path = "/".join(part for part in url.split("/") if part)
    if not path:
        return "/"
    if path.endswith(".html"):
        return f"/{path}"
    return f"/{path}/"


def _parse_published_at(raw: Any) -> datetime | None:
    """Normalize a front-matter date to an aware UTC datetime.

    YAML already turns unquoted dates into date/datetime objects; quoted
    values arrive as ISO-8601 strings.
    """
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, date):
        parsed = datetime.combine(raw, time.min)
    elif isinstance(raw, str) and raw.strip():
        try:
            parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    # Offsets shift the calendar date: 2024-06-28T23:30-05:00 is listed as June 29.
    return parsed.astimezone(UTC)


def _as_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None


def _as_title(value: Any) -> str | None:
    """Accept any non-empty YAML scalar, since `title: 1984` loads as an int."""
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value).strip() or None
