"""Recent-notes listing shown on the landing page (no I/O)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from models import ListingEntry, Note

RECENT_NOTES_LIMIT = 5


def recent_notes(notes: Iterable[Note], limit: int = RECENT_NOTES_LIMIT) -> list[Note]:
    """Return the `limit` most recent notes, newest first.

    Notes sharing a publish timestamp are ordered by ascending url so the
    result is the same on every run regardless of discovery order.
    """
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")

    ordered = sorted(notes, key=lambda n: n.url)
    # list.sort is stable, so the url order survives among equal timestamps.
    ordered.sort(key=lambda n: n.published_at, reverse=True)
    return ordered[:limit]


def format_publish_date(value: date | datetime) -> str:
    """Format a publish date as e.g. 'Friday, June 28, 2024'."""
    if not isinstance(value, date):
        raise TypeError(f"Unsupported publish date value: {value!r}")
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def build_listing(
    notes: Iterable[Note],
    base_path: str = "",
    limit: int = RECENT_NOTES_LIMIT,
) -> list[ListingEntry]:
    """Select the most recent notes and format them for display.

    Args:
        notes: The full, unordered note collection. Not modified.
        base_path: Site prefix prepended to every note url ('' for root sites).
        limit: Maximum number of entries to return.
    """
    prefix = base_path.rstrip("/")
    return [
        ListingEntry(
            title=note.title,
            href=f"{prefix}{note.url}",
            date_label=format_publish_date(note.published_at),
        )
        for note in recent_notes(notes, limit=limit)
    ]
