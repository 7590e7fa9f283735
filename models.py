"""Shared typed models for the notes site."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Note:
    """Normalized note record loaded from a markdown file."""

    title: str
    published_at: datetime
    url: str
    body: str
    source_path: str = ""


@dataclass(frozen=True, slots=True)
class ListingEntry:
    """One rendered row of the recent-notes listing."""

    title: str
    href: str
    date_label: str
