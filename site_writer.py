"""HTML output for the notes site: landing page plus one page per note."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markdown_it import MarkdownIt

from listing import RECENT_NOTES_LIMIT, build_listing, format_publish_date
from models import ListingEntry, Note

SITE_OUTPUT_DIR = os.getenv("SITE_OUTPUT_DIR", "_site")
SITE_BASEURL = os.getenv("SITE_BASEURL", "")
SITE_TITLE = os.getenv("SITE_TITLE", "Notes")
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

LOGGER = logging.getLogger(__name__)

_md = MarkdownIt("commonmark", {"html": True})


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Summary of one write_site() run."""

    index_path: Path
    pages_written: int
    pages_failed: int


@lru_cache(maxsize=1)
def template_environment() -> Environment:
    """Shared Jinja2 environment over TEMPLATES_DIR; autoescapes only .html templates."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["publish_date"] = format_publish_date
    env.filters["js_string"] = json.dumps
    return env


def render_listing_fragment(entries: Sequence[ListingEntry]) -> str:
    """Render the recent-notes fragment embedded in the landing page."""
    return template_environment().get_template("_recent_notes.html").render(entries=entries)


def render_index(
    notes: Sequence[Note],
    base_path: str = "",
    limit: int = RECENT_NOTES_LIMIT,
) -> str:
    """Render the landing page (route '/') with the recent-notes listing."""
    entries = build_listing(notes, base_path=base_path, limit=limit)
    return template_environment().get_template("index.html").render(
        site_title=SITE_TITLE,
        base_path=base_path.rstrip("/"),
        entries=entries,
    )


def render_note(note: Note, base_path: str = "") -> str:
    """Render a single note page with its markdown body converted to HTML."""
    return template_environment().get_template("note.html").render(
        site_title=SITE_TITLE,
        base_path=base_path.rstrip("/"),
        note=note,
        body_html=_md.render(note.body),
    )


def _page_path(output_dir: Path, url: str) -> Path:
    relative = url.strip("/")
    if not relative:
        return output_dir / "index.html"
    if relative.endswith(".html"):
        return output_dir / relative
    return output_dir / relative / "index.html"


def write_site(
    notes: Sequence[Note],
    output_dir: str | None = None,
    base_path: str | None = None,
    limit: int = RECENT_NOTES_LIMIT,
) -> BuildResult:
    """Write index.html and every note page under output_dir.

    A note page that fails to render or write is logged and counted; the
    remaining pages are still written.
    """
    out = Path(output_dir or SITE_OUTPUT_DIR)
    prefix = SITE_BASEURL if base_path is None else base_path
    out.mkdir(parents=True, exist_ok=True)

    index_path = out / "index.html"
    index_path.write_text(render_index(notes, base_path=prefix, limit=limit), encoding="utf-8")
    LOGGER.info("site: wrote landing page → %s", index_path)

    root = out.resolve()
    # Resolved page path -> url that claimed it; the landing page owns index.html.
    claimed: dict[Path, str] = {index_path.resolve(): "/"}

    written = 0
    failed = 0
    for note in notes:
        page_path = _page_path(out, note.url)
        resolved = page_path.resolve()
        if not resolved.is_relative_to(root):
            failed += 1
            LOGGER.warning("site: url=%s resolves outside %s, skipping %s", note.url, out, note.source_path)
            continue
        if resolved in claimed:
            failed += 1
            LOGGER.warning(
                "site: url=%s collides with url=%s at %s, skipping %s",
                note.url,
                claimed[resolved],
                page_path,
                note.source_path,
            )
            continue
        claimed[resolved] = note.url
        try:
            html = render_note(note, base_path=prefix)
            page_path.parent.mkdir(parents=True, exist_ok=True)
            page_path.write_text(html, encoding="utf-8")
            written += 1
        except Exception as exc:  # broad so one bad note does not abort the build
            failed += 1
            LOGGER.exception("site: failed writing url=%s: %s", note.url, exc)

    LOGGER.info("Site build complete. output=%s pages_written=%s pages_failed=%s", out, written, failed)
    return BuildResult(index_path=index_path, pages_written=written, pages_failed=failed)
