from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

import notes_feed
from listing import format_publish_date
from notes_feed import _parse_published_at, load_notes


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_load_notes_smoke(tmp_path: Path) -> None:
    _write(tmp_path, "first-note.md", "---\ntitle: First Note\ndate: 2024-04-24\n---\nHello *world*.\n")

    notes = load_notes(str(tmp_path))

    assert len(notes) == 1
    note = notes[0]
    assert note.title == "First Note"
    assert note.url == "/notes/first-note/"
    assert note.published_at == datetime(2024, 4, 24, tzinfo=UTC)
    assert note.body.strip() == "Hello *world*."
    assert note.source_path.endswith("first-note.md")


def test_nested_notes_use_relative_path_in_url(tmp_path: Path) -> None:
    _write(tmp_path, "python/typing.md", "---\ntitle: Typing\ndate: 2024-05-01\n---\n")

    notes = load_notes(str(tmp_path))

    assert notes[0].url == "/notes/python/typing/"


@pytest.mark.parametrize(("permalink", "expected"), [
    ("/til/grep/", "/til/grep/"),
    ("til/grep/", "/til/grep/"),
])
def test_permalink_overrides_url(tmp_path: Path, permalink: str, expected: str) -> None:
    _write(tmp_path, "grep.md", f"---\ntitle: Grep\ndate: 2024-05-01\npermalink: {permalink}\n---\n")

    assert load_notes(str(tmp_path))[0].url == expected


def test_notes_missing_title_or_date_are_skipped(tmp_path: Path) -> None:
    _write(tmp_path, "ok.md", "---\ntitle: OK\ndate: 2024-01-01\n---\n")
    _write(tmp_path, "no-title.md", "---\ndate: 2024-01-02\n---\n")
    _write(tmp_path, "no-date.md", "---\ntitle: Dateless\n---\n")
    _write(tmp_path, "bad-date.md", "---\ntitle: Bad\ndate: someday\n---\n")
    _write(tmp_path, "no-frontmatter.md", "Just text.\n")

    notes = load_notes(str(tmp_path))

    assert [n.title for n in notes] == ["OK"]


def test_invalid_yaml_is_skipped_with_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write(tmp_path, "broken.md", "---\ntitle: [unclosed\ndate: 2024-01-01\n---\n")
    _write(tmp_path, "ok.md", "---\ntitle: OK\ndate: 2024-01-01\n---\n")

    with caplog.at_level("WARNING"):
        notes = load_notes(str(tmp_path))

    assert [n.title for n in notes] == ["OK"]
    assert "broken.md" in caplog.text


def test_unpublished_notes_are_excluded(tmp_path: Path) -> None:
    _write(tmp_path, "draft.md", "---\ntitle: Draft\ndate: 2024-01-01\npublished: false\n---\n")

    assert load_notes(str(tmp_path)) == []


def test_duplicate_url_keeps_first_in_path_order(tmp_path: Path) -> None:
    _write(tmp_path, "a.md", "---\ntitle: A\ndate: 2024-01-01\npermalink: /same/\n---\n")
    _write(tmp_path, "b.md", "---\ntitle: B\ndate: 2024-01-02\npermalink: /same/\n---\n")

    notes = load_notes(str(tmp_path))

    assert [n.title for n in notes] == ["A"]


def test_non_markdown_files_are_ignored(tmp_path: Path) -> None:
    _write(tmp_path, "image.png", "not really a png")
    _write(tmp_path, "note.markdown", "---\ntitle: Long Suffix\ndate: 2024-01-01\n---\n")

    assert [n.title for n in load_notes(str(tmp_path))] == ["Long Suffix"]


def test_missing_directory_returns_empty(tmp_path: Path) -> None:
    assert load_notes(str(tmp_path / "nope")) == []


def test_default_dir_comes_from_module_constant(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path, "x.md", "---\ntitle: X\ndate: 2024-01-01\n---\n")
    monkeypatch.setattr(notes_feed, "NOTES_DIR", str(tmp_path))

    assert [n.title for n in load_notes()] == ["X"]


def test_datetime_front_matter_is_converted_to_utc(tmp_path: Path) -> None:
    _write(tmp_path, "x.md", "---\ntitle: X\ndate: 2024-06-28 10:00:00 +02:00\n---\n")

    note = load_notes(str(tmp_path))[0]

    assert note.published_at == datetime(2024, 6, 28, 8, 0, tzinfo=UTC)


@pytest.mark.parametrize(("raw", "expected"), [
    ("2024-04-24", datetime(2024, 4, 24, tzinfo=UTC)),
    ("2024-04-24T09:30:00Z", datetime(2024, 4, 24, 9, 30, tzinfo=UTC)),
    ("2024-04-24T09:30:00+01:00", datetime(2024, 4, 24, 8, 30, tzinfo=UTC)),
    (datetime(2024, 4, 24, 9, 30), datetime(2024, 4, 24, 9, 30, tzinfo=UTC)),
])
def test_parse_published_at(raw: object, expected: datetime) -> None:
    assert _parse_published_at(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "not a date", 20240424])
def test_parse_published_at_rejects_garbage(raw: object) -> None:
    assert _parse_published_at(raw) is None


@pytest.mark.parametrize(("raw_title", "expected"), [
    ("1984", "1984"),
    ("404", "404"),
    ("3.14", "3.14"),
    ("yes", "True"),
    ("'  Padded  '", "Padded"),
])
def test_scalar_titles_are_kept_as_strings(tmp_path: Path, raw_title: str, expected: str) -> None:
    _write(tmp_path, "x.md", f"---\ntitle: {raw_title}\ndate: 2024-01-01\n---\n")

    assert [n.title for n in load_notes(str(tmp_path))] == [expected]


@pytest.mark.parametrize("raw_title", ["", "''", "[a, b]", "{a: 1}", "null"])
def test_empty_or_structured_titles_are_rejected(tmp_path: Path, raw_title: str) -> None:
    _write(tmp_path, "x.md", f"---\ntitle: {raw_title}\ndate: 2024-01-01\n---\n")

    assert load_notes(str(tmp_path)) == []


@pytest.mark.parametrize(("permalink", "expected"), [
    ("/notes/a", "/notes/a/"),
    ("notes//a/", "/notes/a/"),
    ("/about.html", "/about.html"),
    ("/", "/"),
])
def test_permalinks_are_normalized(tmp_path: Path, permalink: str, expected: str) -> None:
    _write(tmp_path, "x.md", f"---\ntitle: X\ndate: 2024-01-01\npermalink: {permalink}\n---\n")

    assert load_notes(str(tmp_path))[0].url == expected


def test_slash_variants_of_a_permalink_are_duplicates(tmp_path: Path) -> None:
    _write(tmp_path, "a.md", "---\ntitle: First\ndate: 2024-01-01\npermalink: /notes/a/\n---\n")
    _write(tmp_path, "b.md", "---\ntitle: Second\ndate: 2024-01-02\npermalink: /notes/a\n---\n")

    notes = load_notes(str(tmp_path))

    assert [(n.title, n.url) for n in notes] == [("First", "/notes/a/")]


def test_offset_late_evening_lands_on_next_utc_day(tmp_path: Path) -> None:
    _write(tmp_path, "x.md", "---\ntitle: X\ndate: '2024-06-28T23:30:00-05:00'\n---\n")

    note = load_notes(str(tmp_path))[0]

    assert note.published_at == datetime(2024, 6, 29, 4, 30, tzinfo=UTC)
    assert format_publish_date(note.published_at) == "Saturday, June 29, 2024"
