"""Tests for publication rendering."""

import datetime

import pytest

from pubpage.entry import BibEntry
from pubpage.render import (
    doi_url,
    filter_recent,
    format_entry,
    render_document,
    render_entries,
    sort_by_year,
)


def make_entry(key: str, year: str | None = None, **fields: str) -> BibEntry:
    if year is not None:
        fields["year"] = year
    fields.setdefault("title", f"Title {key}")
    return BibEntry(entry_type="article", key=key, fields=fields)


DOE_2023 = BibEntry(
    entry_type="article",
    key="doe2023",
    fields={
        "author": "Doe, J. and Roe, K.",
        "title": "A Study",
        "year": "2023",
        "journal": "Journal X",
        "doi": "10.1/xyz",
    },
)


def test_render_example_entry():
    fragment = render_entries([DOE_2023], current_year=2024, window=3)

    assert "Doe, J., Roe, K." in fragment
    assert "<i>A Study</i>" in fragment
    assert "Journal X, 2023" in fragment
    assert '<a href="https://doi.org/10.1/xyz">' in fragment
    assert fragment.count('<div class="entry">') == 1


def test_old_entry_is_excluded():
    old = BibEntry("article", "doe2015", {**DOE_2023.fields, "year": "2015"})

    assert render_entries([old], current_year=2024, window=3) == ""


def test_entries_render_newest_first():
    fragment = render_entries(
        [make_entry("older", "2022"), make_entry("newer", "2024")], current_year=2024
    )

    assert fragment.index("Title newer") < fragment.index("Title older")


def test_empty_input_gives_empty_fragment():
    assert render_entries([], current_year=2024) == ""


def test_empty_message_placeholder():
    fragment = render_entries([], current_year=2024, empty_message="No recent publications")

    assert fragment == '<p class="empty">No recent publications</p>\n'


@pytest.mark.parametrize(
    ("year", "included"),
    [("2024", True), ("2021", True), ("2020", False), ("2025", True)],
)
def test_window_boundary(year: str, included: bool):
    """An entry is kept iff year >= current_year - window."""
    kept = filter_recent([make_entry("k", year)], current_year=2024, window=3)

    assert (len(kept) == 1) is included


def test_undated_entries_excluded_under_window():
    entries = [make_entry("dated", "2024"), make_entry("undated"), make_entry("odd", "n.d.")]

    kept = filter_recent(entries, current_year=2024, window=3)

    assert [entry.key for entry in kept] == ["dated"]


def test_no_window_keeps_everything():
    entries = [make_entry("ancient", "1990"), make_entry("undated"), make_entry("new", "2024")]

    kept = filter_recent(entries, current_year=2024, window=None)

    assert [entry.key for entry in kept] == ["ancient", "undated", "new"]


def test_negative_window_rejected():
    with pytest.raises(ValueError, match="must not be negative"):
        filter_recent([], current_year=2024, window=-1)


def test_sort_is_stable_and_idempotent():
    entries = [
        make_entry("a", "2022"),
        make_entry("undated-1"),
        make_entry("b", "2024"),
        make_entry("c", "2022"),
        make_entry("undated-2"),
        make_entry("d", "2024"),
    ]

    once = sort_by_year(entries)
    twice = sort_by_year(once)

    assert [entry.key for entry in once] == ["b", "d", "a", "c", "undated-1", "undated-2"]
    assert twice == once


def test_format_entry_omits_missing_parts():
    entry = BibEntry("misc", "bare", {"title": "Only Title", "year": "2023"})

    block = format_entry(entry)

    assert "<i>Only Title</i>," in block
    assert "2023." in block
    assert "<a " not in block
    assert "None" not in block


def test_format_entry_venue_fallback():
    entry = BibEntry("misc", "k", {"title": "T", "year": "2023", "howpublished": "arXiv"})

    assert "arXiv, 2023." in format_entry(entry)


def test_format_entry_escapes_html():
    entry = BibEntry(
        "article",
        "k",
        {"author": "A & B", "title": "Why <script> Fails", "journal": "J", "year": "2023"},
    )

    block = format_entry(entry)

    assert "A &amp; B" in block
    assert "Why &lt;script&gt; Fails" in block
    assert "<script>" not in block


def test_doi_url_accepts_existing_links():
    assert doi_url("10.1/xyz") == "https://doi.org/10.1/xyz"
    assert doi_url("https://doi.org/10.1/xyz") == "https://doi.org/10.1/xyz"
    assert doi_url(" http://dx.doi.org/10.1/xyz ") == "https://doi.org/10.1/xyz"


def test_default_current_year_is_today():
    this_year = str(datetime.date.today().year)

    fragment = render_entries([make_entry("now", this_year)])

    assert "Title now" in fragment


def test_render_document_wraps_fragment():
    page = render_document('<div class="entry"></div>\n', title="Papers & Talks")

    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Papers &amp; Talks</title>" in page
    assert '<div id="bibtexEntries">\n<div class="entry"></div>\n' in page
