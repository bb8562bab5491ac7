"""Tests for the BibEntry record."""

from dataclasses import FrozenInstanceError

import pytest

from pubpage.entry import BibEntry


def test_year_parsing():
    assert BibEntry("article", "a", {"year": "2023"}).year == 2023
    assert BibEntry("article", "a", {"year": " 2023 "}).year == 2023
    assert BibEntry("article", "a", {"year": "2023a"}).year is None
    assert BibEntry("article", "a", {"year": "in press"}).year is None
    assert BibEntry("article", "a", {}).year is None


def test_venue_priority():
    """The first non-empty venue field wins."""
    entry = BibEntry(
        "inproceedings",
        "a",
        {"journal": "", "booktitle": "Proc. X", "publisher": "ACM"},
    )
    assert entry.venue == "Proc. X"

    assert BibEntry("misc", "b", {"howpublished": "Online"}).venue == "Online"
    assert BibEntry("misc", "c", {"note": "unused"}).venue == ""


def test_authors_split_on_and():
    entry = BibEntry("article", "a", {"author": "Doe, J. and Roe, K. and Poe, E."})

    assert entry.authors == ["Doe, J.", "Roe, K.", "Poe, E."]
    assert BibEntry("article", "b", {}).authors == []


def test_get_is_case_insensitive_with_default():
    entry = BibEntry("article", "a", {"title": "A Study"})

    assert entry.get("Title") == "A Study"
    assert entry.get("doi") == ""
    assert entry.get("doi", "n/a") == "n/a"


def test_entry_is_immutable():
    source = {"title": "A Study"}
    entry = BibEntry("article", "a", source)

    with pytest.raises(FrozenInstanceError):
        entry.key = "b"  # type: ignore[misc]

    with pytest.raises(TypeError):
        entry.fields["title"] = "Changed"  # type: ignore[index]

    source["title"] = "Changed"
    assert entry.get("title") == "A Study"
