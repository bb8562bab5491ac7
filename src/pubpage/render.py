"""HTML rendering of publication entries: recency filter, ordering and formatting."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from html import escape

from .entry import DOI_FIELD, TITLE_FIELD, YEAR_FIELD, BibEntry

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 3
DOI_RESOLVER = "https://doi.org/"

_DOI_PREFIXES = (
    "https://doi.org/",
    "http://doi.org/",
    "https://dx.doi.org/",
    "http://dx.doi.org/",
)


def filter_recent(
    entries: Iterable[BibEntry], *, current_year: int, window: int | None = DEFAULT_WINDOW
) -> list[BibEntry]:
    """Keep entries published within ``window`` years of ``current_year``.

    An entry is kept when its numeric year is ``>= current_year - window``.
    Entries without a numeric year are dropped whenever a window applies.
    With ``window=None`` nothing is filtered, undated entries included.

    Raises:
        ValueError: If ``window`` is negative
    """
    if window is None:
        return list(entries)

    if window < 0:
        raise ValueError(f"Recency window must not be negative: {window}")

    threshold = current_year - window
    kept: list[BibEntry] = []
    for entry in entries:
        year = entry.year
        if year is None:
            logger.debug(f"Dropping {entry.key or '<no key>'}: no numeric year")
            continue
        if year >= threshold:
            kept.append(entry)

    logger.debug(f"Kept {len(kept)} entries from {threshold} onwards")
    return kept


def sort_by_year(entries: Iterable[BibEntry]) -> list[BibEntry]:
    """Order entries newest first; undated entries last, ties keep source order."""
    return sorted(entries, key=lambda entry: (entry.year is None, -(entry.year or 0)))


def doi_url(doi: str) -> str:
    """Build a resolver link, accepting bare DOIs or ones already given as URLs."""
    doi = doi.strip()
    for prefix in _DOI_PREFIXES:
        if doi.lower().startswith(prefix):
            doi = doi[len(prefix) :]
            break
    return DOI_RESOLVER + doi


def format_entry(entry: BibEntry) -> str:
    """Format one entry as an HTML block.

    The block holds the author list, the italic title, ``venue, year`` and a DOI
    link when the entry has one. Missing parts are left out.
    """
    lines: list[str] = []

    authors = ", ".join(entry.authors)
    if authors:
        lines.append(f"{escape(authors)},")

    title = entry.get(TITLE_FIELD)
    if title:
        lines.append(f"<i>{escape(title)}</i>,")

    venue_year = ", ".join(part for part in (entry.venue, entry.get(YEAR_FIELD).strip()) if part)
    if venue_year:
        lines.append(f"{escape(venue_year)}.")

    doi = entry.get(DOI_FIELD).strip()
    if doi:
        url = doi_url(doi)
        lines.append(f'<a href="{escape(url)}">{escape(url)}</a>')

    body = "\n    ".join(lines)
    return f'<div class="entry">\n  <p>\n    {body}\n  </p>\n</div>\n'


def render_entries(
    entries: Iterable[BibEntry],
    *,
    current_year: int | None = None,
    window: int | None = DEFAULT_WINDOW,
    empty_message: str | None = None,
) -> str:
    """Render the recent entries as one HTML fragment, newest first.

    Args:
        entries: Parsed entries in source order
        current_year: Reference year for the recency window (default: this year)
        window: Number of years to look back, or ``None`` to show everything
        empty_message: Text shown when nothing survives the filter; by default
            an empty fragment is returned instead

    Returns:
        Concatenated entry blocks
    """
    if current_year is None:
        current_year = datetime.date.today().year

    recent = sort_by_year(filter_recent(entries, current_year=current_year, window=window))

    if not recent:
        logger.info("No publications to render")
        if empty_message:
            return f'<p class="empty">{escape(empty_message)}</p>\n'
        return ""

    logger.info(f"Rendering {len(recent)} publications")
    return "".join(format_entry(entry) for entry in recent)


def render_document(fragment: str, *, title: str = "Publications") -> str:
    """Wrap a rendered fragment in a standalone HTML page."""
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <head>\n"
        '    <meta charset="utf-8">\n'
        f"    <title>{escape(title)}</title>\n"
        "  </head>\n"
        "  <body>\n"
        '    <div id="bibtexEntries">\n'
        f"{fragment}"
        "    </div>\n"
        "  </body>\n"
        "</html>\n"
    )
