"""Fetch, parse and render pipeline for the publication list."""

import datetime
import logging
from pathlib import Path

from .config import SiteConfig
from .exceptions import RenderError
from .fetch import read_bibtex
from .parser import parse_bibtex, parse_bibtex_strict
from .render import DEFAULT_WINDOW, render_document, render_entries

logger = logging.getLogger(__name__)


def build_publication_list(
    text: str,
    *,
    today: datetime.date | None = None,
    window: int | None = DEFAULT_WINDOW,
    strict: bool = False,
    empty_message: str | None = None,
) -> str:
    """Turn raw BibTeX text into the HTML fragment of recent publications.

    Args:
        text: BibTeX source
        today: Reference date for the recency window (default: today)
        window: Years to look back, or ``None`` for every entry
        strict: Parse with bibtexparser instead of the tolerant parser
        empty_message: Placeholder text when no entry qualifies

    Returns:
        HTML fragment, empty when nothing qualifies and no placeholder is set
    """
    if today is None:
        today = datetime.date.today()

    parse = parse_bibtex_strict if strict else parse_bibtex
    entries = parse(text)
    logger.info(f"Parsed {len(entries)} bibliography entries")

    return render_entries(
        entries, current_year=today.year, window=window, empty_message=empty_message
    )


def publish(config: SiteConfig, *, today: datetime.date | None = None) -> str:
    """Read the configured source, render it, and write the result.

    Nothing is written when the source cannot be read.

    Args:
        config: Site configuration
        today: Reference date for the recency window (default: today)

    Returns:
        The rendered fragment, or the full page when ``config.document`` is set

    Raises:
        SourceFetchError: If the BibTeX source is unavailable
        RenderError: If the output file cannot be written
    """
    text = read_bibtex(config.source, timeout=config.timeout)

    html = build_publication_list(
        text,
        today=today,
        window=config.window,
        strict=config.strict,
        empty_message=config.empty_message,
    )
    if config.document:
        html = render_document(html, title=config.title)

    if config.output is not None:
        write_output(config.output, html)

    return html


def write_output(output_path: Path, html: str) -> None:
    """Write rendered HTML, creating parent directories as needed.

    Raises:
        RenderError: If the file cannot be written
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(html)
    except OSError as e:
        raise RenderError(f"Failed to write {output_path}: {e}") from e

    logger.info(f"✓ Saved to: {output_path}")
