"""BibTeX parsing into :class:`~pubpage.entry.BibEntry` records."""

from __future__ import annotations

import logging

import bibtexparser
from bibtexparser.library import Library

from .entry import BibEntry
from .exceptions import InvalidDataError
from .latex import decode_latex as _decode_latex

logger = logging.getLogger(__name__)

# Block types that carry no bibliographic reference
NON_ENTRY_TYPES = frozenset({"comment", "preamble", "string"})


def parse_bibtex(text: str, *, decode_latex: bool = True) -> list[BibEntry]:
    """Parse BibTeX text into entries, tolerating malformed input.

    Each ``@`` at the start of a line opens a new entry; text before the first
    one, and after an entry's closing delimiter, is ignored. Entries may be
    delimited with braces or parentheses. Header and field problems never raise:
    a malformed entry yields a partial record and a bare ``@`` is skipped.

    Args:
        text: Full content of a ``.bib`` file
        decode_latex: Convert LaTeX accents and escapes in values to Unicode

    Returns:
        Entries in source order
    """
    entries: list[BibEntry] = []

    for segment in _split_segments(text):
        entry = _parse_segment(segment, decode_latex=decode_latex)
        if entry is not None:
            entries.append(entry)

    logger.debug(f"Parsed {len(entries)} entries")
    return entries


def parse_bibtex_strict(text: str, *, decode_latex: bool = True) -> list[BibEntry]:
    """Parse BibTeX text with bibtexparser v2.

    Blocks that bibtexparser rejects (syntax errors, duplicate keys) are logged
    and skipped. Values are cleaned the same way as in :func:`parse_bibtex`.

    Raises:
        InvalidDataError: If bibtexparser fails outright
    """
    library = _parse_library(text)

    for block in library.failed_blocks:
        logger.warning(
            "Skipping unparseable block at line %s: %s",
            block.start_line,
            block.error,
        )

    entries: list[BibEntry] = []
    for bib_entry in library.entries:
        if bib_entry.entry_type.lower() in NON_ENTRY_TYPES:
            continue

        fields: dict[str, str] = {}
        for bib_field in bib_entry.fields:
            fields[bib_field.key.strip().lower()] = clean_value(
                str(bib_field.value), decode_latex=decode_latex
            )

        entries.append(
            BibEntry(
                entry_type=bib_entry.entry_type.strip(),
                key=bib_entry.key.strip(),
                fields=fields,
            )
        )

    logger.debug(f"Parsed {len(entries)} entries with bibtexparser")
    return entries


def find_problems(text: str) -> list[str]:
    """Report blocks bibtexparser cannot read and entries the renderer cannot use fully.

    Returns:
        Human-readable problem descriptions, empty when the file is clean
    """
    problems: list[str] = []

    library = _parse_library(text)
    for block in library.failed_blocks:
        problems.append(f"Unparseable block at line {block.start_line}: {block.error}")

    for position, entry in enumerate(parse_bibtex(text), start=1):
        label = entry.key or f"entry #{position} (@{entry.entry_type})"
        if not entry.key:
            problems.append(f"{label}: missing citation key")
        if not entry.get("title"):
            problems.append(f"{label}: missing title")
        if entry.year is None:
            problems.append(f"{label}: missing or non-numeric year")

    return problems


def clean_value(raw: str, *, decode_latex: bool = True) -> str:
    """Strip BibTeX decoration from a field value.

    Removes a trailing comma, enclosing double quotes and all braces, and
    collapses whitespace, so ``{Deep Learning},`` becomes ``Deep Learning``.
    Quotes inside a braced value are literal and kept.
    """
    value = raw.strip()
    if value.endswith(","):
        value = value[:-1].rstrip()

    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]

    if decode_latex:
        value = _decode_latex(value)

    value = value.replace("{", "").replace("}", "")
    return " ".join(value.split())


def _parse_library(text: str) -> Library:
    try:
        return bibtexparser.parse_string(text)
    except Exception as exc:  # pragma: no cover - library raises many custom exceptions
        raise InvalidDataError(f"bibtexparser failed: {exc}") from exc


def _split_segments(text: str) -> list[str]:
    """Split text into the raw content following each entry marker.

    A marker is an ``@`` that is the first non-blank character of a line, so
    addresses in comments or values never open an entry.
    """
    segments: list[str] = []
    current: list[str] | None = None
    line_start = True

    for char in text:
        if char == "@" and line_start:
            if current is not None:
                segments.append("".join(current))
            current = []
            line_start = False
            continue

        if char == "\n":
            line_start = True
        elif not char.isspace():
            line_start = False

        if current is not None:
            current.append(char)

    if current is not None:
        segments.append("".join(current))

    return segments


def _parse_segment(segment: str, *, decode_latex: bool) -> BibEntry | None:
    stripped = segment.strip()
    if not stripped:
        logger.debug("Skipping empty entry marker")
        return None

    first_line, _, body = stripped.partition("\n")
    openers = [pos for pos in (first_line.find("{"), first_line.find("(")) if pos != -1]
    if not openers:
        # Malformed header: no key, but later lines may still hold fields
        entry_type = first_line.strip()
        chunks = _split_assignments(body)
        key = ""
        logger.debug(f"Entry header without opening delimiter: {entry_type!r}")
    else:
        opener = segment.find(first_line) + min(openers)
        entry_type = segment[:opener].strip()
        chunks = _split_assignments(_entry_body(segment, opener))
        key = ""
        if chunks and "=" not in chunks[0]:
            key = chunks.pop(0).strip().rstrip(",").strip()

    if entry_type.lower() in NON_ENTRY_TYPES:
        logger.debug(f"Skipping @{entry_type} block")
        return None

    fields: dict[str, str] = {}
    for chunk in chunks:
        if "=" not in chunk:
            continue
        name, _, raw_value = chunk.partition("=")
        name = name.strip().lower()
        if not name:
            continue
        fields[name] = clean_value(raw_value, decode_latex=decode_latex)

    return BibEntry(entry_type=entry_type, key=key, fields=fields)


def _entry_body(segment: str, opener: int) -> str:
    """Return the text between ``opener`` and its closing delimiter (or the end).

    Entries open with ``{`` or ``(``; a closing ``)`` only counts outside braces.
    """
    closer = "}" if segment[opener] == "{" else ")"
    depth = 0
    previous = ""
    for index in range(opener + 1, len(segment)):
        char = segment[index]
        if previous != "\\":
            if char == "{":
                depth += 1
            elif char == "}":
                if depth == 0 and closer == "}":
                    return segment[opener + 1 : index]
                depth = max(depth - 1, 0)
            elif char == ")" and closer == ")" and depth == 0:
                return segment[opener + 1 : index]
        previous = char
    return segment[opener + 1 :]


def _split_assignments(body: str) -> list[str]:
    """Split an entry body at top-level commas and newlines, dropping blank chunks."""
    chunks: list[str] = []
    current: list[str] = []
    depth = 0
    in_quotes = False
    previous = ""

    for char in body:
        escaped = previous == "\\"
        previous = char

        if not escaped:
            if char == "{":
                depth += 1
            elif char == "}" and depth > 0:
                depth -= 1
            elif char == '"' and depth == 0:
                in_quotes = not in_quotes

        if char in ",\n" and depth == 0 and not in_quotes:
            chunks.append("".join(current))
            current = []
            continue

        current.append(char)

    chunks.append("".join(current))
    return [chunk for chunk in chunks if chunk.strip()]
