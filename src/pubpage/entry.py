"""Bibliographic entry record shared by the parser and the renderer."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# Field lookup keys read by the renderer; anything else is carried but unused
AUTHOR_FIELD = "author"
TITLE_FIELD = "title"
YEAR_FIELD = "year"
DOI_FIELD = "doi"

# Venue candidates in priority order
VENUE_FIELDS = ("journal", "booktitle", "publisher", "howpublished")

AUTHOR_SEPARATOR = " and "

_YEAR_PATTERN = re.compile(r"^\d+$")


@dataclass(frozen=True, slots=True)
class BibEntry:
    """One bibliographic reference parsed from a BibTeX block.

    Attributes:
        entry_type: Tag following the ``@`` marker (e.g. ``article``)
        key: Citation key, empty when the header was malformed
        fields: Read-only mapping of lower-cased field names to cleaned values
    """

    entry_type: str
    key: str
    fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, name: str, default: str = "") -> str:
        """Return a field value by (case-insensitive) name."""
        return self.fields.get(name.lower(), default)

    @property
    def year(self) -> int | None:
        """Numeric publication year, or ``None`` when missing or non-numeric."""
        value = self.get(YEAR_FIELD).strip()
        if not _YEAR_PATTERN.match(value):
            return None
        return int(value)

    @property
    def venue(self) -> str:
        for name in VENUE_FIELDS:
            value = self.get(name).strip()
            if value:
                return value
        return ""

    @property
    def authors(self) -> list[str]:
        value = self.get(AUTHOR_FIELD)
        return [name.strip() for name in value.split(AUTHOR_SEPARATOR) if name.strip()]
