"""Decoding of LaTeX accent commands and escapes found in BibTeX values."""

from __future__ import annotations

import re
import unicodedata

_COMBINING_MARKS = {
    "'": "\u0301",  # acute
    "`": "\u0300",  # grave
    '"': "\u0308",  # diaeresis
    "^": "\u0302",  # circumflex
    "~": "\u0303",  # tilde
    "=": "\u0304",  # macron
    ".": "\u0307",  # dot above
    "d": "\u0323",  # dot below
    "b": "\u0331",  # macron below
    "H": "\u030b",  # double acute
    "c": "\u0327",  # cedilla
    "k": "\u0328",  # ogonek
    "r": "\u030a",  # ring above
    "u": "\u0306",  # breve
    "v": "\u030c",  # caron
}

_SYMBOL_MARKS = re.escape("".join(sorted(k for k in _COMBINING_MARKS if not k.isalpha())))
_LETTER_MARKS = "".join(sorted(k for k in _COMBINING_MARKS if k.isalpha()))

# Letter commands (\c, \v, ...) need a blank or brace before the base letter,
# otherwise \cite would read as a cedilla on "i"
_ACCENT_PATTERN = re.compile(
    rf"\\(?:([{_SYMBOL_MARKS}])|([{_LETTER_MARKS}])(?=[\s{{]))"
    r"\s*(?:\{(\\?[A-Za-z])\}|(\\[ij](?![A-Za-z])|[A-Za-z]))"
)

_DOTLESS = {"\\i": "i", "\\j": "j"}

_LETTER_MACROS = {
    "\\ae": "æ",
    "\\AE": "Æ",
    "\\oe": "œ",
    "\\OE": "Œ",
    "\\aa": "å",
    "\\AA": "Å",
    "\\ss": "ß",
    "\\o": "ø",
    "\\O": "Ø",
    "\\l": "ł",
    "\\L": "Ł",
}

_LETTER_MACRO_PATTERN = re.compile(
    r"\\("
    + "|".join(sorted((macro[1:] for macro in _LETTER_MACROS), key=len, reverse=True))
    + r")(?![A-Za-z])(?:\{\})?"
)

# Font commands are dropped; their braced argument survives brace stripping
_FONT_COMMAND_PATTERN = re.compile(r"\\(?:emph|textit|textbf|textsc|textrm|texttt|textsf)\s*(?=\{)")

_ESCAPES = {
    "\\&": "&",
    "\\%": "%",
    "\\_": "_",
    "\\$": "$",
    "\\#": "#",
}


def decode_latex(value: str) -> str:
    """Replace LaTeX accents, letter macros and escaped specials with Unicode.

    Braces are left in place for the caller to strip. Unknown commands pass
    through unchanged.

    Args:
        value: Raw field value, e.g. ``Fran{\\c{c}}ois G\\"odel``

    Returns:
        Decoded value, e.g. ``Fran{ç}ois Gödel``
    """
    if "\\" not in value and "--" not in value:
        return value

    decoded = _ACCENT_PATTERN.sub(_compose_accent, value)
    decoded = _LETTER_MACRO_PATTERN.sub(lambda m: _LETTER_MACROS["\\" + m.group(1)], decoded)
    decoded = _FONT_COMMAND_PATTERN.sub("", decoded)
    for escape, char in _ESCAPES.items():
        decoded = decoded.replace(escape, char)
    return decoded.replace("---", "\u2014").replace("--", "\u2013")


def _compose_accent(match: re.Match[str]) -> str:
    combining = _COMBINING_MARKS[match.group(1) or match.group(2)]
    target = match.group(3) or match.group(4)
    base = _DOTLESS.get(target, target)
    if len(base) != 1:
        return match.group(0)

    return unicodedata.normalize("NFC", base + combining)
