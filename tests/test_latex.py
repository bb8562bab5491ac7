"""Tests for LaTeX decoding of field values."""

from __future__ import annotations

import pytest

from pubpage.latex import decode_latex


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (r"Jos\'e Mart{\'i}", "José Mart{í}"),
        (r"Fran{\c{c}}ois and G\"odel", "Fran{ç}ois and Gödel"),
        (r"Br\"{\i}gge and Moli\`ere", "Brïgge and Molière"),
        (r"Erd\H{o}s and Dvo\v r\'ak", "Erdős and Dvořák"),
        (r"G\ae{}teborg Press", "Gæteborg Press"),
        (r"Stra{\ss}e", "Stra{ß}e"),
        (r"Science \& Technology", "Science & Technology"),
        (r"\emph{Deep} Learning", "{Deep} Learning"),
        ("Pages 1--2 --- or so", "Pages 1–2 — or so"),
    ],
)
def test_decode_latex(raw: str, expected: str) -> None:
    assert decode_latex(raw) == expected


def test_decode_latex_leaves_plain_text_alone() -> None:
    assert decode_latex("Deep Learning") == "Deep Learning"


def test_decode_latex_leaves_unknown_commands() -> None:
    """Letter accents need a separator, so longer commands are not mistaken for them."""
    assert decode_latex(r"\cite{x} and \url{y}") == r"\cite{x} and \url{y}"
