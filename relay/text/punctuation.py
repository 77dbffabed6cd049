"""Spoken punctuation normalization for dictated transcripts.

Recognizers configured without punctuation return words such as "comma" or
"full stop" verbatim. :func:`normalize` turns those into symbols and tidies the
whitespace around them, so "no acute findings full stop" becomes
"no acute findings.".
"""

from __future__ import annotations

import re

# Longer phrases come before the shorter forms they contain ("semicolon" before "colon").
_SPOKEN_PUNCTUATION: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(?:full\s+stop|period)\b", re.IGNORECASE), "."),
    (re.compile(r"\bcomma\b", re.IGNORECASE), ","),
    (re.compile(r"\b(?:question\s*mark)\b", re.IGNORECASE), "?"),
    (re.compile(r"\b(?:exclamation\s*(?:mark|point))\b", re.IGNORECASE), "!"),
    (re.compile(r"\bsemi[-\s]?colon\b", re.IGNORECASE), ";"),
    (re.compile(r"\bcolon\b", re.IGNORECASE), ":"),
    (re.compile(r"\bnew\s+paragraph\b", re.IGNORECASE), "\n\n"),
    (re.compile(r"\bnew\s*line\b", re.IGNORECASE), "\n"),
)

_PUNCT = r"[.,!?;:]"

# Whitespace other than newlines; newlines carry dictated line/paragraph breaks.
_SPACE_BEFORE_PUNCT = re.compile(rf"[^\S\n]+({_PUNCT})")
_PUNCT_BEFORE_TEXT = re.compile(rf"({_PUNCT})(?=\S)")
_SPACE_AROUND_NEWLINE = re.compile(r"[^\S\n]*\n[^\S\n]*")
_SPACE_RUN = re.compile(r"[^\S\n]+")


def normalize(text: str | None) -> str | None:
    if not text:
        return text

    for pattern, symbol in _SPOKEN_PUNCTUATION:
        text = pattern.sub(symbol, text)

    text = _SPACE_BEFORE_PUNCT.sub(r"\1", text)
    text = _PUNCT_BEFORE_TEXT.sub(r"\1 ", text)
    text = _SPACE_AROUND_NEWLINE.sub("\n", text)
    text = _SPACE_RUN.sub(" ", text)
    return text.strip()


__all__ = ["normalize"]
