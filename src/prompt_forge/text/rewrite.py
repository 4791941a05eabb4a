# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
String rewriting primitives used by the text pipeline.

Every function here is total: any string in, a string out.
"""

import re

from ..core.constants import WORD_BOUNDARY_RATIO

# Trailing characters that may be dropped before joining; terminal .!? are kept
SOFT_TRAILING = " \t\r\n,;:-"
TERMINAL_PUNCTUATION = ".!?"
_WRAPPING_QUOTES = "\"'`“”‘’"

_COPY_SPACE_RE = re.compile(
    r"(?:\bwith\s+)?"
    r"(?:\b(?:ample|plenty\s+of|generous|lots\s+of|some)\s+)?"
    r"(?:\b(?:left|right|top|bottom)(?:[\s-]side)?\s+)?"
    r"\b(?:copy|negative)[\s-]?space\b"
    r"(?:\s+(?:on|at|to)\s+the\s+(?:left|right|top|bottom)(?:\s+side)?)?"
    r"(?:\s+for\s+(?:text|typography))?",
    re.IGNORECASE,
)

_BACKGROUND_RE = re.compile(
    r"\b(?:transparent|alpha|clear|no|checkered|checkerboard)(?:\s+png)?\s+background\b",
    re.IGNORECASE,
)


def first_non_empty_line(text: str) -> str:
    """First non-blank line, stripped of whitespace and wrapping quotes."""
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line.strip(_WRAPPING_QUOTES).strip()
    return ""


def normalize_punctuation(text: str) -> str:
    """
    Collapse whitespace and repair commas left behind by phrase removal.

    Colons and semicolons are left alone so "::" weights and "16:9" survive.
    """
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"\s+([,.!?])", r"\1", text)
    text = re.sub(r",(?:\s*,)+", ",", text)
    text = re.sub(r",\s*([.!?])", r"\1", text)
    return text.strip(" ,")


def strip_copy_space(text: str) -> str:
    """
    Remove copy-space / negative-space phrasing, including direction qualifiers.

    Text without such a phrase is returned unchanged.
    """
    text, removed = _COPY_SPACE_RE.subn("", text)
    if not removed:
        return text
    return normalize_punctuation(text)


def mentions_transparent_background(text: str) -> bool:
    return _BACKGROUND_RE.search(text) is not None


def rewrite_background(text: str) -> str:
    """Replace transparent/alpha/clear/no/checkered background with white background."""
    return _BACKGROUND_RE.sub("white background", text)


def _join_for(base: str) -> str:
    return " " if base.endswith(tuple(TERMINAL_PUNCTUATION)) else ", "


def add_suffix_safely(text: str, phrase: str, max_chars: int) -> str:
    """
    Append phrase to text without exceeding max_chars.

    If the phrase is already present (case-insensitive) and the text fits,
    the text is returned unchanged. Otherwise trailing soft punctuation is
    trimmed, the text is joined with a space after terminal punctuation or
    ", " otherwise, and the existing text is truncated until everything fits.
    Applying it twice yields the same result as applying it once.

    Args:
        text: Current text
        phrase: Phrase to append
        max_chars: Hard length limit of the result

    Returns:
        Text ending with phrase (or phrase alone, cut to max_chars, when
        nothing else fits)
    """
    if max_chars <= 0:
        return ""

    if phrase.lower() in text.lower():
        if len(text) <= max_chars:
            return text
        text = re.sub(re.escape(phrase), "", text, flags=re.IGNORECASE)
        text = normalize_punctuation(text)

    base = text.rstrip(SOFT_TRAILING)
    if not base:
        return phrase[:max_chars]

    join = _join_for(base)
    while len(base) + len(join) + len(phrase) > max_chars:
        room = max_chars - len(join) - len(phrase)
        if room <= 0:
            return phrase[:max_chars]
        base = base[:room].rstrip(SOFT_TRAILING)
        if not base:
            return phrase[:max_chars]
        join = _join_for(base)

    return f"{base}{join}{phrase}"


def clamp_to_max_chars(text: str, max_chars: int) -> str:
    """
    Hard length limit that prefers word boundaries.

    Cuts at max_chars, then moves back to the last space when it lies past
    WORD_BOUNDARY_RATIO of the budget, and strips trailing punctuation.
    """
    if max_chars <= 0:
        return ""
    if len(text) <= max_chars:
        return text

    cut = text[:max_chars]
    last_space = cut.rfind(" ")
    if last_space > WORD_BOUNDARY_RATIO * max_chars:
        cut = cut[:last_space]
    return cut.rstrip(SOFT_TRAILING + TERMINAL_PUNCTUATION)
