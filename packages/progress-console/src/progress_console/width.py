"""
Terminal column widths of text.

Provides:
- visible_width(): number of terminal columns a string occupies
- split_at_width(): split a string at a column boundary
- truncate_to_width(): cut a string down to a column budget

ANSI escape sequences embedded in the text count as zero columns and are
never split.
"""
from __future__ import annotations

import unicodedata
from typing import NamedTuple

from wcwidth import wcwidth

# ─────────────────────────────────────────────────────────────────────────────
# Width cache
# ─────────────────────────────────────────────────────────────────────────────
_WIDTH_CACHE_SIZE = 512
_width_cache: dict[str, int] = {}

_COMBINING = ("Mn", "Me", "Cf")


def _grapheme_width(segment: str) -> int:
    """Terminal width of a single grapheme cluster."""
    if not segment:
        return 0
    # ZWJ sequences, flags and skin tones render as one wide glyph
    if len(segment) > 1 and any(ord(c) in (0x200D, 0xFE0F) for c in segment):
        return 2
    w = wcwidth(segment[0])
    if w < 0:
        return 0
    return w


def _segment_graphemes(text: str) -> list[str]:
    """Group combining marks with their base character."""
    clusters: list[str] = []
    for ch in text:
        if clusters and (
            unicodedata.category(ch) in _COMBINING or ord(ch) in (0x200D, 0xFE0F, 0x20E3)
        ):
            clusters[-1] += ch
        else:
            clusters.append(ch)
    return clusters


def _ansi_length(s: str, pos: int) -> int:
    """Length of the escape sequence starting at pos, or 0 if there is none."""
    if pos + 1 >= len(s) or s[pos] != "\x1b":
        return 0
    next_ch = s[pos + 1]

    # CSI: ESC [ ... final byte
    if next_ch == "[":
        j = pos + 2
        while j < len(s) and not ("@" <= s[j] <= "~"):
            j += 1
        return j + 1 - pos if j < len(s) else 0

    # OSC / APC: terminated by BEL or ST
    if next_ch in "]_":
        j = pos + 2
        while j < len(s):
            if s[j] == "\x07":
                return j + 1 - pos
            if s[j] == "\x1b" and j + 1 < len(s) and s[j + 1] == "\\":
                return j + 2 - pos
            j += 1
    return 0


def _tokens(text: str) -> list[tuple[str, int]]:
    """Split text into (token, width) pairs; escape sequences have width 0."""
    result: list[tuple[str, int]] = []
    i = 0
    plain_start = 0
    while i < len(text):
        n = _ansi_length(text, i) if text[i] == "\x1b" else 0
        if n:
            for g in _segment_graphemes(text[plain_start:i]):
                result.append((g, _grapheme_width(g)))
            result.append((text[i:i + n], 0))
            i += n
            plain_start = i
        else:
            i += 1
    for g in _segment_graphemes(text[plain_start:]):
        result.append((g, _grapheme_width(g)))
    return result


def visible_width(s: str) -> int:
    """Calculate the visible terminal column width of a string."""
    if not s:
        return 0

    # Fast path: pure printable ASCII
    if s.isascii() and s.isprintable():
        return len(s)

    cached = _width_cache.get(s)
    if cached is not None:
        return cached

    width = sum(w for _, w in _tokens(s))

    if len(_width_cache) >= _WIDTH_CACHE_SIZE:
        _width_cache.pop(next(iter(_width_cache)))
    _width_cache[s] = width
    return width


class WidthSplit(NamedTuple):
    head: str
    tail: str
    head_width: int


def split_at_width(text: str, max_width: int) -> WidthSplit:
    """
    Split text so that ``head`` occupies at most ``max_width`` columns.
    A wide character that would straddle the boundary goes to ``tail``.
    """
    if max_width <= 0:
        return WidthSplit("", text, 0)
    if text.isascii() and text.isprintable():
        head = text[:max_width]
        return WidthSplit(head, text[max_width:], len(head))

    consumed = 0
    width = 0
    for token, w in _tokens(text):
        if width + w > max_width:
            break
        consumed += len(token)
        width += w
    return WidthSplit(text[:consumed], text[consumed:], width)


def truncate_to_width(text: str, max_width: int, ellipsis: str = "") -> str:
    """Truncate text to max_width columns, appending ellipsis if it was cut."""
    if visible_width(text) <= max_width:
        return text
    ellipsis_width = visible_width(ellipsis)
    if ellipsis_width >= max_width:
        return split_at_width(ellipsis, max_width).head
    return split_at_width(text, max_width - ellipsis_width).head + ellipsis
