"""Display-width helpers for painted frames.

Widths are measured per grapheme cluster with ANSI escape sequences
removed, so a frame's wrapped height can be recomputed for any terminal
width.
"""

from __future__ import annotations

import inspect
import math
import re
import unicodedata
from typing import Any, Callable, TypeVar, Union

import grapheme
import wcwidth as _wcwidth

T = TypeVar("T")

# CSI (any final byte), OSC terminated by BEL or ST, APC terminated by BEL or ST
_STRIP_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"
)

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def strip_ansi(text: str) -> str:
    return _STRIP_RE.sub("", text)


def _grapheme_width(g: str) -> int:
    """Terminal cell width of one grapheme cluster."""
    first = ord(g[0])
    if len(g) == 1:
        if first < 0x20 or 0x7F <= first <= 0x9F:
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # Emoji presentation, ZWJ sequences, skin tones and flags
    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2
    if first >= 0x1F000 or 0x2600 <= first <= 0x27BF:
        return 2

    category = unicodedata.category(g[0])
    if category.startswith("M") or category == "Cf":
        return 0
    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Number of terminal columns *text* occupies on a single line."""
    stripped = strip_ansi(text).replace("\t", "   ")
    if not stripped:
        return 0
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    width = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[stripped] = width
    return width


def wrapped_height(line: str, columns: int) -> int:
    """Rows one logical line occupies once the terminal soft-wraps it."""
    if columns <= 0:
        return 1
    return max(1, math.ceil(visible_width(line) / columns))


def count_rows(text: str, columns: int) -> int:
    """Rows a multi-line *text* occupies at *columns* width."""
    return sum(wrapped_height(line, columns) for line in text.split("\n"))


async def resolve_value(value: Union[T, Callable[[], Any]]) -> Any:
    """Return *value*, calling it if callable and awaiting the result if needed."""
    result = value() if callable(value) else value
    if inspect.isawaitable(result):
        result = await result
    return result

