"""Repainting of a block of text in place.

A :class:`Section` remembers the last frame it painted. Each update erases
exactly the rows that frame occupies at the *current* terminal width and
paints the next frame, so a resize between frames is accounted for.

A frame may embed :data:`CURSOR_MARKER` once; the marker is stripped and
the hardware cursor is left at its position (used by text input).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pigment.terminal import (
    CURSOR_COLUMN_FMT,
    CURSOR_DOWN_FMT,
    CURSOR_LEFT,
    CURSOR_UP,
    CURSOR_UP_FMT,
    ERASE_LINE,
)
from pigment.utils import count_rows, visible_width, wrapped_height

if TYPE_CHECKING:
    from pigment.terminal import Terminal

CURSOR_MARKER = "\x1b_pg:c\x07"


def erase_lines(count: int) -> str:
    """Erase *count* rows upward from the cursor row, ending at column 1."""
    if count <= 0:
        return ""
    parts = []
    for i in range(count):
        parts.append(ERASE_LINE)
        if i < count - 1:
            parts.append(CURSOR_UP)
    parts.append(CURSOR_LEFT)
    return "".join(parts)


class Section:
    """A repaintable region ending at the current cursor row."""

    def __init__(self, terminal: Terminal, text: str) -> None:
        self._terminal = terminal
        self._previous = ""
        # Wrapped rows between the parked cursor and the last painted row
        self._rows_below_cursor = 0
        self._paint(text)

    @property
    def text(self) -> str:
        return self._previous

    @property
    def rows(self) -> int:
        return count_rows(self._previous, self._terminal.columns)

    def update(self, text: str) -> None:
        self._terminal.write(self._erase_sequence() + self._paint_sequence(text))

    def rerender(self) -> None:
        """Repaint the last frame, e.g. after a resize."""
        self.update(self._previous)

    def finish(self) -> None:
        """Move below the frame so following output starts on a fresh line."""
        out = ""
        if self._rows_below_cursor:
            out += CURSOR_DOWN_FMT.format(self._rows_below_cursor)
            self._rows_below_cursor = 0
        self._terminal.write(out + "\n")

    def _paint(self, text: str) -> None:
        self._terminal.write(self._paint_sequence(text))

    def _erase_sequence(self) -> str:
        out = ""
        if self._rows_below_cursor:
            out += CURSOR_DOWN_FMT.format(self._rows_below_cursor)
        return out + erase_lines(self.rows)

    def _paint_sequence(self, text: str) -> str:
        marker = text.find(CURSOR_MARKER)
        plain = text.replace(CURSOR_MARKER, "")
        self._previous = plain
        self._rows_below_cursor = 0
        if marker == -1:
            return plain

        columns = self._terminal.columns
        before = text[:marker]
        line_start = before.rfind("\n") + 1
        column = visible_width(before[line_start:])
        line_end = plain.find("\n", marker)
        cursor_line = plain[line_start:] if line_end == -1 else plain[line_start:line_end]
        after = "" if line_end == -1 else plain[line_end + 1:]

        cursor_row = column // columns if columns > 0 else 0
        below = wrapped_height(cursor_line, columns) - 1 - cursor_row
        if line_end != -1:
            below += count_rows(after, columns)
        below = max(below, 0)

        out = plain
        if below:
            out += CURSOR_UP_FMT.format(below)
        out += CURSOR_COLUMN_FMT.format((column % columns if columns > 0 else column) + 1)
        self._rows_below_cursor = below
        return out


def render(terminal: Terminal, text: str) -> Section:
    """Paint *text* and return the section that repaints it."""
    return Section(terminal, text)
