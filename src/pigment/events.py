"""Logical input events delivered to the active controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class KeyPress:
    """A decoded keystroke.

    ``name`` is a key identifier such as ``"up"``, ``"enter"``,
    ``"ctrl+c"`` or, for printable input, the character itself; ``text``
    holds the printable character (empty for control keys).
    """

    name: str
    text: str = ""

    @property
    def printable(self) -> bool:
        return bool(self.text)


@dataclass(frozen=True)
class Paste:
    text: str


@dataclass(frozen=True)
class MouseEvent:
    """SGR (1006) mouse report; ``row``/``column`` are 1-based screen cells."""

    button: int
    column: int
    row: int
    pressed: bool

    @property
    def wheel_up(self) -> bool:
        return self.button & 0b11000011 == 64

    @property
    def wheel_down(self) -> bool:
        return self.button & 0b11000011 == 65

    @property
    def left_click(self) -> bool:
        return self.pressed and self.button & 0b11000011 == 0


@dataclass(frozen=True)
class CursorPosition:
    """Answer to a ``CSI 6n`` device status report."""

    row: int
    column: int


@dataclass(frozen=True)
class Resize:
    columns: int


InputEvent = Union[KeyPress, Paste, MouseEvent, CursorPosition, Resize]
