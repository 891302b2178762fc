"""Decoding of complete terminal input sequences into logical events.

Input is expected one sequence at a time, as split by
:class:`pigment.stdin_buffer.InputBuffer`.
"""

from __future__ import annotations

import re

from pigment.events import CursorPosition, InputEvent, KeyPress, MouseEvent

# Legacy (xterm / VT) escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[Z": "shift+tab",
}

NAVIGATION_KEYS = frozenset(
    {"up", "down", "left", "right", "home", "end", "pageUp", "pageDown"}
)

_SGR_MOUSE_RE = re.compile(r"^\x1b\[<(\d+);(\d+);(\d+)([Mm])$")
_CURSOR_REPORT_RE = re.compile(r"^\x1b\[(\d+);(\d+)R$")
# Kitty CSI-u: ESC [ codepoint ; modifier u
_CSI_U_RE = re.compile(r"^\x1b\[(\d+)(?:;(\d+))?u$")


def parse_key(data: str) -> str | None:
    """Return the key identifier for *data*, or ``None`` when unrecognised."""
    if not data:
        return None

    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    csi_u = _CSI_U_RE.match(data)
    if csi_u:
        codepoint = int(csi_u.group(1))
        modifier = int(csi_u.group(2) or "1") - 1
        if codepoint == 99 and modifier & 4:
            return "ctrl+c"
        return parse_key(chr(codepoint)) if codepoint < 0x110000 else None

    if data == "\x1b":
        return "escape"
    if data in ("\r", "\n"):
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data in ("\x7f", "\x08"):
        return "backspace"

    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    if len(data) == 2 and data[0] == "\x1b" and data[1].isprintable():
        return "alt+" + data[1].lower()

    if len(data) == 1 and data.isprintable():
        return data

    return None


def decode(data: str) -> InputEvent | None:
    """Turn one complete input sequence into an event.

    Mouse reports and cursor position reports become their own events;
    everything else is a :class:`KeyPress`. Unrecognised sequences yield
    ``None`` and are dropped by the caller.
    """
    mouse = _SGR_MOUSE_RE.match(data)
    if mouse:
        return MouseEvent(
            button=int(mouse.group(1)),
            column=int(mouse.group(2)),
            row=int(mouse.group(3)),
            pressed=mouse.group(4) == "M",
        )

    report = _CURSOR_REPORT_RE.match(data)
    if report:
        return CursorPosition(row=int(report.group(1)), column=int(report.group(2)))

    name = parse_key(data)
    if name is None:
        # Multi-character text typed faster than the buffer split it
        if len(data) > 1 and not data.startswith("\x1b") and data.isprintable():
            return KeyPress(name=data, text=data)
        return None

    text = name if len(name) == 1 else (" " if name == "space" else "")
    return KeyPress(name=name, text=text)
