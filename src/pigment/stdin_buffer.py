"""Reassembly of raw input chunks into complete sequences.

A single read from the terminal may carry several keystrokes, or only part
of an escape sequence (mouse reports in particular arrive split). The
:class:`InputBuffer` keeps incomplete escape sequences until they finish,
or until a short timeout proves a lone ``ESC`` was the Escape key.
"""

from __future__ import annotations

import asyncio
import re
from typing import Callable, Literal

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

SequenceStatus = Literal["complete", "incomplete", "not-escape"]

_SGR_MOUSE_BODY_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def sequence_status(data: str) -> SequenceStatus:
    """Classify *data* as a complete escape sequence, a prefix of one, or text."""
    if not data.startswith(ESC):
        return "not-escape"
    if len(data) == 1:
        return "incomplete"

    introducer = data[1]
    if introducer == "[":
        if data.startswith("\x1b[M"):
            # X10 mouse: ESC [ M b x y
            return "complete" if len(data) >= 6 else "incomplete"
        if len(data) < 3:
            return "incomplete"
        body = data[2:]
        if not 0x40 <= ord(body[-1]) <= 0x7E:
            return "incomplete"
        if body.startswith("<") and not _SGR_MOUSE_BODY_RE.match(body):
            return "incomplete"
        return "complete"
    if introducer in "]P_":
        # OSC / DCS / APC run until ST (OSC may also end with BEL)
        if data.endswith("\x1b\\") or (introducer == "]" and data.endswith("\x07")):
            return "complete"
        return "incomplete"
    if introducer == "O":
        return "complete" if len(data) >= 3 else "incomplete"
    return "complete"


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences and an unfinished remainder."""
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue

        end = pos + 1
        while end <= len(buffer):
            if sequence_status(buffer[pos:end]) != "incomplete":
                break
            end += 1
        else:
            return sequences, buffer[pos:]

        sequences.append(buffer[pos:end])
        pos = end

    return sequences, ""


class InputBuffer:
    """Feeds complete sequences and bracketed pastes to callbacks."""

    def __init__(
        self,
        on_sequence: Callable[[str], None],
        on_paste: Callable[[str], None] | None = None,
        *,
        timeout: float = 0.01,
    ) -> None:
        self._on_sequence = on_sequence
        self._on_paste = on_paste
        self._timeout = timeout
        self._pending = ""
        self._paste: str | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, data: str) -> None:
        self._cancel_timer()
        data = self._pending + data
        self._pending = ""

        while data:
            if self._paste is not None:
                end = data.find(BRACKETED_PASTE_END)
                if end == -1:
                    self._paste += data
                    return
                pasted, self._paste = self._paste + data[:end], None
                self._emit_paste(pasted)
                data = data[end + len(BRACKETED_PASTE_END):]
                continue

            start = data.find(BRACKETED_PASTE_START)
            head = data if start == -1 else data[:start]
            sequences, remainder = split_sequences(head)
            for sequence in sequences:
                self._on_sequence(sequence)

            if start == -1:
                self._pending = remainder
                break
            self._paste = ""
            data = data[start + len(BRACKETED_PASTE_START):]

        if self._pending:
            self._schedule_flush()

    def flush(self) -> None:
        """Emit whatever is pending as-is (e.g. a lone Escape)."""
        self._cancel_timer()
        pending, self._pending = self._pending, ""
        if pending:
            self._on_sequence(pending)

    def clear(self) -> None:
        self._cancel_timer()
        self._pending = ""
        self._paste = None

    def _emit_paste(self, text: str) -> None:
        if self._on_paste is not None:
            self._on_paste(text)
        else:
            for ch in text:
                self._on_sequence(ch)

    def _schedule_flush(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.flush()
            return
        self._timer = loop.call_later(self._timeout, self.flush)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
