"""Shared plumbing for interactive controllers.

An :class:`InputChannel` holds the terminal in raw mode for exactly one
controller and turns its input into a queue of :mod:`pigment.events`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pigment.components import DEFAULT_THEME, Theme
from pigment.errors import PromptCancelledError
from pigment.events import InputEvent, Paste, Resize
from pigment.keys import decode
from pigment.stdin_buffer import InputBuffer
from pigment.terminal import Terminal

logger = logging.getLogger(__name__)


@dataclass
class ControllerContext:
    """What a controller needs from the session driving it."""

    terminal: Terminal
    theme: Theme = DEFAULT_THEME
    on_cancel: Callable[[], Any] | None = None
    mouse: bool = False


class InputChannel:
    """Single-consumer event queue bound to a terminal while open.

    Use as an async context manager; leaving the block always restores the
    terminal mode, whether the controller finished, failed or was cancelled.
    """

    def __init__(self, terminal: Terminal, *, mouse: bool = False) -> None:
        self._terminal = terminal
        self._mouse = mouse
        self._queue: asyncio.Queue[InputEvent] = asyncio.Queue()
        self._buffer = InputBuffer(self._on_sequence, self._on_paste)
        self._open = False

    async def __aenter__(self) -> InputChannel:
        self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def open(self) -> None:
        self._terminal.start(self._buffer.feed, self._on_resize)
        self._open = True
        if self._mouse:
            try:
                self._terminal.set_mouse_tracking(True)
            except BaseException:
                self.close()
                raise
        logger.debug("input channel opened")

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        self._buffer.clear()
        try:
            if self._mouse:
                self._terminal.set_mouse_tracking(False)
        finally:
            self._terminal.stop()
        logger.debug("input channel closed")

    async def next(self) -> InputEvent:
        return await self._queue.get()

    def _on_sequence(self, sequence: str) -> None:
        event = decode(sequence)
        if event is None:
            logger.debug("dropping unrecognised input %r", sequence)
            return
        self._queue.put_nowait(event)

    def _on_paste(self, text: str) -> None:
        self._queue.put_nowait(Paste(text))

    def _on_resize(self) -> None:
        self._queue.put_nowait(Resize(self._terminal.columns))


def cancel(context: ControllerContext) -> PromptCancelledError:
    """Run the session's cancel callback and return the error to raise.

    Call only after the terminal has been released.
    """
    if context.on_cancel is not None:
        context.on_cancel()
    return PromptCancelledError()
