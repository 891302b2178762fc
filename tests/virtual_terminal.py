"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

Output is captured in a buffer for assertions. Input is scripted up front
with :meth:`VirtualTerminal.queue_input`; once a controller starts the
terminal, the queued chunks are delivered one per event-loop iteration
until the terminal is stopped. Chunks left over when one controller stops
are delivered to the next one that starts.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Callable, Union

ScriptItem = Union[str, Callable[[], None]]


class VirtualTerminal:
    """In-memory terminal that records all writes for test inspection."""

    def __init__(self, columns: int = 80, rows: int = 24) -> None:
        self._columns = columns
        self._rows = rows
        self._buffer: list[str] = []
        self._script: deque[ScriptItem] = deque()
        self._input_handler: Callable[[str], None] | None = None
        self._resize_handler: Callable[[], None] | None = None
        self._generation = 0
        self.cursor_visible = True
        self.mouse_tracking = False
        self.start_count = 0
        self.stop_count = 0
        self.position_requests = 0

    # -- Terminal protocol: properties --------------------------------------

    @property
    def columns(self) -> int:
        return self._columns

    @columns.setter
    def columns(self, value: int) -> None:
        self._columns = value

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def started(self) -> bool:
        return self._input_handler is not None

    # -- Terminal protocol: lifecycle ---------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        if self.started:
            raise RuntimeError("Terminal is already started")
        self._input_handler = on_input
        self._resize_handler = on_resize
        self.start_count += 1
        self._generation += 1
        generation = self._generation
        asyncio.get_running_loop().call_soon(self._feed_next, generation)

    def stop(self) -> None:
        if self.started:
            self.stop_count += 1
        self._input_handler = None
        self._resize_handler = None
        self.mouse_tracking = False

    # -- Terminal protocol: output ------------------------------------------

    def write(self, data: str) -> None:
        self._buffer.append(data)

    def hide_cursor(self) -> None:
        self.cursor_visible = False
        self.write("\x1b[?25l")

    def show_cursor(self) -> None:
        self.cursor_visible = True
        self.write("\x1b[?25h")

    def set_mouse_tracking(self, enabled: bool) -> None:
        self.mouse_tracking = enabled

    def request_cursor_position(self) -> None:
        self.position_requests += 1

    # -- Test helpers -------------------------------------------------------

    @property
    def output(self) -> str:
        """Everything written to the terminal as a single string."""
        return "".join(self._buffer)

    @property
    def pending_input(self) -> int:
        return len(self._script)

    def clear_buffer(self) -> None:
        self._buffer.clear()

    def queue_input(self, *chunks: str) -> None:
        """Script raw input chunks, delivered in order once started."""
        self._script.extend(chunks)

    def queue_resize(self, columns: int) -> None:
        """Script a resize to *columns* between input chunks."""
        self._script.append(lambda: self.simulate_resize(columns))

    def simulate_input(self, data: str) -> None:
        if self._input_handler is None:
            raise RuntimeError("No input handler registered -- call start() first")
        self._input_handler(data)

    def simulate_resize(self, columns: int) -> None:
        self._columns = columns
        if self._resize_handler is not None:
            self._resize_handler()

    def _feed_next(self, generation: int) -> None:
        if generation != self._generation or not self.started or not self._script:
            return
        item = self._script.popleft()
        if callable(item):
            item()
        else:
            self.simulate_input(item)
        asyncio.get_running_loop().call_soon(self._feed_next, generation)
