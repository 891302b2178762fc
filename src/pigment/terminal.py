"""Terminal abstraction for raw-mode input and frame output.

Provides a ``Terminal`` protocol and ``ProcessTerminal``, the concrete
implementation over real stdin/stdout file descriptors. Raw mode is held
only between :meth:`ProcessTerminal.start` and :meth:`ProcessTerminal.stop`.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import signal
import sys
import termios
from typing import Callable, Protocol, TextIO

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
ERASE_LINE = "\x1b[2K"
CURSOR_UP = "\x1b[1A"
CURSOR_LEFT = "\x1b[G"
CURSOR_UP_FMT = "\x1b[{}A"
CURSOR_DOWN_FMT = "\x1b[{}B"
CURSOR_COLUMN_FMT = "\x1b[{}G"
REQUEST_CURSOR_POSITION = "\x1b[6n"

# Button press tracking + SGR extended coordinates
MOUSE_ENABLE = "\x1b[?1000h\x1b[?1006h"
MOUSE_DISABLE = "\x1b[?1000l\x1b[?1006l"


class Terminal(Protocol):
    """Interface the renderer and controllers drive."""

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def set_mouse_tracking(self, enabled: bool) -> None: ...

    def request_cursor_position(self) -> None: ...


class ProcessTerminal:
    """Terminal backed by real ``stdin``/``stdout`` streams.

    Input is read with an event-loop reader on the stdin descriptor;
    resize arrives through a ``SIGWINCH`` handler installed on the loop.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        *,
        write_log: str | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._write_log_path = write_log if write_log is not None else os.environ.get("PIGMENT_WRITE_LOG", "")
        self._original_termios: list | None = None
        self._input_handler: Callable[[str], None] | None = None
        self._resize_handler: Callable[[], None] | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._loop: asyncio.AbstractEventLoop | None = None
        self._reader_active = False
        self._sigwinch_installed = False
        self._mouse = False

    @property
    def started(self) -> bool:
        return self._input_handler is not None

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- start / stop -------------------------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        """Enter raw mode and begin delivering input to *on_input*."""
        if self.started:
            raise RuntimeError("Terminal is already started")

        fd = self._stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        termios.tcsetattr(fd, termios.TCSANOW, _raw_attributes(self._original_termios))
        logger.debug("raw mode enabled on fd %d", fd)

        self._input_handler = on_input
        self._resize_handler = on_resize
        try:
            self._loop = asyncio.get_running_loop()
            self._loop.add_reader(fd, self._on_readable)
            self._reader_active = True
        except BaseException:
            self.stop()
            raise

        try:
            self._loop.add_signal_handler(signal.SIGWINCH, self._on_sigwinch)
            self._sigwinch_installed = True
        except (NotImplementedError, RuntimeError, ValueError):
            # Not the main thread, or no SIGWINCH on this platform
            self._sigwinch_installed = False

    def stop(self) -> None:
        """Restore the saved terminal mode and detach every handler.

        Safe to call more than once.
        """
        if self._mouse:
            self.set_mouse_tracking(False)

        fd = self._stdin.fileno()
        if self._loop is not None:
            if self._reader_active:
                self._loop.remove_reader(fd)
                self._reader_active = False
            if self._sigwinch_installed:
                self._loop.remove_signal_handler(signal.SIGWINCH)
                self._sigwinch_installed = False
        self._loop = None

        if self._original_termios is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None
            logger.debug("raw mode disabled on fd %d", fd)

        self._input_handler = None
        self._resize_handler = None
        self._decoder.reset()

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        try:
            self._stdout.write(data)
            self._stdout.flush()
        except OSError:
            pass

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                pass

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)

    def set_mouse_tracking(self, enabled: bool) -> None:
        self._mouse = enabled
        self.write(MOUSE_ENABLE if enabled else MOUSE_DISABLE)

    def request_cursor_position(self) -> None:
        self.write(REQUEST_CURSOR_POSITION)

    # -- private ------------------------------------------------------------

    def _on_readable(self) -> None:
        try:
            raw = os.read(self._stdin.fileno(), 4096)
        except OSError:
            return
        if not raw:
            return
        data = self._decoder.decode(raw)
        if data and self._input_handler is not None:
            self._input_handler(data)

    def _on_sigwinch(self) -> None:
        if self._resize_handler is not None:
            self._resize_handler()


def _raw_attributes(attrs: list) -> list:
    """Raw input attributes derived from *attrs*.

    Input is unbuffered and unechoed and Ctrl-C arrives as a byte instead of
    SIGINT. Output post-processing stays on so ``\\n`` still returns the
    carriage.
    """
    raw = list(attrs)
    raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    raw[2] |= termios.CS8
    raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(raw[6])
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    raw[6] = cc
    return raw
