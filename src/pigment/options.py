"""Session options and the environment checks that derive their defaults."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence, TextIO

from pigment.components import DEFAULT_THEME, Theme
from pigment.terminal import ProcessTerminal, Terminal

_FALSY = {"", "0", "false", "no", "off"}


def is_ci(env: Mapping[str, str]) -> bool:
    return env.get("CI", "").strip().lower() not in _FALSY


def is_interactive(stdout: TextIO, env: Mapping[str, str]) -> bool:
    """A real terminal that is neither ``TERM=dumb`` nor a CI runner."""
    try:
        tty = stdout.isatty()
    except (AttributeError, ValueError):
        tty = False
    return tty and env.get("TERM") != "dumb" and not is_ci(env)


@dataclass
class PromptOptions:
    """Configuration of one ``show()`` session.

    ``None`` fields are filled from the process in :meth:`resolved`.
    """

    name: str = ""
    description: str | None = None
    version: str | None = None
    args: Sequence[str] | None = None
    stdin: TextIO | None = None
    stdout: TextIO | None = None
    stderr: TextIO | None = None
    env: Mapping[str, str] | None = None
    interactive: bool | None = None
    mouse: bool = False
    terminal: Terminal | None = None
    theme: Theme | None = None
    on_cancel: Callable[[], Any] | None = None
    on_exit: Callable[[int], Any] | None = None

    def resolved(self) -> PromptOptions:
        env = self.env if self.env is not None else os.environ
        stdout = self.stdout if self.stdout is not None else sys.stdout
        interactive = self.interactive
        if interactive is None:
            interactive = is_interactive(stdout, env)
        theme = self.theme
        if theme is None:
            theme = Theme.plain() if "NO_COLOR" in env or not interactive else DEFAULT_THEME

        return PromptOptions(
            name=self.name or os.path.basename(sys.argv[0]) or "prompt",
            description=self.description,
            version=self.version,
            args=list(self.args) if self.args is not None else sys.argv[1:],
            stdin=self.stdin if self.stdin is not None else sys.stdin,
            stdout=stdout,
            stderr=self.stderr if self.stderr is not None else sys.stderr,
            env=env,
            interactive=interactive,
            mouse=self.mouse,
            terminal=self.terminal,
            theme=theme,
            on_cancel=self.on_cancel,
            on_exit=self.on_exit if self.on_exit is not None else sys.exit,
        )

    def open_terminal(self) -> Terminal:
        if self.terminal is not None:
            return self.terminal
        return ProcessTerminal(self.stdin, self.stdout)
