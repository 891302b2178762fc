"""Interactive free-text question with a single-line editor."""

from __future__ import annotations

import logging
import re
from typing import Any

import grapheme

from pigment import components
from pigment.components import Status, Validation
from pigment.events import KeyPress, Paste, Resize
from pigment.keys import NAVIGATION_KEYS
from pigment.prompts.base import ControllerContext, InputChannel, cancel
from pigment.questions import TextQuestion, run_validator
from pigment.render import Section, render

logger = logging.getLogger(__name__)

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")


class LineEditor:
    """Value and cursor of a single-line input.

    The cursor is a string index that always sits on a grapheme boundary.
    """

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.cursor = len(value)

    def set(self, value: str) -> None:
        self.value = value
        self.cursor = len(value)

    def insert(self, text: str) -> None:
        text = _CONTROL_RE.sub("", text)
        self.value = self.value[: self.cursor] + text + self.value[self.cursor :]
        self.cursor += len(text)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        size = _last_grapheme_length(self.value[: self.cursor])
        self.value = self.value[: self.cursor - size] + self.value[self.cursor :]
        self.cursor -= size

    def delete(self) -> None:
        if self.cursor >= len(self.value):
            return
        size = _first_grapheme_length(self.value[self.cursor :])
        self.value = self.value[: self.cursor] + self.value[self.cursor + size :]

    def left(self) -> None:
        if self.cursor > 0:
            self.cursor -= _last_grapheme_length(self.value[: self.cursor])

    def right(self) -> None:
        if self.cursor < len(self.value):
            self.cursor += _first_grapheme_length(self.value[self.cursor :])

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.value)

    def delete_to_start(self) -> None:
        self.value = self.value[self.cursor :]
        self.cursor = 0

    def delete_to_end(self) -> None:
        self.value = self.value[: self.cursor]

    def delete_word(self) -> None:
        """Delete backwards over trailing whitespace, then one word."""
        before = self.value[: self.cursor]
        stripped = before.rstrip()
        start = len(stripped)
        while start > 0 and not stripped[start - 1].isspace():
            start -= 1
        self.value = before[:start] + self.value[self.cursor :]
        self.cursor = start

    def handle(self, key: KeyPress) -> bool:
        """Apply an editing key; ``False`` when the key is not an edit."""
        match key.name:
            case "backspace":
                self.backspace()
            case "delete" | "ctrl+d":
                self.delete()
            case "left" | "ctrl+b":
                self.left()
            case "right" | "ctrl+f":
                self.right()
            case "home" | "ctrl+a":
                self.home()
            case "end" | "ctrl+e":
                self.end()
            case "ctrl+u":
                self.delete_to_start()
            case "ctrl+k":
                self.delete_to_end()
            case "ctrl+w":
                self.delete_word()
            case _ if key.printable:
                self.insert(key.text)
            case _:
                return False
        return True


def _last_grapheme_length(text: str) -> int:
    last = None
    for last in grapheme.graphemes(text):
        pass
    return len(last) if last else 1


def _first_grapheme_length(text: str) -> int:
    first = next(grapheme.graphemes(text), None)
    return len(first) if first else 1


class TextController:
    """Line editor plus prefill and validation state for a text question.

    A ``default`` is shown dimmed as a prefill. Navigation keys leave it in
    place; any other key clears it. Submitting while it is untouched
    answers with the default.
    """

    def __init__(self, question: TextQuestion, context: ControllerContext, *, default: Any = None) -> None:
        self.question = question
        self.context = context
        self.prefill = None if default is None else str(default)
        self.pristine = self.prefill is not None
        self.editor = LineEditor()
        self.validation: Validation = True
        self._section: Section | None = None

    @property
    def value(self) -> str:
        if self.pristine and self.prefill is not None:
            return self.prefill
        return self.editor.value

    def frame(self, status: Status) -> str:
        return components.text(
            self.question.message,
            status,
            value=self.editor.value if status == "pending" else self.value,
            cursor=self.editor.cursor,
            placeholder=self.prefill if self.pristine else None,
            validation=self.validation,
            theme=self.context.theme,
        )

    def handle(self, event: object) -> str | None:
        match event:
            case KeyPress(name="ctrl+c"):
                return "cancel"
            case KeyPress(name="enter"):
                return "done" if self.submit() else "repaint"
            case KeyPress(name=name) if self.pristine and name in NAVIGATION_KEYS:
                return None
            case KeyPress() | Paste():
                return self._edit(event)
            case Resize():
                return "rerender"
        return None

    def submit(self) -> bool:
        value = self.value
        self.validation = run_validator(self.question.validate, value)
        if self.validation is True:
            return True
        # Keep the rejected answer in the field for correction
        self.pristine = False
        self.editor.set(value)
        return False

    def _edit(self, event: KeyPress | Paste) -> str | None:
        was_pristine = self.pristine
        self.pristine = False
        if isinstance(event, Paste):
            self.editor.insert(event.text)
        elif not self.editor.handle(event):
            self.pristine = was_pristine
            return None
        self.validation = True
        return "repaint"

    async def run(self) -> str:
        terminal = self.context.terminal
        cancelled = False
        terminal.show_cursor()
        async with InputChannel(terminal) as channel:
            self._section = render(terminal, self.frame("pending"))
            while True:
                outcome = self.handle(await channel.next())
                if outcome == "cancel":
                    cancelled = True
                    self._section.update(self.frame("cancelled"))
                    break
                if outcome == "done":
                    self._section.update(self.frame("done"))
                    break
                if outcome in ("repaint", "rerender"):
                    self._section.update(self.frame("pending"))
            self._section.finish()

        if cancelled:
            raise cancel(self.context)
        logger.debug("text answer for %r submitted", self.question.message)
        return self.value


async def text(question: TextQuestion, context: ControllerContext, *, default: Any = None) -> str:
    """Prompt for a free-text answer and return it."""
    return await TextController(question, context, default=default).run()
