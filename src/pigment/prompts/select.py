"""Interactive select, multiselect and confirm questions."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from pigment import components
from pigment.components import Status, Validation, choice_offsets
from pigment.errors import ConfigurationError
from pigment.events import CursorPosition, KeyPress, MouseEvent, Paste, Resize
from pigment.prompts.base import ControllerContext, InputChannel, cancel
from pigment.questions import (
    CONFIRM_CHOICES,
    Choice,
    ConfirmQuestion,
    MultiSelectQuestion,
    SelectQuestion,
    run_validator,
)
from pigment.render import Section, render
from pigment.utils import wrapped_height

logger = logging.getLogger(__name__)

ListQuestion = SelectQuestion | MultiSelectQuestion | ConfirmQuestion


class SelectController:
    """Cursor and selection state for one list question.

    ``choices`` are the active choices (those whose ``skip`` rule did not
    hold); ``default`` is the already-resolved default value.
    """

    def __init__(
        self,
        question: ListQuestion,
        context: ControllerContext,
        *,
        choices: Sequence[Choice] = (),
        default: Any = None,
    ) -> None:
        self.question = question
        self.context = context
        self.multiple = isinstance(question, MultiSelectQuestion)
        self.choices: tuple[Choice, ...] = (
            CONFIRM_CHOICES if isinstance(question, ConfirmQuestion) else tuple(choices)
        )
        self.index = 0
        self.selected: list[Any] = []
        self.validation: Validation = True
        self._section: Section | None = None
        self._bottom_row: int | None = None

        if self.multiple:
            if isinstance(default, (list, tuple)):
                self.selected = [c.value for c in self.choices if c.value in default]
        elif default is not None:
            for i, choice in enumerate(self.choices):
                if choice.value == default:
                    self.index = i
                    break

    # -- state --------------------------------------------------------------

    @property
    def value(self) -> Any:
        if self.multiple:
            return [c.value for c in self.choices if c.value in self.selected]
        return self.choices[self.index].value

    def frame(self, status: Status) -> str:
        theme = self.context.theme
        message = self.question.message
        match self.question:
            case ConfirmQuestion():
                return components.confirm(
                    message, self.choices, self.index, status, validation=self.validation, theme=theme
                )
            case MultiSelectQuestion():
                return components.multiselect(
                    message,
                    self.choices,
                    self.index,
                    self.selected,
                    status,
                    validation=self.validation,
                    theme=theme,
                )
            case SelectQuestion():
                return components.select(
                    message, self.choices, self.index, status, validation=self.validation, theme=theme
                )

    def move(self, delta: int) -> None:
        """Move the cursor; presses past either end are no-ops."""
        self.validation = True
        self.index = min(max(self.index + delta, 0), len(self.choices) - 1)

    def toggle(self, index: int | None = None) -> None:
        if not self.multiple:
            return
        self.validation = True
        value = self.choices[self.index if index is None else index].value
        if value in self.selected:
            self.selected.remove(value)
        else:
            self.selected.append(value)

    def toggle_all(self) -> None:
        if not self.multiple:
            return
        self.validation = True
        if len(self.selected) == len(self.choices):
            self.selected = []
        else:
            self.selected = [c.value for c in self.choices]

    def submit(self) -> bool:
        """Validate the current value; ``True`` when the question is answered."""
        self.validation = run_validator(self.question.validate, self.value)
        return self.validation is True

    def choice_at_row(self, row: int) -> int | None:
        """Index of the choice painted on screen *row*, if known."""
        if self._bottom_row is None or self._section is None or isinstance(self.question, ConfirmQuestion):
            return None
        offset = self._bottom_row - row
        if offset < 0:
            return None

        columns = self.context.terminal.columns
        lines = self._section.text.split("\n")
        line = len(lines) - 1
        while line >= 0:
            height = wrapped_height(lines[line], columns)
            if offset < height:
                break
            offset -= height
            line -= 1
        else:
            return None

        starts = choice_offsets(self.choices)
        for i, start in enumerate(starts):
            end = starts[i + 1] if i + 1 < len(starts) else start + (1 if self.choices[i].description is None else 2)
            if start <= line < end:
                return i
        return None

    # -- loop ---------------------------------------------------------------

    async def run(self) -> Any:
        if not self.multiple and len(self.choices) == 1:
            logger.debug("single choice for %r, answering without prompting", self.question.message)
            return self.choices[0].value
        if not self.choices:
            raise ConfigurationError(f"No choices available for {self.question.message!r}")

        terminal = self.context.terminal
        cancelled = False
        terminal.hide_cursor()
        try:
            async with InputChannel(terminal, mouse=self.context.mouse) as channel:
                self._section = render(terminal, self.frame("pending"))
                self._request_position()
                while True:
                    event = await channel.next()
                    outcome = self._handle(event)
                    if outcome == "cancel":
                        cancelled = True
                        self._paint("cancelled")
                        break
                    if outcome == "done":
                        self._paint("done")
                        break
                    if outcome == "repaint":
                        self._paint("pending")
                        self._request_position()
                    elif outcome == "rerender":
                        self._section.rerender()
                        self._request_position()
                self._section.finish()
        finally:
            terminal.show_cursor()

        if cancelled:
            raise cancel(self.context)
        return self.value

    def _handle(self, event: object) -> str | None:
        match event:
            case KeyPress(name="ctrl+c"):
                return "cancel"
            case KeyPress(name="up" | "left"):
                self.move(-1)
                return "repaint"
            case KeyPress(name="down" | "right"):
                self.move(1)
                return "repaint"
            case KeyPress(name="space") if self.multiple:
                self.toggle()
                return "repaint"
            case KeyPress(name="a") if self.multiple:
                self.toggle_all()
                return "repaint"
            case KeyPress(name="y" | "Y" | "n" | "N" as key) if isinstance(self.question, ConfirmQuestion):
                self.validation = True
                self.index = 0 if key.lower() == "y" else 1
                return "repaint"
            case KeyPress(name="enter"):
                return "done" if self.submit() else "repaint"
            case MouseEvent() as mouse:
                return self._handle_mouse(mouse)
            case CursorPosition(row=row):
                self._bottom_row = row
                return None
            case Resize():
                return "rerender"
            case Paste():
                return None
        return None

    def _handle_mouse(self, mouse: MouseEvent) -> str | None:
        if mouse.wheel_up:
            self.move(-1)
            return "repaint"
        if mouse.wheel_down:
            self.move(1)
            return "repaint"
        if mouse.left_click:
            index = self.choice_at_row(mouse.row)
            if index is None:
                return None
            self.validation = True
            self.index = index
            self.toggle(index)
            return "repaint"
        return None

    def _paint(self, status: Status) -> None:
        assert self._section is not None
        self._section.update(self.frame(status))

    def _request_position(self) -> None:
        if self.context.mouse:
            self.context.terminal.request_cursor_position()


async def select(
    question: ListQuestion,
    context: ControllerContext,
    *,
    choices: Sequence[Choice] = (),
    default: Any = None,
) -> Any:
    """Prompt for a select, multiselect or confirm question and return its value."""
    return await SelectController(question, context, choices=choices, default=default).run()
