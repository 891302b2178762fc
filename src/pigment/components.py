"""Frame formatting for each question kind.

Every function here is pure: given the current state it returns the text
of the next frame. Colours come from a :class:`Theme` so tests (and
``NO_COLOR`` sessions) can render plain text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, Sequence

from pigment.questions import Choice
from pigment.render import CURSOR_MARKER

Status = Literal["pending", "done", "cancelled"]
Validation = bool | str

SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

_ICONS: dict[Status, str] = {"pending": "?", "done": "✔", "cancelled": "◼"}

# Lines before the first choice of a list frame: the border and the header
HEADER_LINES = 2


def _sgr(start: int, end: int) -> Callable[[str], str]:
    return lambda text: f"\x1b[{start}m{text}\x1b[{end}m"


def _identity(text: str) -> str:
    return text


@dataclass(frozen=True)
class Theme:
    strong: Callable[[str], str] = _sgr(1, 22)
    pending: Callable[[str], str] = _sgr(36, 39)
    done: Callable[[str], str] = _sgr(32, 39)
    cancelled: Callable[[str], str] = _sgr(90, 39)
    border: Callable[[str], str] = _sgr(90, 39)
    hint: Callable[[str], str] = _sgr(90, 39)
    error: Callable[[str], str] = _sgr(31, 39)

    @classmethod
    def plain(cls) -> Theme:
        return cls(
            strong=_identity,
            pending=_identity,
            done=_identity,
            cancelled=_identity,
            border=_identity,
            hint=_identity,
            error=_identity,
        )

    def accent(self, status: Status) -> Callable[[str], str]:
        return {"pending": self.pending, "done": self.done, "cancelled": self.cancelled}[status]


DEFAULT_THEME = Theme()


def question(message: str, status: Status, theme: Theme = DEFAULT_THEME) -> str:
    accent = theme.accent(status)
    return f"{theme.border('│')}\n{accent(_ICONS[status])} {theme.strong(message)}"


def error(validation: Validation | None, theme: Theme = DEFAULT_THEME) -> str:
    """The validation hint line, or ``""`` when the value is valid."""
    if validation is True or validation is None:
        return ""
    hint = "Invalid input" if validation is False else validation
    return theme.error(f"✖ {hint}")


def _answer_line(answer: str, theme: Theme) -> str:
    return f"{theme.border('│')} {theme.hint(answer)}"


def _with_error(lines: list[str], validation: Validation | None, theme: Theme) -> str:
    hint = error(validation, theme)
    if hint:
        lines.append(f"{theme.border('└')} {hint}")
    return "\n".join(lines)


def text(
    message: str,
    status: Status,
    *,
    value: str = "",
    cursor: int | None = None,
    placeholder: str | None = None,
    validation: Validation | None = True,
    theme: Theme = DEFAULT_THEME,
) -> str:
    if status != "pending":
        return f"{question(message, status, theme)}\n{_answer_line(value, theme)}"

    if placeholder is not None and not value:
        field = CURSOR_MARKER + theme.hint(placeholder)
    else:
        position = len(value) if cursor is None else cursor
        field = value[:position] + CURSOR_MARKER + value[position:]

    lines = [question(message, status, theme), f"{theme.border('│')} {field}"]
    if not error(validation, theme):
        lines.append(theme.border("└"))
    return _with_error(lines, validation, theme)


def _choice_lines(
    choice: Choice,
    icon: str,
    active: bool,
    status: Status,
    theme: Theme,
) -> list[str]:
    if active:
        lines = [theme.accent(status)(f"› {icon} {choice.label}")]
    else:
        lines = [f"  {icon} {choice.label}"]
    if choice.description is not None:
        lines.append(f"    {theme.hint(choice.description)}")
    return lines


def choice_offsets(choices: Sequence[Choice]) -> list[int]:
    """Logical line index of each choice within a list frame."""
    offsets = []
    line = HEADER_LINES
    for choice in choices:
        offsets.append(line)
        line += 2 if choice.description is not None else 1
    return offsets


def select(
    message: str,
    choices: Sequence[Choice],
    index: int,
    status: Status,
    *,
    validation: Validation | None = True,
    theme: Theme = DEFAULT_THEME,
) -> str:
    if status == "done":
        chosen = choices[index].label if 0 <= index < len(choices) else ""
        return f"{question(message, status, theme)}\n{_answer_line(chosen, theme)}"

    lines = [question(message, status, theme)]
    for i, choice in enumerate(choices):
        lines.extend(_choice_lines(choice, "●" if i == index else "○", i == index, status, theme))
    return _with_error(lines, validation, theme)


def multiselect(
    message: str,
    choices: Sequence[Choice],
    index: int,
    selected: Sequence[Any],
    status: Status,
    *,
    validation: Validation | None = True,
    theme: Theme = DEFAULT_THEME,
) -> str:
    if status == "done":
        chosen = ", ".join(c.label for c in choices if c.value in selected)
        return f"{question(message, status, theme)}\n{_answer_line(chosen, theme)}"

    lines = [question(message, status, theme)]
    for i, choice in enumerate(choices):
        icon = "◼" if choice.value in selected else "◻"
        lines.extend(_choice_lines(choice, icon, i == index, status, theme))
    return _with_error(lines, validation, theme)


def confirm(
    message: str,
    choices: Sequence[Choice],
    index: int,
    status: Status,
    *,
    validation: Validation | None = True,
    theme: Theme = DEFAULT_THEME,
) -> str:
    if status == "done":
        chosen = choices[index].label if 0 <= index < len(choices) else ""
        return f"{question(message, status, theme)}\n{_answer_line(chosen, theme)}"

    accent = theme.accent(status)
    options = theme.border(" / ").join(
        accent(choice.label) if i == index else choice.label
        for i, choice in enumerate(choices)
    )
    lines = [question(message, status, theme), f"{theme.border('│')} {options}"]
    return _with_error(lines, validation, theme)


def spinner(
    message: str,
    status: Status,
    *,
    counter: int = 0,
    answer: Any = None,
    theme: Theme = DEFAULT_THEME,
) -> str:
    if status == "pending":
        frame = SPINNER_FRAMES[counter % len(SPINNER_FRAMES)]
        return f"{theme.border('│')}\n{theme.pending(frame)} {theme.strong(message)}"

    header = question(message, status, theme)
    if status == "done" and answer is not None:
        shown = answer if isinstance(answer, str) else "…"
        return f"{header}\n{_answer_line(shown, theme)}"
    return header
