"""Question declarations.

Each question kind is its own frozen dataclass; the union ``Question`` is
closed and consumers dispatch over it with ``match``/``case``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    ClassVar,
    Literal,
    Sequence,
    Union,
)

QuestionKind = Literal["text", "select", "multiselect", "confirm", "task"]

# ``True`` accepts, a string is a user-facing message, ``False`` is a
# generic rejection.
Validator = Callable[[Any], Union[bool, str]]
SkipRule = Union[bool, Callable[[], Union[bool, Awaitable[bool]]]]


@dataclass(frozen=True)
class Choice:
    value: Any
    title: str | None = None
    description: str | None = None
    skip: SkipRule = False

    @property
    def label(self) -> str:
        return self.title if self.title is not None else str(self.value)


def _as_choices(choices: Sequence[Choice | str]) -> tuple[Choice, ...]:
    return tuple(c if isinstance(c, Choice) else Choice(value=c) for c in choices)


@dataclass(frozen=True, kw_only=True)
class _Question:
    message: str
    description: str = ""
    alias: str | None = None
    validate: Validator | None = None
    default: Any = None
    skip: SkipRule = False
    required: bool = False


@dataclass(frozen=True, kw_only=True)
class TextQuestion(_Question):
    kind: ClassVar[QuestionKind] = "text"


@dataclass(frozen=True, kw_only=True)
class SelectQuestion(_Question):
    kind: ClassVar[QuestionKind] = "select"

    choices: Sequence[Choice | str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "choices", _as_choices(self.choices))


@dataclass(frozen=True, kw_only=True)
class MultiSelectQuestion(_Question):
    kind: ClassVar[QuestionKind] = "multiselect"

    choices: Sequence[Choice | str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "choices", _as_choices(self.choices))


@dataclass(frozen=True, kw_only=True)
class ConfirmQuestion(_Question):
    kind: ClassVar[QuestionKind] = "confirm"


@dataclass(frozen=True)
class TaskProgress:
    """Intermediate notification yielded by a task generator."""

    message: str


@dataclass(frozen=True)
class TaskResult:
    """Final item of a task generator; ``value`` becomes the answer."""

    value: Any
    message: str | None = None


TaskFactory = Callable[[], AsyncIterator[Union[TaskProgress, TaskResult]]]


@dataclass(frozen=True, kw_only=True)
class TaskQuestion:
    kind: ClassVar[QuestionKind] = "task"

    message: str
    task: TaskFactory
    description: str = ""
    alias: str | None = None


Question = Union[
    TextQuestion,
    SelectQuestion,
    MultiSelectQuestion,
    ConfirmQuestion,
    TaskQuestion,
]

QuestionFactory = Callable[[], Union[Question, None, Awaitable[Union[Question, None]]]]


@dataclass(frozen=True)
class Conditional:
    """A question decided at answer time, typically from earlier answers.

    ``prompt`` returns the concrete question, or ``None`` when the question
    does not apply.
    """

    prompt: QuestionFactory
    description: str = ""
    alias: str | None = None


QuestionItem = Union[Question, Conditional, QuestionFactory, None]

CONFIRM_CHOICES = (Choice(value=True, title="Yes"), Choice(value=False, title="No"))


def kind_of(item: QuestionItem) -> QuestionKind | None:
    """Return the kind of a static question, ``None`` for deferred ones."""
    match item:
        case TextQuestion() | SelectQuestion() | MultiSelectQuestion() | ConfirmQuestion() | TaskQuestion():
            return item.kind
        case _:
            return None


def alias_of(item: QuestionItem) -> str | None:
    return getattr(item, "alias", None)


def description_of(item: QuestionItem) -> str:
    return getattr(item, "description", "") or ""


def run_validator(validate: Validator | None, value: Any) -> bool | str:
    """Apply *validate* and normalise its result.

    A non-empty string is returned as the message to show; any other falsy
    result becomes ``False``; everything else accepts.
    """
    if validate is None:
        return True
    result = validate(value)
    if isinstance(result, str):
        return result or False
    return True if result else False
