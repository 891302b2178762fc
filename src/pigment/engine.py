"""Answer resolution: command-line values, skip rules, defaults and prompting.

:func:`create` validates a question set once; every :meth:`Prompt.show`
then runs a :class:`Session` that settles the questions strictly in
declaration order, so later callbacks can read earlier answers.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Mapping, Sequence

from pigment.args import (
    ArgumentResolver,
    ArgumentValue,
    ParsedArguments,
    PositionalArgument,
    flag_for,
    parse_bool,
    parse_positionals,
)
from pigment.context import AnswerContext
from pigment.errors import ArgumentError, ConfigurationError, PromptCancelledError, ValidationError
from pigment.options import PromptOptions
from pigment.prompts import ControllerContext, drive_task, select, spinner, text
from pigment.questions import (
    Choice,
    Conditional,
    ConfirmQuestion,
    MultiSelectQuestion,
    Question,
    QuestionItem,
    SelectQuestion,
    TaskQuestion,
    TextQuestion,
    run_validator,
)
from pigment.usage import format_usage
from pigment.utils import resolve_value

logger = logging.getLogger(__name__)

_HELP_FLAGS = ("-h", "--help")
_VERSION_FLAGS = ("-v", "--version")

_CONCRETE = (TextQuestion, SelectQuestion, MultiSelectQuestion, ConfirmQuestion, TaskQuestion)


def create(
    positionals: Sequence[str] = (),
    questions: Mapping[str, QuestionItem] | None = None,
) -> Prompt:
    """Declare a prompt.

    Raises :class:`ConfigurationError` for malformed positionals or
    question entries.
    """
    parsed = parse_positionals(positionals)
    questions = dict(questions or {})
    for key, item in questions.items():
        if item is None or isinstance(item, (*_CONCRETE, Conditional)) or callable(item):
            continue
        raise ConfigurationError(f"Question '{key}' must be a question, a Conditional or a callable")
    for key, item in questions.items():
        if isinstance(item, SelectQuestion) and not item.choices:
            raise ConfigurationError(f"Question '{key}' declares no choices")
    return Prompt(parsed, questions)


class Prompt:
    """A reusable question set; see :func:`create`."""

    def __init__(self, positionals: Sequence[PositionalArgument], questions: Mapping[str, QuestionItem]) -> None:
        self.positionals = tuple(positionals)
        self.questions = dict(questions)
        self._context = AnswerContext()

    def read(self) -> Mapping[str, Any]:
        """Answers of the running (or last) session, read-only."""
        return self._context.read()

    async def show(self, options: PromptOptions | None = None, **overrides: Any) -> dict[str, Any] | None:
        """Resolve every question and return the answers.

        A parse or validation failure is printed as ``Error: ...`` and
        ends the session through ``on_exit(1)``; ``None`` is returned if
        that callback returns.
        """
        options = dataclasses.replace(options or PromptOptions(), **overrides).resolved()
        session = Session(self, options)
        self._context = session.context
        try:
            return await session.run()
        except (ArgumentError, ValidationError) as error:
            logger.debug("session failed: %s", error)
            print(f"Error: {error}", file=options.stderr)
            options.on_exit(1)
            return None


class Session:
    """One run of a prompt against a resolved :class:`PromptOptions`."""

    def __init__(self, prompt: Prompt, options: PromptOptions) -> None:
        self.prompt = prompt
        self.options = options
        self.context = AnswerContext()
        self.interactive = bool(options.interactive)
        self.resolver = ArgumentResolver(prompt.positionals, prompt.questions)
        self._controller: ControllerContext | None = None

    # -- entry --------------------------------------------------------------

    async def run(self) -> dict[str, Any] | None:
        args = list(self.options.args or ())
        if self._wants(args, _HELP_FLAGS):
            self._write_out(
                format_usage(
                    self.options.name,
                    self.prompt.positionals,
                    self.prompt.questions,
                    description=self.options.description,
                )
            )
            self.options.on_exit(0)
            return None
        if self.options.version is not None and self._wants(args, _VERSION_FLAGS):
            self._write_out(f"{self.options.version}\n")
            self.options.on_exit(0)
            return None

        parsed = self.resolver.resolve(args, strict=not self.interactive)
        for error in parsed.errors:
            self._warn(error)

        await self._bind_positionals(parsed)
        for key, item in self.prompt.questions.items():
            await self._settle(key, item, parsed)

        self.context.close()
        return self.context.to_dict()

    def _wants(self, args: Sequence[str], flags: Sequence[str]) -> bool:
        """Whether a startup flag is present and not claimed by a question."""
        for token in args:
            if token in flags and self.resolver.lookup(token) is None:
                return True
        return False

    async def _bind_positionals(self, parsed: ParsedArguments) -> None:
        for positional in self.prompt.positionals:
            name = positional.name
            if name in self.prompt.questions:
                continue
            if name in parsed:
                self.context.set(name, parsed.values[name])
            elif positional in parsed.missing and self.interactive:
                answer = await self._ask(
                    TextQuestion(message=f"Enter {name}", required=True),
                    key=name,
                )
                self.context.set(name, answer)

    # -- per question -------------------------------------------------------

    async def _settle(self, key: str, item: QuestionItem, parsed: ParsedArguments) -> None:
        question = await self._materialize(item)
        if question is None:
            logger.debug("%s: not applicable", key)
            return

        if isinstance(question, TaskQuestion):
            self.context.set(key, await self._run_task(question))
            return

        choices: tuple[Choice, ...] | None = None
        if key in parsed:
            choices = await self._active_choices(question)
            try:
                value = self._accept(key, question, parsed.values[key], choices)
            except (ArgumentError, ValidationError) as error:
                if not self.interactive:
                    raise
                self._warn(error)
            else:
                logger.debug("%s: taken from arguments", key)
                self.context.set(key, value)
                return

        if await resolve_value(question.skip):
            default = await resolve_value(question.default)
            if default is not None:
                logger.debug("%s: skipped, using default", key)
                self.context.set(key, default)
            else:
                logger.debug("%s: skipped", key)
            return

        if not self.interactive:
            if question.required:
                flag = flag_for(key)
                usage = flag if isinstance(question, ConfirmQuestion) else f"{flag} <value>"
                raise ValidationError(f"Missing required option '{flag}'. Provide a value using {usage}")
            default = await resolve_value(question.default)
            if default is not None:
                logger.debug("%s: using default", key)
                self.context.set(key, default)
            return

        logger.debug("%s: prompting", key)
        if choices is None:
            choices = await self._active_choices(question)
        self.context.set(key, await self._ask(question, key=key, choices=choices))

    async def _materialize(self, item: QuestionItem) -> Question | None:
        match item:
            case None:
                return None
            case Conditional(prompt=factory):
                result = await resolve_value(factory)
            case TextQuestion() | SelectQuestion() | MultiSelectQuestion() | ConfirmQuestion() | TaskQuestion():
                return item
            case _:
                result = await resolve_value(item)

        if result is None or isinstance(result, _CONCRETE):
            return result
        raise ConfigurationError(f"Question factory returned {type(result).__name__}, expected a question or None")

    async def _active_choices(self, question: Question) -> tuple[Choice, ...]:
        if not isinstance(question, (SelectQuestion, MultiSelectQuestion)):
            return ()
        active = []
        for choice in question.choices:
            if not await resolve_value(choice.skip):
                active.append(choice)
        return tuple(active)

    # -- argument path ------------------------------------------------------

    def _accept(self, key: str, question: Question, raw: ArgumentValue, choices: Sequence[Choice]) -> Any:
        """Shape-check and validate a command-line value."""
        flag = flag_for(key)

        def invalid(detail: str) -> ValidationError:
            return ValidationError(f"Invalid value for option '{flag}'. {detail}")

        value: Any
        match question:
            case TextQuestion():
                if not isinstance(raw, str):
                    raise ArgumentError(f"Option '{flag} <value>' argument missing")
                if question.required and not raw:
                    raise invalid("Got empty string")
                value = raw
            case SelectQuestion():
                if not isinstance(raw, str):
                    raise ArgumentError(f"Option '{flag} <value>' argument missing")
                chosen = _find_choice(choices, raw)
                if chosen is None:
                    raise invalid(f"Expected one of {_quoted(choices)}, got '{raw}'")
                value = chosen.value
            case MultiSelectQuestion():
                if isinstance(raw, bool):
                    raise ArgumentError(f"Option '{flag} <value>' argument missing")
                tokens = [raw] if isinstance(raw, str) else list(raw)
                found = [_find_choice(choices, token) for token in tokens]
                if any(choice is None for choice in found):
                    raise invalid(f"Expected one of {_quoted(choices)}, got '{', '.join(tokens)}'")
                if question.required and not found:
                    raise invalid("Got empty list")
                value = [choice.value for choice in found if choice is not None]
            case ConfirmQuestion():
                value = parse_bool(raw)
                if value is None:
                    raise invalid(f"Expected a boolean, got '{raw}'")
            case _:
                raise invalid("Cannot be set from the command line")

        result = run_validator(question.validate, value)
        if result is True:
            return value
        if isinstance(result, str):
            raise invalid(result)
        raise invalid(f"Got '{_display(value)}'")

    # -- interactive path ---------------------------------------------------

    def _controller_context(self) -> ControllerContext:
        if self._controller is None:
            self._controller = ControllerContext(
                terminal=self.options.open_terminal(),
                theme=self.options.theme,
                on_cancel=self.options.on_cancel,
                mouse=self.options.mouse,
            )
        return self._controller

    async def _ask(self, question: Question, *, key: str, choices: Sequence[Choice] = ()) -> Any:
        context = self._controller_context()
        default = await resolve_value(question.default)
        question = dataclasses.replace(question, validate=_with_required(question))
        try:
            match question:
                case TextQuestion():
                    return await text(question, context, default=default)
                case SelectQuestion() | MultiSelectQuestion() | ConfirmQuestion():
                    return await select(question, context, choices=choices, default=default)
        except PromptCancelledError:
            logger.debug("%s: cancelled", key)
            raise
        raise ConfigurationError(f"Question '{key}' cannot be prompted for")

    async def _run_task(self, question: TaskQuestion) -> Any:
        if self.interactive:
            return await spinner(question, self._controller_context())
        result = await drive_task(question.task, lambda message: logger.debug("task: %s", message))
        return result.value

    # -- output -------------------------------------------------------------

    def _write_out(self, data: str) -> None:
        self.options.stdout.write(data)
        self.options.stdout.flush()

    def _warn(self, error: Exception) -> None:
        logger.debug("lenient resolution: %s", error)
        print(f"Warning: {error}", file=self.options.stderr)


def _with_required(question: Question) -> Any:
    """The question's validator, preceded by the ``required`` check."""
    validate = question.validate
    if not question.required:
        return validate

    def check(value: Any) -> bool | str:
        if isinstance(question, TextQuestion) and not value:
            return "A value is required"
        if isinstance(question, MultiSelectQuestion) and not value:
            return "Select at least one option"
        return run_validator(validate, value)

    return check


def _find_choice(choices: Sequence[Choice], token: str) -> Choice | None:
    for choice in choices:
        if choice.value == token or _display(choice.value) == token:
            return choice
    return None


def _quoted(choices: Sequence[Choice]) -> str:
    return ", ".join(f"'{_display(c.value)}'" for c in choices)


def _display(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(_display(v) for v in value)
    return str(value)

