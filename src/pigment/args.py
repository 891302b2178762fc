"""Command-line argument resolution.

Binds positional tokens to declared ``<name>``/``[name]`` slots and flag
tokens to question keys, honouring aliases, kebab/camel spellings,
``--no-`` negation and repeated multi-valued flags.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Sequence, Union

from pigment.errors import ArgumentError, ConfigurationError
from pigment.questions import QuestionItem, QuestionKind, alias_of, kind_of

ArgumentValue = Union[str, bool, list[str]]

# Kinds whose bare flag consumes the following token as its value.
_VALUE_KINDS = {"text", "select", "multiselect"}
_TRUE = {"true", "yes", "y", "1"}
_FALSE = {"false", "no", "n", "0"}


@dataclass(frozen=True)
class PositionalArgument:
    name: str
    optional: bool

    @property
    def token(self) -> str:
        return f"[{self.name}]" if self.optional else f"<{self.name}>"


def parse_positionals(declared: Sequence[str]) -> tuple[PositionalArgument, ...]:
    """Parse ``<required>``/``[optional]`` declarations.

    Raises :class:`ConfigurationError` for an unwrapped name or a required
    positional declared after an optional one.
    """
    parsed: list[PositionalArgument] = []
    seen_optional = False

    for raw in declared:
        if len(raw) > 2 and raw.startswith("[") and raw.endswith("]"):
            item = PositionalArgument(raw[1:-1], optional=True)
        elif len(raw) > 2 and raw.startswith("<") and raw.endswith(">"):
            item = PositionalArgument(raw[1:-1], optional=False)
        else:
            raise ConfigurationError(f"Argument must be wrapped in [] or <> (got {raw})")

        if item.optional:
            seen_optional = True
        elif seen_optional:
            raise ConfigurationError(
                f"Required argument '{item.token}' cannot appear after optional arguments"
            )
        parsed.append(item)

    return tuple(parsed)


def camel_to_kebab(text: str) -> str:
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", text)
    text = re.sub(r"([A-Z])([A-Z][a-z])", r"\1-\2", text)
    return text.lower()


def kebab_to_camel(text: str) -> str:
    return re.sub(r"-([a-zA-Z0-9])", lambda m: m.group(1).upper(), text)


def flag_for(key: str) -> str:
    """Canonical long flag for a question key, e.g. ``userName -> --user-name``."""
    return f"--{camel_to_kebab(key)}"


@dataclass
class ParsedArguments:
    """Result of one resolution pass.

    ``values`` maps canonical keys (question keys and positional names) to
    the raw token values. In lenient mode, ``errors`` collects the problems
    that were skipped over and ``missing`` the unfilled required positionals.
    """

    values: dict[str, ArgumentValue] = field(default_factory=dict)
    errors: list[ArgumentError] = field(default_factory=list)
    missing: list[PositionalArgument] = field(default_factory=list)

    def __contains__(self, key: object) -> bool:
        return key in self.values


class ArgumentResolver:
    """Resolves a token list against a positional declaration and a question set."""

    def __init__(
        self,
        positionals: Sequence[PositionalArgument],
        questions: Mapping[str, QuestionItem],
    ) -> None:
        self._positionals = tuple(positionals)
        self._kinds: dict[str, QuestionKind | None] = {}
        self._names: dict[str, str] = {}
        self._aliases: dict[str, str] = {}
        self._converted: dict[str, str] = {}

        for key, item in questions.items():
            kind = kind_of(item)
            if item is None or kind == "task":
                continue
            self._kinds[key] = kind
            self._names[key] = key
            alias = alias_of(item)
            if alias:
                self._aliases[alias] = key
            for spelling in (camel_to_kebab(key), kebab_to_camel(key)):
                self._converted.setdefault(spelling, key)

    def lookup(self, flag: str) -> str | None:
        """Map a flag to its question key.

        ``--name`` matches question keys and their kebab/camel spellings;
        ``-a`` matches aliases only.
        """
        if flag.startswith("--"):
            return self._lookup_long(flag[2:])
        if flag.startswith("-"):
            return self._aliases.get(flag[1:])
        return None

    def _lookup_long(self, name: str) -> str | None:
        if not name or name.startswith("-"):
            return None
        if name in self._names:
            return self._names[name]
        for spelling in (camel_to_kebab(name), kebab_to_camel(name)):
            if spelling in self._names:
                return spelling
            if spelling in self._converted:
                return self._converted[spelling]
        return None

    def resolve(self, args: Sequence[str], *, strict: bool = True) -> ParsedArguments:
        parsed = ParsedArguments()
        tokens = list(args)
        position = 0
        positional_phase = True
        index = 0

        while index < len(tokens):
            token = tokens[index]
            index += 1

            if not _is_option(token):
                if positional_phase and position < len(self._positionals):
                    parsed.values[self._positionals[position].name] = token
                    position += 1
                else:
                    _fail(parsed, ArgumentError(f"Unexpected argument '{token}'"), strict)
                continue

            positional_phase = False
            flag, has_inline, inline = token.partition("=")
            negated = False
            key = self.lookup(flag)
            if key is None and flag.startswith("--no-") and not has_inline:
                key = self.lookup("--" + flag[len("--no-"):])
                negated = key is not None
            if key is None:
                _fail(parsed, ArgumentError(f"Unknown option '{flag}'"), strict)
                continue

            kind = self._kinds[key]
            value: ArgumentValue
            if negated:
                value = [] if kind == "multiselect" else False
            elif has_inline:
                value = inline
            elif kind in _VALUE_KINDS:
                if index < len(tokens) and not _is_option(tokens[index]):
                    value = tokens[index]
                    index += 1
                else:
                    _fail(parsed, ArgumentError(f"Option '{flag} <value>' argument missing"), strict)
                    continue
            elif kind is None and index < len(tokens) and not _is_option(tokens[index]):
                value = tokens[index]
                index += 1
            elif kind == "confirm" and index < len(tokens) and parse_bool(tokens[index]) is not None:
                value = parse_bool(tokens[index])
                index += 1
            else:
                value = True

            self._store(parsed, key, flag, kind, value, strict)

        for positional in self._positionals[position:]:
            # A positional that shares a question key may be given as a flag
            if positional.optional or positional.name in parsed.values:
                continue
            error = ArgumentError(f"Missing required argument '{positional.token}'")
            _fail(parsed, error, strict)
            parsed.missing.append(positional)

        return parsed

    def _store(
        self,
        parsed: ParsedArguments,
        key: str,
        flag: str,
        kind: QuestionKind | None,
        value: ArgumentValue,
        strict: bool,
    ) -> None:
        if kind == "multiselect":
            current = parsed.values.setdefault(key, [])
            if isinstance(current, list) and isinstance(value, str):
                if value:
                    current.append(value)
            elif isinstance(current, list) and isinstance(value, list):
                current.extend(value)
            return

        if key in parsed.values:
            _fail(parsed, ArgumentError(f"Duplicate option '{flag}'"), strict)
            return
        parsed.values[key] = value


def _is_option(token: str) -> bool:
    return token.startswith("-") and token != "-"


def _fail(parsed: ParsedArguments, error: ArgumentError, strict: bool) -> None:
    if strict:
        raise error
    parsed.errors.append(error)


def parse_bool(value: ArgumentValue) -> bool | None:
    """Read a confirm value; ``None`` when *value* is not a boolean word."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    return None
