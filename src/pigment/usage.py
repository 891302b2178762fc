"""Help text printed for ``-h/--help``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from pigment.args import PositionalArgument, camel_to_kebab
from pigment.questions import QuestionItem, alias_of, description_of, kind_of

_TYPES = {
    "text": "string",
    "select": "string",
    "multiselect": "array",
    "confirm": "boolean",
}

_SEPARATOR = "  "


@dataclass(frozen=True)
class _Row:
    name: str
    description: str
    type: str | None = None
    choices: str | None = None
    default: str | None = None


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _default_hint(item: QuestionItem) -> str | None:
    default = getattr(item, "default", None)
    if default is None or callable(default):
        return None
    if isinstance(default, (list, tuple)):
        return ", ".join(f"'{_format_value(v)}'" for v in default)
    return _format_value(default)


def _option_row(key: str, item: QuestionItem) -> _Row:
    alias = alias_of(item)
    prefix = f"-{alias}, " if alias else "    "
    kind = kind_of(item)
    choices = getattr(item, "choices", None)
    return _Row(
        name=f"{prefix}--{camel_to_kebab(key)}",
        description=description_of(item),
        type=f"[{_TYPES[kind]}]" if kind in _TYPES else None,
        choices=", ".join(f"'{_format_value(c.value)}'" for c in choices) if choices else None,
        default=_default_hint(item),
    )


def format_usage(
    name: str,
    positionals: Sequence[PositionalArgument],
    questions: Mapping[str, QuestionItem],
    *,
    description: str | None = None,
) -> str:
    """Build the usage text for a prompt.

    Options are listed in declaration order with their type, and a
    ``(choices: ..., default: ...)`` line when either is known statically.
    """
    out = f"Usage: {name}"
    if positionals:
        out += " " + " ".join(p.token for p in positionals)
    out += "\n\n"
    if description is not None:
        out += f"{description}\n\n"

    sections = [
        (
            "Startup",
            [
                _Row("-v, --version", "Print the version number and exit"),
                _Row("-h, --help", "Show this help message and exit"),
            ],
        ),
        (
            "Options",
            [
                _option_row(key, item)
                for key, item in questions.items()
                if item is not None and kind_of(item) != "task"
            ],
        ),
    ]

    rows = [row for _, section in sections for row in section]
    name_width = max(len(row.name) for row in rows)
    type_width = max(len(row.type or "") for row in rows)

    for i, (title, section) in enumerate(sections):
        out += f"{title}:\n"
        for row in section:
            option = f"  {row.name.ljust(name_width)}{_SEPARATOR}{(row.type or '').ljust(type_width)}"
            out += f"{option}{_SEPARATOR}{row.description}\n"

            extra = []
            if row.choices is not None:
                extra.append(f"choices: {row.choices}")
            if row.default is not None:
                extra.append(f"default: {row.default}")
            if extra:
                out += f"{' ' * len(option)}{_SEPARATOR}({', '.join(extra)})\n"
        if i < len(sections) - 1:
            out += "\n"

    return out
