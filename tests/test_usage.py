"""Tests for pigment.usage.format_usage."""

from __future__ import annotations

from pigment.args import parse_positionals
from pigment.questions import (
    Conditional,
    ConfirmQuestion,
    MultiSelectQuestion,
    SelectQuestion,
    TaskQuestion,
    TextQuestion,
)
from pigment.usage import format_usage


async def _task():
    if False:
        yield None


QUESTIONS = {
    "username": TextQuestion(message="Name?", description="Your name", alias="u"),
    "drink": SelectQuestion(message="Drink?", description="Drink", choices=["coffee", "tea"], default="tea"),
    "dryRun": ConfirmQuestion(message="Dry?", description="Dry run", default=False),
}


class TestFormatUsage:
    def test_header_with_positionals_and_description(self) -> None:
        usage = format_usage("demo", parse_positionals(["<name>", "[dir]"]), QUESTIONS, description="A demo")
        assert usage.startswith("Usage: demo <name> [dir]\n\nA demo\n\nStartup:\n")

    def test_header_without_extras(self) -> None:
        assert format_usage("demo", (), {}).startswith("Usage: demo\n\nStartup:\n")

    def test_columns_are_aligned(self) -> None:
        usage = format_usage("demo", (), QUESTIONS)
        assert "  -v, --version " + " " * 13 + "Print the version number and exit\n" in usage
        assert "  -u, --username  [string]   Your name\n" in usage
        assert "      --drink     [string]   Drink\n" in usage
        assert "      --dry-run   [boolean]  Dry run\n" in usage

    def test_choices_and_default_hint(self) -> None:
        usage = format_usage("demo", (), QUESTIONS)
        assert " " * 29 + "(choices: 'coffee', 'tea', default: tea)\n" in usage
        assert "(default: false)\n" in usage

    def test_sections_in_order(self) -> None:
        usage = format_usage("demo", (), QUESTIONS)
        assert usage.index("Startup:") < usage.index("\n\nOptions:\n")
        assert usage.index("--username") < usage.index("--drink") < usage.index("--dry-run")

    def test_multiselect_default_list(self) -> None:
        usage = format_usage(
            "demo", (), {"fruits": MultiSelectQuestion(message="Fruits?", choices=["a", "b"], default=["a"])}
        )
        assert "[array]" in usage
        assert "(choices: 'a', 'b', default: 'a')" in usage

    def test_callable_default_is_not_shown(self) -> None:
        usage = format_usage("demo", (), {"name": TextQuestion(message="Name?", default=lambda: "x")})
        assert "default" not in usage

    def test_deferred_question_has_no_type(self) -> None:
        usage = format_usage("demo", (), {"later": Conditional(lambda: None)})
        assert "      --later  " in usage
        assert "[" not in usage.split("--later")[1]

    def test_tasks_are_not_listed(self) -> None:
        usage = format_usage("demo", (), {"setup": TaskQuestion(message="Setting up", task=_task)})
        assert "--setup" not in usage
