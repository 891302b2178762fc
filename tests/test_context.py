"""Tests for pigment.context.AnswerContext."""

from __future__ import annotations

import pytest

from pigment.context import AnswerContext


class TestAnswerContext:
    def test_set_and_read(self) -> None:
        ctx = AnswerContext()
        ctx.set("name", "Alice")
        assert ctx.read()["name"] == "Alice"
        assert "name" in ctx

    def test_keeps_insertion_order(self) -> None:
        ctx = AnswerContext()
        for key in ("b", "a", "c"):
            ctx.set(key, key.upper())
        assert list(ctx.read()) == ["b", "a", "c"]

    def test_read_view_is_live(self) -> None:
        ctx = AnswerContext()
        view = ctx.read()
        ctx.set("later", 1)
        assert view["later"] == 1

    def test_read_view_is_read_only(self) -> None:
        ctx = AnswerContext()
        with pytest.raises(TypeError):
            ctx.read()["name"] = "Mallory"  # type: ignore[index]

    def test_answers_are_set_once(self) -> None:
        ctx = AnswerContext()
        ctx.set("name", "Alice")
        with pytest.raises(KeyError):
            ctx.set("name", "Bob")
        assert ctx.read()["name"] == "Alice"

    def test_closed_context_rejects_answers(self) -> None:
        ctx = AnswerContext()
        ctx.close()
        assert ctx.closed
        with pytest.raises(RuntimeError, match="closed"):
            ctx.set("name", "Alice")

    def test_to_dict_is_a_copy(self) -> None:
        ctx = AnswerContext()
        ctx.set("name", "Alice")
        snapshot = ctx.to_dict()
        snapshot["name"] = "Bob"
        assert ctx.read()["name"] == "Alice"
