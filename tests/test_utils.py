"""Tests for pigment.utils width helpers."""

from __future__ import annotations

import pytest

from pigment.render import CURSOR_MARKER
from pigment.utils import count_rows, resolve_value, strip_ansi, visible_width, wrapped_height


class TestStripAnsi:
    def test_sgr(self) -> None:
        assert strip_ansi("\x1b[31mred\x1b[39m") == "red"

    def test_hyperlink(self) -> None:
        assert strip_ansi("\x1b]8;;https://example.com\x07link\x1b]8;;\x07") == "link"

    def test_cursor_marker(self) -> None:
        assert strip_ansi("ab" + CURSOR_MARKER + "c") == "abc"


class TestVisibleWidth:
    def test_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty(self) -> None:
        assert visible_width("") == 0

    def test_styled_text(self) -> None:
        assert visible_width("\x1b[1mbold\x1b[22m") == 4

    def test_wide_characters(self) -> None:
        assert visible_width("日本") == 4

    def test_combining_mark(self) -> None:
        assert visible_width("e\u0301") == 1

    def test_flag_emoji(self) -> None:
        assert visible_width("\U0001f1ef\U0001f1f5") == 2

    def test_tab(self) -> None:
        assert visible_width("\t") == 3

    def test_control_characters(self) -> None:
        assert visible_width("a\x00b") == 2


class TestRows:
    def test_wrapped_height(self) -> None:
        assert wrapped_height("", 10) == 1
        assert wrapped_height("x" * 10, 10) == 1
        assert wrapped_height("x" * 21, 10) == 3

    def test_zero_width_terminal(self) -> None:
        assert wrapped_height("x" * 50, 0) == 1

    def test_count_rows(self) -> None:
        assert count_rows("a\n\nb", 10) == 3
        assert count_rows("x" * 15 + "\ny", 10) == 3


class TestResolveValue:
    @pytest.mark.asyncio
    async def test_plain_value(self) -> None:
        assert await resolve_value(3) == 3

    @pytest.mark.asyncio
    async def test_callable(self) -> None:
        assert await resolve_value(lambda: "x") == "x"

    @pytest.mark.asyncio
    async def test_async_callable(self) -> None:
        async def value() -> bool:
            return True

        assert await resolve_value(value) is True
