"""Tests for pigment.keys: key identification and event decoding."""

from __future__ import annotations

import pytest

from pigment.events import CursorPosition, KeyPress, MouseEvent
from pigment.keys import LEGACY_KEY_SEQUENCES, decode, parse_key


class TestParseKey:
    @pytest.mark.parametrize(
        "data,expected",
        [
            ("\x1b[A", "up"),
            ("\x1b[B", "down"),
            ("\x1bOC", "right"),
            ("\x1bOD", "left"),
            ("\x1b[H", "home"),
            ("\x1b[4~", "end"),
            ("\x1b[3~", "delete"),
            ("\x1b[Z", "shift+tab"),
        ],
    )
    def test_legacy_sequences(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_every_legacy_sequence_has_a_name(self) -> None:
        assert all(parse_key(seq) == name for seq, name in LEGACY_KEY_SEQUENCES.items())

    def test_control_keys(self) -> None:
        assert parse_key("\r") == "enter"
        assert parse_key("\n") == "enter"
        assert parse_key("\t") == "tab"
        assert parse_key(" ") == "space"
        assert parse_key("\x1b") == "escape"

    def test_backspace_variants(self) -> None:
        assert parse_key("\x7f") == "backspace"
        assert parse_key("\x08") == "backspace"

    def test_ctrl_letters(self) -> None:
        assert parse_key("\x03") == "ctrl+c"
        assert parse_key("\x01") == "ctrl+a"
        assert parse_key("\x15") == "ctrl+u"

    def test_alt_letter(self) -> None:
        assert parse_key("\x1bx") == "alt+x"
        assert parse_key("\x1bX") == "alt+x"

    def test_printable(self) -> None:
        assert parse_key("a") == "a"
        assert parse_key("é") == "é"

    def test_kitty_ctrl_c(self) -> None:
        assert parse_key("\x1b[99;5u") == "ctrl+c"

    def test_kitty_plain_keys(self) -> None:
        assert parse_key("\x1b[13u") == "enter"
        assert parse_key("\x1b[97u") == "a"

    def test_unknown(self) -> None:
        assert parse_key("") is None
        assert parse_key("\x1b[99~") is None


class TestDecode:
    def test_printable_key(self) -> None:
        assert decode("x") == KeyPress("x", "x")

    def test_space_carries_text(self) -> None:
        assert decode(" ") == KeyPress("space", " ")

    def test_control_key_has_no_text(self) -> None:
        event = decode("\r")
        assert event == KeyPress("enter", "")
        assert not event.printable

    def test_fast_typed_text_stays_together(self) -> None:
        assert decode("abc") == KeyPress("abc", "abc")

    def test_unknown_sequence_is_dropped(self) -> None:
        assert decode("\x1b[99~") is None

    def test_cursor_position_report(self) -> None:
        assert decode("\x1b[20;1R") == CursorPosition(row=20, column=1)

    def test_mouse_press(self) -> None:
        event = decode("\x1b[<0;5;10M")
        assert event == MouseEvent(button=0, column=5, row=10, pressed=True)
        assert event.left_click

    def test_mouse_release_is_not_a_click(self) -> None:
        event = decode("\x1b[<0;5;10m")
        assert isinstance(event, MouseEvent)
        assert not event.left_click

    def test_wheel(self) -> None:
        up = decode("\x1b[<64;1;1M")
        down = decode("\x1b[<65;1;1M")
        assert up.wheel_up and not up.wheel_down
        assert down.wheel_down and not down.wheel_up

    def test_modified_click_is_still_left_button(self) -> None:
        # Shift adds 4 to the button code
        assert decode("\x1b[<4;2;3M").left_click
