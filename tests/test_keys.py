"""Tests for the escape-sequence decoder."""

from __future__ import annotations

import pytest

from dusky.tui.keys import Key, MouseReport, classify_sequence, parse_sgr_mouse, read_key

from conftest import ScriptedSource, events_from


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\x1b[A", Key.UP),
        (b"\x1bOA", Key.UP),
        (b"\x1b[B", Key.DOWN),
        (b"\x1b[C", Key.RIGHT),
        (b"\x1bOD", Key.LEFT),
        (b"\x1b[5~", Key.PAGE_UP),
        (b"\x1b[6~", Key.PAGE_DOWN),
        (b"\x1b[H", Key.HOME),
        (b"\x1b[1~", Key.HOME),
        (b"\x1b[7~", Key.HOME),
        (b"\x1b[F", Key.END),
        (b"\x1b[4~", Key.END),
        (b"\x1b[8~", Key.END),
        (b"\x1b[Z", Key.SHIFT_TAB),
    ],
)
def test_named_sequences(data: bytes, expected: Key) -> None:
    assert read_key(ScriptedSource(data), 0.05).key is expected


def test_sgr_mouse_press_is_decoded() -> None:
    event = read_key(ScriptedSource(b"\x1b[<0;45;7M"), 0.05)

    assert event.key is Key.MOUSE
    assert event.mouse == MouseReport(button=0, x=45, y=7, pressed=True)


def test_sgr_mouse_release_and_wheel() -> None:
    release = parse_sgr_mouse("[<2;10;3m")
    wheel_up = parse_sgr_mouse("[<64;1;1M")
    wheel_down = parse_sgr_mouse("[<65;1;1M")

    assert release is not None and release.pressed is False and release.button == 2
    assert wheel_up is not None and wheel_up.wheel == -1
    assert wheel_down is not None and wheel_down.wheel == 1
    assert release.wheel == 0


def test_lone_escape_times_out_to_escape() -> None:
    assert read_key(ScriptedSource(b"\x1b"), 0.05).key is Key.ESCAPE


def test_first_byte_waits_and_continuations_use_timeout() -> None:
    source = ScriptedSource(b"\x1b[A")
    read_key(source, 0.03)

    assert source.timeouts == [None, 0.03, 0.03]


def test_unknown_sequence_is_not_fatal() -> None:
    event = classify_sequence("[99~")

    assert event.key is Key.UNKNOWN
    assert event.raw == "[99~"


def test_plain_and_multibyte_characters() -> None:
    events = list(events_from("q\r➤".encode("utf-8")))

    assert [event.key for event in events] == [Key.CHAR, Key.CHAR, Key.CHAR]
    assert [event.char for event in events] == ["q", "\r", "➤"]


def test_sequences_back_to_back_stay_separate() -> None:
    events = list(events_from(b"\x1b[Bj\x1b[<64;3;3M"))

    assert [event.key for event in events] == [Key.DOWN, Key.CHAR, Key.MOUSE]


def test_end_of_stream_reports_eof() -> None:
    assert read_key(ScriptedSource(), 0.05).key is Key.EOF
