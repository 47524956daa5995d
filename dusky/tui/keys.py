"""Decode raw terminal bytes into logical key and mouse events."""

from __future__ import annotations

import os
import re
import select
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Protocol

ESC = 0x1B

# Wheel buttons in SGR 1006 mouse reports.
WHEEL_UP = 64
WHEEL_DOWN = 65

_SGR_MOUSE = re.compile(r"^\[?<(\d+);(\d+);(\d+)([Mm])$")


class Key(Enum):
    """Logical key produced by :func:`read_key`."""

    CHAR = "char"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    SHIFT_TAB = "shift_tab"
    ESCAPE = "escape"
    MOUSE = "mouse"
    UNKNOWN = "unknown"
    EOF = "eof"


SEQUENCES: Dict[str, Key] = {
    "[A": Key.UP,
    "OA": Key.UP,
    "[B": Key.DOWN,
    "OB": Key.DOWN,
    "[C": Key.RIGHT,
    "OC": Key.RIGHT,
    "[D": Key.LEFT,
    "OD": Key.LEFT,
    "[5~": Key.PAGE_UP,
    "[6~": Key.PAGE_DOWN,
    "[H": Key.HOME,
    "[1~": Key.HOME,
    "[7~": Key.HOME,
    "OH": Key.HOME,
    "[F": Key.END,
    "[4~": Key.END,
    "[8~": Key.END,
    "OF": Key.END,
    "[Z": Key.SHIFT_TAB,
}


@dataclass(frozen=True)
class MouseReport:
    """A decoded SGR mouse report with 1-based screen coordinates."""

    button: int
    x: int
    y: int
    pressed: bool

    @property
    def wheel(self) -> int:
        """Return ``-1`` for wheel up, ``1`` for wheel down and ``0`` otherwise."""

        if self.button == WHEEL_UP:
            return -1
        if self.button == WHEEL_DOWN:
            return 1
        return 0


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    char: str = ""
    mouse: Optional[MouseReport] = None
    raw: str = ""


class ByteSource(Protocol):
    """Anything that hands out terminal input one byte at a time.

    ``read(None)`` blocks until a byte arrives and returns ``b""`` only at end
    of stream. ``read(timeout)`` returns ``b""`` once ``timeout`` seconds pass
    without input.
    """

    def read(self, timeout: Optional[float]) -> bytes:
        ...


class FdByteSource:
    """:class:`ByteSource` reading from a file descriptor such as stdin."""

    def __init__(self, fd: int) -> None:
        self.fd = fd

    def read(self, timeout: Optional[float]) -> bytes:
        if timeout is not None:
            ready, _, _ = select.select([self.fd], [], [], timeout)
            if not ready:
                return b""
        return os.read(self.fd, 1)


def parse_sgr_mouse(sequence: str) -> Optional[MouseReport]:
    """Parse ``[<button;x;y`` terminated by ``M`` (press) or ``m`` (release)."""

    match = _SGR_MOUSE.match(sequence)
    if match is None:
        return None
    button, x, y, terminator = match.groups()
    return MouseReport(button=int(button), x=int(x), y=int(y), pressed=terminator == "M")


def classify_sequence(sequence: str) -> KeyEvent:
    """Map the bytes following ESC to a :class:`KeyEvent`."""

    key = SEQUENCES.get(sequence)
    if key is not None:
        return KeyEvent(key, raw=sequence)
    if "<" in sequence and sequence[-1:] in ("M", "m"):
        report = parse_sgr_mouse(sequence)
        if report is not None:
            return KeyEvent(Key.MOUSE, mouse=report, raw=sequence)
    return KeyEvent(Key.UNKNOWN, raw=sequence)


def _read_escape(source: ByteSource, timeout: float) -> Optional[str]:
    """Collect the continuation of an escape sequence, or ``None`` on timeout."""

    first = source.read(timeout)
    if not first:
        return None
    sequence = first.decode("latin-1")
    if sequence not in ("[", "O"):
        return sequence
    while True:
        byte = source.read(timeout)
        if not byte:
            break
        char = byte.decode("latin-1")
        sequence += char
        if char == "~" or ("a" <= char <= "z") or ("A" <= char <= "Z"):
            break
    return sequence


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def read_key(source: ByteSource, timeout: float) -> KeyEvent:
    """Block for one input event from ``source``.

    ``timeout`` bounds the wait between bytes of an escape sequence; the first
    byte is always awaited indefinitely.
    """

    first = source.read(None)
    if not first:
        return KeyEvent(Key.EOF)
    lead = first[0]
    if lead == ESC:
        sequence = _read_escape(source, timeout)
        if sequence is None:
            return KeyEvent(Key.ESCAPE, raw="\x1b")
        return classify_sequence(sequence)

    data = first
    for _ in range(_utf8_length(lead) - 1):
        more = source.read(timeout)
        if not more:
            break
        data += more
    return KeyEvent(Key.CHAR, char=data.decode("utf-8", errors="replace"))


__all__ = [
    "ByteSource",
    "FdByteSource",
    "Key",
    "KeyEvent",
    "MouseReport",
    "classify_sequence",
    "parse_sgr_mouse",
    "read_key",
]
