"""Raw-mode terminal session with guaranteed restoration."""

from __future__ import annotations

import logging
import os
import signal
import sys
import termios
from types import FrameType
from typing import Callable, Dict, List, Optional, TextIO

from ..errors import TerminalUnavailableError

logger = logging.getLogger(__name__)

MOUSE_ON = "\033[?1000h\033[?1002h\033[?1006h"
MOUSE_OFF = "\033[?1000l\033[?1002l\033[?1006l"
CURSOR_HIDE = "\033[?25l"
CURSOR_SHOW = "\033[?25h"
CLR_SCREEN = "\033[2J"
CURSOR_HOME = "\033[H"
RESET = "\033[0m"

EXIT_SIGTERM = 143

# termios attribute list indices
_IFLAG = 1
_LFLAG = 3
_CC = 6


class TerminalModeGuard:
    """Borrow the controlling terminal for a full-screen menu.

    Entering puts the terminal in cbreak mode (no echo, no line buffering,
    ``ISIG`` kept so Ctrl-C still raises ``KeyboardInterrupt``), enables SGR
    mouse reporting and hides the cursor. Leaving undoes each step on its own,
    so one failing step never prevents the others. ``SIGTERM`` is turned into
    ``SystemExit(143)`` and ``SIGWINCH`` calls :attr:`on_resize`.
    """

    def __init__(
        self,
        fd: Optional[int] = None,
        output: Optional[TextIO] = None,
        *,
        on_resize: Optional[Callable[[], None]] = None,
    ) -> None:
        self.fd = sys.stdin.fileno() if fd is None else fd
        self.output = output if output is not None else sys.stdout
        self.on_resize = on_resize
        self.active = False
        self._saved: Optional[List[object]] = None
        self._old_handlers: Dict[int, object] = {}

    # ------------------------------------------------------------------
    # Context manager protocol
    # ------------------------------------------------------------------
    def __enter__(self) -> "TerminalModeGuard":
        if not os.isatty(self.fd):
            raise TerminalUnavailableError("TUI requires a terminal.")
        try:
            self._saved = termios.tcgetattr(self.fd)
            self._set_cbreak()
        except termios.error as exc:
            raise TerminalUnavailableError(f"Cannot enter raw mode: {exc}") from exc
        self.active = True
        self._install_signals()
        self._write(f"{MOUSE_ON}{CURSOR_HIDE}{CLR_SCREEN}{CURSOR_HOME}")
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.restore()

    # ------------------------------------------------------------------
    # Mode switching
    # ------------------------------------------------------------------
    def _set_cbreak(self) -> None:
        attrs = termios.tcgetattr(self.fd)
        attrs[_LFLAG] &= ~(termios.ICANON | termios.ECHO | termios.IEXTEN)
        attrs[_IFLAG] &= ~(termios.IXON | termios.ICRNL | termios.INLCR | termios.IGNCR)
        attrs[_CC][termios.VMIN] = 1
        attrs[_CC][termios.VTIME] = 0
        termios.tcsetattr(self.fd, termios.TCSANOW, attrs)

    def _write(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()

    def suspend(self) -> None:
        """Hand the terminal back in cooked mode, e.g. for a line prompt."""

        self._write(f"{MOUSE_OFF}{CURSOR_SHOW}{RESET}{CLR_SCREEN}{CURSOR_HOME}")
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)

    def resume(self) -> None:
        """Re-enter cbreak mode after :meth:`suspend`.

        Line editors such as prompt_toolkit reset SIGWINCH to its default when
        they finish, so the guard's own handlers are installed again.
        """

        self._set_cbreak()
        self._install_signals()
        self._write(f"{MOUSE_ON}{CURSOR_HIDE}{CLR_SCREEN}{CURSOR_HOME}")

    def restore(self) -> None:
        """Best-effort restoration of everything :meth:`__enter__` changed."""

        if not self.active:
            return
        self.active = False
        try:
            self._write(f"{MOUSE_OFF}{CURSOR_SHOW}{RESET}\n")
        except (OSError, ValueError) as exc:
            logger.debug("terminal restore: write failed: %s", exc)
        if self._saved is not None:
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            except (termios.error, OSError) as exc:
                logger.debug("terminal restore: tcsetattr failed: %s", exc)
        for signum, handler in self._old_handlers.items():
            try:
                signal.signal(signum, handler)
            except (OSError, ValueError, TypeError) as exc:
                logger.debug("terminal restore: signal %s not restored: %s", signum, exc)
        self._old_handlers.clear()

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------
    def _install_signals(self) -> None:
        """Install the guard's handlers, remembering only the pre-menu ones."""

        handlers = {
            signal.SIGTERM: self._handle_term,
            signal.SIGWINCH: self._handle_winch,
        }
        for signum, handler in handlers.items():
            try:
                previous = signal.signal(signum, handler)
            except ValueError:
                # Only the main thread may install handlers.
                logger.debug("signal %s left untouched outside the main thread", signum)
                continue
            self._old_handlers.setdefault(signum, previous)

    def _handle_term(self, signum: int, frame: Optional[FrameType]) -> None:
        raise SystemExit(EXIT_SIGTERM)

    def _handle_winch(self, signum: int, frame: Optional[FrameType]) -> None:
        if self.on_resize is not None:
            self.on_resize()


__all__ = [
    "CLR_SCREEN",
    "CURSOR_HIDE",
    "CURSOR_SHOW",
    "MOUSE_OFF",
    "MOUSE_ON",
    "TerminalModeGuard",
]
