"""Cooperative draw / read / dispatch loop for the Dusky menus."""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import Callable, Optional, TextIO

from prompt_toolkit import prompt as toolkit_prompt

from ..errors import TerminalUnavailableError
from ..utils import logbook
from ..utils.env_tools import DEFAULT_ESC_TIMEOUT
from .dispatch import InputDispatcher, sync_scroll
from .keys import ByteSource, FdByteSource, KeyEvent, read_key
from .model import InputMode, Menu, MenuBackend, MenuItem, MenuState
from .render import Frame, Renderer
from .terminal import TerminalModeGuard

logger = logging.getLogger(__name__)

TextPrompt = Callable[[str], Optional[str]]


def _serialize(value: object) -> object:
    """Make ``value`` JSON-serialisable for the action log."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _serialize(item) for key, item in value.items()}
    return str(value)


def _menu_log(action: str, **fields: object) -> None:
    """Emit a menu log entry with ``action`` and ``fields``."""

    timestamp = datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")
    payload = {key: _serialize(value) for key, value in fields.items()}
    details = " ".join(f"{key}={payload[key]}" for key in sorted(payload))
    message = f"[Dusky.Menu] {action}"
    if details:
        message = f"{message} {details}"
    record = {
        "timestamp": timestamp,
        "channel": "Dusky.Menu",
        "action": action,
        **payload,
        "message": message,
    }
    logbook.info(record)


def prompt_text(message: str) -> Optional[str]:
    """Read one line with prompt_toolkit; ``None`` when the operator cancels."""

    try:
        return toolkit_prompt(f"➤ {message} ")
    except (EOFError, KeyboardInterrupt):
        return None


class MenuLoop:
    """Run ``menu`` against ``backend`` until the operator quits.

    Every iteration renders one frame, blocks for one input event and
    dispatches it. Failures inside an iteration end up in the status line;
    only process exits (``KeyboardInterrupt`` and ``SystemExit``) leave the
    loop, and the terminal guard restores the terminal on the way out.
    """

    def __init__(
        self,
        menu: Menu,
        backend: MenuBackend,
        *,
        state: Optional[MenuState] = None,
        source: Optional[ByteSource] = None,
        output: Optional[TextIO] = None,
        guard: Optional[TerminalModeGuard] = None,
        text_prompt: TextPrompt = prompt_text,
        escape_timeout: float = DEFAULT_ESC_TIMEOUT,
        color: bool = True,
    ) -> None:
        self.menu = menu
        self.backend = backend
        self.state = state or MenuState()
        self.output = output if output is not None else sys.stdout
        self.source = source or FdByteSource(sys.stdin.fileno())
        self.guard = guard or TerminalModeGuard(output=self.output)
        self.text_prompt = text_prompt
        self.escape_timeout = escape_timeout
        self.renderer = Renderer(menu, color=color)
        self.dispatcher = InputDispatcher(menu)
        self.frame: Optional[Frame] = None
        self._drawing = False

    def run(self) -> MenuState:
        """Take over the terminal and loop until quit; returns the final state."""

        _menu_log("enter", menu=self.menu.title)
        reason = "quit"
        try:
            with self.guard:
                self.guard.on_resize = self.redraw
                while self.state.running:
                    self.draw()
                    self.step(read_key(self.source, self.escape_timeout))
        except KeyboardInterrupt:
            reason = "interrupt"
            raise
        except SystemExit:
            reason = "terminate"
            raise
        except TerminalUnavailableError:
            reason = "no-terminal"
            raise
        finally:
            _menu_log("exit", menu=self.menu.title, reason=reason)
        return self.state

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def draw(self) -> None:
        self._drawing = True
        try:
            sync_scroll(self.menu, self.state)
            frame = self.renderer.render(
                self.state,
                active=self.backend.current_value(),
                context=self.backend.context_line(self.state),
            )
            self.output.write(frame.text)
            self.output.flush()
            self.frame = frame
        except Exception:
            logger.exception("render failed for %s", self.menu.title)
        finally:
            self._drawing = False

    def redraw(self) -> None:
        """Repaint after a terminal resize unless a frame is already in flight."""

        if not self._drawing and self.state.mode is InputMode.BROWSING:
            self.draw()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def step(self, event: KeyEvent) -> None:
        """Dispatch one event; a failing event never stops the loop."""

        try:
            outcome = self.dispatcher.dispatch(self.state, event, self.frame)
            if outcome.quit:
                self.state.running = False
            elif outcome.trigger is not None:
                self.trigger(outcome.trigger)
        except Exception as exc:
            logger.exception("event %s failed", event.key.value)
            self.state.set_status(f"Error: {exc}", ok=False)

    def trigger(self, item: MenuItem) -> None:
        """Apply ``item`` through the backend and record the outcome in the status."""

        text: Optional[str] = None
        message = self.backend.input_prompt(item.payload)
        if message is not None:
            text = self._read_text(message)
            if text is None:
                self.state.set_status("Input cancelled")
                return

        try:
            result = self.backend.apply(item.payload, text)
        except Exception as exc:
            logger.exception("action %s failed", item.label)
            self.state.set_status(f"Error: {exc}", ok=False)
            _menu_log("apply", menu=self.menu.title, item=item.label, success=False, error=str(exc))
            return
        self.state.set_status(result.message, ok=result.success)
        _menu_log("apply", menu=self.menu.title, item=item.label, success=result.success, result=result.message)

    def _read_text(self, message: str) -> Optional[str]:
        self.state.mode = InputMode.AWAITING_TEXT
        self.guard.suspend()
        try:
            return self.text_prompt(message)
        finally:
            self.guard.resume()
            self.state.mode = InputMode.BROWSING


def run_menu(menu: Menu, backend: MenuBackend, **options: object) -> MenuState:
    """Convenience wrapper building a :class:`MenuLoop` and running it."""

    return MenuLoop(menu, backend, **options).run()


__all__ = ["MenuLoop", "prompt_text", "run_menu"]
