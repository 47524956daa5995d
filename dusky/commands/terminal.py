"""Handlers for the ``dusky terminal`` surface."""

from __future__ import annotations

from typing import Dict, Optional

from rich.console import Console
from rich.markup import escape

from ..core.terminal_switcher import (
    TerminalMenuBackend,
    TerminalSwitcher,
    build_terminal_menu,
    initial_state,
)
from ..tui import run_menu
from ..utils import logbook
from ..utils.env_tools import DuskyConfig

console = Console(highlight=False)
error_console = Console(highlight=False, stderr=True)

_SHORTCUTS = ("kitty", "foot", "wezterm")


def requested_terminal(args) -> Optional[str]:
    """Return the terminal named by ``--set`` or one of the shortcut flags."""

    if getattr(args, "set", None):
        return args.set
    for key in _SHORTCUTS:
        if getattr(args, key, False):
            return key
    return None


def _report(record: Dict[str, object]) -> None:
    logbook.info(record)
    if record["success"]:
        console.print(f"[cyan][INFO][/] {escape(str(record['message']))}")
    else:
        error_console.print(f"[red][ERROR][/] {escape(str(record['message']))}")


def switch(args, config: DuskyConfig) -> Dict[str, object]:
    switcher = TerminalSwitcher(config)
    key = requested_terminal(args) or ""
    result = switcher.switch(key)
    record = {
        "action": "terminal_switch",
        "terminal": key,
        "success": result.success,
        "message": result.message,
    }
    _report(record)
    return record


def apply_state(args, config: DuskyConfig) -> Dict[str, object]:
    result = TerminalSwitcher(config).apply_state()
    record = {
        "action": "terminal_apply_state",
        "success": result.success,
        "message": result.message,
    }
    _report(record)
    return record


def menu(args, config: DuskyConfig) -> Dict[str, object]:
    """Open the interactive terminal picker."""

    switcher = TerminalSwitcher(config)
    backend = TerminalMenuBackend(switcher)
    state = run_menu(
        build_terminal_menu(switcher),
        backend,
        state=initial_state(switcher, backend.current),
        escape_timeout=config.escape_timeout,
        color=config.color,
    )
    return {
        "action": "terminal_menu",
        "current": backend.current,
        "status": state.status,
    }


__all__ = ["apply_state", "menu", "requested_terminal", "switch"]
